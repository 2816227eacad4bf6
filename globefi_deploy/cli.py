from pathlib import Path

import click

from globefi_deploy.config import DeployConfig, load_environment
from globefi_deploy.deploy import DEPENDENCY_CONTRACT, DEPENDENT_CONTRACT, run
from globefi_deploy.exceptions import OrchestrationError


def _describe(error):
    message = str(error)
    cause = error.__cause__
    # the cause text is usually already folded into the message
    if cause is not None and str(cause) not in message:
        message += f"\n  caused by: {type(cause).__name__}: {cause}"

    return message


@click.command()
@click.option("--network", "-n", help="Target network (default: $NETWORK or hardhat).")
@click.option("--rpc-url", help="JSON-RPC endpoint, overrides $RPC_URL.")
@click.option(
    "--dependency-address",
    help="Existing token to use on remote networks, overrides $DEPENDENCY_ADDRESS.",
)
@click.option(
    "--artifacts",
    "artifacts_dir",
    type=click.Path(file_okay=False, path_type=Path),
    help="Compiled contract artifacts (default: $ARTIFACTS_DIR or ./artifacts).",
)
@click.option(
    "--env-file",
    type=click.Path(dir_okay=False),
    default=None,
    help="dotenv file to load (default: .env in the working directory).",
)
@click.option(
    "--skip-preflight",
    is_flag=True,
    help="Do not probe the RPC endpoint before deploying.",
)
@click.option("--dependency-contract", default=DEPENDENCY_CONTRACT, show_default=True)
@click.option("--dependent-contract", default=DEPENDENT_CONTRACT, show_default=True)
def main(
    network,
    rpc_url,
    dependency_address,
    artifacts_dir,
    env_file,
    skip_preflight,
    dependency_contract,
    dependent_contract,
):
    """Deploy GlobeFi, minting a MockERC20 first when no token is configured.

    Prints the GlobeFi address on stdout.
    """
    environ = load_environment(env_file)

    config = DeployConfig.from_env(
        environ,
        network=network,
        rpc_url=rpc_url,
        dependency_address=dependency_address,
        artifacts_dir=artifacts_dir,
    )
    config.preflight = not skip_preflight

    try:
        result = run(
            config,
            dependency_name=dependency_contract,
            dependent_name=dependent_contract,
        )
    except OrchestrationError as exc:
        raise click.ClickException(_describe(exc)) from exc

    click.echo(result.contract_address)


if __name__ == "__main__":
    main()
