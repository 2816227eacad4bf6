from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from globefi_deploy.artifacts import ArtifactStore
from globefi_deploy.chain import ChainClient
from globefi_deploy.confirmation import confirm_deployment
from globefi_deploy.network import check_connectivity
from globefi_deploy.output import console, report
from globefi_deploy.signer import resolve_signer


DEPENDENCY_CONTRACT = "MockERC20"
DEPENDENT_CONTRACT = "GlobeFi"


@dataclass(frozen=True)
class TokenSpec:
    name: str
    symbol: str
    supply: str
    decimals: int = 18


MOCK_TOKEN = TokenSpec(name="MockUSD", symbol="mUSD", supply="1000000", decimals=18)


@dataclass(frozen=True)
class TokenAddressBinding:
    address: str
    provisioned: bool


@dataclass(frozen=True)
class DeploymentResult:
    contract_address: str
    confirmed: bool
    tx_hash: Optional[str] = None


def parse_units(amount, decimals):
    """Scale a human amount ("1000000") to the token's smallest unit."""
    scaled = Decimal(str(amount)).scaleb(decimals)
    if scaled != scaled.to_integral_value():
        raise ValueError(f"{amount} has more than {decimals} decimal places")

    return int(scaled)


def needs_dependency(profile, supplied_address):
    # state on ephemeral networks is gone between runs, a configured address
    # there points at nothing
    return profile.is_ephemeral or not supplied_address


def _deploy(client, artifact, args, signer):
    pending = client.deploy(artifact, args, signer)
    address = confirm_deployment(pending)

    tx_hash = getattr(pending, "tx_hash", None)
    if tx_hash is not None and not isinstance(tx_hash, str):
        tx_hash = "0x" + bytes(tx_hash).hex()

    return DeploymentResult(contract_address=address, confirmed=True, tx_hash=tx_hash)


def provision_dependency(
    profile,
    supplied_address,
    signer,
    client,
    artifact,
    token=MOCK_TOKEN,
) -> TokenAddressBinding:
    """Mint a fresh mock token, or keep the supplied one on remote networks.

    ``artifact`` is only touched when a token has to be deployed.
    """
    if not needs_dependency(profile, supplied_address):
        return TokenAddressBinding(address=supplied_address, provisioned=False)

    if supplied_address:
        console.print(
            f"[yellow]Ignoring DEPENDENCY_ADDRESS on ephemeral network '{profile.name}'[/yellow]"
        )

    console.print(f"Deploying {artifact.name} ({token.name}/{token.symbol})...")
    supply = parse_units(token.supply, token.decimals)
    result = _deploy(client, artifact, [token.name, token.symbol, supply], signer)
    report(f"{artifact.name} deployed to", result.contract_address)

    return TokenAddressBinding(address=result.contract_address, provisioned=True)


def deploy_dependent(binding, signer, client, artifact) -> DeploymentResult:
    report("Using token address", binding.address)

    console.print(f"Deploying {artifact.name}...")
    result = _deploy(client, artifact, [binding.address], signer)
    report(f"{artifact.name} deployed to", result.contract_address)

    return result


def run(
    config,
    client=None,
    probe=check_connectivity,
    dependency_name=DEPENDENCY_CONTRACT,
    dependent_name=DEPENDENT_CONTRACT,
) -> DeploymentResult:
    """One full deployment: token (if needed) then GlobeFi.

    Steps run strictly in order and any failure aborts the run. A token that
    was already confirmed stays deployed when the GlobeFi deployment fails.
    """
    profile = config.validate()
    report("Active network", profile.name)

    # a build mismatch must surface before anything is paid for
    artifacts = ArtifactStore(config.artifacts_dir)
    dependency_artifact = None
    if needs_dependency(profile, config.dependency_address):
        dependency_artifact = artifacts.read(dependency_name)
    dependent_artifact = artifacts.read(dependent_name)

    if config.preflight:
        chain_id = probe(profile.rpc_endpoint)
        report("Chain id", chain_id)

    if client is None:
        client = ChainClient.connect(profile.rpc_endpoint)

    signer = resolve_signer(profile, client, config.private_key)

    binding = provision_dependency(
        profile, config.dependency_address, signer, client, dependency_artifact
    )

    return deploy_dependent(binding, signer, client, dependent_artifact)
