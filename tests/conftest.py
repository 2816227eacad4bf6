import json

import pytest

from globefi_deploy.config import DeployConfig
from globefi_deploy.exceptions import DeploymentError
from globefi_deploy.network import resolve_network


# hardhat's well-known first dev account
DEV_KEY = "ac0974bec39a17e36ba4a6b4d238ff944bacb478cbed5efcae784d7bf4f2ff80"
DEV_ADDRESS = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"

NODE_ACCOUNTS = [
    "0x70997970C51812dc3A010C7d01b50e0d17dc79C8",
    "0x3C44CdDdB6a900fa2b585dd299e03d12FA4293BC",
]

SUPPLIED_TOKEN = "0xABCDEF0123456789ABCDEF0123456789ABCDEF01"

ARTIFACT_ABI = [{"type": "constructor", "inputs": [], "stateMutability": "nonpayable"}]


class FakePending:
    def __init__(self, address, tx_hash):
        self.address = address
        self.tx_hash = tx_hash
        self.confirmed = False

    def wait_for_deployment(self):
        self.confirmed = True
        return self.address


class FakeChain:
    """Stands in for ChainClient and records every call made against it."""

    def __init__(self, accounts=None, fail_on=None):
        self.node_accounts = list(NODE_ACCOUNTS if accounts is None else accounts)
        self.fail_on = fail_on
        self.calls = []
        self.deployments = []

    def accounts(self):
        self.calls.append("eth_accounts")
        return list(self.node_accounts)

    def deploy(self, artifact, args, signer):
        self.calls.append(("deploy", artifact.name))
        if artifact.name == self.fail_on:
            raise DeploymentError(f"Could not submit {artifact.name} deployment: reverted")

        n = len(self.deployments) + 1
        pending = FakePending("0x" + f"{n:040x}", "0x" + f"{n:064x}")
        self.deployments.append(
            {"name": artifact.name, "args": list(args), "signer": signer, "pending": pending}
        )
        return pending


def write_artifact(root, name, bytecode="0x6080604052", layout="hardhat"):
    if layout == "hardhat":
        folder = root / "contracts" / f"{name}.sol"
    else:
        folder = root / "contracts"
    folder.mkdir(parents=True, exist_ok=True)

    path = folder / f"{name}.json"
    path.write_text(json.dumps({"contractName": name, "abi": ARTIFACT_ABI, "bytecode": bytecode}))
    return path


@pytest.fixture
def artifacts_dir(tmp_path):
    root = tmp_path / "artifacts"
    for name in ("MockERC20", "GlobeFi"):
        write_artifact(root, name)
        (root / "contracts" / f"{name}.sol" / f"{name}.dbg.json").write_text("{}")

    yield root


@pytest.fixture
def create_chain():
    def create_chain(accounts=None, fail_on=None):
        return FakeChain(accounts=accounts, fail_on=fail_on)

    yield create_chain


@pytest.fixture
def chain(create_chain):
    yield create_chain()


@pytest.fixture
def probe(chain):
    def probe(endpoint):
        chain.calls.append(("eth_chainId", endpoint))
        return 31337

    yield probe


@pytest.fixture
def create_config(artifacts_dir):
    def create_config(**kwargs):
        kwargs.setdefault("artifacts_dir", artifacts_dir)
        return DeployConfig(**kwargs)

    yield create_config


@pytest.fixture
def local_profile():
    yield resolve_network("hardhat")


@pytest.fixture
def remote_profile():
    yield resolve_network("sepolia", "https://rpc.sepolia.example")
