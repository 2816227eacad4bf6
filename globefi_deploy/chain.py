import requests
from web3 import Web3
from web3.exceptions import Web3Exception

from globefi_deploy.exceptions import ConnectivityError, DeploymentError


RPC_ERRORS = (requests.exceptions.RequestException, Web3Exception, ValueError)

# receipts are waited on until the node answers, only the preflight probe is bounded
RECEIPT_TIMEOUT = float("inf")


def _encodable(arg):
    # web3 only encodes checksummed addresses, operators paste them in any case
    if isinstance(arg, str) and Web3.is_address(arg):
        return Web3.to_checksum_address(arg)

    return arg


class PendingDeployment:
    """A submitted contract creation that has not been confirmed yet."""

    def __init__(self, w3, name, tx_hash):
        self.w3 = w3
        self.name = name
        self.tx_hash = tx_hash
        self.receipt = None
        self.address = None

    def __repr__(self):
        return f"<PendingDeployment {self.name} {Web3.to_hex(self.tx_hash)}>"

    def wait_for_deployment(self, timeout=RECEIPT_TIMEOUT):
        try:
            receipt = self.w3.eth.wait_for_transaction_receipt(self.tx_hash, timeout=timeout)
        except RPC_ERRORS as exc:
            raise DeploymentError(
                f"{self.name} deployment {Web3.to_hex(self.tx_hash)} was not confirmed: {exc}"
            ) from exc

        if receipt.get("status") == 0:
            raise DeploymentError(
                f"{self.name} deployment {Web3.to_hex(self.tx_hash)} reverted"
            )

        address = receipt.get("contractAddress")
        if not address:
            raise DeploymentError(
                f"{self.name} deployment {Web3.to_hex(self.tx_hash)} created no contract"
            )

        self.receipt = receipt
        self.address = address
        return address


class ChainClient:
    """The handful of JSON-RPC calls a deployment run needs."""

    def __init__(self, w3, endpoint=None):
        self.w3 = w3
        self.endpoint = endpoint

    @classmethod
    def connect(cls, endpoint):
        return cls(Web3(Web3.HTTPProvider(endpoint)), endpoint=endpoint)

    def accounts(self):
        try:
            return list(self.w3.eth.accounts)
        except RPC_ERRORS as exc:
            raise ConnectivityError(
                f"Could not list accounts on {self.endpoint}: {exc}", endpoint=self.endpoint
            ) from exc

    def deploy(self, artifact, args, signer):
        factory = self.w3.eth.contract(abi=artifact.abi, bytecode=artifact.bytecode)

        try:
            constructor = factory.constructor(*[_encodable(a) for a in args])
            tx_hash = signer.send(self.w3, constructor)
        except RPC_ERRORS as exc:
            raise DeploymentError(f"Could not submit {artifact.name} deployment: {exc}") from exc

        return PendingDeployment(self.w3, artifact.name, tx_hash)
