from web3 import Web3

from globefi_deploy.exceptions import DeploymentError


class ConfirmationAdapter:
    """Blocks until a pending deployment is mined and returns its address."""

    def __init__(self, pending):
        self.pending = pending

    def wait(self):
        raise NotImplementedError

    def confirm(self):
        address = self.wait() or _address_of(self.pending)
        if not address or not Web3.is_address(address):
            raise DeploymentError(f"Deployment did not resolve to an address: {address!r}")

        return Web3.to_checksum_address(address)


class WaitForDeploymentAdapter(ConfirmationAdapter):
    def wait(self):
        return self.pending.wait_for_deployment()


class DeployedAdapter(ConfirmationAdapter):
    """Handles that only expose the older ``deployed()`` call."""

    def wait(self):
        self.pending.deployed()


def _address_of(pending):
    return getattr(pending, "target", None) or getattr(pending, "address", None)


def adapter_for(pending):
    if callable(getattr(pending, "wait_for_deployment", None)):
        return WaitForDeploymentAdapter(pending)
    if callable(getattr(pending, "deployed", None)):
        return DeployedAdapter(pending)

    raise DeploymentError(
        f"Cannot confirm {type(pending).__name__}: it exposes neither "
        "wait_for_deployment() nor deployed()"
    )


def confirm_deployment(pending):
    return adapter_for(pending).confirm()
