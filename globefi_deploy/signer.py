import re

from eth_account import Account

from globefi_deploy.exceptions import ConfigurationError, SignerError
from globefi_deploy.output import report


KEY_PREFIX = "0x"
_KEY_PATTERN = re.compile(r"^0x[0-9a-fA-F]{64}$")


def canonicalize_key(key):
    """Prefix a raw private key with 0x; already-prefixed keys come back as is."""
    key = key.strip()
    if key.startswith(KEY_PREFIX):
        return key

    return KEY_PREFIX + key


def is_valid_key(key):
    return bool(_KEY_PATTERN.match(canonicalize_key(key)))


class NodeAccountSigner:
    """An account the node keeps unlocked, transactions are signed node-side."""

    def __init__(self, address):
        self.address = address

    def send(self, w3, constructor):
        return constructor.transact({"from": self.address})

    def __repr__(self):
        return f"<NodeAccountSigner {self.address}>"


class WalletSigner:
    """A local key, transactions are signed here and sent raw."""

    def __init__(self, account):
        self.account = account

    @property
    def address(self):
        return self.account.address

    def send(self, w3, constructor):
        nonce = w3.eth.get_transaction_count(self.address, "pending")
        tx = constructor.build_transaction({"from": self.address, "nonce": nonce})
        signed = self.account.sign_transaction(tx)

        return w3.eth.send_raw_transaction(signed.raw_transaction)

    def __repr__(self):
        return f"<WalletSigner {self.address}>"


def wallet_from_key(key):
    try:
        account = Account.from_key(canonicalize_key(key))
    except Exception as exc:
        raise SignerError(f"Could not derive an account from PRIVATE_KEY: {exc}") from exc

    return WalletSigner(account)


def resolve_signer(profile, client, private_key=None):
    """Pick the deployer for this run.

    Local networks always use the node's first unlocked account, remote ones
    always sign with PRIVATE_KEY. A key configured for a local network is
    ignored.
    """
    if profile.is_ephemeral:
        accounts = client.accounts()
        if not accounts:
            raise SignerError(
                f"No accounts available on {profile.rpc_endpoint}: "
                "run a local node with unlocked accounts"
            )

        signer = NodeAccountSigner(accounts[0])
        report("Deployer (node account)", signer.address)
        return signer

    if not private_key:
        raise ConfigurationError(
            f"Missing PRIVATE_KEY for network '{profile.name}'", setting="PRIVATE_KEY"
        )

    signer = wallet_from_key(private_key)
    report("Deployer", signer.address)
    return signer
