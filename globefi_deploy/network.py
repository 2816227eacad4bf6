from dataclasses import dataclass
from typing import Optional

import requests
from web3 import Web3
from web3.exceptions import Web3Exception

from globefi_deploy.exceptions import ConfigurationError, ConnectivityError


# hardhat runs in-process, localhost is a node started with `npx hardhat node`
EPHEMERAL_NETWORKS = ("hardhat", "localhost")
LOOPBACK_RPC_URL = "http://127.0.0.1:8545"
PROBE_TIMEOUT = 2.0


@dataclass(frozen=True)
class NetworkProfile:
    name: str
    is_ephemeral: bool
    rpc_endpoint: str


def is_ephemeral(name: str) -> bool:
    return name in EPHEMERAL_NETWORKS


def resolve_network(name: str, rpc_url: Optional[str] = None) -> NetworkProfile:
    """Map a network name (and optional configured URL) to a NetworkProfile.

    Ephemeral networks fall back to the loopback node, every other network
    must come with an explicit RPC URL.
    """
    if is_ephemeral(name):
        return NetworkProfile(name, True, rpc_url or LOOPBACK_RPC_URL)

    if not rpc_url:
        raise ConfigurationError(
            f"Missing RPC_URL for network '{name}'", setting="RPC_URL"
        )

    return NetworkProfile(name, False, rpc_url)


def check_connectivity(endpoint: str, timeout: float = PROBE_TIMEOUT) -> int:
    """Ask the endpoint for its chain id, failing fast if it does not answer."""
    # single attempt, the provider's own retries would outlast the timeout
    provider = Web3.HTTPProvider(
        endpoint,
        request_kwargs={"timeout": timeout},
        exception_retry_configuration=None,
    )
    w3 = Web3(provider)

    try:
        return w3.eth.chain_id
    except (requests.exceptions.RequestException, Web3Exception, ValueError) as exc:
        raise ConnectivityError(
            f"RPC connectivity check failed for {endpoint}: {exc}. "
            "Start a local node (npx hardhat node) or set a valid RPC_URL in .env",
            endpoint=endpoint,
        ) from exc
