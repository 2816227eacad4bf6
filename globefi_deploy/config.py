import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from dotenv import find_dotenv, load_dotenv
from web3 import Web3

from globefi_deploy.exceptions import ConfigurationError
from globefi_deploy.network import NetworkProfile, is_ephemeral, resolve_network
from globefi_deploy.signer import canonicalize_key, is_valid_key


DEFAULT_NETWORK = "hardhat"
DEFAULT_ARTIFACTS_DIR = "artifacts"


def load_environment(env_file=None):
    """Pull a .env file into os.environ without clobbering exported values."""
    load_dotenv(dotenv_path=env_file or find_dotenv(usecwd=True), override=False)
    return os.environ


def _get(environ, *names):
    for name in names:
        value = environ.get(name)
        if value is not None and value.strip() != "":
            return value.strip()

    return None


@dataclass
class DeployConfig:
    network: str = DEFAULT_NETWORK
    rpc_url: Optional[str] = None
    private_key: Optional[str] = None
    dependency_address: Optional[str] = None
    artifacts_dir: Path = Path(DEFAULT_ARTIFACTS_DIR)
    preflight: bool = True

    @classmethod
    def from_env(cls, environ: Mapping[str, str], **overrides) -> "DeployConfig":
        network = overrides.pop("network", None) or _get(environ, "NETWORK")
        network = network or DEFAULT_NETWORK

        # sepolia may be configured as SEPOLIA_RPC_URL like in hardhat.config.ts
        scoped_rpc = f"{network.upper().replace('-', '_')}_RPC_URL"
        # a generic RPC_URL in .env belongs to the remote network, local runs
        # stay on loopback unless LOCALHOST_RPC_URL (or --rpc-url) says otherwise
        rpc_names = (scoped_rpc,) if is_ephemeral(network) else ("RPC_URL", scoped_rpc)

        config = cls(
            network=network,
            rpc_url=_get(environ, *rpc_names),
            private_key=_get(environ, "PRIVATE_KEY"),
            dependency_address=_get(environ, "DEPENDENCY_ADDRESS", "STABLECOIN_ADDRESS"),
            artifacts_dir=Path(_get(environ, "ARTIFACTS_DIR") or DEFAULT_ARTIFACTS_DIR),
        )

        for field, value in overrides.items():
            if value is not None:
                setattr(config, field, value)

        return config

    def validate(self) -> NetworkProfile:
        """Check every required setting before anything touches the network."""
        profile = resolve_network(self.network, self.rpc_url)

        # ephemeral runs sign with the node's accounts and always mint a fresh
        # token, so neither PRIVATE_KEY nor DEPENDENCY_ADDRESS matter there
        if profile.is_ephemeral:
            return profile

        if not self.private_key:
            raise ConfigurationError(
                f"Missing PRIVATE_KEY for network '{profile.name}'",
                setting="PRIVATE_KEY",
            )

        if not is_valid_key(self.private_key):
            raise ConfigurationError(
                "PRIVATE_KEY is not a 32 byte hex string", setting="PRIVATE_KEY"
            )

        if self.dependency_address and not Web3.is_address(self.dependency_address):
            raise ConfigurationError(
                f"DEPENDENCY_ADDRESS is not a valid address: {self.dependency_address}",
                setting="DEPENDENCY_ADDRESS",
            )

        self.private_key = canonicalize_key(self.private_key)

        return profile
