"""Deploys the GlobeFi contract, provisioning a mock stablecoin when needed."""

__version__ = "0.1.0"
