"""Wallet (Sign-In with Ethereum) and federated login."""

__version__ = "0.1.0"
