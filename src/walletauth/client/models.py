"""Data model for wallet and federated sign-in."""

from pydantic import BaseModel, ConfigDict, Field, field_validator
from web3 import Web3


def normalize_address(address: str) -> str:
    """Normalize wallet address to checksum format.

    Args:
        address: Wallet address in any letter case

    Returns:
        Checksummed address

    Raises:
        ValueError: If the value is not a 20-byte hex address
    """
    if not isinstance(address, str):
        raise ValueError(f"Invalid wallet address: {address!r}")
    return Web3.to_checksum_address(address.strip())


def is_valid_address(address: str) -> bool:
    """Check if address is a valid Ethereum address."""
    try:
        normalize_address(address)
        return True
    except ValueError:
        return False


class VerificationResult(BaseModel):
    """Verdict returned by the authentication service."""

    success: bool
    address: str | None = None
    token: str | None = None
    error: str | None = None


class FederatedAssertion(BaseModel):
    """Identity asserted by the federated provider."""

    display_name: str | None = None
    avatar_url: str | None = None
    access_token: str


class WalletAssertion(BaseModel):
    """Identity asserted by a verified wallet signature."""

    address: str
    verified: bool
    token: str | None = None

    @field_validator("address")
    @classmethod
    def checksum_address(cls, value: str) -> str:
        return normalize_address(value)


IdentityAssertion = FederatedAssertion | WalletAssertion


class SessionRecord(BaseModel):
    """Unified authenticated-user state."""

    model_config = ConfigDict(frozen=True)

    display_name: str
    avatar_url: str
    wallet_address: str | None = Field(default=None)
    bearer_token: str | None = Field(default=None)
