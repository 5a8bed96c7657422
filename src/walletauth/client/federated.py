"""Federated identity provider interface."""

from enum import Enum
from typing import Protocol, runtime_checkable

from walletauth.client.models import FederatedAssertion


class FederatedErrorCode(str, Enum):
    """Failure categories of a federated sign-in."""

    USER_CANCELLED = "USER_CANCELLED"
    NETWORK_FAILURE = "NETWORK_FAILURE"
    OTHER = "OTHER"

    @classmethod
    def from_provider_code(cls, code: str | None) -> "FederatedErrorCode":
        """Map a provider-specific error code onto a category."""
        if code == "auth/popup-closed-by-user":
            return cls.USER_CANCELLED
        if code == "auth/network-request-failed":
            return cls.NETWORK_FAILURE
        return cls.OTHER


class FederatedSignInError(Exception):
    """Federated sign-in failed."""

    def __init__(self, code: FederatedErrorCode, message: str = ""):
        super().__init__(message or code.value)
        self.code = code
        self.message = message


@runtime_checkable
class FederatedIdentityProvider(Protocol):
    """Signs the user in with the federated provider.

    Raises FederatedSignInError on failure.
    """

    async def sign_in(self) -> FederatedAssertion: ...


async def federated_sign_in(provider: FederatedIdentityProvider) -> FederatedAssertion:
    """Run the provider sign-in and check the assertion carries a token.

    Raises:
        FederatedSignInError: On provider failure or a missing access token
    """
    try:
        assertion = await provider.sign_in()
    except FederatedSignInError:
        raise
    except Exception as e:
        raise FederatedSignInError(FederatedErrorCode.OTHER, str(e)) from e

    if assertion is None or not assertion.access_token:
        raise FederatedSignInError(
            FederatedErrorCode.OTHER, "Failed to get authentication token"
        )
    return assertion
