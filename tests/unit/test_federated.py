"""Tests for the federated identity collaborator."""

import pytest

from walletauth.client.federated import (
    FederatedErrorCode,
    FederatedIdentityProvider,
    FederatedSignInError,
    federated_sign_in,
)


class TestFederatedErrorCode:
    """Tests for provider error code mapping."""

    def test_provider_codes(self):
        """Test known provider codes map to categories."""
        assert (
            FederatedErrorCode.from_provider_code("auth/popup-closed-by-user")
            == FederatedErrorCode.USER_CANCELLED
        )
        assert (
            FederatedErrorCode.from_provider_code("auth/network-request-failed")
            == FederatedErrorCode.NETWORK_FAILURE
        )
        assert FederatedErrorCode.from_provider_code("auth/internal-error") == (
            FederatedErrorCode.OTHER
        )
        assert FederatedErrorCode.from_provider_code(None) == FederatedErrorCode.OTHER


class TestFederatedSignIn:
    """Tests for the sign-in helper."""

    @pytest.mark.asyncio
    async def test_returns_assertion(self, federated_provider, federated_assertion):
        """Test a successful sign-in."""
        assert isinstance(federated_provider, FederatedIdentityProvider)

        assertion = await federated_sign_in(federated_provider)

        assert assertion == federated_assertion

    @pytest.mark.asyncio
    async def test_provider_error_passes_through(self, failing_federated_provider):
        """Test a provider error keeps its code."""
        provider = failing_federated_provider(
            FederatedSignInError(FederatedErrorCode.USER_CANCELLED)
        )

        with pytest.raises(FederatedSignInError) as exc_info:
            await federated_sign_in(provider)

        assert exc_info.value.code == FederatedErrorCode.USER_CANCELLED

    @pytest.mark.asyncio
    async def test_unexpected_error_is_other(self, failing_federated_provider):
        """Test arbitrary exceptions map to OTHER."""
        provider = failing_federated_provider(RuntimeError("popup blocked"))

        with pytest.raises(FederatedSignInError) as exc_info:
            await federated_sign_in(provider)

        assert exc_info.value.code == FederatedErrorCode.OTHER
        assert "popup blocked" in str(exc_info.value)
