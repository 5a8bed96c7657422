"""Pytest configuration and fixtures."""

import pytest
from fastapi.testclient import TestClient

from walletauth.client import FederatedAssertion, FederatedSignInError, LocalAccountWallet


@pytest.fixture(scope="session")
def app():
    """Create FastAPI application for testing."""
    from walletauth.main import create_app

    return create_app()


@pytest.fixture(scope="session")
def client(app):
    """Create test client."""
    with TestClient(app) as client:
        yield client


@pytest.fixture(scope="function")
def settings():
    """Create settings instance for testing."""
    from walletauth.core.config import Settings

    return Settings(environment="testing")


@pytest.fixture(autouse=True)
def clear_nonces():
    """Reset issued challenges between tests."""
    from walletauth.services.siwe import service

    service._siwe_auth_service = None
    yield
    service._siwe_auth_service = None


@pytest.fixture
def wallet():
    """Wallet that approves every request."""
    return LocalAccountWallet()


class FakeFederatedProvider:
    """Federated provider returning a fixed assertion or error."""

    def __init__(
        self,
        assertion: FederatedAssertion | None = None,
        error: Exception | None = None,
    ):
        self.assertion = assertion
        self.error = error
        self.calls = 0

    async def sign_in(self) -> FederatedAssertion:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.assertion


@pytest.fixture
def federated_assertion():
    """Assertion of a federated user."""
    return FederatedAssertion(
        display_name="Ada Lovelace",
        avatar_url="https://example.com/ada.png",
        access_token="federated-token",
    )


@pytest.fixture
def federated_provider(federated_assertion):
    """Federated provider that signs in successfully."""
    return FakeFederatedProvider(assertion=federated_assertion)


@pytest.fixture
def failing_federated_provider():
    """Factory for federated providers failing with a given error."""

    def factory(error: FederatedSignInError) -> FakeFederatedProvider:
        return FakeFederatedProvider(error=error)

    return factory
