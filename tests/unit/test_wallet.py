"""Tests for wallet connection and signing."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from eth_account import Account
from eth_account.messages import encode_defunct

from walletauth.client.errors import (
    ProviderRpcError,
    SigningError,
    SigningRejected,
    UserRejected,
    WalletError,
    WalletUnavailable,
)
from walletauth.client.wallet import (
    LocalAccountWallet,
    MessageSigner,
    WalletConnector,
    WalletProvider,
)


class TestWalletConnector:
    """Tests for the wallet connector."""

    @pytest.mark.asyncio
    async def test_connect_returns_checksummed_address(self):
        """Test that a lowercase account is returned checksummed."""
        account = Account.create()
        provider = MagicMock()
        provider.request_accounts = AsyncMock(return_value=[account.address.lower()])

        address = await WalletConnector(provider).connect()

        assert address == account.address

    @pytest.mark.asyncio
    async def test_connect_uses_first_account(self, wallet):
        """Test that the first returned account is used."""
        other = Account.create()
        provider = MagicMock()
        provider.request_accounts = AsyncMock(
            return_value=[wallet.address, other.address]
        )

        address = await WalletConnector(provider).connect()

        assert address == wallet.address

    @pytest.mark.asyncio
    async def test_missing_provider(self):
        """Test that a missing provider raises WalletUnavailable."""
        connector = WalletConnector(None)

        assert connector.is_available is False
        with pytest.raises(WalletUnavailable):
            await connector.connect()

    @pytest.mark.asyncio
    async def test_user_rejection(self):
        """Test that a denied access request raises UserRejected."""
        wallet = LocalAccountWallet(approve_accounts=False)

        with pytest.raises(UserRejected) as exc_info:
            await WalletConnector(wallet).connect()

        assert isinstance(exc_info.value.cause, ProviderRpcError)

    @pytest.mark.asyncio
    async def test_other_provider_error(self):
        """Test that other RPC errors raise WalletError."""
        provider = MagicMock()
        provider.request_accounts = AsyncMock(
            side_effect=ProviderRpcError(-32002, "Request already pending")
        )

        with pytest.raises(WalletError):
            await WalletConnector(provider).connect()

    @pytest.mark.asyncio
    async def test_unexpected_exception(self):
        """Test that arbitrary failures raise WalletError."""
        provider = MagicMock()
        provider.request_accounts = AsyncMock(side_effect=RuntimeError("boom"))

        with pytest.raises(WalletError):
            await WalletConnector(provider).connect()

    @pytest.mark.asyncio
    async def test_no_accounts(self):
        """Test that an empty account list raises WalletError."""
        provider = MagicMock()
        provider.request_accounts = AsyncMock(return_value=[])

        with pytest.raises(WalletError):
            await WalletConnector(provider).connect()

    @pytest.mark.asyncio
    async def test_invalid_account(self):
        """Test that a malformed account raises WalletError."""
        provider = MagicMock()
        provider.request_accounts = AsyncMock(return_value=["0x123"])

        with pytest.raises(WalletError):
            await WalletConnector(provider).connect()


class TestMessageSigner:
    """Tests for the message signer."""

    @pytest.mark.asyncio
    async def test_signature_recovers_to_wallet(self, wallet):
        """Test that the produced signature recovers to the signer."""
        signature = await MessageSigner(wallet).sign(wallet.address, "hello")

        recovered = Account.recover_message(
            encode_defunct(text="hello"), signature=signature
        )
        assert recovered == wallet.address
        assert signature.startswith("0x")

    @pytest.mark.asyncio
    async def test_signing_rejected(self):
        """Test that a declined prompt raises SigningRejected."""
        wallet = LocalAccountWallet(approve_signing=False)

        with pytest.raises(SigningRejected):
            await MessageSigner(wallet).sign(wallet.address, "hello")

    @pytest.mark.asyncio
    async def test_signing_error(self):
        """Test that other failures raise SigningError."""
        provider = MagicMock()
        provider.sign_message = AsyncMock(side_effect=ProviderRpcError(-32603, "Internal"))

        with pytest.raises(SigningError):
            await MessageSigner(provider).sign("0x" + "1" * 40, "hello")

    @pytest.mark.asyncio
    async def test_empty_signature(self):
        """Test that an empty signature raises SigningError."""
        provider = MagicMock()
        provider.sign_message = AsyncMock(return_value="")

        with pytest.raises(SigningError):
            await MessageSigner(provider).sign("0x" + "1" * 40, "hello")

    @pytest.mark.asyncio
    async def test_missing_provider(self):
        """Test signing without a wallet."""
        with pytest.raises(SigningError):
            await MessageSigner(None).sign("0x" + "1" * 40, "hello")


class TestLocalAccountWallet:
    """Tests for the key-backed wallet provider."""

    def test_implements_provider_protocol(self, wallet):
        """Test protocol conformance."""
        assert isinstance(wallet, WalletProvider)

    def test_from_key(self):
        """Test wallet creation from a private key."""
        account = Account.create()
        wallet = LocalAccountWallet.from_key(account.key.hex())

        assert wallet.address == account.address

    @pytest.mark.asyncio
    async def test_refuses_foreign_account(self, wallet):
        """Test that signing for another account is refused."""
        other = Account.create()

        with pytest.raises(ProviderRpcError) as exc_info:
            await wallet.sign_message(other.address, "hello")

        assert exc_info.value.is_user_rejection is False
