"""Wallet connection and message signing."""

import logging
from typing import Protocol, runtime_checkable

from eth_account import Account
from eth_account.messages import encode_defunct
from eth_account.signers.local import LocalAccount

from walletauth.client.errors import (
    USER_REJECTED_CODE,
    ProviderRpcError,
    SigningError,
    SigningRejected,
    UserRejected,
    WalletError,
    WalletUnavailable,
)
from walletauth.client.models import normalize_address

logger = logging.getLogger(__name__)


@runtime_checkable
class WalletProvider(Protocol):
    """Capability interface of an injected wallet.

    Implementations raise ProviderRpcError; code 4001 means the user
    rejected the request.
    """

    async def request_accounts(self) -> list[str]: ...

    async def sign_message(self, address: str, message: str) -> str: ...


class WalletConnector:
    """Requests account access from the wallet provider."""

    def __init__(self, provider: WalletProvider | None):
        """Initialize connector.

        Args:
            provider: Injected wallet provider, or None when no wallet is present
        """
        self.provider = provider

    @property
    def is_available(self) -> bool:
        return self.provider is not None

    async def connect(self) -> str:
        """Connect to the wallet and return the checksummed account address.

        Returns:
            Checksummed address of the first account

        Raises:
            WalletUnavailable: No provider is injected
            UserRejected: The user denied account access
            WalletError: Any other provider failure
        """
        if self.provider is None:
            raise WalletUnavailable("No wallet provider found")

        try:
            accounts = await self.provider.request_accounts()
        except ProviderRpcError as e:
            if e.is_user_rejection:
                raise UserRejected("Account access was denied", cause=e) from e
            raise WalletError(f"Wallet connection failed: {e}", cause=e) from e
        except Exception as e:
            raise WalletError(f"Wallet connection failed: {e}", cause=e) from e

        if not accounts:
            raise WalletError("Wallet returned no accounts")

        try:
            address = normalize_address(accounts[0])
        except ValueError as e:
            raise WalletError(f"Wallet returned an invalid address: {e}", cause=e) from e

        logger.info(f"Wallet connected: {address}")
        return address


class MessageSigner:
    """Obtains signatures from the connected wallet."""

    def __init__(self, provider: WalletProvider | None):
        self.provider = provider

    async def sign(self, address: str, message: str) -> str:
        """Ask the wallet to sign a challenge message.

        Args:
            address: Account that must sign
            message: Challenge message

        Returns:
            Signature as hex string

        Raises:
            SigningRejected: The user declined the prompt
            SigningError: Any other failure
        """
        if self.provider is None:
            raise SigningError("No wallet provider found")

        try:
            signature = await self.provider.sign_message(address, message)
        except ProviderRpcError as e:
            if e.is_user_rejection:
                raise SigningRejected("Signature request was declined", cause=e) from e
            raise SigningError(f"Failed to sign message: {e}", cause=e) from e
        except Exception as e:
            raise SigningError(f"Failed to sign message: {e}", cause=e) from e

        if not signature:
            raise SigningError("Wallet returned an empty signature")
        return signature


class LocalAccountWallet:
    """Wallet provider backed by a local private key (EIP-191 personal_sign)."""

    def __init__(
        self,
        account: LocalAccount | None = None,
        approve_accounts: bool = True,
        approve_signing: bool = True,
    ):
        """Initialize local wallet.

        Args:
            account: Signing account (a fresh one is created if None)
            approve_accounts: Whether account access requests are granted
            approve_signing: Whether signature requests are granted
        """
        self.account = account or Account.create()
        self.approve_accounts = approve_accounts
        self.approve_signing = approve_signing

    @classmethod
    def from_key(cls, private_key: str, **kwargs) -> "LocalAccountWallet":
        return cls(Account.from_key(private_key), **kwargs)

    @property
    def address(self) -> str:
        return self.account.address

    async def request_accounts(self) -> list[str]:
        if not self.approve_accounts:
            raise ProviderRpcError(USER_REJECTED_CODE, "User rejected the request.")
        return [self.account.address]

    async def sign_message(self, address: str, message: str) -> str:
        if not self.approve_signing:
            raise ProviderRpcError(USER_REJECTED_CODE, "User denied message signature.")
        if normalize_address(address) != self.account.address:
            raise ProviderRpcError(4100, "Requested account is not authorized.")

        signed = self.account.sign_message(encode_defunct(text=message))
        signature = signed.signature.hex()
        if not signature.startswith("0x"):
            signature = "0x" + signature
        return signature
