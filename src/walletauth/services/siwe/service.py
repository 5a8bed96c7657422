"""Sign-In with Ethereum challenge issuing and verification."""

import hashlib
import logging
import secrets
import time
from datetime import datetime, timedelta, timezone

from eth_account.messages import encode_defunct
from pydantic import BaseModel
from web3 import Web3

from walletauth.core.config import get_settings
from walletauth.services.siwe.message import SiweMessage, SiweMessageError

logger = logging.getLogger(__name__)


class NonceData(BaseModel):
    """Issued challenge awaiting its signature."""

    nonce: str
    message: str
    expires_at: int
    wallet_address: str


class SignatureVerificationResult(BaseModel):
    """Result of signature verification."""

    valid: bool
    wallet_address: str | None = None
    error: str | None = None


class SiweAuthService:
    """Service issuing SIWE challenges and verifying their signatures."""

    def __init__(
        self,
        nonce_expire_seconds: int | None = None,
        statement: str | None = None,
        chain_id: int | None = None,
        version: str | None = None,
    ):
        """Initialize SIWE auth service.

        Args:
            nonce_expire_seconds: How long challenges are valid
            statement: Statement shown in the signing prompt
            chain_id: Chain ID bound into challenges
            version: EIP-4361 message version
        """
        settings = get_settings()
        self.nonce_expire_seconds = (
            nonce_expire_seconds
            if nonce_expire_seconds is not None
            else settings.nonce_expire_seconds
        )
        self.statement = statement if statement is not None else settings.siwe_statement
        self.chain_id = chain_id or settings.chain_id
        self.version = version or settings.siwe_version
        self.w3 = Web3()
        # In-memory nonce storage
        self._nonces: dict[str, NonceData] = {}

    def issue_message(self, wallet_address: str, domain: str, uri: str) -> NonceData:
        """Issue a challenge message bound to address, domain and origin.

        Args:
            wallet_address: Wallet address requesting authentication
            domain: Requesting site's domain
            uri: Requesting site's origin

        Returns:
            NonceData with nonce and message to sign

        Raises:
            ValueError: If the address, domain or uri is invalid
        """
        wallet_address = self._normalize_address(wallet_address)

        nonce = secrets.token_hex(16)
        issued_at = datetime.now(timezone.utc).replace(microsecond=0)
        expiration = issued_at + timedelta(seconds=self.nonce_expire_seconds)

        message = SiweMessage(
            domain=domain,
            address=wallet_address,
            statement=self.statement or None,
            uri=uri,
            version=self.version,
            chain_id=self.chain_id,
            nonce=nonce,
            issued_at=issued_at,
            expiration_time=expiration,
        ).prepare_message()

        # Domain and uri must survive a round trip through the parser
        try:
            SiweMessage.parse(message)
        except SiweMessageError as e:
            raise ValueError(f"Cannot issue challenge: {e}") from e

        nonce_data = NonceData(
            nonce=nonce,
            message=message,
            expires_at=int(expiration.timestamp()),
            wallet_address=wallet_address,
        )

        # Keyed by wallet + nonce to prevent reuse
        storage_key = self._get_storage_key(wallet_address, nonce)
        self._nonces[storage_key] = nonce_data

        self._cleanup_expired_nonces()

        logger.info(f"Issued SIWE challenge for {wallet_address} on {domain}")
        return nonce_data

    def verify(self, message: str, signature: str) -> SignatureVerificationResult:
        """Verify a signed challenge.

        The signer recovered from the signature must equal the address bound
        into the message, and the message must be the one issued for its nonce.

        Args:
            message: Challenge message that was signed
            signature: Signature from wallet

        Returns:
            SignatureVerificationResult indicating success or failure
        """
        try:
            parsed = SiweMessage.parse(message)
        except SiweMessageError as e:
            return SignatureVerificationResult(
                valid=False,
                error=f"Malformed message: {e}",
            )

        try:
            wallet_address = self._normalize_address(parsed.address)
        except ValueError:
            return SignatureVerificationResult(
                valid=False,
                error="Invalid wallet address in message",
            )

        storage_key = self._get_storage_key(wallet_address, parsed.nonce)

        nonce_data = self._nonces.get(storage_key)
        if not nonce_data:
            return SignatureVerificationResult(
                valid=False,
                error="Invalid or expired nonce",
            )

        if time.time() > nonce_data.expires_at:
            del self._nonces[storage_key]
            return SignatureVerificationResult(
                valid=False,
                error="Nonce has expired",
            )

        if nonce_data.message != message:
            return SignatureVerificationResult(
                valid=False,
                error="Message does not match the issued challenge",
            )

        try:
            recovered_address = self._recover_address(
                message=message,
                signature=signature,
            )
        except Exception as e:
            logger.error(f"Signature verification error: {e}")
            return SignatureVerificationResult(
                valid=False,
                error=f"Signature verification failed: {str(e)}",
            )

        if recovered_address.lower() != wallet_address.lower():
            return SignatureVerificationResult(
                valid=False,
                error="Signature does not match wallet address",
            )

        # One-time use
        self._nonces.pop(storage_key, None)

        logger.info(f"SIWE signature verified for {wallet_address}")
        return SignatureVerificationResult(
            valid=True,
            wallet_address=wallet_address,
        )

    def _recover_address(self, message: str, signature: str) -> str:
        """Recover wallet address from signed message (EIP-191 personal_sign)."""
        message_encoded = encode_defunct(text=message)
        return self.w3.eth.account.recover_message(
            message_encoded,
            signature=signature,
        )

    def _normalize_address(self, address: str) -> str:
        return self.w3.to_checksum_address(address)

    def _get_storage_key(self, wallet_address: str, nonce: str) -> str:
        return hashlib.sha256(f"{wallet_address}:{nonce}".encode()).hexdigest()

    def _cleanup_expired_nonces(self) -> None:
        """Remove expired nonces from storage."""
        current_time = time.time()
        expired_keys = [
            key
            for key, data in self._nonces.items()
            if current_time > data.expires_at
        ]
        for key in expired_keys:
            del self._nonces[key]

    def is_valid_address(self, address: str) -> bool:
        """Check if address is valid Ethereum address."""
        try:
            self.w3.to_checksum_address(address)
            return True
        except ValueError:
            return False


# Singleton instance
_siwe_auth_service: SiweAuthService | None = None


def get_siwe_auth_service() -> SiweAuthService:
    """Get or create SIWE auth service singleton."""
    global _siwe_auth_service
    if _siwe_auth_service is None:
        _siwe_auth_service = SiweAuthService()
    return _siwe_auth_service
