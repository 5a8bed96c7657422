"""JWT session token service."""

import logging
from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt
from pydantic import BaseModel

from walletauth.core.config import get_settings

logger = logging.getLogger(__name__)


class TokenPayload(BaseModel):
    """JWT token payload."""

    sub: str  # Subject (wallet address)
    exp: datetime
    iat: datetime
    type: str
    wallet_address: str | None = None


class IssuedToken(BaseModel):
    """Access token issued after a verified login."""

    access_token: str
    token_type: str = "Bearer"
    expires_in: int  # Seconds


class JWTService:
    """Service for creating and validating session tokens."""

    def __init__(
        self,
        secret_key: str | None = None,
        algorithm: str = "HS256",
        access_token_expire_minutes: int | None = None,
    ):
        """Initialize JWT service.

        Args:
            secret_key: Secret key for signing tokens
            algorithm: JWT algorithm (default: HS256)
            access_token_expire_minutes: Access token expiration in minutes
        """
        settings = get_settings()
        self.secret_key = secret_key or settings.secret_key
        self.algorithm = algorithm
        self.access_token_expire_minutes = (
            access_token_expire_minutes or settings.access_token_expire_minutes
        )

    def create_access_token(
        self,
        subject: str,
        wallet_address: str | None = None,
    ) -> str:
        """Create an access token.

        Args:
            subject: Token subject (the wallet address)
            wallet_address: Verified wallet address

        Returns:
            Encoded JWT access token
        """
        now = datetime.now(timezone.utc)
        expire = now + timedelta(minutes=self.access_token_expire_minutes)

        payload = {
            "sub": subject,
            "exp": expire,
            "iat": now,
            "type": "access",
            "wallet_address": wallet_address,
        }

        return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)

    def issue(self, wallet_address: str) -> IssuedToken:
        """Issue the session token for a verified wallet."""
        return IssuedToken(
            access_token=self.create_access_token(
                subject=wallet_address,
                wallet_address=wallet_address,
            ),
            expires_in=self.access_token_expire_minutes * 60,
        )

    def verify_token(self, token: str) -> TokenPayload | None:
        """Verify and decode a JWT token.

        Returns:
            TokenPayload if valid, None if invalid
        """
        try:
            payload = jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm],
            )
            return TokenPayload(**payload)
        except JWTError as e:
            logger.warning(f"JWT verification failed: {e}")
            return None

    def verify_access_token(self, token: str) -> TokenPayload | None:
        """Verify an access token specifically."""
        payload = self.verify_token(token)
        if payload and payload.type == "access":
            return payload
        return None


# Singleton instance
_jwt_service: JWTService | None = None


def get_jwt_service() -> JWTService:
    """Get or create JWT service singleton."""
    global _jwt_service
    if _jwt_service is None:
        _jwt_service = JWTService()
    return _jwt_service
