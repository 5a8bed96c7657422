"""Sign-In with Ethereum services."""

from walletauth.services.siwe.message import SiweMessage, SiweMessageError
from walletauth.services.siwe.service import (
    NonceData,
    SignatureVerificationResult,
    SiweAuthService,
    get_siwe_auth_service,
)

__all__ = [
    # Message format
    "SiweMessage",
    "SiweMessageError",
    # Service
    "SiweAuthService",
    "NonceData",
    "SignatureVerificationResult",
    "get_siwe_auth_service",
]
