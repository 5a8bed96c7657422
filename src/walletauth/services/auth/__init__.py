"""Session token services module."""

from walletauth.services.auth.dependencies import (
    AuthenticatedUser,
    CurrentUser,
    get_current_user,
)
from walletauth.services.auth.jwt_service import (
    IssuedToken,
    JWTService,
    TokenPayload,
    get_jwt_service,
)

__all__ = [
    # JWT
    "JWTService",
    "TokenPayload",
    "IssuedToken",
    "get_jwt_service",
    # Dependencies
    "AuthenticatedUser",
    "get_current_user",
    # Type alias
    "CurrentUser",
]
