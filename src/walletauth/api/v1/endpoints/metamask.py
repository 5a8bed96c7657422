"""Wallet (SIWE) login endpoints."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel, Field

from walletauth.core.config import get_settings
from walletauth.services.auth import JWTService, get_jwt_service
from walletauth.services.siwe import SiweAuthService, get_siwe_auth_service

logger = logging.getLogger(__name__)
router = APIRouter(prefix=get_settings().metamask_route_prefix, tags=["Wallet Login"])


# Request/Response Models
class MessageRequest(BaseModel):
    """Request for a challenge message."""

    address: str = Field(
        ...,
        description="Wallet address to authenticate",
        pattern=r"^0x[a-fA-F0-9]{40}$",
    )
    domain: str = Field(
        ...,
        description="Requesting site's domain",
        pattern=r"^[^\s]+$",
    )
    uri: str = Field(
        ...,
        description="Requesting site's origin",
        pattern=r"^[^\s]+$",
    )


class VerifyRequest(BaseModel):
    """Signed challenge submitted for verification."""

    message: str = Field(..., min_length=1, description="Challenge message")
    signature: str = Field(..., min_length=1, description="Wallet signature")


class VerifyResponse(BaseModel):
    """Verification verdict."""

    success: bool
    address: str | None = None
    token: str | None = None
    token_type: str | None = None
    expires_in: int | None = None
    error: str | None = None


# Endpoints
@router.post("/message", response_class=PlainTextResponse)
async def request_message(
    request: MessageRequest,
    siwe_auth: Annotated[SiweAuthService, Depends(get_siwe_auth_service)],
) -> str:
    """Issue a challenge message to be signed by the wallet.

    The message must be signed and submitted to /verify before it expires.
    """
    if not siwe_auth.is_valid_address(request.address):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid wallet address",
        )

    try:
        nonce_data = siwe_auth.issue_message(
            request.address,
            domain=request.domain,
            uri=request.uri,
        )
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )
    return nonce_data.message


@router.post("/verify", response_model=VerifyResponse)
async def verify_signature(
    request: VerifyRequest,
    siwe_auth: Annotated[SiweAuthService, Depends(get_siwe_auth_service)],
    jwt_service: Annotated[JWTService, Depends(get_jwt_service)],
) -> VerifyResponse:
    """Verify a signed challenge and issue a session token.

    A signature that does not verify yields ``success: false``.
    """
    result = siwe_auth.verify(request.message, request.signature)

    if not result.valid:
        logger.info(f"Wallet verification rejected: {result.error}")
        return VerifyResponse(success=False, error=result.error)

    token = jwt_service.issue(result.wallet_address)

    return VerifyResponse(
        success=True,
        address=result.wallet_address,
        token=token.access_token,
        token_type=token.token_type,
        expires_in=token.expires_in,
    )
