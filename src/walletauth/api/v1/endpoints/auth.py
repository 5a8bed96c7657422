"""Session endpoints."""

from fastapi import APIRouter
from pydantic import BaseModel

from walletauth.services.auth import CurrentUser

router = APIRouter(prefix="/auth", tags=["Authentication"])


class UserInfoResponse(BaseModel):
    """Current user information."""

    user_id: str
    wallet_address: str | None


@router.get("/me", response_model=UserInfoResponse)
async def get_current_user_info(
    user: CurrentUser,
) -> UserInfoResponse:
    """Get the user identified by the bearer token."""
    return UserInfoResponse(
        user_id=user.user_id,
        wallet_address=user.wallet_address,
    )
