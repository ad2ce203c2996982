from __future__ import annotations

from fastapi import APIRouter

from jetfund.dependencies import CurrentUser
from jetfund.models.profile import UserProfile

router = APIRouter(prefix="/auth", tags=["auth"])


@router.get("/me", response_model=UserProfile)
async def get_current_user_info(current_user: CurrentUser) -> UserProfile:
    """Get current authenticated user information."""
    return current_user.sanitized()
