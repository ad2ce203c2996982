from __future__ import annotations

from fastapi import APIRouter

from jetfund.dependencies import CurrentUser, UserServiceDep
from jetfund.models.api import ProfileResponse, ProfileUpdateRequest, SuccessResponse

router = APIRouter(prefix="/user", tags=["user"])


@router.get("/profile", response_model=ProfileResponse)
async def get_profile(service: UserServiceDep, current_user: CurrentUser) -> ProfileResponse:
    """Profile without any address data."""
    profile = await service.get_profile(current_user.id)
    return ProfileResponse(**profile.model_dump())


@router.put("/profile", response_model=SuccessResponse)
async def update_profile(
    payload: ProfileUpdateRequest,
    service: UserServiceDep,
    current_user: CurrentUser,
) -> SuccessResponse:
    await service.update_profile(current_user.id, payload.personal_info, payload.address_info)
    return SuccessResponse(message="Profile updated successfully")


@router.post("/invalidate-sessions", response_model=SuccessResponse)
async def invalidate_sessions(service: UserServiceDep, current_user: CurrentUser) -> SuccessResponse:
    """Sign the user out on every device."""
    await service.invalidate_sessions(current_user.id)
    return SuccessResponse(message="Signed out on all devices successfully")
