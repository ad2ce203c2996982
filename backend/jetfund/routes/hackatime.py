from __future__ import annotations

from fastapi import APIRouter

from jetfund.dependencies import CurrentUser, HackatimeServiceDep
from jetfund.models.hackatime import HackatimeStatsResponse

router = APIRouter(prefix="/hackatime", tags=["hackatime"])


@router.get("/stats", response_model=HackatimeStatsResponse)
async def get_hackatime_stats(
    service: HackatimeServiceDep,
    current_user: CurrentUser,
) -> HackatimeStatsResponse:
    return await service.fetch_user_stats(current_user.slack_id)
