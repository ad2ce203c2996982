from __future__ import annotations

from fastapi import APIRouter

from jetfund.dependencies import CurrentUser, EarningsServiceDep
from jetfund.models.api import Earnings

router = APIRouter(prefix="/earnings", tags=["earnings"])


@router.get("", response_model=Earnings)
async def get_earnings(service: EarningsServiceDep, current_user: CurrentUser) -> Earnings:
    return await service.get_earnings(current_user.id)
