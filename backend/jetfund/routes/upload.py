from __future__ import annotations

from fastapi import APIRouter, File, UploadFile

from jetfund.dependencies import CurrentUser, UploadServiceDep
from jetfund.exceptions import RuleViolationError
from jetfund.models.api import UploadResponse

router = APIRouter(prefix="/upload", tags=["upload"])


@router.post("", response_model=UploadResponse)
async def upload_screenshot(
    service: UploadServiceDep,
    current_user: CurrentUser,
    file: UploadFile | None = File(default=None),
) -> UploadResponse:
    if file is None:
        raise RuleViolationError("No file provided")
    content = await file.read()
    url = await service.relay(file.filename, content, file.content_type)
    return UploadResponse(url=url)
