from __future__ import annotations

from fastapi import APIRouter

from jetfund.dependencies import CurrentUser, SessionServiceDep
from jetfund.models.api import (
    CurrentSessionResponse,
    FinishSessionRequest,
    SessionProofRequest,
    SessionResponse,
    StartSessionRequest,
    SubmitSessionRequest,
)

router = APIRouter(prefix="/sessions", tags=["sessions"])


@router.get("/current", response_model=CurrentSessionResponse)
async def get_current_session(
    service: SessionServiceDep,
    current_user: CurrentUser,
) -> CurrentSessionResponse:
    session = await service.get_current_unfinished(current_user.id)
    return CurrentSessionResponse(session=session)


@router.post("/start", response_model=SessionResponse)
async def start_session(
    payload: StartSessionRequest,
    service: SessionServiceDep,
    current_user: CurrentUser,
) -> SessionResponse:
    session = await service.start_session(current_user.id, payload.project_id)
    return SessionResponse(session=session)


@router.post("/finish", response_model=SessionResponse)
async def finish_session(
    payload: FinishSessionRequest,
    service: SessionServiceDep,
    current_user: CurrentUser,
) -> SessionResponse:
    session = await service.finish_session(current_user.id, payload.session_id)
    return SessionResponse(session=session)


@router.post("/submit", response_model=SessionResponse)
async def submit_session(
    payload: SubmitSessionRequest,
    service: SessionServiceDep,
    current_user: CurrentUser,
) -> SessionResponse:
    session = await service.submit_proof(
        current_user.id,
        payload.session_id,
        payload.git_commit_url,
        payload.image_url,
    )
    return SessionResponse(session=session)


@router.patch("/{session_id}", response_model=SessionResponse)
async def resubmit_session(
    session_id: str,
    payload: SessionProofRequest,
    service: SessionServiceDep,
    current_user: CurrentUser,
) -> SessionResponse:
    """Replace the proof on a rejected session and send it back for review."""
    session = await service.resubmit_session(
        current_user.id,
        session_id,
        payload.git_commit_url,
        payload.image_url,
    )
    return SessionResponse(session=session)
