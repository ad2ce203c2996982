from __future__ import annotations

from fastapi import APIRouter

from jetfund.dependencies import CurrentUser, ProjectServiceDep, SessionServiceDep
from jetfund.models.api import (
    ProjectCreateRequest,
    ProjectListResponse,
    ProjectResponse,
    ProjectSubmitRequest,
    ProjectUpdateRequest,
    SessionListResponse,
    SuccessResponse,
    TotalTimeResponse,
)

router = APIRouter(prefix="/projects", tags=["projects"])


@router.get("", response_model=ProjectListResponse)
async def list_user_projects(
    service: ProjectServiceDep,
    current_user: CurrentUser,
) -> ProjectListResponse:
    """List all projects for the current user."""
    projects = await service.list_user_projects(current_user.id)
    return ProjectListResponse(projects=projects)


@router.post("", response_model=ProjectResponse)
async def create_project(
    payload: ProjectCreateRequest,
    service: ProjectServiceDep,
    current_user: CurrentUser,
) -> ProjectResponse:
    project = await service.create_project(
        current_user.id,
        payload.name,
        payload.hackatime_project,
    )
    return ProjectResponse(project=project)


@router.get("/{project_id}", response_model=ProjectResponse)
async def get_project(
    project_id: str,
    service: ProjectServiceDep,
    current_user: CurrentUser,
) -> ProjectResponse:
    project = await service.get_project(current_user.id, project_id)
    return ProjectResponse(project=project)


@router.patch("/{project_id}", response_model=ProjectResponse)
async def edit_project(
    project_id: str,
    payload: ProjectUpdateRequest,
    service: ProjectServiceDep,
    current_user: CurrentUser,
) -> ProjectResponse:
    changes = {name: getattr(payload, name) for name in payload.model_fields_set}
    project = await service.edit_project(current_user.id, project_id, **changes)
    return ProjectResponse(project=project)


@router.delete("/{project_id}", response_model=SuccessResponse)
async def delete_project(
    project_id: str,
    service: ProjectServiceDep,
    current_user: CurrentUser,
) -> SuccessResponse:
    await service.delete_project(current_user.id, project_id)
    return SuccessResponse()


@router.post("/{project_id}/submit", response_model=ProjectResponse)
async def submit_project(
    project_id: str,
    payload: ProjectSubmitRequest,
    service: ProjectServiceDep,
    current_user: CurrentUser,
) -> ProjectResponse:
    project = await service.submit_project(
        current_user.id,
        project_id,
        playable_url=payload.playable_url,
        code_url=payload.code_url,
        screenshot_url=payload.screenshot_url,
        description=payload.description,
    )
    return ProjectResponse(project=project)


@router.post("/{project_id}/reopen", response_model=ProjectResponse)
async def reopen_project(
    project_id: str,
    service: ProjectServiceDep,
    current_user: CurrentUser,
) -> ProjectResponse:
    project = await service.reopen_project(current_user.id, project_id)
    return ProjectResponse(project=project)


@router.get("/{project_id}/sessions", response_model=SessionListResponse)
async def list_project_sessions(
    project_id: str,
    service: SessionServiceDep,
    current_user: CurrentUser,
) -> SessionListResponse:
    sessions = await service.list_sessions_for_project(current_user.id, project_id)
    return SessionListResponse(sessions=sessions)


@router.get("/{project_id}/total-time", response_model=TotalTimeResponse)
async def get_project_total_time(
    project_id: str,
    service: SessionServiceDep,
    current_user: CurrentUser,
) -> TotalTimeResponse:
    total_hours = await service.total_time_for_project(current_user.id, project_id)
    return TotalTimeResponse(total_hours=total_hours)
