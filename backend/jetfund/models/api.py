from __future__ import annotations

from pydantic import BaseModel, Field

from .profile import UserProfile
from .project import Project
from .work_session import WorkSession


class StartSessionRequest(BaseModel):
    project_id: str | None = None


class FinishSessionRequest(BaseModel):
    session_id: str | None = None


class SessionProofRequest(BaseModel):
    git_commit_url: str | None = None
    image_url: str | None = None


class SubmitSessionRequest(SessionProofRequest):
    session_id: str | None = None


class SessionResponse(BaseModel):
    success: bool = True
    session: WorkSession


class CurrentSessionResponse(BaseModel):
    session: WorkSession | None = None


class SessionListResponse(BaseModel):
    sessions: list[WorkSession] = Field(default_factory=list)


class ProjectCreateRequest(BaseModel):
    name: str | None = None
    hackatime_project: str | None = None


class ProjectUpdateRequest(BaseModel):
    """Partial update; only fields present in the request body are applied."""

    name: str | None = None
    hackatime_project: str | None = None


class ProjectSubmitRequest(BaseModel):
    playable_url: str | None = None
    code_url: str | None = None
    screenshot_url: str | None = None
    description: str | None = None


class ProjectResponse(BaseModel):
    project: Project


class ProjectListResponse(BaseModel):
    projects: list[Project] = Field(default_factory=list)


class SuccessResponse(BaseModel):
    success: bool = True
    message: str | None = None


class TotalTimeResponse(BaseModel):
    total_hours: float


class PersonalInfo(BaseModel):
    email: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    birthday: str | None = None


class AddressInfo(BaseModel):
    address_line1: str | None = None
    address_line2: str | None = None
    city: str | None = None
    state: str | None = None
    postal_code: str | None = None
    country: str | None = None


class ProfileUpdateRequest(BaseModel):
    personal_info: PersonalInfo | None = None
    address_info: AddressInfo | None = None


class ProfileResponse(UserProfile):
    pass


class Earnings(BaseModel):
    approved_usd: float = 0.0
    pending_usd: float = 0.0


class UploadResponse(BaseModel):
    url: str
