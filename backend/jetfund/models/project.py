from __future__ import annotations

from datetime import UTC, datetime
from enum import Enum

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(UTC)


class ProjectStatus(str, Enum):
    """Lifecycle states for a project."""

    ACTIVE = "active"
    SUBMITTED = "submitted"
    APPROVED = "approved"
    REJECTED = "rejected"

    @classmethod
    def _missing_(cls, value: object) -> ProjectStatus | None:
        # Older records use "finished" for a submitted project.
        if isinstance(value, str) and value.strip().lower() == "finished":
            return cls.SUBMITTED
        return None

    def can_transition_to(self, target: ProjectStatus) -> bool:
        return target in PROJECT_TRANSITIONS[self]


PROJECT_TRANSITIONS: dict[ProjectStatus, frozenset[ProjectStatus]] = {
    ProjectStatus.ACTIVE: frozenset({ProjectStatus.SUBMITTED}),
    ProjectStatus.SUBMITTED: frozenset({ProjectStatus.APPROVED, ProjectStatus.REJECTED}),
    ProjectStatus.APPROVED: frozenset(),
    # Reopening is additionally gated by the ``allow_project_reopen`` setting.
    ProjectStatus.REJECTED: frozenset({ProjectStatus.ACTIVE}),
}


class Project(BaseModel):
    """Domain representation of a project together with its hour rollups."""

    id: str
    user: list[str] = Field(default_factory=list)
    name: str
    status: ProjectStatus = ProjectStatus.ACTIVE
    hackatime_project: str | None = None
    playable_url: str | None = None
    code_url: str | None = None
    screenshot_url: str | None = None
    description: str | None = None
    rejection_reason: str | None = None
    hackatime_hours: float = 0.0
    session_pending_hours: float = 0.0
    session_approved_hours: float = 0.0
    hackatime_pending_hours: float = 0.0
    hackatime_approved_hours: float = 0.0
    pending_hours: float = 0.0
    approved_hours: float = 0.0
    hours_spent: float = 0.0
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)

    def is_owned_by(self, user_id: str) -> bool:
        return user_id in self.user

    @property
    def is_hackatime_tracked(self) -> bool:
        return bool(self.hackatime_project)
