from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field


class SessionStatus(str, Enum):
    """Lifecycle states for a work session."""

    ONGOING = "ongoing"
    FINISHED = "finished"
    SUBMITTED = "submitted"
    APPROVED = "approved"
    REJECTED = "rejected"

    def can_transition_to(self, target: SessionStatus) -> bool:
        return target in SESSION_TRANSITIONS[self]


SESSION_TRANSITIONS: dict[SessionStatus, frozenset[SessionStatus]] = {
    SessionStatus.ONGOING: frozenset({SessionStatus.FINISHED}),
    SessionStatus.FINISHED: frozenset(
        {SessionStatus.SUBMITTED, SessionStatus.APPROVED, SessionStatus.REJECTED}
    ),
    SessionStatus.SUBMITTED: frozenset({SessionStatus.APPROVED, SessionStatus.REJECTED}),
    SessionStatus.APPROVED: frozenset(),
    SessionStatus.REJECTED: frozenset({SessionStatus.FINISHED}),
}


class WorkSession(BaseModel):
    """One timed unit of work logged against a project."""

    id: str
    user: list[str] = Field(default_factory=list)
    project: list[str] = Field(default_factory=list)
    start_time: datetime
    end_time: datetime | None = None
    git_commit_url: str = ""
    image_url: str = ""
    status: SessionStatus = SessionStatus.ONGOING
    rejection_reason: str | None = None
    hours_spent: float | None = None

    @property
    def user_id(self) -> str | None:
        return self.user[0] if self.user else None

    @property
    def project_id(self) -> str | None:
        return self.project[0] if self.project else None

    @property
    def has_proof(self) -> bool:
        return bool(self.git_commit_url.strip()) and bool(self.image_url.strip())

    def is_non_terminal(self) -> bool:
        """True while the session still needs its owner: running, or stopped without proof."""
        if self.status == SessionStatus.ONGOING:
            return True
        return self.status == SessionStatus.FINISHED and not self.has_proof
