from __future__ import annotations

from jetfund.exceptions import NotAuthorizedError, RuleViolationError
from jetfund.models.project import Project
from jetfund.models.work_session import WorkSession


def is_blank(value: str | None) -> bool:
    return value is None or not value.strip()


def require_fields(message: str, **values: str | None) -> dict[str, str]:
    """Return the stripped values, or raise with *message* if any is blank."""
    if any(is_blank(value) for value in values.values()):
        raise RuleViolationError(message, missing=[k for k, v in values.items() if is_blank(v)])
    return {key: value.strip() for key, value in values.items()}


def ensure_project_owner(project: Project, user_id: str) -> None:
    if not project.is_owned_by(user_id):
        raise NotAuthorizedError()


def ensure_session_owner(session: WorkSession, user_id: str) -> None:
    if user_id not in session.user:
        raise NotAuthorizedError("Not authorized to modify this session.")
