from __future__ import annotations

from typing import Any


class JetFundError(Exception):
    """Base error for business-rule and dependency failures."""

    status_code = 500
    error_code = "INTERNAL_ERROR"

    def __init__(self, message: str, **extra: Any):
        super().__init__(message)
        self.message = message
        self.extra = extra

    def to_response(self) -> dict[str, Any]:
        body: dict[str, Any] = {"detail": self.message, "error_code": self.error_code}
        body.update(self.extra)
        return body


class NotAuthenticatedError(JetFundError):
    """Raised when no valid identity accompanies the request."""

    status_code = 401
    error_code = "NOT_AUTHENTICATED"


class NotAuthorizedError(JetFundError):
    """Raised when acting on a record owned by someone else."""

    status_code = 403
    error_code = "FORBIDDEN"

    def __init__(self, message: str = "Not authorized."):
        super().__init__(message)


class NotFoundError(JetFundError):
    """Raised when a record identifier cannot be resolved."""

    status_code = 404
    error_code = "NOT_FOUND"

    def __init__(self, resource: str, record_id: str):
        super().__init__(f"{resource} '{record_id}' was not found")
        self.resource = resource
        self.record_id = record_id


class RuleViolationError(JetFundError):
    """Raised when a request breaks a validation or lifecycle rule."""

    status_code = 400
    error_code = "VALIDATION_ERROR"


class InvalidTransitionError(RuleViolationError):
    """Raised when a status change is not in the transition table."""

    def __init__(self, kind: str, current: str, target: str):
        super().__init__(f"Cannot move {kind} from '{current}' to '{target}'.")
        self.current = current
        self.target = target


class UnfinishedSessionError(RuleViolationError):
    """Raised when the user still has a session that needs their attention."""

    def __init__(self, session: Any, message: str = "You already have an unfinished session."):
        payload = session.model_dump(mode="json") if session is not None else None
        super().__init__(message, session=payload)
        self.session = session


class UpstreamError(JetFundError):
    """Raised when the store or an external API call fails."""

    status_code = 500
    error_code = "EXTERNAL_API_ERROR"
