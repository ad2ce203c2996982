from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timedelta

from jetfund.exceptions import InvalidTransitionError, RuleViolationError, UnfinishedSessionError
from jetfund.models.project import Project, ProjectStatus
from jetfund.models.work_session import SessionStatus, WorkSession
from jetfund.repositories.project_repository import ProjectRepository
from jetfund.repositories.session_repository import OpenSessionConflictError, SessionRepository
from jetfund.services.guards import ensure_project_owner, ensure_session_owner, require_fields
from jetfund.tools import ensure_utc, utcnow

logger = logging.getLogger(__name__)

MAX_SESSION_LENGTH = timedelta(hours=24)
MIN_SESSION_LENGTH = timedelta(minutes=1)


class SessionService:
    """Start/finish/submit rules for time-tracking sessions."""

    def __init__(
        self,
        sessions: SessionRepository,
        projects: ProjectRepository,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.sessions = sessions
        self.projects = projects
        self.clock = clock

    async def _owned_project(self, user_id: str, project_id: str) -> Project:
        project = await self.projects.get_project(project_id)
        ensure_project_owner(project, user_id)
        return project

    async def _owned_session(self, user_id: str, session_id: str) -> WorkSession:
        session = await self.sessions.get_session(session_id)
        ensure_session_owner(session, user_id)
        return session

    async def start_session(self, user_id: str, project_id: str | None) -> WorkSession:
        fields = require_fields("Missing project.", project_id=project_id)
        project = await self._owned_project(user_id, fields["project_id"])

        if project.status != ProjectStatus.ACTIVE:
            raise RuleViolationError("This project cannot accept new sessions.")
        if project.is_hackatime_tracked:
            raise RuleViolationError(
                "This project is tracked by Hackatime; manual sessions are disabled."
            )

        blocking = await self.sessions.find_unfinished_for_user(user_id)
        if blocking is not None:
            logger.info(
                "Refused to start session while another is unfinished",
                extra={"user_id": user_id, "session_id": blocking.id, "rule": "single-open-session"},
            )
            raise UnfinishedSessionError(blocking)

        try:
            session = await self.sessions.create_session(user_id, project.id, self.clock())
        except OpenSessionConflictError:
            # A concurrent request claimed the open-session slot first.
            raise UnfinishedSessionError(
                await self.sessions.find_unfinished_for_user(user_id)
            ) from None

        logger.info(
            "Session started",
            extra={"user_id": user_id, "project_id": project.id, "session_id": session.id},
        )
        return session

    async def finish_session(self, user_id: str, session_id: str | None) -> WorkSession:
        fields = require_fields("Missing session.", session_id=session_id)
        session = await self._owned_session(user_id, fields["session_id"])

        if session.status != SessionStatus.ONGOING:
            raise RuleViolationError("Session is not in progress.")

        now = ensure_utc(self.clock())
        duration = now - session.start_time
        if duration > MAX_SESSION_LENGTH:
            raise RuleViolationError(
                "Session is longer than 24 hours. It looks like the timer was left running."
            )
        if duration < timedelta(0):
            raise RuleViolationError("Session ends before it started. Check your system clock.")
        if duration < MIN_SESSION_LENGTH:
            raise RuleViolationError("Session must last at least one minute.")

        finished = await self.sessions.finish_session(session.id, now)
        logger.info(
            "Session finished",
            extra={"user_id": user_id, "session_id": session.id},
        )
        return finished

    async def submit_proof(
        self,
        user_id: str,
        session_id: str | None,
        git_commit_url: str | None,
        image_url: str | None,
    ) -> WorkSession:
        """Attach proof to a stopped session; rejected sessions are resubmitted instead."""
        fields = require_fields(
            "Missing required fields: session_id, git_commit_url, image_url",
            session_id=session_id,
            git_commit_url=git_commit_url,
            image_url=image_url,
        )
        session = await self._owned_session(user_id, fields["session_id"])

        if session.status == SessionStatus.REJECTED:
            return await self._resubmit(user_id, session, fields["git_commit_url"], fields["image_url"])
        if session.status == SessionStatus.APPROVED:
            raise RuleViolationError("Session is already reviewed.")
        if session.status == SessionStatus.ONGOING:
            raise RuleViolationError("Session must be finished before submitting details.")
        if session.status != SessionStatus.FINISHED or session.has_proof:
            raise RuleViolationError("Session details have already been submitted.")

        updated = await self.sessions.attach_proof(
            session.id, fields["git_commit_url"], fields["image_url"]
        )
        logger.info("Session proof submitted", extra={"user_id": user_id, "session_id": session.id})
        return updated

    async def resubmit_session(
        self,
        user_id: str,
        session_id: str,
        git_commit_url: str | None,
        image_url: str | None,
    ) -> WorkSession:
        fields = require_fields(
            "Missing required fields: git_commit_url, image_url",
            git_commit_url=git_commit_url,
            image_url=image_url,
        )
        session = await self._owned_session(user_id, session_id)

        if session.status == SessionStatus.APPROVED:
            raise RuleViolationError("Session is already reviewed.")
        if session.status != SessionStatus.REJECTED:
            raise RuleViolationError("Can only update rejected sessions.")
        return await self._resubmit(user_id, session, fields["git_commit_url"], fields["image_url"])

    async def _resubmit(
        self,
        user_id: str,
        session: WorkSession,
        git_commit_url: str,
        image_url: str,
    ) -> WorkSession:
        if not session.status.can_transition_to(SessionStatus.FINISHED):
            raise InvalidTransitionError("session", session.status.value, SessionStatus.FINISHED.value)
        updated = await self.sessions.attach_proof(
            session.id, git_commit_url, image_url, status=SessionStatus.FINISHED
        )
        logger.info("Rejected session resubmitted", extra={"user_id": user_id, "session_id": session.id})
        return updated

    async def get_current_unfinished(self, user_id: str) -> WorkSession | None:
        return await self.sessions.find_unfinished_for_user(user_id)

    async def list_sessions_for_project(self, user_id: str, project_id: str) -> list[WorkSession]:
        await self._owned_project(user_id, project_id)
        return await self.sessions.list_project_sessions(project_id)

    async def total_time_for_project(self, user_id: str, project_id: str) -> float:
        await self._owned_project(user_id, project_id)
        return await self.sessions.total_hours_for_project(project_id)
