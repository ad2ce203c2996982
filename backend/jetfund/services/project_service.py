from __future__ import annotations

import logging

from jetfund.exceptions import InvalidTransitionError, RuleViolationError
from jetfund.models.project import Project, ProjectStatus
from jetfund.models.work_session import SessionStatus
from jetfund.repositories.project_repository import ProjectRepository
from jetfund.repositories.session_repository import SessionRepository
from jetfund.repositories.user_repository import UserRepository
from jetfund.services.guards import ensure_project_owner, is_blank, require_fields
from jetfund.services.hackatime_service import HackatimeService

logger = logging.getLogger(__name__)

_UNSET = object()


class ProjectService:
    """Create/edit/delete/submit rules for projects."""

    def __init__(
        self,
        projects: ProjectRepository,
        sessions: SessionRepository,
        users: UserRepository,
        hackatime: HackatimeService | None = None,
        allow_reopen: bool = False,
    ):
        self.projects = projects
        self.sessions = sessions
        self.users = users
        self.hackatime = hackatime
        self.allow_reopen = allow_reopen

    async def get_project(self, user_id: str, project_id: str) -> Project:
        project = await self.projects.get_project(project_id)
        ensure_project_owner(project, user_id)
        return project

    async def list_user_projects(self, user_id: str) -> list[Project]:
        return await self.projects.list_user_projects(user_id)

    async def create_project(
        self,
        user_id: str,
        name: str | None,
        hackatime_project: str | None = None,
    ) -> Project:
        fields = require_fields("Missing name.", name=name)
        link = None if is_blank(hackatime_project) else hackatime_project
        project = await self.projects.create_project(user_id, fields["name"], link)
        logger.info("Project created", extra={"user_id": user_id, "project_id": project.id})
        return project

    async def edit_project(
        self,
        user_id: str,
        project_id: str,
        *,
        name: str | None | object = _UNSET,
        hackatime_project: str | None | object = _UNSET,
    ) -> Project:
        project = await self.get_project(user_id, project_id)
        if project.status != ProjectStatus.ACTIVE:
            raise RuleViolationError("Only active projects can be edited.")

        changes: dict[str, str | None] = {}
        if name is not _UNSET:
            changes["name"] = require_fields("Missing name.", name=name)["name"]
        if hackatime_project is not _UNSET:
            link = None if is_blank(hackatime_project) else hackatime_project
            if link and link != project.hackatime_project:
                if await self.sessions.count_project_sessions(project.id):
                    raise RuleViolationError(
                        "This project already has manual sessions and cannot be linked to Hackatime."
                    )
            changes["hackatime_project"] = link

        if not changes:
            return project
        return await self.projects.update_project(project.id, **changes)

    async def delete_project(self, user_id: str, project_id: str) -> None:
        project = await self.get_project(user_id, project_id)
        if project.status != ProjectStatus.ACTIVE:
            raise RuleViolationError("Only active projects can be deleted.")
        await self.projects.delete_project(project.id)
        logger.info("Project deleted", extra={"user_id": user_id, "project_id": project.id})

    async def submit_project(
        self,
        user_id: str,
        project_id: str,
        *,
        playable_url: str | None,
        code_url: str | None,
        screenshot_url: str | None,
        description: str | None,
    ) -> Project:
        artifacts = require_fields(
            "Missing required fields: playable_url, code_url, screenshot_url, description",
            playable_url=playable_url,
            code_url=code_url,
            screenshot_url=screenshot_url,
            description=description,
        )
        project = await self.get_project(user_id, project_id)
        if project.status != ProjectStatus.ACTIVE:
            raise RuleViolationError("Project is already submitted.")

        in_flight = await self.sessions.find_unfinished_for_user(user_id, project_id=project.id)
        if in_flight is not None:
            raise RuleViolationError(
                "Finish and submit your current session for this project before shipping it.",
                session=in_flight.model_dump(mode="json"),
            )

        owner = await self.users.get_user(user_id)
        missing = owner.missing_profile_fields()
        if missing:
            logger.info(
                "Project submission blocked by incomplete profile",
                extra={"user_id": user_id, "project_id": project.id, "rule": "profile-complete"},
            )
            raise RuleViolationError(
                "Your name, birthday and address must be set in account settings before submitting a project.",
                missing=missing,
            )

        if project.is_hackatime_tracked:
            if self.hackatime is None:
                raise RuleViolationError("Hackatime tracking is not available.")
            artifacts["hackatime_hours"] = await self.hackatime.project_hours(
                owner.slack_id, project.hackatime_project
            )

        if not project.status.can_transition_to(ProjectStatus.SUBMITTED):
            raise InvalidTransitionError("project", project.status.value, ProjectStatus.SUBMITTED.value)
        await self.projects.update_project_status(project.id, ProjectStatus.SUBMITTED, **artifacts)
        moved = await self.sessions.update_statuses_for_project(project.id, SessionStatus.SUBMITTED)
        logger.info(
            "Project submitted with %d session(s)",
            moved,
            extra={"user_id": user_id, "project_id": project.id},
        )
        return await self.projects.get_project(project.id)

    async def reopen_project(self, user_id: str, project_id: str) -> Project:
        if not self.allow_reopen:
            raise RuleViolationError("Rejected projects cannot be reopened.")
        project = await self.get_project(user_id, project_id)
        if project.status != ProjectStatus.REJECTED:
            raise RuleViolationError("Only rejected projects can be reopened.")
        if not project.status.can_transition_to(ProjectStatus.ACTIVE):
            raise InvalidTransitionError("project", project.status.value, ProjectStatus.ACTIVE.value)
        reopened = await self.projects.update_project_status(
            project.id, ProjectStatus.ACTIVE, rejection_reason=None
        )
        logger.info("Project reopened", extra={"user_id": user_id, "project_id": project.id})
        return reopened
