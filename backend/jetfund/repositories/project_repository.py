from __future__ import annotations

from collections.abc import Iterable
from datetime import UTC, datetime
from typing import Any
from uuid import uuid4

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from jetfund.exceptions import NotFoundError
from jetfund.models.project import Project, ProjectStatus
from jetfund.models.project_db import ProjectDB
from jetfund.models.work_session import SessionStatus
from jetfund.models.work_session_db import WorkSessionDB
from jetfund.repositories.session_repository import session_hours
from jetfund.tools import ensure_utc, round_half_up

EDITABLE_COLUMNS = frozenset(
    {
        "name",
        "hackatime_project",
        "playable_url",
        "code_url",
        "screenshot_url",
        "description",
        "rejection_reason",
        "hackatime_hours",
    }
)

PENDING_SESSION_STATUSES = frozenset({SessionStatus.FINISHED.value, SessionStatus.SUBMITTED.value})


def compute_rollups(
    status: ProjectStatus,
    sessions: Iterable[WorkSessionDB],
    hackatime_hours: float,
) -> dict[str, float]:
    """Aggregate session and Hackatime hours into pending/approved buckets."""

    ended = [(s.status, session_hours(s) or 0.0) for s in sessions if s.end_time is not None]

    session_pending = 0.0
    if status == ProjectStatus.SUBMITTED:
        session_pending = sum(hours for s_status, hours in ended if s_status in PENDING_SESSION_STATUSES)
    session_approved = sum(hours for s_status, hours in ended if s_status == SessionStatus.APPROVED.value)

    hackatime_pending = hackatime_hours if status == ProjectStatus.SUBMITTED else 0.0
    hackatime_approved = hackatime_hours if status == ProjectStatus.APPROVED else 0.0

    return {
        "session_pending_hours": round_half_up(session_pending),
        "session_approved_hours": round_half_up(session_approved),
        "hackatime_pending_hours": round_half_up(hackatime_pending),
        "hackatime_approved_hours": round_half_up(hackatime_approved),
        "pending_hours": round_half_up(session_pending + hackatime_pending),
        "approved_hours": round_half_up(session_approved + hackatime_approved),
        "hours_spent": round_half_up(sum(hours for _, hours in ended) + hackatime_hours),
    }


class ProjectRepository:
    """Repository for Project records and their hour rollups."""

    def __init__(self, session: AsyncSession):
        self.session = session

    def _query(self):
        return (
            select(ProjectDB)
            .options(selectinload(ProjectDB.sessions))
            .execution_options(populate_existing=True)
        )

    def _project_db_to_model(self, project_db: ProjectDB) -> Project:
        """Convert database model to domain model."""
        status = ProjectStatus(project_db.status)
        hackatime_hours = project_db.hackatime_hours or 0.0
        return Project(
            id=project_db.id,
            user=[project_db.user_id],
            name=project_db.name,
            status=status,
            hackatime_project=project_db.hackatime_project,
            playable_url=project_db.playable_url,
            code_url=project_db.code_url,
            screenshot_url=project_db.screenshot_url,
            description=project_db.description,
            rejection_reason=project_db.rejection_reason,
            hackatime_hours=hackatime_hours,
            created_at=ensure_utc(project_db.created_at),
            updated_at=ensure_utc(project_db.updated_at),
            **compute_rollups(status, project_db.sessions, hackatime_hours),
        )

    async def _load(self, project_id: str) -> ProjectDB:
        result = await self.session.execute(self._query().where(ProjectDB.id == project_id))
        project_db = result.scalar_one_or_none()
        if project_db is None:
            raise NotFoundError("Project", project_id)
        return project_db

    async def _reload(self, project_id: str) -> Project:
        return self._project_db_to_model(await self._load(project_id))

    async def create_project(
        self,
        user_id: str,
        name: str,
        hackatime_project: str | None = None,
    ) -> Project:
        project_db = ProjectDB(
            id=uuid4().hex,
            user_id=user_id,
            name=name,
            status=ProjectStatus.ACTIVE.value,
            hackatime_project=hackatime_project,
            hackatime_hours=0.0,
        )
        self.session.add(project_db)
        await self.session.commit()
        return await self._reload(project_db.id)

    async def get_project(self, project_id: str) -> Project:
        return await self._reload(project_id)

    async def list_user_projects(self, user_id: str) -> list[Project]:
        result = await self.session.execute(
            self._query().where(ProjectDB.user_id == user_id).order_by(ProjectDB.created_at.desc())
        )
        return [self._project_db_to_model(p) for p in result.scalars().all()]

    async def update_project(self, project_id: str, **fields: Any) -> Project:
        unknown = set(fields) - EDITABLE_COLUMNS
        if unknown:
            raise ValueError(f"Unknown project fields: {sorted(unknown)}")

        project_db = await self._load(project_id)
        for name, value in fields.items():
            setattr(project_db, name, value)
        project_db.updated_at = datetime.now(UTC)
        await self.session.commit()
        return await self._reload(project_id)

    async def update_project_status(
        self,
        project_id: str,
        status: ProjectStatus,
        **fields: Any,
    ) -> Project:
        unknown = set(fields) - EDITABLE_COLUMNS
        if unknown:
            raise ValueError(f"Unknown project fields: {sorted(unknown)}")

        project_db = await self._load(project_id)
        project_db.status = status.value
        for name, value in fields.items():
            setattr(project_db, name, value)
        project_db.updated_at = datetime.now(UTC)
        await self.session.commit()
        return await self._reload(project_id)

    async def delete_project(self, project_id: str) -> None:
        project_db = await self._load(project_id)
        await self.session.delete(project_db)
        await self.session.commit()
