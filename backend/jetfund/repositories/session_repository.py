from __future__ import annotations

from datetime import datetime
from uuid import uuid4

from sqlalchemy import and_, func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from jetfund.exceptions import NotFoundError
from jetfund.models.work_session import SessionStatus, WorkSession
from jetfund.models.work_session_db import WorkSessionDB
from jetfund.tools import ensure_utc, hours_between, round_half_up


class OpenSessionConflictError(Exception):
    """Raised when a user already holds the single open-session slot."""

    def __init__(self, user_id: str):
        super().__init__(f"User '{user_id}' already has an open session")
        self.user_id = user_id


def session_hours(session_db: WorkSessionDB) -> float | None:
    if session_db.end_time is None:
        return None
    return round_half_up(hours_between(session_db.start_time, session_db.end_time))


def _is_open(session_db: WorkSessionDB) -> bool:
    if session_db.status == SessionStatus.ONGOING.value:
        return True
    has_proof = bool((session_db.git_commit_url or "").strip()) and bool(
        (session_db.image_url or "").strip()
    )
    return session_db.status == SessionStatus.FINISHED.value and not has_proof


def _sync_open_marker(session_db: WorkSessionDB) -> None:
    session_db.open_owner_id = session_db.user_id if _is_open(session_db) else None


def _unfinished_clause():
    return or_(
        WorkSessionDB.status == SessionStatus.ONGOING.value,
        and_(
            WorkSessionDB.status == SessionStatus.FINISHED.value,
            or_(
                WorkSessionDB.git_commit_url == "",
                WorkSessionDB.git_commit_url.is_(None),
                WorkSessionDB.image_url == "",
                WorkSessionDB.image_url.is_(None),
            ),
        ),
    )


class SessionRepository:
    """Repository for work session records."""

    def __init__(self, session: AsyncSession):
        self.session = session

    def _session_db_to_model(self, session_db: WorkSessionDB) -> WorkSession:
        return WorkSession(
            id=session_db.id,
            user=[session_db.user_id],
            project=[session_db.project_id],
            start_time=ensure_utc(session_db.start_time),
            end_time=ensure_utc(session_db.end_time),
            git_commit_url=session_db.git_commit_url or "",
            image_url=session_db.image_url or "",
            status=SessionStatus(session_db.status),
            rejection_reason=session_db.rejection_reason,
            hours_spent=session_hours(session_db),
        )

    async def _load(self, session_id: str) -> WorkSessionDB:
        result = await self.session.execute(
            select(WorkSessionDB).where(WorkSessionDB.id == session_id)
        )
        session_db = result.scalar_one_or_none()
        if session_db is None:
            raise NotFoundError("Session", session_id)
        return session_db

    async def _save(self, session_db: WorkSessionDB) -> WorkSession:
        _sync_open_marker(session_db)
        await self.session.commit()
        await self.session.refresh(session_db)
        return self._session_db_to_model(session_db)

    async def create_session(
        self,
        user_id: str,
        project_id: str,
        start_time: datetime,
    ) -> WorkSession:
        session_db = WorkSessionDB(
            id=uuid4().hex,
            user_id=user_id,
            project_id=project_id,
            start_time=start_time,
            end_time=None,
            git_commit_url="",
            image_url="",
            status=SessionStatus.ONGOING.value,
            open_owner_id=user_id,
        )
        self.session.add(session_db)
        try:
            await self.session.commit()
        except IntegrityError as exc:
            await self.session.rollback()
            raise OpenSessionConflictError(user_id) from exc
        await self.session.refresh(session_db)
        return self._session_db_to_model(session_db)

    async def get_session(self, session_id: str) -> WorkSession:
        return self._session_db_to_model(await self._load(session_id))

    async def find_unfinished_for_user(
        self,
        user_id: str,
        project_id: str | None = None,
    ) -> WorkSession | None:
        query = select(WorkSessionDB).where(
            WorkSessionDB.user_id == user_id,
            _unfinished_clause(),
        )
        if project_id is not None:
            query = query.where(WorkSessionDB.project_id == project_id)
        query = query.order_by(WorkSessionDB.start_time.desc()).limit(1)

        result = await self.session.execute(query)
        session_db = result.scalar_one_or_none()
        return self._session_db_to_model(session_db) if session_db is not None else None

    async def list_project_sessions(self, project_id: str) -> list[WorkSession]:
        result = await self.session.execute(
            select(WorkSessionDB)
            .where(WorkSessionDB.project_id == project_id)
            .order_by(WorkSessionDB.start_time.desc())
        )
        return [self._session_db_to_model(s) for s in result.scalars().all()]

    async def count_project_sessions(self, project_id: str) -> int:
        result = await self.session.execute(
            select(func.count()).select_from(WorkSessionDB).where(WorkSessionDB.project_id == project_id)
        )
        return result.scalar_one()

    async def total_hours_for_project(self, project_id: str) -> float:
        result = await self.session.execute(
            select(WorkSessionDB).where(
                WorkSessionDB.project_id == project_id,
                WorkSessionDB.end_time.is_not(None),
            )
        )
        total = sum(session_hours(s) or 0.0 for s in result.scalars().all())
        return round_half_up(total)

    async def finish_session(self, session_id: str, end_time: datetime) -> WorkSession:
        session_db = await self._load(session_id)
        session_db.end_time = end_time
        session_db.status = SessionStatus.FINISHED.value
        return await self._save(session_db)

    async def attach_proof(
        self,
        session_id: str,
        git_commit_url: str,
        image_url: str,
        status: SessionStatus | None = None,
    ) -> WorkSession:
        session_db = await self._load(session_id)
        session_db.git_commit_url = git_commit_url
        session_db.image_url = image_url
        if status is not None:
            session_db.status = status.value
        return await self._save(session_db)

    async def update_status(
        self,
        session_id: str,
        status: SessionStatus,
        rejection_reason: str | None = None,
    ) -> WorkSession:
        session_db = await self._load(session_id)
        session_db.status = status.value
        if rejection_reason is not None:
            session_db.rejection_reason = rejection_reason
        return await self._save(session_db)

    async def update_statuses_for_project(
        self,
        project_id: str,
        target: SessionStatus,
    ) -> int:
        """Move every session of the project that may legally reach *target*; returns the count."""
        result = await self.session.execute(
            select(WorkSessionDB).where(WorkSessionDB.project_id == project_id)
        )
        moved = 0
        for session_db in result.scalars().all():
            if SessionStatus(session_db.status).can_transition_to(target):
                session_db.status = target.value
                _sync_open_marker(session_db)
                moved += 1
        if moved:
            await self.session.commit()
        return moved
