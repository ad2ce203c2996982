from __future__ import annotations

import logging
from datetime import datetime
from typing import Any
from uuid import uuid4

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from jetfund.exceptions import NotFoundError
from jetfund.models.profile import UserAccount
from jetfund.models.user import User
from jetfund.tools import ensure_utc

logger = logging.getLogger(__name__)

PROFILE_COLUMNS = frozenset(
    {
        "name",
        "email",
        "first_name",
        "last_name",
        "birthday",
        "address_line1",
        "address_line2",
        "city",
        "state",
        "postal_code",
        "country",
    }
)


class UserRepository:
    """Repository for User records."""

    def __init__(self, session: AsyncSession):
        self.session = session

    def _user_db_to_model(self, user: User) -> UserAccount:
        return UserAccount(
            id=user.id,
            slack_id=user.slack_id,
            name=user.name,
            email=user.email,
            first_name=user.first_name,
            last_name=user.last_name,
            birthday=user.birthday,
            address_line1=user.address_line1,
            address_line2=user.address_line2,
            city=user.city,
            state=user.state,
            postal_code=user.postal_code,
            country=user.country,
            spent_usd=user.spent_usd or 0.0,
            sessions_invalidated_at=ensure_utc(user.sessions_invalidated_at),
        )

    async def _load(self, user_id: str) -> User:
        result = await self.session.execute(select(User).where(User.id == user_id))
        user = result.scalar_one_or_none()
        if user is None:
            raise NotFoundError("User", user_id)
        return user

    async def get_user(self, user_id: str) -> UserAccount:
        return self._user_db_to_model(await self._load(user_id))

    async def find_user(self, user_id: str) -> UserAccount | None:
        result = await self.session.execute(select(User).where(User.id == user_id))
        user = result.scalar_one_or_none()
        return self._user_db_to_model(user) if user is not None else None

    async def find_by_slack_id(self, slack_id: str) -> UserAccount | None:
        result = await self.session.execute(select(User).where(User.slack_id == slack_id))
        user = result.scalar_one_or_none()
        return self._user_db_to_model(user) if user is not None else None

    async def get_or_create_by_slack_id(
        self,
        slack_id: str,
        name: str | None = None,
        email: str | None = None,
    ) -> UserAccount:
        existing = await self.find_by_slack_id(slack_id)
        if existing is not None:
            return existing

        user = User(id=uuid4().hex, slack_id=slack_id, name=name, email=email, spent_usd=0.0)
        self.session.add(user)
        try:
            await self.session.commit()
        except IntegrityError:
            # Another request provisioned the same identity first.
            await self.session.rollback()
            existing = await self.find_by_slack_id(slack_id)
            if existing is None:
                raise
            return existing
        await self.session.refresh(user)
        logger.info("Provisioned user for new identity", extra={"user_id": user.id})
        return self._user_db_to_model(user)

    async def update_profile(self, user_id: str, fields: dict[str, Any]) -> UserAccount:
        unknown = set(fields) - PROFILE_COLUMNS
        if unknown:
            raise ValueError(f"Unknown profile fields: {sorted(unknown)}")

        user = await self._load(user_id)
        for name, value in fields.items():
            setattr(user, name, value)
        await self.session.commit()
        await self.session.refresh(user)
        return self._user_db_to_model(user)

    async def set_sessions_invalidated_at(self, user_id: str, when: datetime) -> UserAccount:
        user = await self._load(user_id)
        user.sessions_invalidated_at = when
        await self.session.commit()
        await self.session.refresh(user)
        return self._user_db_to_model(user)

    async def set_spent_usd(self, user_id: str, spent_usd: float) -> UserAccount:
        user = await self._load(user_id)
        user.spent_usd = spent_usd
        await self.session.commit()
        await self.session.refresh(user)
        return self._user_db_to_model(user)
