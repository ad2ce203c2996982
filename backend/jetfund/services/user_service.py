from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime

from jetfund.exceptions import RuleViolationError
from jetfund.models.api import AddressInfo, PersonalInfo
from jetfund.models.profile import UserProfile
from jetfund.repositories.user_repository import UserRepository
from jetfund.services.guards import require_fields
from jetfund.tools import utcnow

logger = logging.getLogger(__name__)


class UserService:
    """Profile reads and writes; address data only ever flows inward."""

    def __init__(self, users: UserRepository, clock: Callable[[], datetime] = utcnow):
        self.users = users
        self.clock = clock

    async def get_profile(self, user_id: str) -> UserProfile:
        user = await self.users.get_user(user_id)
        return user.sanitized()

    async def update_profile(
        self,
        user_id: str,
        personal_info: PersonalInfo | None,
        address_info: AddressInfo | None = None,
    ) -> UserProfile:
        if personal_info is None:
            raise RuleViolationError("Personal information is required.")

        fields: dict[str, str | None] = dict(
            require_fields(
                "Email, first name, and last name are required.",
                email=personal_info.email,
                first_name=personal_info.first_name,
                last_name=personal_info.last_name,
            )
        )
        if personal_info.birthday is not None:
            fields["birthday"] = personal_info.birthday.strip() or None

        if address_info is not None:
            for name, value in address_info.model_dump(exclude_unset=True).items():
                fields[name] = value.strip() if isinstance(value, str) else value

        user = await self.users.update_profile(user_id, fields)
        logger.info("Profile updated", extra={"user_id": user_id})
        return user.sanitized()

    async def invalidate_sessions(self, user_id: str) -> None:
        await self.users.set_sessions_invalidated_at(user_id, self.clock())
        logger.info("All sign-in sessions invalidated", extra={"user_id": user_id})
