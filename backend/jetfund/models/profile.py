from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel

REQUIRED_PROFILE_FIELDS: tuple[str, ...] = ("first_name", "last_name", "birthday")
REQUIRED_ADDRESS_FIELDS: tuple[str, ...] = (
    "address_line1",
    "city",
    "state",
    "postal_code",
    "country",
)


def _blank(value: str | None) -> bool:
    return value is None or not value.strip()


class UserAccount(BaseModel):
    """Full user record as the services see it, address included."""

    id: str
    slack_id: str
    name: str | None = None
    email: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    birthday: str | None = None
    address_line1: str | None = None
    address_line2: str | None = None
    city: str | None = None
    state: str | None = None
    postal_code: str | None = None
    country: str | None = None
    spent_usd: float = 0.0
    sessions_invalidated_at: datetime | None = None

    @property
    def has_address(self) -> bool:
        return not any(_blank(getattr(self, name)) for name in REQUIRED_ADDRESS_FIELDS)

    def missing_profile_fields(self) -> list[str]:
        """Names of the fields that must be filled in before a project can be submitted."""
        return [
            name
            for name in REQUIRED_PROFILE_FIELDS + REQUIRED_ADDRESS_FIELDS
            if _blank(getattr(self, name))
        ]

    def sanitized(self) -> UserProfile:
        return UserProfile(
            id=self.id,
            slack_id=self.slack_id,
            name=self.name,
            email=self.email,
            first_name=self.first_name,
            last_name=self.last_name,
            birthday=self.birthday,
            spent_usd=self.spent_usd,
            has_address=self.has_address,
        )


class UserProfile(BaseModel):
    """Client-facing view of a user; never carries address fields."""

    id: str
    slack_id: str
    name: str | None = None
    email: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    birthday: str | None = None
    spent_usd: float = 0.0
    has_address: bool = False
