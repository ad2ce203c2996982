from __future__ import annotations

from datetime import UTC, datetime

from sqlalchemy import Column, DateTime, Float, String
from sqlalchemy.orm import relationship

from jetfund.database import Base


class User(Base):
    """User record keyed by the external Slack identity."""

    __tablename__ = "users"

    id = Column(String, primary_key=True, index=True)
    slack_id = Column(String, unique=True, index=True, nullable=False)
    name = Column(String, nullable=True)
    email = Column(String, nullable=True)
    first_name = Column(String, nullable=True)
    last_name = Column(String, nullable=True)
    birthday = Column(String, nullable=True)
    # Address is write-only from the API's point of view.
    address_line1 = Column(String, nullable=True)
    address_line2 = Column(String, nullable=True)
    city = Column(String, nullable=True)
    state = Column(String, nullable=True)
    postal_code = Column(String, nullable=True)
    country = Column(String, nullable=True)
    spent_usd = Column(Float, nullable=False, default=0.0)
    sessions_invalidated_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(UTC), nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
        nullable=False,
    )

    projects = relationship("ProjectDB", back_populates="user")
    sessions = relationship("WorkSessionDB", back_populates="user")
