from __future__ import annotations

from datetime import UTC, datetime

from sqlalchemy import Column, DateTime, Float, ForeignKey, String, Text
from sqlalchemy.orm import relationship

from jetfund.database import Base


class ProjectDB(Base):
    """Database model for projects linked to users."""

    __tablename__ = "projects"

    id = Column(String, primary_key=True, index=True)
    user_id = Column(String, ForeignKey("users.id"), nullable=False, index=True)
    name = Column(String, nullable=False)
    status = Column(String, nullable=False, default="active")
    hackatime_project = Column(String, nullable=True)
    playable_url = Column(String, nullable=True)
    code_url = Column(String, nullable=True)
    screenshot_url = Column(String, nullable=True)
    description = Column(Text, nullable=True)
    rejection_reason = Column(Text, nullable=True)
    # Externally tracked hours, captured when the project is submitted.
    hackatime_hours = Column(Float, nullable=False, default=0.0)
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(UTC), nullable=False)
    updated_at = Column(DateTime(timezone=True), default=lambda: datetime.now(UTC), onupdate=lambda: datetime.now(UTC), nullable=False)

    user = relationship("User", back_populates="projects")
    sessions = relationship(
        "WorkSessionDB",
        back_populates="project",
        cascade="all, delete-orphan",
        order_by="WorkSessionDB.start_time",
    )
