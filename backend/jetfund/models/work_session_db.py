from __future__ import annotations

from datetime import UTC, datetime

from sqlalchemy import Column, DateTime, ForeignKey, String, Text
from sqlalchemy.orm import relationship

from jetfund.database import Base


class WorkSessionDB(Base):
    """Database model for a timed unit of work on a project."""

    __tablename__ = "sessions"

    id = Column(String, primary_key=True, index=True)
    user_id = Column(String, ForeignKey("users.id"), nullable=False, index=True)
    project_id = Column(String, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True)
    start_time = Column(DateTime(timezone=True), nullable=False)
    end_time = Column(DateTime(timezone=True), nullable=True)
    git_commit_url = Column(String, nullable=False, default="")
    image_url = Column(String, nullable=False, default="")
    status = Column(String, nullable=False, default="ongoing")
    rejection_reason = Column(Text, nullable=True)
    # Holds the owner's id while the session is non-terminal; the unique
    # constraint allows at most one such session per user.
    open_owner_id = Column(String, nullable=True, unique=True)
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(UTC), nullable=False)
    updated_at = Column(DateTime(timezone=True), default=lambda: datetime.now(UTC), onupdate=lambda: datetime.now(UTC), nullable=False)

    user = relationship("User", back_populates="sessions")
    project = relationship("ProjectDB", back_populates="sessions")
