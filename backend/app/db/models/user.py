"""User ORM model."""
from __future__ import annotations

from uuid import uuid4

from sqlalchemy import Column, DateTime, func
from sqlalchemy.dialects.postgresql import UUID

from app.db.base import Base


class User(Base):
    """Owner of one profile, its tasks and the generated calendar.

    Users are created implicitly by the first profile or task write.
    """

    __tablename__ = "users"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    # Naive local time of the last successful schedule generation.
    last_planned_at = Column(DateTime, nullable=True)
