"""Task ORM model."""
from __future__ import annotations

from uuid import uuid4

from sqlalchemy import Boolean, Column, Date, DateTime, Float, ForeignKey, Index, String, Text, Time, func, text as sa_text
from sqlalchemy.dialects.postgresql import UUID

from app.db.base import Base


class Task(Base):
    __tablename__ = "tasks"
    __table_args__ = (
        Index("ix_tasks_user_id", "user_id"),
        Index("ix_tasks_completed", "completed"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    task_name = Column(Text, nullable=False)
    task_priority = Column(String(40), nullable=False)
    task_category = Column(String(80), nullable=False, server_default=sa_text("'study'"))
    task_deadline = Column(Date, nullable=False)
    task_deadline_time = Column(Time, nullable=False)
    task_duration_hours = Column(Float, nullable=False)
    computer_required = Column(Boolean, nullable=False, server_default=sa_text("false"))
    completed = Column(Boolean, nullable=False, server_default=sa_text("false"))
    completed_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
