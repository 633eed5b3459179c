"""Persisted output of the scheduling engine."""
from __future__ import annotations

from uuid import uuid4

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Index, String, Text, func, text as sa_text
from sqlalchemy.dialects.postgresql import UUID

from app.db.base import Base


class ScheduleBlock(Base):
    """One placed work chunk. Times are naive local wall-clock values."""

    __tablename__ = "schedule_blocks"
    __table_args__ = (
        Index("ix_schedule_blocks_user_id", "user_id"),
        Index("ix_schedule_blocks_task_id", "task_id"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    task_id = Column(UUID(as_uuid=True), ForeignKey("tasks.id", ondelete="CASCADE"), nullable=False)
    task_name = Column(Text, nullable=False)
    priority = Column(String(40), nullable=False)
    category = Column(String(80), nullable=False)
    start_at = Column(DateTime, nullable=False)
    end_at = Column(DateTime, nullable=False)
    is_weekend = Column(Boolean, nullable=False, server_default=sa_text("false"))
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class FixedBlock(Base):
    """A merged commitment, break or weekend activity shown on the calendar."""

    __tablename__ = "fixed_blocks"
    __table_args__ = (Index("ix_fixed_blocks_user_id", "user_id"),)

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    label = Column(Text, nullable=False)
    category = Column(String(20), nullable=False)
    start_at = Column(DateTime, nullable=False)
    end_at = Column(DateTime, nullable=False)
