"""Declarative base plus every mapped table, so ``Base.metadata`` is complete on import."""

from app.db.base import Base
from app.db.models import ActivityLog, FixedBlock, Goal, PlannerProfile, ScheduleBlock, Task, User

__all__ = ["ActivityLog", "Base", "FixedBlock", "Goal", "PlannerProfile", "ScheduleBlock", "Task", "User"]
