"""ORM models exposed for metadata discovery."""
from app.db.models.activity_log import ActivityLog
from app.db.models.goal import Goal
from app.db.models.profile import PlannerProfile
from app.db.models.schedule_block import FixedBlock, ScheduleBlock
from app.db.models.task import Task
from app.db.models.user import User

__all__ = [
    "ActivityLog",
    "FixedBlock",
    "Goal",
    "PlannerProfile",
    "ScheduleBlock",
    "Task",
    "User",
]
