"""Long-term goals and the task categories they add."""
from __future__ import annotations

import logging
import re
from typing import List
from uuid import UUID

from sqlalchemy import asc
from sqlalchemy.orm import Session

from app.db.models.activity_log import ActivityLog
from app.db.models.goal import Goal
from app.db.models.schedule_block import ScheduleBlock
from app.db.models.task import Task
from app.services.errors import DuplicateGoalError, GoalNotFoundError, OwnershipError
from app.services.profile_service import get_or_create_user

logger = logging.getLogger(__name__)

FALLBACK_CATEGORY = "study"
STANDARD_CATEGORIES = ("study", "project", "chores", "personal", "social")
GOAL_COLORS = ("#7c3aed", "#0284c7", "#db2777", "#16a34a", "#ea580c", "#9333ea")

_WHITESPACE = re.compile(r"\s+")


def goal_category(name: str) -> str:
    """Category slug for a goal name: ``"Learn Piano"`` becomes ``"learn-piano"``."""
    return _WHITESPACE.sub("-", name.strip().lower())


def list_goals(db: Session, user_id: UUID) -> List[Goal]:
    return (
        db.query(Goal)
        .filter(Goal.user_id == user_id)
        .order_by(asc(Goal.created_at), asc(Goal.id))
        .all()
    )


def category_options(goals: List[Goal]) -> List[str]:
    """Task categories a user can pick: the standard ones followed by one per goal."""
    return list(STANDARD_CATEGORIES) + [goal.category for goal in goals]


def create_goal(db: Session, user_id: UUID, name: str) -> Goal:
    """Add a goal; names that match an existing goal ignoring case are rejected."""
    name = name.strip()
    category = goal_category(name)
    existing = list_goals(db, user_id)
    for goal in existing:
        if goal.name.lower() == name.lower() or goal.category == category:
            raise DuplicateGoalError(f"A goal named {goal.name!r} already exists")

    get_or_create_user(db, user_id)
    goal = Goal(
        user_id=user_id,
        name=name,
        category=category,
        color=GOAL_COLORS[len(existing) % len(GOAL_COLORS)],
    )
    db.add(goal)
    db.commit()
    db.refresh(goal)
    logger.info("Created goal %s (%s) for user %s", goal.id, category, user_id)
    return goal


def delete_goal(db: Session, user_id: UUID, goal_id: UUID) -> int:
    """Remove a goal and move its tasks back to the study category. Returns the tasks moved."""
    goal = db.get(Goal, goal_id)
    if not goal:
        raise GoalNotFoundError(f"Goal {goal_id} not found")
    if goal.user_id != user_id:
        raise OwnershipError(f"Goal {goal_id} does not belong to user {user_id}")

    reassigned = (
        db.query(Task)
        .filter(Task.user_id == user_id, Task.task_category == goal.category)
        .update({Task.task_category: FALLBACK_CATEGORY}, synchronize_session=False)
    )
    db.query(ScheduleBlock).filter(
        ScheduleBlock.user_id == user_id, ScheduleBlock.category == goal.category
    ).update({ScheduleBlock.category: FALLBACK_CATEGORY}, synchronize_session=False)
    db.add(
        ActivityLog(
            user_id=user_id,
            action_type="goal_deleted",
            action_payload={"goal_id": str(goal_id), "category": goal.category, "tasks_reassigned": reassigned},
            reason=f"Goal {goal.name!r} removed",
        )
    )
    db.delete(goal)
    db.commit()
    logger.info("Deleted goal %s; %d tasks moved to %s", goal_id, reassigned, FALLBACK_CATEGORY)
    return reassigned
