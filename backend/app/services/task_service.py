"""Task lifecycle: create, edit, complete and delete."""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import List
from uuid import UUID

from sqlalchemy import asc
from sqlalchemy.orm import Session

from app.api.schemas.task import TaskFields
from app.db.models.schedule_block import ScheduleBlock
from app.db.models.task import Task
from app.services.errors import OwnershipError, TaskNotFoundError
from app.services.profile_service import get_or_create_user
from app.services.scheduling.models import Priority, Task as PlannerTask

logger = logging.getLogger(__name__)


def list_tasks(db: Session, user_id: UUID) -> List[Task]:
    return (
        db.query(Task)
        .filter(Task.user_id == user_id)
        .order_by(asc(Task.created_at), asc(Task.id))
        .all()
    )


def get_owned_task(db: Session, user_id: UUID, task_id: UUID) -> Task:
    task = db.get(Task, task_id)
    if not task:
        raise TaskNotFoundError(f"Task {task_id} not found")
    if task.user_id != user_id:
        raise OwnershipError(f"Task {task_id} does not belong to user {user_id}")
    return task


def create_task(db: Session, user_id: UUID, fields: TaskFields) -> Task:
    get_or_create_user(db, user_id)
    task = Task(user_id=user_id, completed=False)
    _apply_fields(task, fields)
    db.add(task)
    db.commit()
    db.refresh(task)
    return task


def edit_task(db: Session, user_id: UUID, task_id: UUID, fields: TaskFields) -> Task:
    """Update a task in place; the id and completion state are preserved."""
    task = get_owned_task(db, user_id, task_id)
    _apply_fields(task, fields)
    db.commit()
    db.refresh(task)
    return task


def set_completion(db: Session, user_id: UUID, task_id: UUID, completed: bool) -> tuple[Task, bool]:
    task = get_owned_task(db, user_id, task_id)
    changed = task.completed != completed
    if changed:
        task.completed = completed
        task.completed_at = datetime.now(timezone.utc) if completed else None
        db.commit()
        db.refresh(task)
    return task, changed


def delete_task(db: Session, user_id: UUID, task_id: UUID) -> int:
    """Delete a task and every schedule block placed for it. Returns the blocks removed."""
    task = get_owned_task(db, user_id, task_id)
    removed = (
        db.query(ScheduleBlock)
        .filter(ScheduleBlock.task_id == task_id)
        .delete(synchronize_session=False)
    )
    db.delete(task)
    db.commit()
    logger.info("Deleted task %s and %d schedule blocks", task_id, removed)
    return removed


def to_planner_task(task: Task) -> PlannerTask:
    return PlannerTask(
        id=str(task.id),
        task_name=task.task_name,
        task_priority=Priority(task.task_priority),
        task_category=task.task_category,
        task_deadline=task.task_deadline,
        task_deadline_time=task.task_deadline_time,
        task_duration_hours=task.task_duration_hours,
        computer_required=bool(task.computer_required),
        completed=bool(task.completed),
    )


def _apply_fields(task: Task, fields: TaskFields) -> None:
    task.task_name = fields.task_name
    task.task_priority = fields.task_priority.value
    task.task_category = fields.task_category
    task.task_deadline = fields.task_deadline
    task.task_deadline_time = fields.task_deadline_time
    task.task_duration_hours = fields.task_duration_hours
    task.computer_required = fields.computer_required
