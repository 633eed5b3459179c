"""Move a single scheduled chunk to a new start time (calendar drag-and-drop)."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from app.db.models.activity_log import ActivityLog
from app.db.models.schedule_block import FixedBlock, ScheduleBlock
from app.db.models.task import Task
from app.services.errors import BlockConflictError, BlockNotFoundError, OwnershipError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Interval:
    start: datetime
    end: datetime
    label: str

    def overlaps(self, start: datetime, end: datetime) -> bool:
        return self.start < end and start < self.end


def find_move_conflict(
    new_start: datetime,
    new_end: datetime,
    *,
    fixed: Iterable[Interval],
    others: Iterable[Interval],
    deadline: Optional[datetime],
) -> Optional[BlockConflictError]:
    """
    Return the first reason the interval cannot be used, or None.

    Only raw interval overlaps and the task deadline are checked; personalization
    scoring is not re-run for a manual move.
    """
    for interval in fixed:
        if interval.overlaps(new_start, new_end):
            return BlockConflictError(f"Overlaps fixed block '{interval.label}'", conflicting_label=interval.label)
    for interval in others:
        if interval.overlaps(new_start, new_end):
            return BlockConflictError(f"Overlaps scheduled task '{interval.label}'", conflicting_label=interval.label)
    if deadline is not None and new_end > deadline:
        return BlockConflictError("Block would end after the task deadline")
    return None


def move_block(
    db: Session,
    user_id: UUID,
    block_id: UUID,
    new_start: datetime,
    *,
    request_id: Optional[str] = None,
) -> ScheduleBlock:
    """Shift one stored block, keeping its duration, after checking for conflicts."""
    block = db.get(ScheduleBlock, block_id)
    if not block:
        raise BlockNotFoundError(f"Schedule block {block_id} not found")
    if block.user_id != user_id:
        raise OwnershipError(f"Schedule block {block_id} does not belong to user {user_id}")

    new_start = new_start.replace(tzinfo=None)
    new_end = new_start + (block.end_at - block.start_at)

    fixed = [
        Interval(row.start_at, row.end_at, row.label)
        for row in db.query(FixedBlock).filter(
            FixedBlock.user_id == user_id,
            FixedBlock.start_at < new_end,
            FixedBlock.end_at > new_start,
        )
    ]
    others = [
        Interval(row.start_at, row.end_at, row.task_name)
        for row in db.query(ScheduleBlock).filter(
            ScheduleBlock.user_id == user_id,
            ScheduleBlock.id != block_id,
            ScheduleBlock.start_at < new_end,
            ScheduleBlock.end_at > new_start,
        )
    ]
    task = db.get(Task, block.task_id)
    deadline = datetime.combine(task.task_deadline, task.task_deadline_time) if task else None

    conflict = find_move_conflict(new_start, new_end, fixed=fixed, others=others, deadline=deadline)
    if conflict:
        logger.info("Rejected move of block %s: %s", block_id, conflict.reason)
        raise conflict

    previous_start = block.start_at
    block.start_at = new_start
    block.end_at = new_end
    block.is_weekend = new_start.weekday() >= 5
    db.add(
        ActivityLog(
            user_id=user_id,
            action_type="schedule_block_moved",
            action_payload={
                "block_id": str(block.id),
                "task_id": str(block.task_id),
                "from": previous_start.isoformat(),
                "to": new_start.isoformat(),
                "request_id": request_id or "",
            },
            reason="Schedule block moved manually",
        )
    )
    db.commit()
    db.refresh(block)
    return block
