"""Run the scheduling engine for a stored user and persist its output."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from sqlalchemy import asc
from sqlalchemy.orm import Session

from app.db.models.activity_log import ActivityLog
from app.db.models.schedule_block import FixedBlock, ScheduleBlock
from app.db.models.user import User
from app.observability.tracing import trace
from app.services.profile_service import require_profile
from app.services.scheduling.engine import generate_schedule
from app.services.scheduling.models import ScheduleResult
from app.services.task_ranker import rank_tasks
from app.services.task_service import list_tasks, to_planner_task

logger = logging.getLogger(__name__)


@dataclass
class StoredSchedule:
    blocks: List[ScheduleBlock]
    fixed_blocks: List[FixedBlock]


@dataclass
class PlanRun:
    result: ScheduleResult
    stored: StoredSchedule


def generate_for_user(
    db: Session,
    user_id: UUID,
    *,
    now: Optional[datetime] = None,
    request_id: Optional[str] = None,
) -> PlanRun:
    """
    Rank the user's tasks, run the engine and replace the stored calendar.

    Raises ProfileNotFoundError when the user has no profile yet. The previous
    schedule and fixed blocks are replaced in a single commit.
    """
    profile = require_profile(db, user_id)
    ranked = rank_tasks(to_planner_task(task) for task in list_tasks(db, user_id))
    now = now or datetime.now()

    with trace(
        "schedule.generate",
        metadata={"task_count": len(ranked)},
        user_id=str(user_id),
        request_id=request_id,
    ) as planning_trace:
        result = generate_schedule(profile, ranked, now=now)
        if planning_trace:
            planning_trace.update(
                metadata={
                    "chunks_scheduled": len(result.schedule),
                    "fixed_blocks": len(result.fixed_blocks),
                    "shortfalls": [placement.task_name for placement in result.shortfalls][:5],
                }
            )

    try:
        db.query(ScheduleBlock).filter(ScheduleBlock.user_id == user_id).delete(synchronize_session=False)
        db.query(FixedBlock).filter(FixedBlock.user_id == user_id).delete(synchronize_session=False)

        blocks = [
            ScheduleBlock(
                user_id=user_id,
                task_id=UUID(chunk.task_id),
                task_name=chunk.task_name,
                priority=chunk.priority.value,
                category=chunk.category,
                start_at=chunk.start,
                end_at=chunk.end,
                is_weekend=chunk.is_weekend,
            )
            for chunk in result.schedule
        ]
        fixed_blocks = [
            FixedBlock(
                user_id=user_id,
                label=block.label,
                category=block.category,
                start_at=block.start,
                end_at=block.end,
            )
            for block in result.fixed_blocks
        ]
        db.add_all(blocks)
        db.add_all(fixed_blocks)
        user = db.get(User, user_id)
        if user is not None:
            user.last_planned_at = now
        db.add(
            ActivityLog(
                user_id=user_id,
                action_type="schedule_generated",
                action_payload={
                    "placements": [placement.model_dump(mode="json") for placement in result.placements],
                    "chunks_scheduled": len(result.schedule),
                    "request_id": request_id or "",
                },
                reason="Schedule regenerated",
            )
        )
        db.commit()
    except Exception:
        db.rollback()
        raise

    for placement in result.shortfalls:
        logger.warning(
            "Task %s scheduled %d/%d chunks for user %s",
            placement.task_id,
            placement.chunks_scheduled,
            placement.chunk_count,
            user_id,
        )

    return PlanRun(result=result, stored=StoredSchedule(blocks=blocks, fixed_blocks=fixed_blocks))


def load_schedule(db: Session, user_id: UUID) -> StoredSchedule:
    blocks = (
        db.query(ScheduleBlock)
        .filter(ScheduleBlock.user_id == user_id)
        .order_by(asc(ScheduleBlock.start_at))
        .all()
    )
    fixed_blocks = (
        db.query(FixedBlock)
        .filter(FixedBlock.user_id == user_id)
        .order_by(asc(FixedBlock.start_at))
        .all()
    )
    return StoredSchedule(blocks=blocks, fixed_blocks=fixed_blocks)
