"""Batch regeneration of every user's rolling planning horizon."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, List, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from app.db.models.profile import PlannerProfile
from app.services.planner_service import generate_for_user


logger = logging.getLogger(__name__)


@dataclass
class JobRunResult:
    users_processed: int
    chunks_scheduled: int
    users_with_shortfalls: int = 0
    failures: int = 0


def _profiled_user_ids(db: Session) -> List[UUID]:
    rows = db.query(PlannerProfile.user_id).distinct().all()
    return [row[0] for row in rows]


def run_schedule_for_all_users(
    db: Session,
    *,
    user_ids: Optional[Iterable[UUID]] = None,
    now: Optional[datetime] = None,
) -> JobRunResult:
    """Re-plan each user so the horizon always starts today; one failure does not stop the batch."""
    ids = _profiled_user_ids(db) if user_ids is None else list(dict.fromkeys(user_ids))
    users_processed = 0
    chunks_scheduled = 0
    with_shortfalls = 0
    failures = 0
    for uid in ids:
        try:
            run = generate_for_user(db, uid, now=now)
        except Exception:
            logger.exception("Schedule regeneration failed for user %s", uid)
            failures += 1
            continue
        users_processed += 1
        chunks_scheduled += len(run.result.schedule)
        if run.result.shortfalls:
            with_shortfalls += 1
    return JobRunResult(
        users_processed=users_processed,
        chunks_scheduled=chunks_scheduled,
        users_with_shortfalls=with_shortfalls,
        failures=failures,
    )
