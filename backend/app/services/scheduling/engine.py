"""Entry point of the scheduling engine."""
from __future__ import annotations

import logging
from datetime import date, datetime
from typing import List, Optional, Sequence

from app.services.scheduling.grid import HORIZON_DAYS, build_availability_grid
from app.services.scheduling.merger import merge_fixed_blocks
from app.services.scheduling.models import Profile, ScheduleBlock, ScheduleResult, Task, TaskPlacement
from app.services.scheduling.placer import place_task

logger = logging.getLogger(__name__)


def generate_schedule(
    profile: Profile,
    ranked_tasks: Sequence[Task],
    *,
    start_date: Optional[date] = None,
    now: Optional[datetime] = None,
) -> ScheduleResult:
    """
    Place ranked tasks onto a fresh availability grid.

    Tasks are processed strictly in the given order, so earlier tasks claim
    slots first. Completed tasks are left off the calendar. The call does not
    raise for validated input; tasks that do not fit are reported through
    ``ScheduleResult.placements``.
    """
    now = now or datetime.now()
    start_date = start_date or now.date()
    grid = build_availability_grid(profile, start_date, HORIZON_DAYS)

    schedule: List[ScheduleBlock] = []
    placements: List[TaskPlacement] = []
    for task in ranked_tasks:
        if task.completed:
            continue
        blocks, placement = place_task(grid, task, profile, now)
        schedule.extend(blocks)
        placements.append(placement)

    fixed_blocks = merge_fixed_blocks(grid.fixed_blocks)
    logger.info(
        "Generated schedule: %d chunks for %d tasks, %d fixed blocks, %d shortfalls",
        len(schedule),
        len(placements),
        len(fixed_blocks),
        sum(1 for placement in placements if not placement.fully_scheduled),
    )
    return ScheduleResult(schedule=schedule, fixed_blocks=fixed_blocks, placements=placements)
