"""Slot scoring and greedy chunk placement."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import List, Optional, Tuple

from app.services.scheduling.chunker import ChunkPlan, plan_chunks
from app.services.scheduling.grid import DAY_END_MINUTE, DaySlots, Grid, Slot
from app.services.scheduling.models import (
    ProcrastinatorType,
    Profile,
    ScheduleBlock,
    Task,
    TaskPlacement,
    WorkStyle,
)
from app.services.scheduling.strategies import select_strategy

logger = logging.getLogger(__name__)

# Breaks longer than this are expected to line up with the user's declared break times.
MAX_BLOCKED_BREAK_MINUTES = 15


@dataclass(frozen=True)
class ScoringContext:
    """Per-task values the scorer reads for every candidate slot."""

    productive_start: int
    productive_end: int
    priority_weight: int
    deadline: datetime
    latest_allowed: datetime
    horizon_start: datetime
    is_review_task: bool


@dataclass
class _Candidate:
    slot: Slot
    score: int
    starts_at: datetime


def usable_day_range(days: List[DaySlots], latest_allowed: datetime, now: datetime) -> Optional[Tuple[int, int]]:
    """
    Return the inclusive ``(start, end)`` day indexes a task may use, or None.

    The range opens on the first day that has not fully passed and closes on the
    last day whose end-of-day is still at or before ``latest_allowed``.
    """
    start_index = next((index for index, day in enumerate(days) if day.end_of_day >= now), None)
    end_index: Optional[int] = None
    for index, day in enumerate(days):
        if day.end_of_day <= latest_allowed:
            end_index = index

    if start_index is None or end_index is None or end_index < start_index:
        return None
    return start_index, end_index


def score_slot(slot: Slot, day: DaySlots, profile: Profile, context: ScoringContext) -> int:
    score = 0
    minute = slot.start_minutes

    inside_productive = context.productive_start <= minute < context.productive_end
    if inside_productive:
        score += 10
        if context.priority_weight <= 2:
            score += 5
    elif context.priority_weight >= 3:
        score += 3

    if profile.is_procrastinator:
        kind = profile.procrastinator_type
        if kind is ProcrastinatorType.DEADLINE_DRIVEN:
            days_until_deadline = (context.deadline - day.at(minute)) / timedelta(days=1)
            total_days_available = (context.latest_allowed - context.horizon_start) / timedelta(days=1)
            if days_until_deadline <= total_days_available * 0.3:
                score += 8
            elif days_until_deadline <= total_days_available * 0.5:
                score += 4
            if 14 * 60 <= minute < 20 * 60:
                score += 3
        elif kind is ProcrastinatorType.DISTRACTION:
            if minute < 9 * 60 or minute >= 20 * 60:
                score += 3
        elif kind is ProcrastinatorType.PERFECTIONIST:
            if inside_productive:
                score += 3
        elif kind is ProcrastinatorType.OVERWHELMED:
            if minute < 12 * 60:
                score += 4
        elif kind is ProcrastinatorType.AVOIDANT:
            if 9 * 60 <= minute < 17 * 60:
                score += 3
        elif kind is ProcrastinatorType.LACK_OF_MOTIVATION:
            score += 2

    if day.is_weekend and profile.preferred_work_style is WorkStyle.LONG_SESSIONS:
        score += 2
    elif not day.is_weekend and profile.preferred_work_style is WorkStyle.SHORT_BURSTS:
        score += 2

    if slot.review_preferred and context.is_review_task:
        score += 5

    return score


def place_task(grid: Grid, task: Task, profile: Profile, now: datetime) -> Tuple[List[ScheduleBlock], TaskPlacement]:
    """
    Greedily commit a task's chunks onto the grid, mutating slot availability.

    Days are walked in the strategy's order; within a day candidates are ranked
    by score (ties keep grid order) and taken until the per-day cap or the
    task's chunk count is exhausted. Partial placement is kept and reported.
    """
    plan = plan_chunks(task, profile)
    strategy = select_strategy(profile)
    latest_allowed = task.deadline - timedelta(minutes=plan.buffer_minutes)

    day_range = usable_day_range(grid.days, latest_allowed, now)
    if day_range is None:
        logger.warning(
            "Task %r has no usable days before its deadline (%s minus %d min buffer); skipping",
            task.task_name,
            task.deadline.isoformat(),
            plan.buffer_minutes,
        )
        return [], _placement(task, plan, strategy.name.value, 0, skipped=True)

    start_index, end_index = day_range
    days_available = end_index - start_index + 1
    max_per_day = strategy.max_chunks_per_day(plan.chunk_count, days_available)
    productive_start, productive_end = profile.productive_window
    context = ScoringContext(
        productive_start=productive_start * 60,
        productive_end=productive_end * 60,
        priority_weight=task.task_priority.weight,
        deadline=task.deadline,
        latest_allowed=latest_allowed,
        horizon_start=grid.horizon_start,
        is_review_task="review" in task.task_name.lower(),
    )

    blocks: List[ScheduleBlock] = []
    for day_index in strategy.day_order(start_index, end_index):
        if len(blocks) >= plan.chunk_count:
            break

        day = grid.days[day_index]
        chunks_today = 0
        last_chunk_end: Optional[datetime] = None

        candidates = [
            _Candidate(slot=slot, score=score_slot(slot, day, profile, context), starts_at=day.at(slot.start_minutes))
            for slot in day.slots
            if slot.available and day.at(slot.start_minutes) <= latest_allowed
        ]
        candidates.sort(key=lambda candidate: -candidate.score)

        for candidate in candidates:
            if chunks_today >= max_per_day or len(blocks) >= plan.chunk_count:
                break
            if not candidate.slot.available:
                continue
            if last_chunk_end is not None and plan.break_minutes > 0:
                if candidate.starts_at < last_chunk_end + timedelta(minutes=plan.break_minutes):
                    continue
            if not _chunk_fits(day, candidate, plan, latest_allowed, now):
                continue

            block = _commit_chunk(day, candidate, task, plan, chunks_remaining=plan.chunk_count - len(blocks))
            blocks.append(block)
            chunks_today += 1
            last_chunk_end = block.end

    placement = _placement(task, plan, strategy.name.value, len(blocks))
    if not placement.fully_scheduled:
        logger.warning(
            "Could not fully schedule task %r before deadline. Scheduled %d/%d chunks.",
            task.task_name,
            placement.chunks_scheduled,
            placement.chunk_count,
        )
    return blocks, placement


def _chunk_fits(
    day: DaySlots,
    candidate: _Candidate,
    plan: ChunkPlan,
    latest_allowed: datetime,
    now: datetime,
) -> bool:
    chunk_start = candidate.slot.start_minutes
    chunk_end = chunk_start + plan.chunk_size_minutes
    if chunk_end > DAY_END_MINUTE:
        return False
    if candidate.starts_at < now or day.at(chunk_end) > latest_allowed:
        return False
    for slot in day.slots:
        if slot.start_minutes < chunk_end and slot.end_minutes > chunk_start and not slot.available:
            return False
    return not any(reserved.overlaps(chunk_start, chunk_end) for reserved in day.reserved)


def _commit_chunk(
    day: DaySlots,
    candidate: _Candidate,
    task: Task,
    plan: ChunkPlan,
    *,
    chunks_remaining: int,
) -> ScheduleBlock:
    chunk_start = candidate.slot.start_minutes
    chunk_end = chunk_start + plan.chunk_size_minutes
    _close_slots(day, chunk_start, chunk_end)

    if 0 < plan.break_minutes <= MAX_BLOCKED_BREAK_MINUTES and chunks_remaining > 1:
        _close_slots(day, chunk_end, chunk_end + plan.break_minutes)

    return ScheduleBlock(
        task_id=task.id,
        task_name=task.task_name,
        priority=task.task_priority,
        category=task.task_category or "study",
        start=candidate.starts_at,
        end=candidate.starts_at + timedelta(minutes=plan.chunk_size_minutes),
        is_weekend=day.is_weekend,
    )


def _close_slots(day: DaySlots, start_minute: int, end_minute: int) -> None:
    for slot in day.slots:
        if slot.start_minutes < end_minute and slot.end_minutes > start_minute:
            slot.available = False


def _placement(task: Task, plan: ChunkPlan, strategy: str, scheduled: int, *, skipped: bool = False) -> TaskPlacement:
    return TaskPlacement(
        task_id=task.id,
        task_name=task.task_name,
        chunks_scheduled=scheduled,
        chunk_count=plan.chunk_count,
        chunk_size_minutes=plan.chunk_size_minutes,
        buffer_minutes=plan.buffer_minutes,
        strategy=strategy,
        skipped=skipped,
    )
