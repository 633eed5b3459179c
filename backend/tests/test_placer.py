from __future__ import annotations

from datetime import date, datetime

from app.services.scheduling.grid import build_availability_grid
from app.services.scheduling.models import (
    Commitment,
    Priority,
    ProcrastinatorType,
    ProductiveTime,
    Profile,
    Task,
    WorkStyle,
)
from app.services.scheduling.placer import ScoringContext, place_task, score_slot, usable_day_range

MONDAY = date(2026, 10, 19)
MIDNIGHT = datetime(2026, 10, 19)


def _slot(day, hour: int, minute: int = 0):
    return next(slot for slot in day.slots if slot.start_minutes == hour * 60 + minute)


def _context(priority_weight: int = 1, *, is_review_task: bool = False, window=(9, 17)) -> ScoringContext:
    return ScoringContext(
        productive_start=window[0] * 60,
        productive_end=window[1] * 60,
        priority_weight=priority_weight,
        deadline=datetime(2026, 10, 29, 23, 59),
        latest_allowed=datetime(2026, 10, 29, 22, 59),
        horizon_start=MIDNIGHT,
        is_review_task=is_review_task,
    )


def test_usable_day_range_bounds() -> None:
    days = build_availability_grid(Profile(), MONDAY).days

    assert usable_day_range(days, datetime(2026, 10, 22, 23, 29), MIDNIGHT) == (0, 2)
    assert usable_day_range(days, datetime(2026, 10, 22, 23, 59), MIDNIGHT) == (0, 3)
    assert usable_day_range(days, datetime(2026, 10, 22, 23, 29), datetime(2026, 10, 20, 8, 0)) == (1, 2)
    assert usable_day_range(days, datetime(2026, 10, 19, 11, 40), datetime(2026, 10, 19, 12, 0)) is None
    assert usable_day_range(days, datetime(2026, 10, 21, 23, 59), datetime(2026, 10, 23, 9, 0)) is None


def test_productive_window_and_priority_scoring() -> None:
    profile = Profile()
    day = build_availability_grid(profile, MONDAY).days[0]

    assert score_slot(_slot(day, 10), day, profile, _context(1)) == 15
    assert score_slot(_slot(day, 10), day, profile, _context(3)) == 10
    assert score_slot(_slot(day, 20), day, profile, _context(1)) == 0
    assert score_slot(_slot(day, 20), day, profile, _context(4)) == 3


def test_procrastinator_type_adjustments() -> None:
    day = build_availability_grid(Profile(), MONDAY).days[0]

    def score(kind: ProcrastinatorType, hour: int) -> int:
        profile = Profile(is_procrastinator=True, procrastinator_type=kind)
        return score_slot(_slot(day, hour), day, profile, _context(3))

    assert score(ProcrastinatorType.DISTRACTION, 7) == 3 + 3
    assert score(ProcrastinatorType.DISTRACTION, 10) == 10
    assert score(ProcrastinatorType.PERFECTIONIST, 10) == 13
    assert score(ProcrastinatorType.OVERWHELMED, 10) == 14
    assert score(ProcrastinatorType.AVOIDANT, 10) == 13
    assert score(ProcrastinatorType.LACK_OF_MOTIVATION, 20) == 3 + 2


def test_deadline_driven_prefers_late_afternoons_near_deadline() -> None:
    days = build_availability_grid(Profile(), MONDAY).days
    profile = Profile(is_procrastinator=True, procrastinator_type=ProcrastinatorType.DEADLINE_DRIVEN)
    context = _context(3)
    near = days[9]
    far = days[0]

    assert score_slot(_slot(near, 15), near, profile, context) == 10 + 8 + 3
    assert score_slot(_slot(far, 15), far, profile, context) == 10 + 3


def test_work_style_and_review_bonuses() -> None:
    days = build_availability_grid(Profile(weekly_review_hours=1), MONDAY).days
    monday, saturday = days[0], days[5]
    long_sessions = Profile(preferred_work_style=WorkStyle.LONG_SESSIONS, weekly_review_hours=1)
    short_bursts = Profile(preferred_work_style=WorkStyle.SHORT_BURSTS, weekly_review_hours=1)

    assert score_slot(_slot(saturday, 20), saturday, long_sessions, _context(1)) == 2
    assert score_slot(_slot(monday, 20), monday, long_sessions, _context(1)) == 0
    assert score_slot(_slot(monday, 20), monday, short_bursts, _context(1)) == 2
    assert score_slot(_slot(monday, 8), monday, long_sessions, _context(1, is_review_task=True)) == 5
    assert score_slot(_slot(monday, 8), monday, long_sessions, _context(1)) == 0


def test_place_task_mutates_grid_and_respects_availability() -> None:
    profile = Profile(
        most_productive_time=ProductiveTime.MORNING,
        weekly_schedule={"Mon": [Commitment(name="Lecture", time="09:00-10:00")]},
    )
    grid = build_availability_grid(profile, MONDAY)
    task = Task(
        task_name="Problem set",
        task_priority=Priority.URGENT_IMPORTANT,
        task_deadline=date(2026, 10, 20),
        task_duration_hours=1,
    )

    blocks, placement = place_task(grid, task, profile, MIDNIGHT)

    assert placement.fully_scheduled
    assert [block.start.strftime("%H:%M") for block in blocks] == ["10:00", "10:30"]
    assert not _slot(grid.days[0], 10).available
    assert not _slot(grid.days[0], 10, 30).available
    assert _slot(grid.days[0], 11).available


def test_long_chunks_skip_slots_that_straddle_fixed_time() -> None:
    profile = Profile(
        preferred_work_style=WorkStyle.LONG_SESSIONS,
        weekly_schedule={"Mon": [Commitment(name="Seminar", time="09:15-10:45")]},
    )
    grid = build_availability_grid(profile, MONDAY)
    task = Task(
        task_name="Lab report",
        task_priority=Priority.URGENT_IMPORTANT,
        task_deadline=date(2026, 10, 20),
        task_duration_hours=1,
    )

    blocks, _ = place_task(grid, task, profile, MIDNIGHT)

    assert len(blocks) == 1
    seminar = (datetime(2026, 10, 19, 9, 15), datetime(2026, 10, 19, 10, 45))
    assert blocks[0].end <= seminar[0] or blocks[0].start >= seminar[1]
    assert blocks[0].start == datetime(2026, 10, 19, 11, 0)


def test_short_break_after_chunk_is_kept_free() -> None:
    profile = Profile(preferred_work_style=WorkStyle.SHORT_BURSTS)
    grid = build_availability_grid(profile, MONDAY)
    task = Task(
        task_name="Flashcards",
        task_priority=Priority.URGENT_IMPORTANT,
        task_deadline=date(2026, 10, 20),
        task_duration_hours=1.25,
    )

    blocks, placement = place_task(grid, task, profile, MIDNIGHT)

    assert placement.chunk_count == 3
    assert len(blocks) == 3
    ordered = sorted(blocks, key=lambda block: block.start)
    for earlier, later in zip(ordered, ordered[1:]):
        assert (later.start - earlier.end).total_seconds() >= 5 * 60
