from __future__ import annotations

from datetime import date

import pytest

from app.services.scheduling.chunker import focus_timer_minutes, plan_chunks
from app.services.scheduling.models import Priority, Profile, Task, WorkStyle


def _task(hours: float) -> Task:
    return Task(
        task_name="Essay draft",
        task_priority=Priority.IMPORTANT_NOT_URGENT,
        task_deadline=date(2026, 10, 30),
        task_duration_hours=hours,
    )


def test_default_profile_uses_half_hour_chunks() -> None:
    plan = plan_chunks(_task(2), Profile())

    assert plan.chunk_size_minutes == 30
    assert plan.break_minutes == 0
    assert plan.chunk_count == 4
    assert plan.buffer_minutes == 30
    assert plan.total_minutes == 120


def test_short_bursts_round_chunk_count_up() -> None:
    plan = plan_chunks(_task(1.25), Profile(preferred_work_style=WorkStyle.SHORT_BURSTS))

    assert (plan.chunk_size_minutes, plan.break_minutes, plan.chunk_count) == (25, 5, 3)


@pytest.mark.parametrize(
    ("style", "expected"),
    [
        (WorkStyle.LONG_SESSIONS, (60, 10)),
        (WorkStyle.MIXED, (40, 0)),
    ],
)
def test_work_style_chunk_sizes(style: WorkStyle, expected: tuple) -> None:
    plan = plan_chunks(_task(2), Profile(preferred_work_style=style))

    assert (plan.chunk_size_minutes, plan.break_minutes) == expected


def test_study_method_overrides_chunk_and_break() -> None:
    profile = Profile(
        preferred_work_style=WorkStyle.LONG_SESSIONS,
        preferred_study_method="Pomodoro: 25-min study, 5-min break",
    )

    plan = plan_chunks(_task(1), profile)

    # The first "<n> min" before "break" sets both values.
    assert plan.chunk_size_minutes == 25
    assert plan.break_minutes == 25


def test_study_method_break_applies_without_chunk_override() -> None:
    plan = plan_chunks(_task(1), Profile(preferred_study_method="10 min study, 5 min break"))

    assert plan.chunk_size_minutes == 30
    assert plan.break_minutes == 10


def test_study_method_break_out_of_range_keeps_current_break() -> None:
    profile = Profile(
        preferred_work_style=WorkStyle.SHORT_BURSTS,
        preferred_study_method="45 min focus then a break",
    )

    plan = plan_chunks(_task(1), profile)

    assert (plan.chunk_size_minutes, plan.break_minutes) == (45, 5)


def test_study_method_without_break_keeps_work_style_break() -> None:
    profile = Profile(
        preferred_work_style=WorkStyle.LONG_SESSIONS,
        preferred_study_method="90 minute deep work",
    )

    plan = plan_chunks(_task(3), profile)

    assert plan.chunk_size_minutes == 90
    assert plan.break_minutes == 10
    assert plan.chunk_count == 2


def test_out_of_range_study_method_is_ignored() -> None:
    plan = plan_chunks(_task(1), Profile(preferred_study_method="10 min sprints"))

    assert plan.chunk_size_minutes == 30


def test_trouble_finishing_caps_chunk_and_extends_buffer() -> None:
    profile = Profile(preferred_work_style=WorkStyle.LONG_SESSIONS, has_trouble_finishing=True)

    plan = plan_chunks(_task(1), profile)

    assert plan.chunk_size_minutes == 25
    assert plan.break_minutes == 10
    assert plan.buffer_minutes == 60

    default_plan = plan_chunks(_task(1), Profile(has_trouble_finishing=True))
    assert default_plan.break_minutes == 5


def test_procrastinators_get_hour_buffer() -> None:
    assert plan_chunks(_task(1), Profile(is_procrastinator=True)).buffer_minutes == 60


def test_tiny_task_still_gets_one_chunk() -> None:
    plan = plan_chunks(_task(0.1), Profile())

    assert plan.total_minutes == 6
    assert plan.chunk_count == 1


def test_focus_timer_minutes() -> None:
    assert focus_timer_minutes(None) == 25
    assert focus_timer_minutes(Profile()) == 25
    assert focus_timer_minutes(Profile(preferred_work_style=WorkStyle.LONG_SESSIONS)) == 60
    assert focus_timer_minutes(Profile(preferred_work_style=WorkStyle.MIXED)) == 40
    assert (
        focus_timer_minutes(
            Profile(preferred_work_style=WorkStyle.SHORT_BURSTS, preferred_study_method="45 minute blocks")
        )
        == 45
    )


def test_focus_timer_default_length_study_method_defers_to_work_style() -> None:
    long_sessions = Profile(preferred_study_method="25 min", preferred_work_style=WorkStyle.LONG_SESSIONS)

    assert focus_timer_minutes(long_sessions) == 60
    assert focus_timer_minutes(Profile(preferred_study_method="25 min")) == 25
    assert focus_timer_minutes(Profile(preferred_study_method="10 min", preferred_work_style=WorkStyle.MIXED)) == 40
