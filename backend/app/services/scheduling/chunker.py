"""Work-chunk sizing driven by the user's personalization answers."""
from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Optional

from app.services.scheduling.models import Profile, Task, WorkStyle

BASE_CHUNK_MINUTES = 30
DEFAULT_BUFFER_MINUTES = 30
EXTENDED_BUFFER_MINUTES = 60
TROUBLE_FINISHING_MAX_CHUNK = 25
TROUBLE_FINISHING_MIN_BREAK = 5
DEFAULT_FOCUS_MINUTES = 25

STUDY_CHUNK_PATTERN = re.compile(r"(\d+)[\s-]*(?:min|minute)", re.IGNORECASE)
STUDY_BREAK_PATTERN = re.compile(r"(\d+)[\s-]*(?:min|minute).*break", re.IGNORECASE)

# (chunk minutes, break minutes or None to keep the current break)
WORK_STYLE_CHUNKS = {
    WorkStyle.SHORT_BURSTS: (25, 5),
    WorkStyle.LONG_SESSIONS: (60, 10),
    WorkStyle.MIXED: (40, None),
}


@dataclass(frozen=True)
class ChunkPlan:
    chunk_size_minutes: int
    break_minutes: int
    chunk_count: int
    buffer_minutes: int
    total_minutes: int


def plan_chunks(task: Task, profile: Profile) -> ChunkPlan:
    """Derive chunk size, inter-chunk break, chunk count and deadline buffer for a task."""
    chunk_size = BASE_CHUNK_MINUTES
    break_minutes = 0

    if profile.preferred_work_style is not None:
        style_chunk, style_break = WORK_STYLE_CHUNKS[profile.preferred_work_style]
        chunk_size = style_chunk
        if style_break is not None:
            break_minutes = style_break

    # Both overrides read the first "<n> min" in the text.
    custom_chunk = _study_method_chunk(profile.preferred_study_method)
    if custom_chunk is not None:
        chunk_size = custom_chunk
    custom_break = _study_method_break(profile.preferred_study_method)
    if custom_break is not None:
        break_minutes = custom_break

    if profile.has_trouble_finishing:
        chunk_size = min(chunk_size, TROUBLE_FINISHING_MAX_CHUNK)
        break_minutes = max(break_minutes, TROUBLE_FINISHING_MIN_BREAK)

    total_minutes = math.ceil(task.task_duration_hours * 60)
    chunk_count = max(1, math.ceil(total_minutes / chunk_size))

    return ChunkPlan(
        chunk_size_minutes=chunk_size,
        break_minutes=break_minutes,
        chunk_count=chunk_count,
        buffer_minutes=buffer_minutes_for(profile),
        total_minutes=total_minutes,
    )


def buffer_minutes_for(profile: Profile) -> int:
    buffer = DEFAULT_BUFFER_MINUTES
    if profile.is_procrastinator:
        buffer = EXTENDED_BUFFER_MINUTES
    if profile.has_trouble_finishing:
        buffer = max(buffer, EXTENDED_BUFFER_MINUTES)
    return buffer


def focus_timer_minutes(profile: Optional[Profile]) -> int:
    """Length of one focus-timer session for the user, defaulting to a 25 minute Pomodoro."""
    if profile is None:
        return DEFAULT_FOCUS_MINUTES

    minutes = _study_method_chunk(profile.preferred_study_method) or DEFAULT_FOCUS_MINUTES
    # A study method that lands on the default still defers to the work style.
    if minutes == DEFAULT_FOCUS_MINUTES and profile.preferred_work_style is not None:
        minutes = WORK_STYLE_CHUNKS[profile.preferred_work_style][0]
    return minutes


def _study_method_chunk(text: str) -> Optional[int]:
    match = STUDY_CHUNK_PATTERN.search(text or "")
    if not match:
        return None
    minutes = int(match.group(1))
    return minutes if 15 <= minutes <= 120 else None


def _study_method_break(text: str) -> Optional[int]:
    match = STUDY_BREAK_PATTERN.search(text or "")
    if not match:
        return None
    minutes = int(match.group(1))
    return minutes if 0 <= minutes <= 30 else None
