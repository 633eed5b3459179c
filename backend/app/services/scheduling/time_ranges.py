"""Clock and time-range helpers shared by the scheduling engine."""
from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import List, Optional

RANGE_PATTERN = re.compile(r"(\d{1,2}:\d{2})\s*-\s*(\d{1,2}:\d{2})")
TOKEN_SEPARATOR = re.compile(r"[;,]+")


@dataclass(frozen=True)
class TimeRange:
    """Half-open interval of minutes since midnight."""

    start_minute: int
    end_minute: int

    def contains(self, minute: int) -> bool:
        return self.start_minute <= minute < self.end_minute

    def overlaps(self, start_minute: int, end_minute: int) -> bool:
        return self.start_minute < end_minute and start_minute < self.end_minute


def parse_clock(value: str | None) -> Optional[int]:
    """Return minutes since midnight for an ``H:MM`` string, or None."""
    if not value:
        return None
    hours, _, minutes = value.strip().partition(":")
    if not hours.isdigit() or not minutes.isdigit():
        return None
    return int(hours) * 60 + int(minutes)


def format_clock(total_minutes: int) -> str:
    hours, minutes = divmod(total_minutes, 60)
    return f"{hours:02d}:{minutes:02d}"


def parse_time_ranges(text: str | None) -> List[TimeRange]:
    """
    Parse ``"HH:MM-HH:MM; HH:MM-HH:MM"`` (``;`` or ``,`` separated) into intervals.

    Tokens that do not contain a clock range are skipped without error so that
    free-text input such as ``"lunch 12:00-13:00, gym"`` still yields the lunch range.
    """
    if not text:
        return []

    ranges: List[TimeRange] = []
    for token in TOKEN_SEPARATOR.split(text):
        match = RANGE_PATTERN.search(token.strip())
        if not match:
            continue
        start = parse_clock(match.group(1))
        end = parse_clock(match.group(2))
        if start is None or end is None:
            continue
        ranges.append(TimeRange(start, end))
    return ranges


def at_minute(day: date, minute: int) -> datetime:
    """Combine a calendar date with a minute offset from its midnight."""
    return datetime.combine(day, time.min) + timedelta(minutes=minute)
