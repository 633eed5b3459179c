"""Availability grid construction for the planning horizon."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Iterable, List

from app.services.scheduling.models import FixedBlock, Profile
from app.services.scheduling.time_ranges import TimeRange, at_minute

logger = logging.getLogger(__name__)

HORIZON_DAYS = 14
SLOT_MINUTES = 30
DAY_START_MINUTE = 6 * 60
DAY_END_MINUTE = 24 * 60
REVIEW_START_MINUTE = 8 * 60
REVIEW_END_MINUTE = 11 * 60

DAY_NAMES = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
WEEKEND_DAY_KEYS = {"Sat": "Saturday", "Sun": "Sunday"}


@dataclass
class Slot:
    start_minutes: int
    available: bool = True
    personal: bool = False
    review_preferred: bool = False

    @property
    def end_minutes(self) -> int:
        return self.start_minutes + SLOT_MINUTES


@dataclass
class DaySlots:
    date: date
    day_name: str
    slots: List[Slot]
    reserved: List[TimeRange] = field(default_factory=list)

    @property
    def is_weekend(self) -> bool:
        return self.day_name in WEEKEND_DAY_KEYS

    @property
    def end_of_day(self) -> datetime:
        return at_minute(self.date, 23 * 60 + 59)

    def at(self, minute: int) -> datetime:
        return at_minute(self.date, minute)


@dataclass
class Grid:
    start_date: date
    days: List[DaySlots]
    fixed_blocks: List[FixedBlock]

    @property
    def horizon_start(self) -> datetime:
        return at_minute(self.start_date, 0)


def build_availability_grid(profile: Profile, start_date: date, horizon_days: int = HORIZON_DAYS) -> Grid:
    """
    Build one DaySlots per horizon day with fixed time already blocked.

    Rules run in order: weekday commitments, daily breaks, weekend activities,
    reserved personal time, review-preferred marking. A later rule can close a
    slot but never reopens one.
    """
    days: List[DaySlots] = []
    fixed_blocks: List[FixedBlock] = []

    for offset in range(horizon_days):
        current = start_date + timedelta(days=offset)
        day = DaySlots(
            date=current,
            day_name=DAY_NAMES[current.weekday()],
            slots=[Slot(minute) for minute in range(DAY_START_MINUTE, DAY_END_MINUTE, SLOT_MINUTES)],
        )

        for commitment in profile.weekly_schedule.get(day.day_name, []):
            _block_ranges(day, commitment.ranges, commitment.name or "Fixed commitment", "routine", fixed_blocks)

        _block_ranges(day, profile.break_ranges, "Break", "break", fixed_blocks)

        weekend_key = WEEKEND_DAY_KEYS.get(day.day_name)
        if weekend_key:
            for activity in profile.weekend_schedule.get(weekend_key, []):
                _block_ranges(day, activity.ranges, activity.name or "Weekend activity", "weekend", fixed_blocks)

        _reserve_personal_time(day, profile.weekly_personal_time)

        if profile.weekly_review_hours > 0:
            for slot in day.slots:
                if REVIEW_START_MINUTE <= slot.start_minutes <= REVIEW_END_MINUTE:
                    slot.review_preferred = True

        days.append(day)

    logger.debug(
        "Built availability grid from %s for %d days (%d raw fixed blocks)",
        start_date.isoformat(),
        horizon_days,
        len(fixed_blocks),
    )
    return Grid(start_date=start_date, days=days, fixed_blocks=fixed_blocks)


def _block_ranges(
    day: DaySlots,
    ranges: Iterable[TimeRange],
    label: str,
    category: str,
    fixed_blocks: List[FixedBlock],
) -> None:
    for time_range in ranges:
        for slot in day.slots:
            if time_range.contains(slot.start_minutes):
                slot.available = False

        for minute in range(time_range.start_minute, time_range.end_minute, SLOT_MINUTES):
            start = day.at(minute)
            fixed_blocks.append(
                FixedBlock(
                    label=label,
                    category=category,
                    start=start,
                    end=start + timedelta(minutes=SLOT_MINUTES),
                )
            )
            day.reserved.append(TimeRange(minute, minute + SLOT_MINUTES))


def _reserve_personal_time(day: DaySlots, weekly_hours: float) -> None:
    # Closes the latest slots of each day; a placeholder for a real personal-time policy.
    if weekly_hours <= 0:
        return
    minutes_per_day = int(weekly_hours * 60 // 7)
    assigned = 0
    for slot in reversed(day.slots):
        if assigned >= minutes_per_day:
            break
        slot.available = False
        slot.personal = True
        assigned += SLOT_MINUTES
