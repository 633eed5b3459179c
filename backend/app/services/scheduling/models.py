"""Value types consumed and produced by the scheduling engine."""
from __future__ import annotations

from datetime import date, datetime, time
from enum import Enum
from typing import Dict, List, Literal, Optional, Tuple
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from app.services.scheduling.time_ranges import TimeRange, parse_time_ranges

WEEKDAY_KEYS: Tuple[str, ...] = ("Mon", "Tue", "Wed", "Thu", "Fri")
WEEKEND_KEYS: Tuple[str, ...] = ("Saturday", "Sunday")


class Priority(str, Enum):
    URGENT_IMPORTANT = "Urgent & Important"
    URGENT_NOT_IMPORTANT = "Urgent, Not Important"
    IMPORTANT_NOT_URGENT = "Important, Not Urgent"
    NOT_URGENT_NOT_IMPORTANT = "Not Urgent & Not Important"

    @property
    def weight(self) -> int:
        return PRIORITY_WEIGHTS[self]


PRIORITY_WEIGHTS: Dict[Priority, int] = {
    Priority.URGENT_IMPORTANT: 1,
    Priority.URGENT_NOT_IMPORTANT: 2,
    Priority.IMPORTANT_NOT_URGENT: 3,
    Priority.NOT_URGENT_NOT_IMPORTANT: 4,
}


class ProcrastinatorType(str, Enum):
    PERFECTIONIST = "perfectionist"
    DEADLINE_DRIVEN = "deadline-driven"
    LACK_OF_MOTIVATION = "lack-of-motivation"
    AVOIDANT = "avoidant"
    DISTRACTION = "distraction"
    OVERWHELMED = "overwhelmed"


class WorkStyle(str, Enum):
    SHORT_BURSTS = "short-bursts"
    LONG_SESSIONS = "long-sessions"
    MIXED = "mixed"


class ProductiveTime(str, Enum):
    EARLY_MORNING = "Early Morning"
    MORNING = "Morning"
    AFTERNOON = "Afternoon"
    EVENING = "Evening"
    LATE_NIGHT = "Late Night"


# Hour windows as [start, end) in local clock hours.
PRODUCTIVE_TIME_WINDOWS: Dict[ProductiveTime, Tuple[int, int]] = {
    ProductiveTime.EARLY_MORNING: (6, 9),
    ProductiveTime.MORNING: (9, 12),
    ProductiveTime.AFTERNOON: (12, 17),
    ProductiveTime.EVENING: (17, 21),
    ProductiveTime.LATE_NIGHT: (21, 24),
}
DEFAULT_PRODUCTIVE_WINDOW: Tuple[int, int] = (9, 17)


class Commitment(BaseModel):
    """A named recurring block such as a lecture, shift or weekend activity."""

    name: str = ""
    time: str
    description: Optional[str] = None
    ranges: List[TimeRange] = Field(default_factory=list, exclude=True, repr=False)

    @model_validator(mode="after")
    def _parse_ranges(self) -> "Commitment":
        self.ranges = parse_time_ranges(self.time)
        return self


class Profile(BaseModel):
    """Normalized personalization profile for one user."""

    user_name: str = ""
    user_age_group: Optional[str] = None
    weekly_schedule: Dict[str, List[Commitment]] = Field(default_factory=dict, validate_default=True)
    weekend_schedule: Dict[str, List[Commitment]] = Field(default_factory=dict, validate_default=True)
    sleep_weekdays: Optional[str] = None
    sleep_weekends: Optional[str] = None
    break_times: str = ""
    is_procrastinator: bool = False
    procrastinator_type: Optional[ProcrastinatorType] = None
    has_trouble_finishing: Optional[bool] = None
    preferred_work_style: Optional[WorkStyle] = None
    most_productive_time: Optional[ProductiveTime] = None
    preferred_study_method: str = ""
    weekly_personal_time: float = Field(default=0.0, ge=0)
    weekly_review_hours: float = Field(default=0.0, ge=0)
    break_ranges: List[TimeRange] = Field(default_factory=list, exclude=True, repr=False)

    @field_validator("weekly_schedule")
    @classmethod
    def _weekday_keys(cls, value: Dict[str, List[Commitment]]) -> Dict[str, List[Commitment]]:
        return _check_day_keys(value, WEEKDAY_KEYS)

    @field_validator("weekend_schedule")
    @classmethod
    def _weekend_keys(cls, value: Dict[str, List[Commitment]]) -> Dict[str, List[Commitment]]:
        return _check_day_keys(value, WEEKEND_KEYS)

    @model_validator(mode="after")
    def _parse_breaks(self) -> "Profile":
        self.break_ranges = parse_time_ranges(self.break_times)
        return self

    @property
    def productive_window(self) -> Tuple[int, int]:
        if self.most_productive_time is None:
            return DEFAULT_PRODUCTIVE_WINDOW
        return PRODUCTIVE_TIME_WINDOWS[self.most_productive_time]


def _check_day_keys(value: Dict[str, List[Commitment]], allowed: Tuple[str, ...]) -> Dict[str, List[Commitment]]:
    unknown = sorted(set(value) - set(allowed))
    if unknown:
        raise ValueError(f"unexpected day keys {unknown}; expected {list(allowed)}")
    return {day: list(value.get(day, [])) for day in allowed}


def new_task_id() -> str:
    return f"task_{uuid4().hex}"


class Task(BaseModel):
    id: str = Field(default_factory=new_task_id)
    task_name: str
    task_priority: Priority
    task_category: str = "study"
    task_deadline: date
    task_deadline_time: time = time(23, 59)
    task_duration_hours: float = Field(gt=0)
    computer_required: bool = False
    completed: bool = False

    @property
    def deadline(self) -> datetime:
        return datetime.combine(self.task_deadline, self.task_deadline_time)


class ScheduleBlock(BaseModel):
    kind: Literal["task"] = "task"
    task_id: str
    task_name: str
    priority: Priority
    category: str
    start: datetime
    end: datetime
    is_weekend: bool = False


class FixedBlock(BaseModel):
    kind: Literal["fixed"] = "fixed"
    label: str
    category: Literal["routine", "break", "weekend"]
    start: datetime
    end: datetime


class TaskPlacement(BaseModel):
    """How many chunks of a task landed on the calendar."""

    task_id: str
    task_name: str
    chunks_scheduled: int
    chunk_count: int
    chunk_size_minutes: int
    buffer_minutes: int
    strategy: str
    skipped: bool = False

    @property
    def fully_scheduled(self) -> bool:
        return self.chunks_scheduled >= self.chunk_count

    @property
    def deficit(self) -> Tuple[int, int]:
        return (self.chunks_scheduled, self.chunk_count)


class ScheduleResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    schedule: List[ScheduleBlock]
    fixed_blocks: List[FixedBlock]
    placements: List[TaskPlacement]

    @property
    def shortfalls(self) -> List[TaskPlacement]:
        return [placement for placement in self.placements if not placement.fully_scheduled]
