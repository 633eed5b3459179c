"""Schemas for schedule generation and calendar edits."""
from __future__ import annotations

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from app.api.schemas.goal import GoalSummary
from app.services.scheduling.models import FixedBlock, Profile, ScheduleBlock, TaskPlacement


class ScheduleGenerateRequest(BaseModel):
    user_id: UUID


class ScheduledChunk(ScheduleBlock):
    id: UUID


class CalendarBlock(FixedBlock):
    id: UUID


class ScheduleResponse(BaseModel):
    user_id: UUID
    schedule: List[ScheduledChunk]
    fixed_blocks: List[CalendarBlock]
    placements: List[TaskPlacement] = Field(default_factory=list)
    request_id: str


class BlockMoveRequest(BaseModel):
    user_id: UUID
    start: datetime


class BlockMoveResponse(BaseModel):
    block: ScheduledChunk
    request_id: str


class TaskStateEntry(BaseModel):
    id: UUID
    task_name: str
    task_priority: str
    task_category: str
    task_deadline: str
    task_deadline_time: str
    task_duration_hours: float
    computer_required: bool
    completed: bool


class StateDocument(BaseModel):
    """Full planner state in the layout the calendar client persists."""

    model_config = ConfigDict(populate_by_name=True)

    profile: Optional[Profile]
    tasks: List[TaskStateEntry]
    ranked_tasks: List[TaskStateEntry] = Field(alias="rankedTasks")
    schedule: List[ScheduledChunk]
    fixed_blocks: List[CalendarBlock] = Field(alias="fixedBlocks")
    goals: List[GoalSummary] = Field(default_factory=list)
