"""Schemas for task management."""
from __future__ import annotations

from datetime import date, datetime, time
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from app.services.scheduling.models import Priority


class TaskFields(BaseModel):
    task_name: str = Field(min_length=1, max_length=200)
    task_priority: Priority
    task_category: str = "study"
    task_deadline: date
    task_deadline_time: time = time(23, 59)
    task_duration_hours: float = Field(gt=0, le=200)
    computer_required: bool = False

    @field_validator("task_name", "task_category")
    @classmethod
    def _strip(cls, value: str) -> str:
        stripped = value.strip()
        if not stripped:
            raise ValueError("must not be blank")
        return stripped


class TaskCreateRequest(TaskFields):
    user_id: UUID


class TaskEditRequest(TaskFields):
    user_id: UUID


class TaskSummary(BaseModel):
    id: UUID
    task_name: str
    task_priority: Priority
    task_category: str
    task_deadline: date
    task_deadline_time: time
    task_duration_hours: float
    computer_required: bool
    completed: bool
    completed_at: Optional[datetime]
    created_at: datetime
    updated_at: datetime


class TaskUpdateRequest(BaseModel):
    user_id: UUID
    completed: bool


class TaskUpdateResponse(BaseModel):
    id: UUID
    completed: bool
    completed_at: Optional[datetime]
    request_id: str


class TaskDeleteResponse(BaseModel):
    id: UUID
    schedule_blocks_removed: int
    request_id: str


class RankedTasksResponse(BaseModel):
    user_id: UUID
    tasks: List[TaskSummary]
    request_id: str
