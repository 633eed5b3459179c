"""Schemas for long-term goals."""
from __future__ import annotations

from datetime import datetime
from typing import List
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator


class GoalCreateRequest(BaseModel):
    user_id: UUID
    name: str = Field(min_length=1, max_length=80)

    @field_validator("name")
    @classmethod
    def _strip(cls, value: str) -> str:
        stripped = value.strip()
        if not stripped:
            raise ValueError("must not be blank")
        return stripped


class GoalSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    category: str
    color: str
    created_at: datetime


class GoalListResponse(BaseModel):
    user_id: UUID
    goals: List[GoalSummary]
    # Standard task categories followed by one per goal.
    categories: List[str]
    request_id: str


class GoalDeleteResponse(BaseModel):
    id: UUID
    tasks_reassigned: int
    request_id: str
