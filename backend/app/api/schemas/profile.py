"""Schemas for the planner profile."""
from __future__ import annotations

from typing import Any, Dict
from uuid import UUID

from pydantic import BaseModel

from app.services.scheduling.models import Profile


class ProfileUpsertRequest(BaseModel):
    user_id: UUID
    # Raw questionnaire answers; older label-based shapes are accepted and migrated.
    profile: Dict[str, Any]


class ProfileResponse(BaseModel):
    user_id: UUID
    profile: Profile
    request_id: str


class FocusTimerResponse(BaseModel):
    user_id: UUID
    minutes: int
    request_id: str
