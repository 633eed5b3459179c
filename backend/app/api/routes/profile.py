"""Planner profile endpoints."""
from __future__ import annotations

from time import perf_counter
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from pydantic import ValidationError
from sqlalchemy.orm import Session

from app.api.schemas.profile import FocusTimerResponse, ProfileResponse, ProfileUpsertRequest
from app.db.deps import get_db
from app.observability.metrics import log_metric
from app.observability.tracing import trace
from app.services.profile_service import load_profile, save_profile
from app.services.scheduling.chunker import focus_timer_minutes

router = APIRouter()


@router.put("/profile", response_model=ProfileResponse, tags=["profile"])
def upsert_profile(
    request: Request,
    payload: ProfileUpsertRequest,
    db: Session = Depends(get_db),
) -> ProfileResponse:
    """Store the questionnaire answers after migrating them to the normalized profile."""
    request_id = getattr(request.state, "request_id", None)
    start = perf_counter()
    with trace("profile.upsert", metadata={"route": "/profile"}, user_id=str(payload.user_id), request_id=request_id):
        try:
            profile = save_profile(db, payload.user_id, payload.profile)
        except ValidationError as exc:
            db.rollback()
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail=exc.errors(include_url=False, include_context=False),
            )
        except ValueError as exc:
            db.rollback()
            raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc))

    log_metric("profile.upsert.success", 1, metadata={"user_id": str(payload.user_id)})
    log_metric("profile.upsert.latency_ms", (perf_counter() - start) * 1000, metadata={"user_id": str(payload.user_id)})
    return ProfileResponse(user_id=payload.user_id, profile=profile, request_id=request_id or "")


@router.get("/profile", response_model=ProfileResponse, tags=["profile"])
def get_profile(
    request: Request,
    user_id: UUID = Query(..., description="User ID"),
    db: Session = Depends(get_db),
) -> ProfileResponse:
    request_id = getattr(request.state, "request_id", None)
    with trace("profile.get", metadata={"route": "/profile"}, user_id=str(user_id), request_id=request_id):
        profile = load_profile(db, user_id)
        if profile is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Profile not found")

    return ProfileResponse(user_id=user_id, profile=profile, request_id=request_id or "")


@router.get("/focus-timer", response_model=FocusTimerResponse, tags=["profile"])
def focus_timer(
    request: Request,
    user_id: UUID = Query(..., description="User ID"),
    db: Session = Depends(get_db),
) -> FocusTimerResponse:
    """Default focus-session length derived from the user's study preferences."""
    request_id = getattr(request.state, "request_id", None)
    minutes = focus_timer_minutes(load_profile(db, user_id))
    log_metric("focus_timer.minutes", minutes, metadata={"user_id": str(user_id)})
    return FocusTimerResponse(user_id=user_id, minutes=minutes, request_id=request_id or "")
