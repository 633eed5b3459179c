"""Long-term goal endpoints."""
from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy.orm import Session

from app.api.schemas.goal import GoalCreateRequest, GoalDeleteResponse, GoalListResponse, GoalSummary
from app.db.deps import get_db
from app.db.models.goal import Goal
from app.observability.metrics import log_metric
from app.observability.tracing import trace
from app.services.errors import DuplicateGoalError, GoalNotFoundError, OwnershipError
from app.services.goal_service import category_options, create_goal, delete_goal, list_goals

router = APIRouter()


@router.get("/goals", response_model=GoalListResponse, tags=["goals"])
def get_goals(
    request: Request,
    user_id: UUID = Query(..., description="User ID owning the goals"),
    db: Session = Depends(get_db),
) -> GoalListResponse:
    request_id = getattr(request.state, "request_id", None)
    with trace("goal.list", metadata={"route": "/goals"}, user_id=str(user_id), request_id=request_id):
        goals = list_goals(db, user_id)

    return GoalListResponse(
        user_id=user_id,
        goals=[_serialize_goal(goal) for goal in goals],
        categories=category_options(goals),
        request_id=request_id or "",
    )


@router.post("/goals", response_model=GoalSummary, status_code=status.HTTP_201_CREATED, tags=["goals"])
def post_goal(
    payload: GoalCreateRequest,
    request: Request,
    db: Session = Depends(get_db),
) -> GoalSummary:
    """Add a goal; its slug becomes a task category."""
    request_id = getattr(request.state, "request_id", None)
    try:
        with trace("goal.create", metadata={"route": "/goals"}, user_id=str(payload.user_id), request_id=request_id):
            goal = create_goal(db, payload.user_id, payload.name)
    except DuplicateGoalError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
    except Exception:
        db.rollback()
        raise

    log_metric("goal.create.success", 1, metadata={"user_id": str(payload.user_id)})
    return _serialize_goal(goal)


@router.delete("/goals/{goal_id}", response_model=GoalDeleteResponse, tags=["goals"])
def remove_goal(
    goal_id: UUID,
    request: Request,
    user_id: UUID = Query(..., description="User ID owning the goal"),
    db: Session = Depends(get_db),
) -> GoalDeleteResponse:
    """Delete a goal; tasks filed under it move to the study category."""
    request_id = getattr(request.state, "request_id", None)
    try:
        with trace(
            "goal.delete",
            metadata={"route": f"/goals/{goal_id}", "goal_id": str(goal_id)},
            user_id=str(user_id),
            request_id=request_id,
        ):
            reassigned = delete_goal(db, user_id, goal_id)
    except GoalNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Goal not found")
    except OwnershipError:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Goal does not belong to user")
    except Exception:
        db.rollback()
        raise

    log_metric("goal.delete.tasks_reassigned", reassigned, metadata={"user_id": str(user_id)})
    return GoalDeleteResponse(id=goal_id, tasks_reassigned=reassigned, request_id=request_id or "")


def _serialize_goal(goal: Goal) -> GoalSummary:
    return GoalSummary.model_validate(goal)
