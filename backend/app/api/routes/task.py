"""Task management API routes."""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy.orm import Session

from app.api.schemas.task import (
    RankedTasksResponse,
    TaskCreateRequest,
    TaskDeleteResponse,
    TaskEditRequest,
    TaskSummary,
    TaskUpdateRequest,
    TaskUpdateResponse,
)
from app.db.deps import get_db
from app.db.models.task import Task
from app.observability.metrics import log_metric
from app.observability.tracing import trace
from app.services.errors import OwnershipError, TaskNotFoundError
from app.services.task_ranker import rank_tasks
from app.services.task_service import (
    create_task,
    delete_task,
    edit_task,
    list_tasks,
    set_completion,
    to_planner_task,
)

router = APIRouter()


@router.get("/tasks", response_model=List[TaskSummary], tags=["tasks"])
def get_tasks(
    http_request: Request,
    user_id: UUID = Query(..., description="User ID owning the tasks"),
    include_completed: bool = Query(True),
    db: Session = Depends(get_db),
) -> List[TaskSummary]:
    """List a user's tasks in creation order."""
    request_id = getattr(http_request.state, "request_id", None)
    metadata: Dict[str, Any] = {
        "route": "/tasks",
        "include_completed": include_completed,
    }
    with trace("task.list", metadata=metadata, user_id=str(user_id), request_id=request_id):
        tasks = list_tasks(db, user_id)
        if not include_completed:
            tasks = [task for task in tasks if not task.completed]

    log_metric("task.list.count", len(tasks), metadata={"user_id": str(user_id)})
    return [_serialize_task(task) for task in tasks]


@router.get("/tasks/ranked", response_model=RankedTasksResponse, tags=["tasks"])
def get_ranked_tasks(
    http_request: Request,
    user_id: UUID = Query(..., description="User ID owning the tasks"),
    db: Session = Depends(get_db),
) -> RankedTasksResponse:
    """Tasks in the order the scheduler will place them."""
    request_id = getattr(http_request.state, "request_id", None)
    with trace("task.ranked", metadata={"route": "/tasks/ranked"}, user_id=str(user_id), request_id=request_id):
        rows = {str(task.id): task for task in list_tasks(db, user_id)}
        ranked = rank_tasks(to_planner_task(task) for task in rows.values())

    return RankedTasksResponse(
        user_id=user_id,
        tasks=[_serialize_task(rows[task.id]) for task in ranked],
        request_id=request_id or "",
    )


@router.post("/tasks", response_model=TaskSummary, status_code=status.HTTP_201_CREATED, tags=["tasks"])
def post_task(
    payload: TaskCreateRequest,
    http_request: Request,
    db: Session = Depends(get_db),
) -> TaskSummary:
    request_id = getattr(http_request.state, "request_id", None)
    metadata = {"route": "/tasks", "priority": payload.task_priority.value, "category": payload.task_category}
    try:
        with trace("task.create", metadata=metadata, user_id=str(payload.user_id), request_id=request_id):
            task = create_task(db, payload.user_id, payload)
    except Exception:
        db.rollback()
        raise

    log_metric("task.create.success", 1, metadata={"user_id": str(payload.user_id)})
    return _serialize_task(task)


@router.put("/tasks/{task_id}", response_model=TaskSummary, tags=["tasks"])
def put_task(
    task_id: UUID,
    payload: TaskEditRequest,
    http_request: Request,
    db: Session = Depends(get_db),
) -> TaskSummary:
    """Edit a task's fields; its id and existing schedule blocks are kept."""
    request_id = getattr(http_request.state, "request_id", None)
    try:
        with trace(
            "task.edit",
            metadata={"route": f"/tasks/{task_id}", "task_id": str(task_id)},
            user_id=str(payload.user_id),
            request_id=request_id,
        ):
            task = edit_task(db, payload.user_id, task_id, payload)
    except TaskNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Task not found")
    except OwnershipError:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Task does not belong to user")
    except Exception:
        db.rollback()
        raise

    log_metric("task.edit.success", 1, metadata={"user_id": str(payload.user_id), "task_id": str(task_id)})
    return _serialize_task(task)


@router.patch("/tasks/{task_id}", response_model=TaskUpdateResponse, tags=["tasks"])
def update_task_completion(
    task_id: UUID,
    payload: TaskUpdateRequest,
    http_request: Request,
    db: Session = Depends(get_db),
) -> TaskUpdateResponse:
    """Mark a task complete or incomplete."""
    request_id = getattr(http_request.state, "request_id", None)
    start_time = datetime.now(timezone.utc)
    try:
        with trace(
            "task.complete",
            metadata={"route": f"/tasks/{task_id}", "task_id": str(task_id), "completed": payload.completed},
            user_id=str(payload.user_id),
            request_id=request_id,
        ):
            task, changed = set_completion(db, payload.user_id, task_id, payload.completed)
    except TaskNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Task not found")
    except OwnershipError:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Task does not belong to user")
    except Exception:
        db.rollback()
        raise

    latency_ms = (datetime.now(timezone.utc) - start_time).total_seconds() * 1000
    log_metric(
        "task.complete.changed",
        1 if changed else 0,
        metadata={"user_id": str(payload.user_id), "task_id": str(task_id)},
    )
    log_metric("task.complete.latency_ms", latency_ms, metadata={"task_id": str(task_id)})

    return TaskUpdateResponse(
        id=task.id,
        completed=bool(task.completed),
        completed_at=task.completed_at,
        request_id=request_id or "",
    )


@router.delete("/tasks/{task_id}", response_model=TaskDeleteResponse, tags=["tasks"])
def remove_task(
    task_id: UUID,
    http_request: Request,
    user_id: UUID = Query(..., description="User ID owning the task"),
    db: Session = Depends(get_db),
) -> TaskDeleteResponse:
    """Delete a task together with every calendar block placed for it."""
    request_id = getattr(http_request.state, "request_id", None)
    try:
        with trace(
            "task.delete",
            metadata={"route": f"/tasks/{task_id}", "task_id": str(task_id)},
            user_id=str(user_id),
            request_id=request_id,
        ):
            removed = delete_task(db, user_id, task_id)
    except TaskNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Task not found")
    except OwnershipError:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Task does not belong to user")
    except Exception:
        db.rollback()
        raise

    log_metric("task.delete.blocks_removed", removed, metadata={"user_id": str(user_id), "task_id": str(task_id)})
    return TaskDeleteResponse(id=task_id, schedule_blocks_removed=removed, request_id=request_id or "")


def _serialize_task(task: Task) -> TaskSummary:
    return TaskSummary(
        id=task.id,
        task_name=task.task_name,
        task_priority=task.task_priority,
        task_category=task.task_category,
        task_deadline=task.task_deadline,
        task_deadline_time=task.task_deadline_time,
        task_duration_hours=task.task_duration_hours,
        computer_required=bool(task.computer_required),
        completed=bool(task.completed),
        completed_at=task.completed_at,
        created_at=task.created_at,
        updated_at=task.updated_at,
    )
