"""Schedule generation, calendar read and block move endpoints."""
from __future__ import annotations

from time import perf_counter
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy.orm import Session

from app.api.schemas.goal import GoalSummary
from app.api.schemas.schedule import (
    BlockMoveRequest,
    BlockMoveResponse,
    CalendarBlock,
    ScheduledChunk,
    ScheduleGenerateRequest,
    ScheduleResponse,
    StateDocument,
    TaskStateEntry,
)
from app.db.deps import get_db
from app.db.models.schedule_block import FixedBlock, ScheduleBlock
from app.observability.metrics import log_metric
from app.observability.tracing import trace
from app.services.block_reassignment import move_block
from app.services.errors import (
    BlockConflictError,
    BlockNotFoundError,
    OwnershipError,
    ProfileNotFoundError,
)
from app.services.goal_service import list_goals
from app.services.planner_service import generate_for_user, load_schedule
from app.services.profile_service import load_profile
from app.services.task_ranker import rank_tasks
from app.services.task_service import list_tasks, to_planner_task

router = APIRouter()


@router.post("/schedule/generate", response_model=ScheduleResponse, tags=["schedule"])
def schedule_generate(
    request: Request,
    payload: ScheduleGenerateRequest,
    db: Session = Depends(get_db),
) -> ScheduleResponse:
    """Re-plan the next 14 days for the user and return the new calendar."""
    request_id = getattr(request.state, "request_id", None)
    start = perf_counter()
    try:
        run = generate_for_user(db, payload.user_id, request_id=request_id)
    except ProfileNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Complete the profile before generating a schedule",
        )

    metadata = {"user_id": str(payload.user_id)}
    log_metric("schedule.generate.chunks", len(run.result.schedule), metadata=metadata)
    log_metric("schedule.generate.shortfalls", len(run.result.shortfalls), metadata=metadata)
    log_metric("schedule.generate.latency_ms", (perf_counter() - start) * 1000, metadata=metadata)

    return ScheduleResponse(
        user_id=payload.user_id,
        schedule=_chunks(run.stored.blocks),
        fixed_blocks=_calendar_blocks(run.stored.fixed_blocks),
        placements=run.result.placements,
        request_id=request_id or "",
    )


@router.get("/schedule", response_model=ScheduleResponse, tags=["schedule"])
def schedule_latest(
    request: Request,
    user_id: UUID = Query(..., description="User ID"),
    db: Session = Depends(get_db),
) -> ScheduleResponse:
    request_id = getattr(request.state, "request_id", None)
    with trace("schedule.latest", metadata={"route": "/schedule"}, user_id=str(user_id), request_id=request_id):
        stored = load_schedule(db, user_id)

    return ScheduleResponse(
        user_id=user_id,
        schedule=_chunks(stored.blocks),
        fixed_blocks=_calendar_blocks(stored.fixed_blocks),
        request_id=request_id or "",
    )


@router.patch("/schedule/blocks/{block_id}", response_model=BlockMoveResponse, tags=["schedule"])
def schedule_block_move(
    block_id: UUID,
    request: Request,
    payload: BlockMoveRequest,
    db: Session = Depends(get_db),
) -> BlockMoveResponse:
    """Move one chunk; rejected with 409 when it would overlap or pass the deadline."""
    request_id = getattr(request.state, "request_id", None)
    metadata = {"route": f"/schedule/blocks/{block_id}", "block_id": str(block_id)}
    try:
        with trace("schedule.block_move", metadata=metadata, user_id=str(payload.user_id), request_id=request_id):
            block = move_block(db, payload.user_id, block_id, payload.start, request_id=request_id)
    except BlockNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Schedule block not found")
    except OwnershipError:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Schedule block does not belong to user")
    except BlockConflictError as exc:
        db.rollback()
        log_metric("schedule.block_move.conflict", 1, metadata={"user_id": str(payload.user_id)})
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=exc.reason)

    log_metric("schedule.block_move.success", 1, metadata={"user_id": str(payload.user_id)})
    return BlockMoveResponse(block=_chunk(block), request_id=request_id or "")


@router.get("/state", response_model=StateDocument, tags=["schedule"])
def planner_state(
    request: Request,
    user_id: UUID = Query(..., description="User ID"),
    db: Session = Depends(get_db),
) -> StateDocument:
    """Everything the calendar client stores, goals included."""
    request_id = getattr(request.state, "request_id", None)
    with trace("state.export", metadata={"route": "/state"}, user_id=str(user_id), request_id=request_id):
        tasks = [to_planner_task(task) for task in list_tasks(db, user_id)]
        stored = load_schedule(db, user_id)
        document = StateDocument(
            profile=load_profile(db, user_id),
            tasks=[_state_entry(task) for task in tasks],
            ranked_tasks=[_state_entry(task) for task in rank_tasks(tasks)],
            schedule=_chunks(stored.blocks),
            fixed_blocks=_calendar_blocks(stored.fixed_blocks),
            goals=[GoalSummary.model_validate(goal) for goal in list_goals(db, user_id)],
        )
    return document


def _chunk(block: ScheduleBlock) -> ScheduledChunk:
    return ScheduledChunk(
        id=block.id,
        task_id=str(block.task_id),
        task_name=block.task_name,
        priority=block.priority,
        category=block.category,
        start=block.start_at,
        end=block.end_at,
        is_weekend=bool(block.is_weekend),
    )


def _chunks(blocks: List[ScheduleBlock]) -> List[ScheduledChunk]:
    return sorted((_chunk(block) for block in blocks), key=lambda chunk: chunk.start)


def _calendar_blocks(blocks: List[FixedBlock]) -> List[CalendarBlock]:
    return sorted(
        (
            CalendarBlock(id=block.id, label=block.label, category=block.category, start=block.start_at, end=block.end_at)
            for block in blocks
        ),
        key=lambda block: block.start,
    )


def _state_entry(task) -> TaskStateEntry:
    return TaskStateEntry(
        id=task.id,
        task_name=task.task_name,
        task_priority=task.task_priority.value,
        task_category=task.task_category,
        task_deadline=task.task_deadline.isoformat(),
        task_deadline_time=task.task_deadline_time.strftime("%H:%M"),
        task_duration_hours=task.task_duration_hours,
        computer_required=task.computer_required,
        completed=task.completed,
    )
