from __future__ import annotations

from datetime import date, datetime, time, timedelta
from uuid import UUID, uuid4

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.db.deps import get_db
from app.db.models.activity_log import ActivityLog
from app.db.models.goal import Goal
from app.db.models.profile import PlannerProfile
from app.db.models.schedule_block import FixedBlock, ScheduleBlock
from app.db.models.task import Task
from app.db.models.user import User
from app.main import app


@pytest.fixture()
def client():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )

    @event.listens_for(engine, "connect")
    def set_sqlite_pragma(dbapi_connection, connection_record):  # pragma: no cover - sqlite setup
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    TestingSessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)
    User.__table__.create(bind=engine)
    PlannerProfile.__table__.create(bind=engine)
    Task.__table__.create(bind=engine)
    ScheduleBlock.__table__.create(bind=engine)
    FixedBlock.__table__.create(bind=engine)
    ActivityLog.__table__.create(bind=engine)
    Goal.__table__.create(bind=engine)

    def override_get_db():
        db = TestingSessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client, TestingSessionLocal
    app.dependency_overrides.clear()


DEADLINE = date.today() + timedelta(days=5)


def _setup_user(client: TestClient) -> tuple[UUID, str]:
    user_id = uuid4()
    response = client.put(
        "/profile",
        json={"user_id": str(user_id), "profile": {"user_name": "Jo", "break_times": "12:00-13:00"}},
    )
    assert response.status_code == 200
    task = client.post(
        "/tasks",
        json={
            "user_id": str(user_id),
            "task_name": "Statistics homework",
            "task_priority": "Urgent & Important",
            "task_deadline": DEADLINE.isoformat(),
            "task_duration_hours": 1,
        },
    )
    assert task.status_code == 201
    return user_id, task.json()["id"]


def _generate(client: TestClient, user_id: UUID) -> dict:
    response = client.post("/schedule/generate", json={"user_id": str(user_id)})
    assert response.status_code == 200, response.text
    return response.json()


def _iso(day: date, hour: int, minute: int = 0) -> str:
    return datetime.combine(day, time(hour, minute)).isoformat()


def test_generate_requires_profile(client):
    test_client, _ = client

    response = test_client.post("/schedule/generate", json={"user_id": str(uuid4())})

    assert response.status_code == 409


def test_generate_places_chunks_and_persists_calendar(client):
    test_client, SessionLocal = client
    user_id, task_id = _setup_user(test_client)

    body = _generate(test_client, user_id)

    assert len(body["schedule"]) == 2
    assert {chunk["task_id"] for chunk in body["schedule"]} == {task_id}
    assert all(chunk["kind"] == "task" for chunk in body["schedule"])
    assert body["placements"][0]["chunk_count"] == 2
    breaks = [block for block in body["fixed_blocks"] if block["category"] == "break"]
    assert len(breaks) == 14
    assert all(block["start"].endswith("T12:00:00") and block["end"].endswith("T13:00:00") for block in breaks)

    stored = test_client.get("/schedule", params={"user_id": str(user_id)})
    assert stored.status_code == 200
    assert [chunk["id"] for chunk in stored.json()["schedule"]] == [chunk["id"] for chunk in body["schedule"]]

    with SessionLocal() as session:
        actions = session.query(ActivityLog).filter(ActivityLog.user_id == user_id).all()
        assert [action.action_type for action in actions] == ["schedule_generated"]


def test_regenerating_replaces_previous_calendar(client):
    test_client, SessionLocal = client
    user_id, _ = _setup_user(test_client)

    _generate(test_client, user_id)
    second = _generate(test_client, user_id)

    with SessionLocal() as session:
        assert session.query(ScheduleBlock).count() == len(second["schedule"]) == 2
        assert session.query(FixedBlock).count() == len(second["fixed_blocks"])


def test_completed_task_is_not_scheduled(client):
    test_client, _ = client
    user_id, task_id = _setup_user(test_client)
    test_client.patch(f"/tasks/{task_id}", json={"user_id": str(user_id), "completed": True})

    body = _generate(test_client, user_id)

    assert body["schedule"] == []
    assert body["placements"] == []


def test_move_block_to_free_time(client):
    test_client, SessionLocal = client
    user_id, _ = _setup_user(test_client)
    chunk = _generate(test_client, user_id)["schedule"][0]
    target = _iso(date.today() + timedelta(days=1), 7)

    response = test_client.patch(
        f"/schedule/blocks/{chunk['id']}",
        json={"user_id": str(user_id), "start": target},
    )

    assert response.status_code == 200, response.text
    moved = response.json()["block"]
    assert moved["start"] == target
    assert moved["end"] == _iso(date.today() + timedelta(days=1), 7, 30)
    with SessionLocal() as session:
        kinds = [row.action_type for row in session.query(ActivityLog).filter(ActivityLog.user_id == user_id)]
        assert "schedule_block_moved" in kinds


def test_move_block_conflicts_return_409(client):
    test_client, SessionLocal = client
    user_id, _ = _setup_user(test_client)
    first, second = _generate(test_client, user_id)["schedule"]
    url = f"/schedule/blocks/{first['id']}"

    into_break = test_client.patch(url, json={"user_id": str(user_id), "start": _iso(date.today() + timedelta(days=1), 12, 15)})
    onto_other = test_client.patch(url, json={"user_id": str(user_id), "start": second["start"]})
    past_deadline = test_client.patch(url, json={"user_id": str(user_id), "start": _iso(DEADLINE, 23, 45)})

    assert into_break.status_code == 409
    assert "Break" in into_break.json()["detail"]
    assert onto_other.status_code == 409
    assert past_deadline.status_code == 409
    assert "deadline" in past_deadline.json()["detail"]

    with SessionLocal() as session:
        unchanged = session.get(ScheduleBlock, UUID(first["id"]))
        assert unchanged.start_at.isoformat() == first["start"]


def test_move_block_not_found_and_wrong_owner(client):
    test_client, _ = client
    user_id, _ = _setup_user(test_client)
    chunk = _generate(test_client, user_id)["schedule"][0]
    start = _iso(date.today() + timedelta(days=1), 7)

    missing = test_client.patch(f"/schedule/blocks/{uuid4()}", json={"user_id": str(user_id), "start": start})
    stranger = test_client.patch(f"/schedule/blocks/{chunk['id']}", json={"user_id": str(uuid4()), "start": start})

    assert missing.status_code == 404
    assert stranger.status_code == 403


def test_deleting_task_removes_its_blocks(client):
    test_client, _ = client
    user_id, task_id = _setup_user(test_client)
    _generate(test_client, user_id)

    response = test_client.delete(f"/tasks/{task_id}", params={"user_id": str(user_id)})

    assert response.status_code == 200
    assert response.json()["schedule_blocks_removed"] == 2
    assert test_client.get("/schedule", params={"user_id": str(user_id)}).json()["schedule"] == []


def test_state_document_uses_client_field_names(client):
    test_client, _ = client
    user_id, task_id = _setup_user(test_client)
    _generate(test_client, user_id)

    response = test_client.get("/state", params={"user_id": str(user_id)})

    assert response.status_code == 200
    state = response.json()
    assert set(state) == {"profile", "tasks", "rankedTasks", "schedule", "fixedBlocks", "goals"}
    assert state["profile"]["user_name"] == "Jo"
    assert state["rankedTasks"][0]["id"] == task_id
    assert state["tasks"][0]["task_deadline"] == DEADLINE.isoformat()
    assert state["tasks"][0]["task_deadline_time"] == "23:59"
    assert len(state["schedule"]) == 2


def test_state_document_lists_goals(client):
    test_client, _ = client
    user_id, _ = _setup_user(test_client)
    created = test_client.post("/goals", json={"user_id": str(user_id), "name": "Learn Piano"})
    assert created.status_code == 201

    state = test_client.get("/state", params={"user_id": str(user_id)}).json()

    assert [(goal["name"], goal["category"]) for goal in state["goals"]] == [("Learn Piano", "learn-piano")]
