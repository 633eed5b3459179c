"""Regression tests for application route registration."""
from fastapi.routing import APIRoute

from app.main import app


def _routes():
    return [(route.path, method) for route in app.routes if isinstance(route, APIRoute) for method in route.methods]


def test_planner_routes_registered_once() -> None:
    routes = _routes()
    expected = [
        ("/health", "GET"),
        ("/profile", "PUT"),
        ("/profile", "GET"),
        ("/focus-timer", "GET"),
        ("/goals", "GET"),
        ("/goals", "POST"),
        ("/goals/{goal_id}", "DELETE"),
        ("/tasks", "GET"),
        ("/tasks", "POST"),
        ("/tasks/ranked", "GET"),
        ("/tasks/{task_id}", "PUT"),
        ("/tasks/{task_id}", "PATCH"),
        ("/tasks/{task_id}", "DELETE"),
        ("/schedule/generate", "POST"),
        ("/schedule", "GET"),
        ("/schedule/blocks/{block_id}", "PATCH"),
        ("/state", "GET"),
    ]

    for entry in expected:
        assert routes.count(entry) == 1, entry


def test_ranked_listing_is_not_shadowed_by_task_lookup() -> None:
    assert ("/tasks/{task_id}", "GET") not in _routes()
