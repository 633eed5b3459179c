"""PlanWise API: profile, task and calendar endpoints for the study planner."""
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from app.api.routes.goals import router as goals_router
from app.api.routes.profile import router as profile_router
from app.api.routes.schedule import router as schedule_router
from app.api.routes.task import router as task_router
from app.core.config import settings
from app.core.logging import configure_logging
from app.core.middleware import RequestIDMiddleware
from app.observability.client import init_opik
from app.observability.tracing import trace
from app.services.scheduling.grid import HORIZON_DAYS

configure_logging(log_level=settings.log_level)
logger = logging.getLogger(__name__)

app = FastAPI(title=settings.app_name, version="0.1.0")
app.add_middleware(RequestIDMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Request-Id"],
)

for router in (profile_router, goals_router, task_router, schedule_router):
    app.include_router(router)


@app.on_event("startup")
async def on_startup() -> None:
    init_opik()
    logger.info("%s ready; planning horizon is %d days", settings.app_name, HORIZON_DAYS)


@app.get("/health", tags=["health"], summary="Readiness probe")
async def health_check(request: Request) -> dict[str, str]:
    with trace("http.health_check", metadata={"route": "/health"}, request_id=request.state.request_id):
        return {"status": "ok"}
