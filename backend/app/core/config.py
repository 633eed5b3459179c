"""Runtime settings for the API and the scheduler worker, read from env vars or .env."""
from functools import lru_cache
from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_name: str = "PlanWise Backend"
    log_level: str = "INFO"
    database_url: str = "postgresql+psycopg2://planwise@localhost:5432/planwise"
    # Origins of the calendar web client.
    cors_origins: List[str] = Field(default_factory=lambda: ["http://localhost:3000", "http://127.0.0.1:3000"])

    opik_enabled: bool = False
    opik_api_key: str | None = None
    opik_project: str = "planwise"

    scheduler_enabled: bool = False
    scheduler_timezone: str = "UTC"
    daily_job_hour: int = Field(default=0, ge=0, le=23)
    daily_job_minute: int = Field(default=5, ge=0, le=59)
    jobs_run_on_startup: bool = False


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
