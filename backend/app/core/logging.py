"""Logging setup shared by the API process and the scheduler worker."""
from __future__ import annotations

import logging
from logging.config import dictConfig
from typing import Any, Dict

from app.core.context import get_request_id

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(request_id)s | %(message)s"

_configured = False


class RequestIdFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = get_request_id() or "-"
        return True


def logging_config(log_level: str) -> Dict[str, Any]:
    """dictConfig payload: one console handler, request ids on every line, quiet SQL."""
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {"default": {"format": LOG_FORMAT}},
        "filters": {"request_id": {"()": RequestIdFilter}},
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "default",
                "level": log_level,
                "filters": ["request_id"],
            }
        },
        "loggers": {
            "app.services.scheduling.grid": {"level": "INFO"},
            "sqlalchemy.engine": {"level": "WARNING"},
            "apscheduler": {"level": "WARNING"},
        },
        "root": {"handlers": ["console"], "level": log_level},
    }


def configure_logging(*, log_level: str = "INFO") -> None:
    """Apply the logging config; later calls are ignored."""
    global _configured
    if _configured:
        return
    dictConfig(logging_config(log_level.upper()))
    _configured = True
    logging.getLogger(__name__).debug("Logging configured at %s", log_level)
