"""Opik SDK client lifecycle."""
from __future__ import annotations

import logging
from threading import Lock
from typing import Optional

from opik import Opik

from app.core.config import settings

logger = logging.getLogger(__name__)

_client: Optional[Opik] = None
_client_lock = Lock()
_init_attempted = False


def init_opik() -> Optional[Opik]:
    """Create the Opik client on first use when tracing is enabled; later calls reuse it."""
    global _client, _init_attempted

    with _client_lock:
        if _client is not None or _init_attempted:
            return _client
        _init_attempted = True

        if not settings.opik_enabled:
            logger.debug("Opik disabled; traces and metrics are no-ops")
            return None

        if not settings.opik_api_key:
            logger.warning("OPIK_ENABLED is true but OPIK_API_KEY is missing; skipping Opik init.")
            return None

        try:
            _client = Opik(project_name=settings.opik_project, api_key=settings.opik_api_key)
        except Exception as exc:  # pragma: no cover - network/credential failure
            logger.warning("Failed to initialize Opik, tracing will be disabled: %s", exc)
            return None

    logger.info("Opik enabled (project=%s).", settings.opik_project)
    return _client


def get_opik_client() -> Optional[Opik]:
    if _client is not None:
        return _client
    return init_opik()
