"""Opik-backed tracing that degrades to a no-op when Opik is off."""
from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, Callable, Dict, Iterator, Optional

from app.observability.client import get_opik_client

if TYPE_CHECKING:  # pragma: no cover - typing helper
    from opik.api_objects.trace.trace_client import Trace

logger = logging.getLogger(__name__)


def _trace_metadata(
    metadata: Optional[Dict[str, Any]],
    user_id: Optional[str],
    request_id: Optional[str],
) -> Optional[Dict[str, Any]]:
    merged = {key: value for key, value in (metadata or {}).items() if value is not None}
    if user_id:
        merged.setdefault("user_id", str(user_id))
    if request_id:
        merged.setdefault("request_id", request_id)
    return merged or None


def _quietly(action: Callable[[], Any], what: str) -> None:
    try:
        action()
    except Exception:  # pragma: no cover - tracing must not break requests
        logger.debug("Opik %s failed", what, exc_info=True)


@contextmanager
def trace(
    name: str,
    metadata: Optional[Dict[str, Any]] = None,
    user_id: Optional[str] = None,
    request_id: Optional[str] = None,
) -> Iterator[Optional["Trace"]]:
    """
    Wrap a block in an Opik trace and yield it, or yield None when tracing is off.

    ``None`` metadata values are dropped. An exception escaping the block is
    recorded on the trace as ``error_info`` and then re-raised unchanged.
    """
    client = get_opik_client()
    opik_trace: Optional["Trace"] = None
    if client:
        try:
            opik_trace = client.trace(name=name, metadata=_trace_metadata(metadata, user_id, request_id))
        except Exception as exc:  # pragma: no cover - tracing must not break requests
            logger.debug("Unable to start Opik trace %s: %s", name, exc)

    try:
        yield opik_trace
    except Exception as exc:
        if opik_trace:
            error_info = {"exception_type": type(exc).__name__, "message": str(exc)}
            _quietly(lambda: opik_trace.update(error_info=error_info), f"error report for {name}")
        raise
    finally:
        if opik_trace:
            _quietly(opik_trace.end, f"close of {name}")
