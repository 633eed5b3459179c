"""Metric helpers recorded as short Opik traces."""
from __future__ import annotations

from typing import Any, Dict, Optional

from app.observability import tracing


def log_metric(name: str, value: float | int, metadata: Optional[Dict[str, Any]] = None) -> None:
    """Record ``value`` under ``metric:<name>``; a no-op while Opik is disabled."""
    payload: Dict[str, Any] = dict(metadata or {})
    payload["value"] = value
    with tracing.trace(f"metric:{name}", metadata=payload):
        pass
