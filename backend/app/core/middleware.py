"""HTTP middleware shared by every route."""
from __future__ import annotations

import logging
from time import perf_counter
from typing import Callable
from uuid import uuid4

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from app.core.context import bind_request_id

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-Id"


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Accept or mint a request id, expose it on ``request.state`` and echo it back."""

    async def dispatch(self, request: Request, call_next: Callable[[Request], Response]) -> Response:  # type: ignore[override]
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid4())
        request.state.request_id = request_id
        start = perf_counter()

        with bind_request_id(request_id):
            response = await call_next(request)
            logger.debug(
                "%s %s -> %s in %.1f ms",
                request.method,
                request.url.path,
                response.status_code,
                (perf_counter() - start) * 1000,
            )

        response.headers[REQUEST_ID_HEADER] = request_id
        return response
