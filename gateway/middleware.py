"""Request logging middleware."""

from __future__ import annotations

import logging
import time
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log every inbound request before dispatch and its outcome after."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        logger.info("%s %s", request.method, request.url.path)
        t0 = time.time()

        response = await call_next(request)

        latency_ms = int((time.time() - t0) * 1000)
        level = logging.WARNING if response.status_code >= 400 else logging.DEBUG
        logger.log(
            level,
            "%s %s -> %d (%d ms)",
            request.method,
            request.url.path,
            response.status_code,
            latency_ms,
        )
        return response
