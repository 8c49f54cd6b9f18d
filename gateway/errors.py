"""Gateway error type and the handlers that render errors to callers."""

from __future__ import annotations

import logging

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.responses import PlainTextResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)

INVALID_REQUEST = "Invalid request format"
BODY_TOO_LARGE = "Request body too large"
BODY_READ_FAILED = "Failed to read request body"
UPSTREAM_UNREACHABLE = "Failed to communicate with AI service"
UPSTREAM_UNPROCESSABLE = "Failed to process AI service response"


class GatewayError(HTTPException):
    """A terminal failure for one request, sent to the caller as plain text."""


def upstream_status_error(status_code: int) -> GatewayError:
    return GatewayError(status_code=status_code, detail=f"AI service error: {status_code}")


async def gateway_error_handler(request: Request, exc: GatewayError) -> Response:
    return PlainTextResponse(str(exc.detail), status_code=exc.status_code, headers=exc.headers)


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> Response:
    # Routing misses, including a known path with the wrong method.
    if exc.status_code in (status.HTTP_404_NOT_FOUND, status.HTTP_405_METHOD_NOT_ALLOWED):
        logger.info("No route matched for %s %s", request.method, request.url.path)
        return Response(status_code=status.HTTP_404_NOT_FOUND)
    return PlainTextResponse(str(exc.detail), status_code=exc.status_code, headers=exc.headers)


def install_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(GatewayError, gateway_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
