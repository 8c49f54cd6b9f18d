"""Bounded request-body reading and request-model validation."""

from __future__ import annotations

import logging
from typing import TypeVar

from fastapi import Request, status
from pydantic import BaseModel, ValidationError
from starlette.requests import ClientDisconnect

from .errors import BODY_READ_FAILED, BODY_TOO_LARGE, INVALID_REQUEST, GatewayError

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


def _declared_length(request: Request) -> int | None:
    raw = request.headers.get("content-length")
    if raw is None:
        return None
    try:
        return int(raw)
    except ValueError:
        return None


async def read_body(request: Request, *, max_bytes: int) -> bytearray:
    """Read the request body chunk by chunk, giving up with 413 once it
    grows past ``max_bytes``.
    """
    declared = _declared_length(request)
    if declared is not None and declared > max_bytes:
        logger.warning("Rejecting body with declared length %d > %d", declared, max_bytes)
        raise GatewayError(status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE, detail=BODY_TOO_LARGE)

    buf = bytearray()
    try:
        async for chunk in request.stream():
            buf.extend(chunk)
            if len(buf) > max_bytes:
                logger.warning("Request body exceeded %d bytes", max_bytes)
                raise GatewayError(
                    status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE, detail=BODY_TOO_LARGE
                )
    except ClientDisconnect as e:
        logger.warning("Failed to read request body: %r", e)
        raise GatewayError(status_code=status.HTTP_400_BAD_REQUEST, detail=BODY_READ_FAILED) from e
    return buf


def parse_request(raw: bytes | bytearray, model: type[M]) -> M:
    try:
        return model.model_validate_json(raw)
    except ValidationError as e:
        logger.warning("Failed to parse request: %s", e)
        raise GatewayError(status_code=status.HTTP_400_BAD_REQUEST, detail=INVALID_REQUEST) from e


async def read_request(request: Request, model: type[M], *, max_bytes: int) -> M:
    raw = await read_body(request, max_bytes=max_bytes)
    return parse_request(raw, model)
