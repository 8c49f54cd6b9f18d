"""Upstream AI service client used by the completion handlers."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TypeVar

import httpx
from openai import APIConnectionError, APIStatusError, AsyncOpenAI
from pydantic import BaseModel, ValidationError

from .config import AIServiceSettings
from .errors import UPSTREAM_UNPROCESSABLE, UPSTREAM_UNREACHABLE, GatewayError, upstream_status_error

logger = logging.getLogger(__name__)

CHAT_COMPLETIONS_PATH = "/v1/chat/completions"
COMPLETIONS_PATH = "/v1/api/completions"

R = TypeVar("R", bound=BaseModel)


@dataclass
class AIServiceUpstream:
    base_url: str
    api_key: str = field(repr=False)
    timeout_s: float = 30.0
    http_client: httpx.AsyncClient | None = None

    def __post_init__(self) -> None:
        # max_retries=0: every request gets exactly one attempt.
        self.client = AsyncOpenAI(
            api_key=self.api_key,
            base_url=self.base_url,
            timeout=self.timeout_s,
            max_retries=0,
            http_client=self.http_client,
        )
        # The SDK picks these up from OPENAI_ORG_ID / OPENAI_PROJECT_ID; only the
        # bearer credential and content type go upstream.
        self.client.organization = None
        self.client.project = None

    @classmethod
    def from_settings(
        cls, settings: AIServiceSettings, *, http_client: httpx.AsyncClient | None = None
    ) -> AIServiceUpstream:
        return cls(
            base_url=settings.url,
            api_key=settings.api_key,
            timeout_s=settings.timeout_s,
            http_client=http_client,
        )

    async def forward(self, path: str, body: BaseModel, response_model: type[R]) -> R:
        """POST ``body`` to ``path`` on the AI service and validate the reply.

        Failures are raised as :class:`GatewayError` carrying the status and
        message the caller should see; the underlying cause is only logged.
        """
        payload = body.model_dump(mode="json", exclude_none=True)
        try:
            resp = await self.client.post(path, cast_to=httpx.Response, body=payload)
        except APIStatusError as e:
            logger.error("AI service returned %d for %s", e.status_code, path)
            raise upstream_status_error(e.status_code) from e
        except APIConnectionError as e:
            logger.error("Failed to send request to AI service: %r", e.__cause__ or e)
            raise GatewayError(status_code=500, detail=UPSTREAM_UNREACHABLE) from e

        try:
            return response_model.model_validate_json(resp.content)
        except ValidationError as e:
            logger.error("Failed to parse AI service response: %s", e)
            raise GatewayError(status_code=500, detail=UPSTREAM_UNPROCESSABLE) from e

    async def close(self) -> None:
        await self.client.close()
