"""FastAPI application wiring for the completion forwarding gateway."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Annotated, AsyncIterator

import httpx
from fastapi import Depends, FastAPI, Request, Response
from pydantic import BaseModel

from .body import read_request
from .config import Settings
from .errors import install_error_handlers
from .middleware import RequestLoggingMiddleware
from .models import (
    ChatCompletionRequest,
    ChatCompletionResponse,
    CompletionRequest,
    CompletionResponse,
)
from .upstream import CHAT_COMPLETIONS_PATH, COMPLETIONS_PATH, AIServiceUpstream


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_upstream(request: Request) -> AIServiceUpstream:
    return request.app.state.upstream


def _json_response(model: BaseModel) -> Response:
    # Strict models reject the dict FastAPI would re-validate, so serialize here.
    return Response(content=model.model_dump_json(), media_type="application/json")


def create_app(settings: Settings, *, http_client: httpx.AsyncClient | None = None) -> FastAPI:
    """Build the gateway app around an immutable settings snapshot.

    ``http_client`` overrides the transport used to reach the AI service.
    """
    upstream = AIServiceUpstream.from_settings(settings.ai_service, http_client=http_client)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await upstream.close()

    app = FastAPI(
        title="Roost Gateway",
        version="0.1.0",
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        redirect_slashes=False,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.upstream = upstream

    install_error_handlers(app)
    app.add_middleware(RequestLoggingMiddleware)

    @app.get("/health")
    def health() -> dict[str, str]:
        """Return a liveness signal; the AI service is not consulted."""
        return {"status": "ok"}

    @app.post("/v1/chat/completions")
    async def chat_completions(
        req: Request,
        cfg: Annotated[Settings, Depends(get_settings)],
        ai: Annotated[AIServiceUpstream, Depends(get_upstream)],
    ) -> Response:
        body = await read_request(req, ChatCompletionRequest, max_bytes=cfg.server.max_body_bytes)
        out = await ai.forward(CHAT_COMPLETIONS_PATH, body, ChatCompletionResponse)
        return _json_response(out)

    @app.post("/v1/completions")
    async def completions(
        req: Request,
        cfg: Annotated[Settings, Depends(get_settings)],
        ai: Annotated[AIServiceUpstream, Depends(get_upstream)],
    ) -> Response:
        body = await read_request(req, CompletionRequest, max_bytes=cfg.server.max_body_bytes)
        out = await ai.forward(COMPLETIONS_PATH, body, CompletionResponse)
        return _json_response(out)

    return app
