import json
from typing import Callable

import httpx
import pytest
from fastapi.testclient import TestClient

from gateway.config import AIServiceSettings, ServerSettings, Settings
from gateway.main import create_app

AI_URL = "http://ai.test"
AI_KEY = "test-key-123"


def _chat_response() -> dict:
    return {
        "id": "chatcmpl-1",
        "object": "chat.completion",
        "created": 1700000000,
        "model": "m",
        "choices": [
            {
                "index": 0,
                "message": {"role": "assistant", "content": "hello"},
                "finish_reason": "stop",
            }
        ],
    }


def _completion_response() -> dict:
    return {
        "id": "cmpl-1",
        "object": "text_completion",
        "created": 1700000000,
        "model": "m",
        "choices": [
            {"text": "world", "index": 0, "logprobs": None, "finish_reason": "length"},
        ],
    }


class FakeAIService:
    """Records outbound requests and answers them with ``respond``."""

    def __init__(self) -> None:
        self.calls: list[httpx.Request] = []
        self.respond: Callable[[httpx.Request], httpx.Response] = self._default

    def _default(self, request: httpx.Request) -> httpx.Response:
        if request.url.path == "/v1/chat/completions":
            return httpx.Response(200, json=_chat_response())
        return httpx.Response(200, json=_completion_response())

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        return self.respond(request)

    def last_json(self) -> dict:
        return json.loads(self.calls[-1].content)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        server=ServerSettings(),
        ai_service=AIServiceSettings(url=AI_URL, api_key=AI_KEY),
    )


@pytest.fixture
def ai_service() -> FakeAIService:
    return FakeAIService()


@pytest.fixture
def client(settings: Settings, ai_service: FakeAIService) -> TestClient:
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(ai_service))
    return TestClient(create_app(settings, http_client=http_client))


@pytest.fixture
def chat_response() -> dict:
    return _chat_response()


@pytest.fixture
def completion_response() -> dict:
    return _completion_response()
