"""Request and response schemas for the forwarded completion endpoints.

Models validate strictly: JSON values must already have the declared type,
so nothing is coerced on its way through the gateway.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

U32_MAX = 2**32 - 1
U64_MAX = 2**64 - 1


class StrictModel(BaseModel):
    model_config = ConfigDict(strict=True)


class Message(StrictModel):
    role: str
    content: str


class ChatCompletionRequest(StrictModel):
    model: str
    messages: list[Message]


class ChatChoice(StrictModel):
    index: int = Field(ge=0, le=U32_MAX)
    message: Message
    finish_reason: str


class ChatCompletionResponse(StrictModel):
    id: str
    object: str
    created: int = Field(ge=0, le=U64_MAX)
    model: str
    choices: list[ChatChoice]


class CompletionRequest(StrictModel):
    model: str
    prompt: str
    max_tokens: int | None = Field(default=None, ge=0, le=U32_MAX)
    temperature: float | None = None


class CompletionChoice(StrictModel):
    text: str
    index: int = Field(ge=0, le=U32_MAX)
    logprobs: Any | None = None
    finish_reason: str


class CompletionResponse(StrictModel):
    id: str
    object: str
    created: int = Field(ge=0, le=U64_MAX)
    model: str
    choices: list[CompletionChoice]
