"""Pydantic schemas for the chat endpoint."""

from __future__ import annotations

from typing import Any, Literal
from pydantic import BaseModel, Field


class ChatMessage(BaseModel):
    """A single message in the visible transcript."""

    id: str
    role: Literal["user", "assistant"]
    content: str


class ChatRequest(BaseModel):
    """Body for POST /api/chat — the full transcript including the newest user turn."""

    messages: list[ChatMessage] = Field(default_factory=list)


class HistoryEntry(BaseModel):
    """One turn in the shape Gemini's start_chat(history=...) expects."""

    role: Literal["user", "model"]
    parts: list[str]

    def to_content(self) -> dict[str, Any]:
        return {"role": self.role, "parts": list(self.parts)}


class RateLimitBody(BaseModel):
    """429 response body. retryAfter is in seconds and mirrors the Retry-After header."""

    error: str = "Rate limit exceeded"
    message: str
    retryAfter: int


class ErrorBody(BaseModel):
    """500 response body."""

    error: str
