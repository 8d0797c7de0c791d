"""Pydantic schemas package."""

from personachat.schemas.chat import (
    ChatMessage,
    ChatRequest,
    ErrorBody,
    HistoryEntry,
    RateLimitBody,
)

__all__ = [
    "ChatMessage", "ChatRequest", "HistoryEntry",
    "RateLimitBody", "ErrorBody",
]
