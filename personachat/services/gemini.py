"""
Gemini service — wraps Google Generative AI chat streaming.

Model : GEMINI_MODEL (default: gemini-2.5-flash)

Every request opens a fresh chat session seeded with the caller's history and
streams the reply back as plain text fragments. Failures are never retried
here: rate limits are translated into RateLimitError (with the server's retry
hint when one can be found) and everything else into GeminiError, so the
caller owns the retry policy.
"""

from __future__ import annotations

import logging
import re
from typing import Any, AsyncIterator, Sequence

import google.generativeai as genai

from personachat.config import settings
from personachat.schemas.chat import HistoryEntry

logger = logging.getLogger(__name__)

genai.configure(api_key=settings.gemini_api_key)

_model = genai.GenerativeModel(settings.gemini_model)

# REST errors embed the RetryInfo JSON; gRPC errors render the proto detail.
_RETRY_DELAY_PATTERNS = (
    re.compile(r'retryDelay":"(\d+)s'),
    re.compile(r"retry_delay\s*\{\s*seconds:\s*(\d+)"),
)


class GeminiError(Exception):
    """Raised when the Gemini API rejects or fails a request."""


class RateLimitError(GeminiError):
    """Raised on a 429 from Gemini. retry_after is the suggested wait in seconds."""

    def __init__(self, retry_after: int, message: str = "Rate limit exceeded") -> None:
        super().__init__(message)
        self.retry_after = retry_after


class StreamError(GeminiError):
    """Raised when a reply stream fails after it has started."""


def is_rate_limit_error(exc: BaseException) -> bool:
    """Return True if the exception carries a 429 status or mentions 429."""
    for attr in ("code", "status_code", "status"):
        if getattr(exc, attr, None) == 429:
            return True
    return "429" in str(exc)


def parse_retry_delay(message: str, default: int | None = None) -> int:
    """
    Extract the retry delay (seconds) from an error message.
    Falls back to DEFAULT_RETRY_SECONDS when no hint is present.
    """
    for pattern in _RETRY_DELAY_PATTERNS:
        match = pattern.search(message)
        if match:
            return int(match.group(1))
    return settings.default_retry_seconds if default is None else default


def translate_error(exc: Exception) -> GeminiError:
    """Map an SDK / transport exception onto the service's error taxonomy."""
    if isinstance(exc, GeminiError):
        return exc
    if is_rate_limit_error(exc):
        return RateLimitError(retry_after=parse_retry_delay(str(exc)), message=str(exc))
    return GeminiError(str(exc))


def _chunk_text(chunk: Any) -> str:
    """
    Concatenate the text parts of one streamed chunk.
    Chunks without candidates (e.g. trailing usage metadata) yield "".
    """
    candidates = getattr(chunk, "candidates", None)
    if not candidates:
        return ""
    content = candidates[0].content
    return "".join(part.text for part in content.parts if getattr(part, "text", ""))


async def _iter_fragments(response: Any) -> AsyncIterator[str]:
    async for chunk in response:
        text = _chunk_text(chunk)
        if text:
            yield text


async def send_message_stream(
    history: Sequence[HistoryEntry],
    message: str,
) -> AsyncIterator[str]:
    """
    Start a chat seeded with history, send message and return the reply as an
    async iterator of text fragments.

    The first request is made before returning, so quota and auth failures
    raise here (RateLimitError / GeminiError) rather than mid-stream.
    """
    chat = _model.start_chat(history=[entry.to_content() for entry in history])
    try:
        response = await chat.send_message_async(
            message,
            stream=True,
            generation_config=genai.GenerationConfig(
                max_output_tokens=settings.max_output_tokens,
                temperature=settings.temperature,
            ),
        )
    except Exception as exc:
        error = translate_error(exc)
        if isinstance(error, RateLimitError):
            logger.warning(
                "Gemini model '%s' rate limited — retry in %ds",
                settings.gemini_model,
                error.retry_after,
            )
        else:
            logger.error("Gemini model '%s' failed: %s", settings.gemini_model, exc)
        raise error from exc

    return _iter_fragments(response)
