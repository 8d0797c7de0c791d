"""
Chat endpoint — called by the chat client with the full visible transcript.
Returns the model's reply as a raw text/plain stream (no framing).
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse, Response, StreamingResponse

from personachat.config import settings
from personachat.schemas.chat import ChatRequest, ErrorBody, RateLimitBody
from personachat.services.gemini import RateLimitError
from personachat.services.orchestrator import handle_chat
from personachat.utils.bot_data import BotProfile, get_profile

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["chat"])


def get_bot_profile() -> BotProfile:
    """FastAPI dependency: the configured bot variant."""
    return get_profile(settings.bot_variant)


def rate_limit_response(retry_after: int) -> JSONResponse:
    """Build the structured 429 response with a matching Retry-After header."""
    body = RateLimitBody(
        message=(
            f"Google AI API rate limit reached. Please try again in {retry_after} seconds. "
            "The free tier of Gemini API has strict rate limits."
        ),
        retryAfter=retry_after,
    )
    return JSONResponse(
        status_code=429,
        content=body.model_dump(),
        headers={"Retry-After": str(retry_after)},
    )


def error_response(message: str) -> JSONResponse:
    """Build the generic 500 response."""
    return JSONResponse(status_code=500, content=ErrorBody(error=message).model_dump())


@router.post("/chat")
async def chat(
    body: ChatRequest,
    profile: BotProfile = Depends(get_bot_profile),
) -> Response:
    """
    Forward the transcript to Gemini and stream the reply.

    Responses:
      200 text/plain — reply fragments as they arrive
      429 application/json — {error, message, retryAfter} + Retry-After header
      500 application/json — {error}
    """
    try:
        stream = await handle_chat(body.messages, profile)
    except RateLimitError as exc:
        logger.warning("Chat rate limited — retry after %ds", exc.retry_after)
        return rate_limit_response(exc.retry_after)
    except Exception as exc:
        logger.exception("Error processing chat: %s", exc)
        return error_response(str(exc) or "Failed to process chat request")

    return StreamingResponse(
        stream,
        media_type="text/plain; charset=utf-8",
        headers={
            "Cache-Control": "no-cache",
            "X-Accel-Buffering": "no",
        },
    )
