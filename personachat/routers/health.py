"""Health check endpoints — used by load balancers and uptime monitoring."""

from __future__ import annotations

import logging

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from personachat import __version__
from personachat.config import settings

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


@router.get("/health")
async def health() -> dict:
    """Liveness probe — returns 200 if the process is running."""
    return {"status": "ok", "bot": settings.bot_variant, "version": __version__}


@router.get("/ready")
async def ready() -> JSONResponse:
    """
    Readiness probe — 200 when a Gemini credential is configured,
    503 with {"gemini_api_key": "missing"} otherwise.
    """
    if not settings.gemini_api_key:
        logger.warning("Readiness check failed: GEMINI_API_KEY is not set")
        return JSONResponse(content={"gemini_api_key": "missing"}, status_code=503)
    return JSONResponse(content={"gemini_api_key": "ok"}, status_code=200)
