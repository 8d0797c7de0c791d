"""
PersonaChat — FastAPI application entry point.
Serves POST /api/chat for the configured bot variant plus health probes.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from personachat import __version__
from personachat.config import settings
from personachat.routers import chat, health
from personachat.utils.bot_data import get_profile

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Log the active variant and warn early about a missing credential."""
    profile = get_profile(settings.bot_variant)
    logger.info(
        "Starting PersonaChat (bot=%s, model=%s, env=%s)",
        profile.name,
        settings.gemini_model,
        settings.app_env,
    )
    if not settings.gemini_api_key:
        logger.warning("GEMINI_API_KEY is not set — every chat request will fail upstream.")

    yield

    logger.info("Shutting down PersonaChat.")


app = FastAPI(
    title="PersonaChat",
    description="Persona-primed Gemini chat bots with streamed replies.",
    version=__version__,
    lifespan=lifespan,
)

# ── CORS ─────────────────────────────────────────────────────────────────────

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ── Routers ──────────────────────────────────────────────────────────────────

app.include_router(health.router)
app.include_router(chat.router)


# ── Global exception handlers ────────────────────────────────────────────────

@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Malformed chat payloads get the same generic 500 body as other failures."""
    logger.error("Invalid request on %s %s: %s", request.method, request.url, exc.errors())
    return JSONResponse(
        status_code=500,
        content={"error": "Failed to process chat request"},
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Return a machine-readable error for any unhandled exception."""
    logger.exception("Unhandled exception on %s %s", request.method, request.url)
    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error"},
    )
