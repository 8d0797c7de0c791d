"""
personachat — command line entry point.

Usage:
    personachat serve --bot legal --port 8000     # run the API with uvicorn
    personachat chat --bot legal                  # terminal chat against a running API
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
from typing import Optional, Sequence

from personachat.utils.bot_data import BOT_PROFILES, get_profile

logger = logging.getLogger(__name__)


def _serve(args: argparse.Namespace) -> None:
    import uvicorn

    # Settings are read when personachat.main is imported, so set env first.
    if args.bot:
        os.environ["BOT_VARIANT"] = args.bot
    uvicorn.run(
        "personachat.main:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
    )


def _chat(args: argparse.Namespace) -> None:
    from personachat.client.terminal import run_terminal_chat
    from personachat.config import settings

    logging.basicConfig(
        level=logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    profile = get_profile(args.bot or settings.bot_variant)
    url = args.url or settings.personachat_api_url
    try:
        asyncio.run(run_terminal_chat(profile, url))
    except KeyboardInterrupt:
        logger.info("Chat interrupted.")


def main(argv: Optional[Sequence[str]] = None) -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(prog="personachat", description="Persona-primed Gemini chat bots.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve = subparsers.add_parser("serve", help="Run the chat API")
    serve.add_argument("--host", default="127.0.0.1", help="Bind address")
    serve.add_argument("--port", type=int, default=8000, help="Bind port")
    serve.add_argument("--bot", choices=sorted(BOT_PROFILES), help="Bot variant (overrides BOT_VARIANT)")
    serve.add_argument("--reload", action="store_true", help="Reload on code changes")
    serve.set_defaults(handler=_serve)

    chat = subparsers.add_parser("chat", help="Chat in the terminal")
    chat.add_argument("--bot", choices=sorted(BOT_PROFILES), help="Bot variant (overrides BOT_VARIANT)")
    chat.add_argument("--url", help="API base URL (overrides PERSONACHAT_API_URL)")
    chat.set_defaults(handler=_chat)

    args = parser.parse_args(argv)
    args.handler(args)


if __name__ == "__main__":
    main()
