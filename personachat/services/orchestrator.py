"""
Orchestrator — turns a visible chat transcript into a Gemini chat request.

Each request is handled statelessly:

  1. find the active query (the last user message)
  2. classify it against the bot's domain keywords (logged, never enforced)
  3. build history = persona priming turns + prior user/assistant pairs
  4. open a streamed reply and hand it to the relay

No server-side session exists; everything is rebuilt from the payload.
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import AsyncIterator, Sequence

from personachat.config import settings
from personachat.schemas.chat import ChatMessage, HistoryEntry
from personachat.services import gemini
from personachat.services.classifier import is_in_domain
from personachat.services.relay import relay_fragments
from personachat.utils.bot_data import BotProfile
from personachat.utils.prompts import build_priming_history

logger = logging.getLogger(__name__)


class NoUserMessageError(ValueError):
    """Raised when the transcript contains no user message to answer."""


def find_active_query(messages: Sequence[ChatMessage]) -> int:
    """Return the index of the most recent user message."""
    for index in range(len(messages) - 1, -1, -1):
        if messages[index].role == "user":
            return index
    raise NoUserMessageError("No user message found")


def build_history(
    messages: Sequence[ChatMessage],
    active_index: int,
    profile: BotProfile,
) -> list[HistoryEntry]:
    """
    Build the Gemini history for a transcript.

    Starts with the two priming turns, then adds every earlier user message
    in transcript order, each followed by the assistant reply that directly
    follows it (if any). The active query is excluded — it is sent as the
    new message, not as history.
    """
    history = build_priming_history(profile)
    if len(messages) <= 1:
        return history

    for index, message in enumerate(messages):
        if message.role != "user" or index == active_index:
            continue
        history.append(HistoryEntry(role="user", parts=[message.content]))
        if index + 1 < len(messages) and messages[index + 1].role == "assistant":
            history.append(HistoryEntry(role="model", parts=[messages[index + 1].content]))
    return history


async def handle_chat(
    messages: Sequence[ChatMessage],
    profile: BotProfile,
) -> AsyncIterator[bytes]:
    """
    Open a streamed Gemini reply for the transcript and return the byte relay.

    Raises NoUserMessageError, gemini.RateLimitError or gemini.GeminiError
    before any bytes are produced; errors after that surface from the
    returned iterator as gemini.StreamError.
    """
    active_index = find_active_query(messages)
    query = messages[active_index]

    in_domain = is_in_domain(query.content, profile.keywords)
    history = build_history(messages, active_index, profile)

    logger.debug("Chat history: %s", json.dumps([entry.to_content() for entry in history]))
    logger.info("Last user message: %s", query.content)
    logger.info("In-domain query for %s: %s", profile.name, in_domain)

    loop = asyncio.get_running_loop()
    deadline = loop.time() + settings.max_duration_seconds

    fragments = await asyncio.wait_for(
        gemini.send_message_stream(history, query.content),
        timeout=settings.max_duration_seconds,
    )
    return relay_fragments(fragments, deadline=deadline)
