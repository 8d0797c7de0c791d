"""
Chat controller — owns one conversation session on the client side.

State: transcript, input text, loading flag, error banner, rate-limit
countdown. Network: POST /api/chat with the full transcript, then read the
text/plain reply incrementally so the assistant message grows chunk by chunk.
Every state change calls on_change(controller) so a view can re-render.

Only one request is in flight at a time (the loading flag gates submit),
and nothing is ever retried automatically — after a 429 the countdown
blocks input until the server's retryAfter window has elapsed.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import Callable, Optional

import httpx

from personachat.client.transcript import Transcript, new_message
from personachat.schemas.chat import ChatMessage
from personachat.utils.bot_data import BotProfile

logger = logging.getLogger(__name__)

GREETING_ID = "1"
DEFAULT_ERROR = "Failed to communicate with the AI"


def _parse_retry_after(value: object) -> Optional[int]:
    """Whole seconds from a retryAfter field ("17.5" gives 17), or None if unusable or not positive."""
    if value is None or isinstance(value, bool):
        return None
    try:
        seconds = int(float(value))
    except (TypeError, ValueError, OverflowError):
        return None
    return seconds if seconds > 0 else None


class ChatClientError(Exception):
    """Any failure talking to the chat endpoint. Rendered as the error banner."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        retry_after: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.retry_after = retry_after


class ChatController:
    def __init__(
        self,
        profile: BotProfile,
        client: httpx.AsyncClient,
        on_change: Optional[Callable[["ChatController"], None]] = None,
        endpoint: str = "/api/chat",
        tick_interval: float = 1.0,
    ) -> None:
        self.profile = profile
        self.transcript = Transcript(
            (ChatMessage(id=GREETING_ID, role="assistant", content=profile.greeting),)
        )
        self.input_text = ""
        self.is_loading = False
        self.error: Optional[str] = None
        self.retry_seconds: Optional[int] = None

        self._client = client
        self._on_change = on_change
        self._endpoint = endpoint
        self._tick_interval = tick_interval
        self._countdown_task: Optional[asyncio.Task] = None

    # ── View helpers ─────────────────────────────────────────────────────────

    @property
    def can_submit(self) -> bool:
        return bool(self.input_text.strip()) and not self.is_loading and not self.retry_seconds

    def is_refusal(self, message: ChatMessage) -> bool:
        """True for assistant replies carrying the bot's out-of-domain refusal."""
        return message.role == "assistant" and self.profile.refusal_message in message.content

    def _notify(self) -> None:
        if self._on_change is not None:
            self._on_change(self)

    # ── Input ────────────────────────────────────────────────────────────────

    def set_input(self, text: str) -> None:
        self.input_text = text
        self._notify()

    def use_example(self, index: int) -> str:
        """Load example prompt #index into the input field. Raises IndexError."""
        if index < 0:
            raise IndexError(f"No example #{index}")
        example = self.profile.examples[index]
        self.set_input(example)
        return example

    async def handle_key(self, key: str, shift: bool = False) -> bool:
        """Enter (without Shift) submits the current input. Returns True if handled."""
        if key == "Enter" and not shift:
            await self.submit()
            return True
        return False

    # ── Submit ───────────────────────────────────────────────────────────────

    async def submit(self, text: Optional[str] = None) -> None:
        """
        Send text (default: the current input) as a new user turn.
        No-op for blank text, while a request is in flight, or during a countdown.
        """
        content = self.input_text if text is None else text
        if not content.strip() or self.is_loading or self.retry_seconds:
            return

        user_message = new_message("user", content)
        self.transcript = self.transcript.append(user_message)
        self.input_text = ""
        self.is_loading = True
        self.error = None
        self._notify()

        try:
            await self._exchange()
        except Exception as exc:
            logger.warning("Chat error: %s", exc)
            # A rate-limit banner was already set by _raise_for_failure
            if not self.retry_seconds:
                self.error = str(exc) or DEFAULT_ERROR
        finally:
            self.is_loading = False
            self._notify()

    async def _exchange(self) -> None:
        payload = {"messages": self.transcript.to_payload()}
        async with self._client.stream("POST", self._endpoint, json=payload) as response:
            if not response.is_success:
                await response.aread()
                self._raise_for_failure(response)

            content_type = response.headers.get("content-type", "")
            if "text/plain" not in content_type:
                raise ChatClientError("Unexpected response format from server")

            assistant = new_message("assistant")
            self.transcript = self.transcript.append(assistant)
            self._notify()

            reply = ""
            async for chunk in response.aiter_text():
                reply += chunk
                self.transcript = self.transcript.update(assistant.id, reply)
                self._notify()

    def _raise_for_failure(self, response: httpx.Response) -> None:
        try:
            data = response.json()
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            data = {}

        seconds = _parse_retry_after(data.get("retryAfter"))
        if response.status_code == 429 and seconds:
            message = data.get("message") or (
                f"Rate limit exceeded. Please wait {seconds} seconds before trying again."
            )
            self.error = message
            self.start_countdown(seconds)
            raise ChatClientError(message, status_code=429, retry_after=seconds)

        raise ChatClientError(
            data.get("error") or "Failed to get response",
            status_code=response.status_code,
        )

    # ── Countdown ────────────────────────────────────────────────────────────

    def start_countdown(self, seconds: int) -> None:
        """Block submission for seconds, ticking down on the running event loop."""
        if self._countdown_task is not None:
            self._countdown_task.cancel()
        self.retry_seconds = seconds if seconds > 0 else None
        self._notify()
        if self.retry_seconds:
            self._countdown_task = asyncio.create_task(self._run_countdown())

    async def _run_countdown(self) -> None:
        while self.retry_seconds:
            await asyncio.sleep(self._tick_interval)
            self.tick()

    def tick(self) -> None:
        """Advance the countdown by one second; at zero clear the error and unblock."""
        if not self.retry_seconds:
            return
        if self.retry_seconds > 1:
            self.retry_seconds -= 1
        else:
            self.retry_seconds = None
            self.error = None
        self._notify()

    async def close(self) -> None:
        """Stop the countdown task, if any."""
        task, self._countdown_task = self._countdown_task, None
        if task is not None and not task.done():
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task
