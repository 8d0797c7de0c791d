"""
Terminal front-end for the chat controller.

The renderer is the controller's on_change callback. Messages are printed in
transcript order with the newest always last; a growing assistant message only
has its new suffix written, which gives the streaming "typing" effect.
"""

from __future__ import annotations

import asyncio
import logging
import sys
from typing import Callable, Optional, TextIO

import httpx

from personachat.client.controller import ChatController
from personachat.utils.bot_data import BotProfile

logger = logging.getLogger(__name__)

QUIT_COMMANDS = {":quit", ":q", ":exit"}
EXAMPLE_COMMAND = ":example"


class TerminalRenderer:
    def __init__(self, profile: BotProfile, out: Optional[TextIO] = None) -> None:
        self._profile = profile
        self._out = out or sys.stdout
        self._written: dict[str, int] = {}   # message id -> characters already printed
        self._flagged: set[str] = set()
        self._open_id: Optional[str] = None
        self._last_error: Optional[str] = None
        self._last_countdown: Optional[int] = None

    def write(self, text: str) -> None:
        self._out.write(text)
        self._out.flush()

    def _speaker(self, role: str) -> str:
        return "You" if role == "user" else self._profile.name

    def intro(self, controller: ChatController) -> None:
        """Print the disclaimer, the greeting and the example prompts."""
        self.write(f"── {self._profile.name} ──\n")
        if self._profile.disclaimer:
            self.write(f"[!] {self._profile.disclaimer}\n")
        self(controller)
        self.write("\nTry asking about:\n")
        for number, example in enumerate(self._profile.examples, start=1):
            self.write(f"  {EXAMPLE_COMMAND} {number}  {example}\n")
        self.write("Type :quit to leave.\n")

    def __call__(self, controller: ChatController) -> None:
        for message in controller.transcript:
            written = self._written.get(message.id)
            if written is None:
                self.write(f"\n{self._speaker(message.role)}: ")
                self._open_id = message.id
                written = 0
            if len(message.content) > written:
                self.write(message.content[written:])
            self._written[message.id] = len(message.content)

        last = controller.transcript.last()
        if not controller.is_loading and last is not None and last.id == self._open_id:
            self.write("\n")
            self._open_id = None
            if controller.is_refusal(last) and last.id not in self._flagged:
                self._flagged.add(last.id)
                self.write(f"(i) NON-{self._profile.domain_label} QUERY DETECTED\n")

        if controller.error and controller.error != self._last_error:
            self.write(f"\n[error] {controller.error}\n")
        self._last_error = controller.error

        if controller.retry_seconds != self._last_countdown:
            if controller.retry_seconds:
                self.write(
                    f"Rate limit reached. You can submit again in "
                    f"{controller.retry_seconds} seconds.\n"
                )
            elif self._last_countdown:
                self.write("You can submit again.\n")
        self._last_countdown = controller.retry_seconds


async def run_terminal_chat(
    profile: BotProfile,
    base_url: str,
    input_func: Callable[[str], str] = input,
    out: Optional[TextIO] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> None:
    """
    Read lines from the terminal and drive a ChatController against base_url.

    Each line is typed into the input and followed by Enter. ":example N"
    loads example N into the input (an empty line then sends it).
    """
    renderer = TerminalRenderer(profile, out=out)
    timeout = httpx.Timeout(60.0, connect=10.0)
    async with httpx.AsyncClient(
        base_url=base_url, timeout=timeout, transport=transport
    ) as client:
        controller = ChatController(profile, client, on_change=renderer)
        renderer.intro(controller)
        try:
            while True:
                try:
                    line = await asyncio.to_thread(input_func, "> ")
                except EOFError:
                    break
                command = line.strip()

                if command in QUIT_COMMANDS:
                    break
                if command.startswith(EXAMPLE_COMMAND):
                    number = command[len(EXAMPLE_COMMAND):].strip()
                    try:
                        example = controller.use_example(int(number) - 1)
                    except (ValueError, IndexError):
                        renderer.write(f"Pick an example between 1 and {len(profile.examples)}.\n")
                        continue
                    renderer.write(f"Loaded: {example} (press Enter to send)\n")
                    continue

                if line:
                    controller.set_input(line)
                await controller.handle_key("Enter")
        finally:
            await controller.close()
