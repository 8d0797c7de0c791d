"""Immutable transcript container. Every update returns a new Transcript."""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import Iterator, Literal, Optional

from personachat.schemas.chat import ChatMessage


def new_message(role: Literal["user", "assistant"], content: str = "") -> ChatMessage:
    """Create a message with a fresh unique id."""
    return ChatMessage(id=str(uuid.uuid4()), role=role, content=content)


@dataclass(frozen=True)
class Transcript:
    """Ordered chat messages. Order is the turn sequence sent to the server."""

    messages: tuple[ChatMessage, ...] = ()

    def append(self, message: ChatMessage) -> Transcript:
        return Transcript(self.messages + (message,))

    def update(self, message_id: str, content: str) -> Transcript:
        """Return a copy with the content of message_id replaced."""
        return Transcript(
            tuple(
                m.model_copy(update={"content": content}) if m.id == message_id else m
                for m in self.messages
            )
        )

    def last(self) -> Optional[ChatMessage]:
        return self.messages[-1] if self.messages else None

    def to_payload(self) -> list[dict[str, str]]:
        """Serialise for the POST /api/chat body."""
        return [m.model_dump() for m in self.messages]

    def __iter__(self) -> Iterator[ChatMessage]:
        return iter(self.messages)

    def __len__(self) -> int:
        return len(self.messages)
