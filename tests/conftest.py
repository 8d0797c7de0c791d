"""Shared fixtures for the PersonaChat test suite."""

from types import SimpleNamespace

import pytest

from personachat.schemas.chat import ChatMessage


async def fragment_stream(*fragments, error=None):
    """Async iterator of text fragments, optionally failing after the last one."""
    for fragment in fragments:
        yield fragment
    if error is not None:
        raise error


def make_chunk(*texts):
    """Build an object shaped like a streamed GenerateContentResponse chunk."""
    parts = [SimpleNamespace(text=t) for t in texts]
    return SimpleNamespace(candidates=[SimpleNamespace(content=SimpleNamespace(parts=parts))])


@pytest.fixture
def greeting():
    return ChatMessage(id="1", role="assistant", content="Hello, how can I help?")


@pytest.fixture
def multi_turn_transcript(greeting):
    """greeting, two answered user turns, then the active query."""
    return [
        greeting,
        ChatMessage(id="u1", role="user", content="Give me a habit"),
        ChatMessage(id="a1", role="assistant", content="Drink water daily"),
        ChatMessage(id="u2", role="user", content="Another one"),
        ChatMessage(id="a2", role="assistant", content="Walk 5000 steps"),
        ChatMessage(id="u3", role="user", content="And for sleep?"),
    ]
