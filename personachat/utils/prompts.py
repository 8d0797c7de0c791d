"""
Priming history builders for every Gemini chat session.
All persona text lives in bot_data — this module only shapes it into turns.
"""

from __future__ import annotations

from personachat.schemas.chat import HistoryEntry
from personachat.utils.bot_data import BotProfile


def build_priming_history(profile: BotProfile) -> list[HistoryEntry]:
    """
    Return the two synthetic turns that open every chat history.

    Gemini requires history to start with a user turn, so the persona is
    injected as a user acknowledgement request followed by a model turn
    carrying the full system prompt.
    """
    return [
        HistoryEntry(role="user", parts=[profile.acknowledgement_prompt]),
        HistoryEntry(role="model", parts=[profile.system_prompt]),
    ]
