"""
Domain classifier — keyword heuristic deciding whether a message belongs to
the bot's declared domain.

The result is diagnostic only: the orchestrator logs it but never gates the
model request on it. Domain restriction is left to the persona instructions.
"""

from __future__ import annotations

import logging
from typing import Iterable

logger = logging.getLogger(__name__)


def is_in_domain(text: str, keywords: Iterable[str]) -> bool:
    """
    Return True if any keyword occurs as a substring of the lower-cased text.

    No stemming, negation or word-boundary handling: "lawsuit" matches inside
    "lawsuitology" and "art" matches inside "start".
    """
    lowered = text.lower()
    for keyword in keywords:
        if keyword.lower() in lowered:
            logger.debug("Domain keyword matched: %r", keyword)
            return True
    return False
