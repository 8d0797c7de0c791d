"""
Stream relay — forwards upstream text fragments to the HTTP response as
UTF-8 bytes, one write per fragment, with no buffering or coalescing.
"""

from __future__ import annotations

import asyncio
import logging
from typing import AsyncIterator, Optional

from personachat.services.gemini import StreamError

logger = logging.getLogger(__name__)


async def relay_fragments(
    fragments: AsyncIterator[str],
    deadline: Optional[float] = None,
) -> AsyncIterator[bytes]:
    """
    Re-emit each fragment as soon as it arrives.

    deadline is an event-loop timestamp bounding the whole relay; fragments
    are awaited with whatever remains of it. Any upstream failure (including
    running past the deadline) raises StreamError, which aborts the response.
    Bytes already sent are not retracted.
    """
    loop = asyncio.get_running_loop()
    iterator = fragments.__aiter__()
    sent = 0

    try:
        while True:
            remaining = None if deadline is None else max(deadline - loop.time(), 0.0)
            try:
                text = await asyncio.wait_for(iterator.__anext__(), timeout=remaining)
            except StopAsyncIteration:
                break
            except asyncio.TimeoutError as exc:
                logger.error(
                    "Reply stream exceeded the handler time limit after %d fragments", sent
                )
                raise StreamError("Reply stream timed out") from exc
            except Exception as exc:
                logger.error("Error in stream processing after %d fragments: %s", sent, exc)
                raise StreamError(str(exc) or "Reply stream failed") from exc

            if text:
                sent += 1
                yield text.encode("utf-8")
    finally:
        aclose = getattr(iterator, "aclose", None)
        if aclose is not None:
            await aclose()

    logger.debug("Reply stream complete (%d fragments)", sent)
