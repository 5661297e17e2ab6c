"""Line framing for streamed NDJSON / SSE response bodies."""

from __future__ import annotations

import asyncio
import logging
from typing import AsyncIterable, AsyncIterator

_logger = logging.getLogger(__name__)

_DATA_PREFIX = "data:"
DONE_SENTINEL = "[DONE]"


def _unframe(line: str) -> str:
    stripped = line.strip()
    if stripped[: len(_DATA_PREFIX)].lower() == _DATA_PREFIX:
        stripped = stripped[len(_DATA_PREFIX) :].strip()
    return stripped


async def frame_lines(
    source: AsyncIterable[str],
    cancel: asyncio.Event | None = None,
) -> AsyncIterator[str]:
    """Yield logical lines from *source*.

    Blank lines are skipped, an SSE ``data:`` prefix is removed and the
    ``[DONE]`` sentinel ends the sequence.  *cancel* is checked before
    every read, so a set event stops the sequence at the next line
    boundary without touching the source again.
    """
    lines = source.__aiter__()
    while True:
        if cancel is not None and cancel.is_set():
            _logger.debug("Stream cancelled at line boundary")
            return
        try:
            raw = await lines.__anext__()
        except StopAsyncIteration:
            return

        line = _unframe(raw)
        if not line:
            continue
        if line == DONE_SENTINEL:
            _logger.debug("Received %s sentinel", DONE_SENTINEL)
            return
        yield line
