"""Offline stand-in for ``OllamaClient``.

Produces canned thinking and final fragments with small random delays,
which is enough to exercise the chat screen without a running server.
"""

from __future__ import annotations

import asyncio
import logging
import random
from typing import AsyncGenerator

from ollama_chat.types import ClassifiedFragment, ModelDescriptor

_logger = logging.getLogger(__name__)

SIM_MODELS = ("SimModel-1", "SimModel-2")

_THINKING_POOL = (
    "Processing your request",
    "...almost there",
    "Just a bit more",
    "Analyzing data",
    "Crunching numbers",
    "Formulating response",
    "Checking details",
    "Loading context",
    "Verifying input",
    "Thinking...",
)

_FINAL_POOL = (
    'Here is the final response based on your input: "{prompt}".',
    'Done! Your input "{prompt}" has been processed successfully!',
    'All set! Result for "{prompt}": success.',
    'Your request "{prompt}" is now complete.',
    'Finished processing "{prompt}"!',
    'Result ready: "{prompt}" has been handled.',
    'Successfully generated response for "{prompt}".',
    'Output ready for "{prompt}"!',
    'Completed: "{prompt}" was processed correctly.',
    'Final response for "{prompt}" is now available.',
)


class SimulatedClient:
    """Deterministic when given a seeded ``random.Random`` and zero delays."""

    def __init__(
        self,
        rng: random.Random | None = None,
        thinking_delay: tuple[float, float] = (0.3, 0.7),
        final_delay: tuple[float, float] = (0.3, 0.6),
    ) -> None:
        self._rng = rng or random.Random()
        self._thinking_delay = thinking_delay
        self._final_delay = final_delay

    async def list_models(self) -> list[ModelDescriptor]:
        return [ModelDescriptor(name=name) for name in SIM_MODELS]

    def _pick(self, pool: tuple[str, ...]) -> list[str]:
        count = self._rng.randint(1, len(pool) // 2)
        return self._rng.sample(pool, count)

    async def _pause(self, bounds: tuple[float, float]) -> None:
        low, high = bounds
        if high > 0:
            await asyncio.sleep(self._rng.uniform(low, high))

    async def stream_generation(
        self,
        model: str,
        prompt: str,
        cancel: asyncio.Event | None = None,
    ) -> AsyncGenerator[ClassifiedFragment, None]:
        _logger.debug("Simulating generation for %s", model)
        script = [(chunk, True) for chunk in self._pick(_THINKING_POOL)]
        script += [
            (chunk.format(prompt=prompt), False) for chunk in self._pick(_FINAL_POOL)
        ]

        for text, is_thinking in script:
            await self._pause(self._thinking_delay if is_thinking else self._final_delay)
            if cancel is not None and cancel.is_set():
                return
            yield ClassifiedFragment(text=text + " ", is_thinking=is_thinking)

    async def close(self) -> None:
        pass
