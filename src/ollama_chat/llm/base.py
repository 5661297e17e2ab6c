"""Backend capability shared by the live and simulated clients."""

from __future__ import annotations

import asyncio
from typing import AsyncIterator, Protocol, runtime_checkable

from ollama_chat.types import ClassifiedFragment, ModelDescriptor


@runtime_checkable
class ChatBackend(Protocol):
    """What the terminal front-end needs from a generation service.

    ``stream_generation`` yields non-empty fragments in production
    order and ends cleanly when *cancel* is set.
    """

    async def list_models(self) -> list[ModelDescriptor]: ...

    def stream_generation(
        self,
        model: str,
        prompt: str,
        cancel: asyncio.Event | None = None,
    ) -> AsyncIterator[ClassifiedFragment]: ...

    async def close(self) -> None: ...
