"""Async client for the Ollama native generation API.

Uses ``httpx.AsyncClient`` against ``<base>/generate`` and
``<base>/tags``.  No retries are attempted; callers decide whether a
failed call is worth repeating.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, AsyncGenerator

import httpx
from pydantic import ValidationError

from ollama_chat.config import OllamaConfig
from ollama_chat.errors import DecodeError, TransportError, UpstreamError
from ollama_chat.types import ClassifiedFragment, ModelDescriptor

from .decoder import decode_text
from .framing import frame_lines
from .think_tags import ThinkTagParser

_logger = logging.getLogger(__name__)


class OllamaClient:
    """Client for a local Ollama server."""

    def __init__(
        self,
        config: OllamaConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config or OllamaConfig()
        self._client = httpx.AsyncClient(
            base_url=self.config.base_url,
            headers={"Content-Type": "application/json"},
            timeout=httpx.Timeout(
                self.config.timeout,
                connect=self.config.connect_timeout,
                read=self.config.read_timeout,
            ),
            transport=transport,
        )

    # ------------------------------------------------------------------
    # Model catalog
    # ------------------------------------------------------------------

    async def list_models(self) -> list[ModelDescriptor]:
        """Return the models installed on the server, in server order."""
        try:
            resp = await self._client.get("tags")
        except httpx.RequestError as e:
            raise TransportError(f"Cannot reach Ollama at {self.config.base_url}: {e}") from e

        if not resp.is_success:
            raise UpstreamError(resp.status_code, resp.text)

        try:
            data = resp.json()
        except ValueError as e:
            raise DecodeError(resp.text, "model list is not valid JSON") from e

        raw_models = data.get("models") if isinstance(data, dict) else None
        try:
            return [ModelDescriptor.model_validate(m) for m in raw_models or []]
        except ValidationError as e:
            raise DecodeError(resp.text, str(e)) from e

    # ------------------------------------------------------------------
    # Streaming generation
    # ------------------------------------------------------------------

    async def stream_generation(
        self,
        model: str,
        prompt: str,
        cancel: asyncio.Event | None = None,
    ) -> AsyncGenerator[ClassifiedFragment, None]:
        """Stream a completion for *prompt*, classified as thinking/final.

        Raises ``UpstreamError`` before the first fragment when the
        server rejects the request, and ``TransportError`` when the
        connection fails.  Setting *cancel* ends the stream at the next
        line boundary.
        """
        payload: dict[str, Any] = {
            "model": model,
            "prompt": prompt,
            "stream": True,
        }
        parser = ThinkTagParser()
        emitted = 0

        try:
            async with self._client.stream("POST", "generate", json=payload) as resp:
                if not resp.is_success:
                    body = (await resp.aread()).decode(errors="replace")
                    raise UpstreamError(resp.status_code, body)

                async for line in frame_lines(resp.aiter_lines(), cancel):
                    text = decode_text(line)
                    if text is None:
                        continue
                    fragment = parser.feed(text)
                    if fragment is None:
                        continue
                    emitted += 1
                    yield fragment
        except httpx.RequestError as e:
            _logger.warning(
                "Ollama stream failed after %d fragments: %s", emitted, e,
            )
            raise TransportError(f"Connection to Ollama failed: {e}") from e

        _logger.debug(
            "Stream for %s finished: %d fragments%s",
            model, emitted,
            " (cancelled)" if cancel is not None and cancel.is_set() else "",
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> OllamaClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()
