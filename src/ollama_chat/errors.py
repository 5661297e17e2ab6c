"""Error taxonomy for the Ollama client."""

from __future__ import annotations


class ChatClientError(Exception):
    """Base class for errors raised by the Ollama client."""


class UpstreamError(ChatClientError):
    """The service answered the initial request with a failure status."""

    def __init__(self, status_code: int, body: str = "") -> None:
        self.status_code = status_code
        self.body = body
        message = f"Ollama returned {status_code}"
        if body:
            message = f"{message}: {body}"
        super().__init__(message)


class DecodeError(ChatClientError):
    """A response line is not valid JSON or not a generation record."""

    def __init__(self, line: str, reason: str) -> None:
        self.line = line
        self.reason = reason
        super().__init__(f"Cannot decode line {line[:80]!r}: {reason}")


class TransportError(ChatClientError):
    """The connection failed while opening or reading a response."""
