"""Decoding of single response lines into generation increments."""

from __future__ import annotations

import json
import logging

from pydantic import ValidationError

from ollama_chat.errors import DecodeError
from ollama_chat.types import GenerationIncrement

_logger = logging.getLogger(__name__)


def decode_increment(line: str) -> GenerationIncrement:
    """Parse one framed line.

    Raises
    ------
    DecodeError
        If the line is not JSON, not an object, or does not match the
        shape of a generation record.
    """
    try:
        data = json.loads(line)
    except json.JSONDecodeError as e:
        raise DecodeError(line, str(e)) from e
    if not isinstance(data, dict):
        raise DecodeError(line, f"expected a JSON object, got {type(data).__name__}")
    try:
        return GenerationIncrement.model_validate(data)
    except ValidationError as e:
        raise DecodeError(line, str(e)) from e


def decode_text(line: str) -> str | None:
    """Return the response text carried by *line*, or ``None``.

    Malformed lines, in-band error records and metadata-only records
    (such as the final ``done`` record) all yield ``None``.
    """
    try:
        increment = decode_increment(line)
    except DecodeError as e:
        _logger.debug("Dropping line: %s", e)
        return None

    if increment.error:
        _logger.warning("Ollama reported an error in stream: %s", increment.error)
        return None

    if increment.done:
        _logger.debug(
            "Generation done (reason=%s, prompt_tokens=%s, completion_tokens=%s, total_ns=%s)",
            increment.done_reason, increment.prompt_eval_count,
            increment.eval_count, increment.total_duration,
        )
    return increment.response or None
