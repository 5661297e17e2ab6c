"""Shared data types for Ollama Chat."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# Wire types
# ---------------------------------------------------------------------------

class ModelDescriptor(BaseModel):
    """A selectable generation model, as listed by ``GET /tags``."""

    model_config = ConfigDict(frozen=True, extra="ignore", protected_namespaces=())

    name: str
    modified_at: str | None = None
    size: int | None = None
    digest: str | None = None


class GenerationIncrement(BaseModel):
    """One line of a streamed ``POST /generate`` response.

    Only ``response`` and ``done`` drive the stream; the remaining
    fields are metadata passed through for callers that want them.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True, protected_namespaces=())

    model_name: str | None = Field(default=None, alias="model")
    created_at: str | None = None  # RFC 3339 with nanoseconds, kept as sent
    response: str | None = None
    done: bool = False
    done_reason: str | None = None
    context: list[int] | None = None
    prompt_eval_count: int | None = None
    eval_count: int | None = None
    total_duration: int | None = None
    load_duration: int | None = None
    eval_duration: int | None = None
    error: str | None = None  # in-band failure reported by the server


# ---------------------------------------------------------------------------
# Stream types
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ClassifiedFragment:
    """A piece of model output handed to the consumer."""

    text: str
    is_thinking: bool


@dataclass(frozen=True)
class StreamState:
    """Per-call state carried between increments of one stream."""

    inside_thinking_block: bool = False
