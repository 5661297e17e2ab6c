"""Classification of streamed text into thinking and final output.

Reasoning models wrap their chain of thought in ``<think>...</think>``.
The tags can arrive anywhere: in the middle of an increment, alone in
an increment, or with the opening and closing tag several increments
apart.  ``step`` is the transition function; ``ThinkTagParser`` keeps
the state for one stream.

The rules are applied once per increment:

1. An opening tag switches to thinking and drops everything up to and
   including the tag.
2. A closing tag (searched in what is left) switches back and drops
   everything from the tag onwards.
3. Stray tags left over are removed.
4. Non-blank remaining text is emitted with the state *after* 1 and 2.

Text after a closing tag in the same increment is discarded.  Text
before a closing tag is emitted as final.
"""

from __future__ import annotations

import re

from ollama_chat.types import ClassifiedFragment, StreamState

OPEN_TAG = "<think>"
CLOSE_TAG = "</think>"

_OPEN_RE = re.compile(re.escape(OPEN_TAG), re.IGNORECASE)
_CLOSE_RE = re.compile(re.escape(CLOSE_TAG), re.IGNORECASE)


def step(
    state: StreamState, text: str,
) -> tuple[StreamState, ClassifiedFragment | None]:
    """Process one text increment.

    Returns the new state and the fragment to emit, if any.
    """
    inside = state.inside_thinking_block

    match = _OPEN_RE.search(text)
    if match:
        inside = True
        text = text[match.end() :]

    match = _CLOSE_RE.search(text)
    if match:
        inside = False
        text = text[: match.start()]

    text = _CLOSE_RE.sub("", _OPEN_RE.sub("", text))

    new_state = StreamState(inside_thinking_block=inside)
    if not text.strip():
        return new_state, None
    return new_state, ClassifiedFragment(text=text, is_thinking=inside)


class ThinkTagParser:
    """Stateful wrapper around ``step`` for a single stream."""

    def __init__(self) -> None:
        self.state = StreamState()

    def feed(self, text: str) -> ClassifiedFragment | None:
        self.state, fragment = step(self.state, text)
        return fragment

    @property
    def inside_thinking_block(self) -> bool:
        return self.state.inside_thinking_block
