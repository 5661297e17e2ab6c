"""Tests for response line framing."""

from __future__ import annotations

import asyncio

from ollama_chat.llm.framing import frame_lines


class _RecordingSource:
    """Async line source that counts how many lines were pulled."""

    def __init__(self, lines: list[str]) -> None:
        self._lines = list(lines)
        self.reads = 0

    def __aiter__(self):
        return self

    async def __anext__(self) -> str:
        if self.reads >= len(self._lines):
            raise StopAsyncIteration
        line = self._lines[self.reads]
        self.reads += 1
        return line


async def _collect(source, cancel: asyncio.Event | None = None) -> list[str]:
    return [line async for line in frame_lines(source, cancel)]


class TestFrameLines:
    async def test_plain_lines_pass_through(self):
        lines = await _collect(_RecordingSource(['{"a": 1}', '{"b": 2}']))
        assert lines == ['{"a": 1}', '{"b": 2}']

    async def test_blank_lines_skipped(self):
        lines = await _collect(_RecordingSource(["", "   ", "one", "\t", "two"]))
        assert lines == ["one", "two"]

    async def test_data_prefix_stripped_case_insensitive(self):
        source = _RecordingSource(['data: {"x": 1}', 'DATA:{"y": 2}', 'Data:   z  '])
        assert await _collect(source) == ['{"x": 1}', '{"y": 2}', "z"]

    async def test_empty_data_line_skipped(self):
        assert await _collect(_RecordingSource(["data:", "data:   ", "x"])) == ["x"]

    async def test_done_sentinel_stops_reading(self):
        source = _RecordingSource(["one", "[DONE]", "never"])
        assert await _collect(source) == ["one"]
        assert source.reads == 2

    async def test_sse_done_sentinel(self):
        source = _RecordingSource(["data: one", "data: [DONE]", "data: never"])
        assert await _collect(source) == ["one"]

    async def test_cancel_before_first_read(self):
        cancel = asyncio.Event()
        cancel.set()
        source = _RecordingSource(["one", "two"])
        assert await _collect(source, cancel) == []
        assert source.reads == 0

    async def test_cancel_between_lines(self):
        cancel = asyncio.Event()
        source = _RecordingSource(["one", "two", "three"])
        seen = []
        async for line in frame_lines(source, cancel):
            seen.append(line)
            cancel.set()
        assert seen == ["one"]
        assert source.reads == 1

    async def test_framing_is_idempotent(self):
        raw = ["", "data: a", "b", "  ", "DATA: c", "[DONE]", "d"]
        first = await _collect(_RecordingSource(raw))
        second = await _collect(_RecordingSource(raw))
        assert first == second == ["a", "b", "c"]

