"""Tests for decoding generation records."""

import json
import logging

import pytest

from ollama_chat.errors import DecodeError
from ollama_chat.llm.decoder import decode_increment, decode_text
from ollama_chat.types import GenerationIncrement


def _line(**fields) -> str:
    return json.dumps(fields)


class TestDecodeIncrement:
    def test_full_record(self):
        inc = decode_increment(_line(
            model="qwen3:8b",
            created_at="2025-01-01T12:00:00.123456789Z",
            response="Hi",
            done=False,
        ))
        assert inc.model_name == "qwen3:8b"
        assert inc.created_at == "2025-01-01T12:00:00.123456789Z"
        assert inc.response == "Hi"
        assert inc.done is False

    def test_final_record_metadata(self):
        inc = decode_increment(_line(
            model="qwen3:8b",
            response="",
            done=True,
            done_reason="stop",
            context=[1, 2, 3],
            total_duration=5_000_000_000,
            load_duration=1_000_000,
            prompt_eval_count=12,
            eval_count=40,
        ))
        assert inc.done is True
        assert inc.prompt_eval_count == 12
        assert inc.eval_count == 40
        assert inc.total_duration == 5_000_000_000
        assert inc.load_duration == 1_000_000

    def test_unknown_fields_ignored(self):
        inc = decode_increment(_line(response="x", thinking="y", extra={"a": 1}))
        assert inc.response == "x"

    def test_malformed_json(self):
        with pytest.raises(DecodeError) as exc:
            decode_increment("{not json")
        assert exc.value.line == "{not json"

    def test_non_object_json(self):
        with pytest.raises(DecodeError):
            decode_increment("[1, 2, 3]")

    def test_wrong_shape(self):
        with pytest.raises(DecodeError):
            decode_increment(_line(response=["not", "text"]))

    def test_round_trip(self):
        original = GenerationIncrement(response="partial <think>", done=False)
        decoded = decode_increment(original.model_dump_json(by_alias=True, exclude_none=True))
        assert (decoded.response, decoded.done) == (original.response, original.done)


class TestDecodeText:
    def test_returns_response(self):
        assert decode_text(_line(response="Hello", done=False)) == "Hello"

    def test_malformed_line_dropped(self):
        assert decode_text("{not json") is None

    def test_empty_response_dropped(self):
        assert decode_text(_line(response="", done=False)) is None

    def test_missing_response_dropped(self):
        assert decode_text(_line(model="m", done=True)) is None

    def test_whitespace_response_kept(self):
        # Classification decides about blank text, not the decoder.
        assert decode_text(_line(response=" ")) == " "

    def test_error_record_dropped_and_logged(self, caplog: pytest.LogCaptureFixture):
        with caplog.at_level(logging.WARNING, logger="ollama_chat.llm.decoder"):
            assert decode_text(_line(error="model requires more system memory")) is None
        assert "more system memory" in caplog.text
