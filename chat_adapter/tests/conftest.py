"""Pytest configuration for the chat_adapter test suite.

Provides:
- environment isolation (no ambient ``ANTHROPIC_*`` or config-file settings);
- a scripted fake transport that records requests and ``close()`` calls;
- SSE encoding helpers and a provider factory wired to the fake transport;
- log capture on the shared ``chat_adapter`` logger.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Iterator, List, Mapping, Optional, Sequence, Tuple

import pytest

from chat_adapter.anthropic import AnthropicProvider
from chat_adapter.base.capabilities import reset_default_classifier
from chat_adapter.config import reset_config_cache
from chat_adapter.config.env import CONFIG_FILE_ENV, ENV_FIELD_MAP

TEST_MODEL = "claude-sonnet-4-5"


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Strip provider env vars and drop cached config for every test."""
    for suffix in ENV_FIELD_MAP.values():
        monkeypatch.delenv(f"ANTHROPIC_{suffix}", raising=False)
    monkeypatch.delenv(CONFIG_FILE_ENV, raising=False)
    monkeypatch.delenv("CHAT_ADAPTER_LOG_LEVEL", raising=False)
    reset_config_cache()
    reset_default_classifier()
    yield
    reset_config_cache()
    reset_default_classifier()


class FakeResponse:
    """In-memory :class:`TransportResponse`.

    ``fail_after`` raises ``error`` once that many chunks have been yielded,
    simulating a dropped connection.
    """

    def __init__(
        self,
        chunks: Sequence[bytes] = (),
        *,
        status_code: int = 200,
        headers: Optional[Mapping[str, str]] = None,
        fail_after: Optional[int] = None,
        error: Optional[BaseException] = None,
    ) -> None:
        self.status_code = status_code
        self.headers: Dict[str, str] = dict(headers or {"request-id": "req_test"})
        self._chunks = list(chunks)
        self._fail_after = fail_after
        self._error = error or ConnectionResetError("connection reset by peer")
        self.close_calls = 0
        self.chunks_read = 0

    @property
    def closed(self) -> bool:
        return self.close_calls > 0

    def iter_bytes(self) -> Iterator[bytes]:
        for i, chunk in enumerate(self._chunks):
            if self._fail_after is not None and i >= self._fail_after:
                raise self._error
            if self.closed:
                raise ConnectionAbortedError("response closed")
            self.chunks_read += 1
            yield chunk
        if self._fail_after is not None and self._fail_after >= len(self._chunks):
            raise self._error

    def read(self) -> bytes:
        return b"".join(self._chunks)

    def close(self) -> None:
        self.close_calls += 1


class FakeTransport:
    """Scripted :class:`Transport`; hands out queued responses in order."""

    def __init__(self, *responses: Any) -> None:
        self._responses: List[Any] = list(responses)
        self.calls: List[Tuple[str, bytes, Dict[str, str]]] = []

    def open(self, path: str, body: bytes, headers: Mapping[str, str]) -> FakeResponse:
        self.calls.append((path, body, dict(headers)))
        if not self._responses:
            raise AssertionError("FakeTransport has no scripted response left")
        nxt = self._responses.pop(0)
        if isinstance(nxt, BaseException):
            raise nxt
        return nxt

    @property
    def last_body(self) -> Dict[str, Any]:
        return json.loads(self.calls[-1][1])

    @property
    def last_headers(self) -> Dict[str, str]:
        return self.calls[-1][2]


def encode_sse(events: Sequence[Tuple[str, Mapping[str, Any]]]) -> bytes:
    """Encode ``(event_name, payload)`` pairs as an SSE body."""
    out = []
    for name, payload in events:
        out.append(f"event: {name}\ndata: {json.dumps(payload)}\n\n")
    return "".join(out).encode("utf-8")


def message_start(msg_id: str = "msg_1", input_tokens: int = 10) -> Tuple[str, Dict[str, Any]]:
    return (
        "message_start",
        {
            "type": "message_start",
            "message": {
                "id": msg_id,
                "type": "message",
                "role": "assistant",
                "model": TEST_MODEL,
                "content": [],
                "stop_reason": None,
                "usage": {"input_tokens": input_tokens, "output_tokens": 1},
            },
        },
    )


def text_start(index: int) -> Tuple[str, Dict[str, Any]]:
    return ("content_block_start", {"type": "content_block_start", "index": index, "content_block": {"type": "text", "text": ""}})


def tool_start(index: int, tool_id: str, name: str) -> Tuple[str, Dict[str, Any]]:
    return (
        "content_block_start",
        {
            "type": "content_block_start",
            "index": index,
            "content_block": {"type": "tool_use", "id": tool_id, "name": name, "input": {}},
        },
    )


def text_delta(index: int, text: str) -> Tuple[str, Dict[str, Any]]:
    return ("content_block_delta", {"type": "content_block_delta", "index": index, "delta": {"type": "text_delta", "text": text}})


def json_delta(index: int, fragment: str) -> Tuple[str, Dict[str, Any]]:
    return (
        "content_block_delta",
        {"type": "content_block_delta", "index": index, "delta": {"type": "input_json_delta", "partial_json": fragment}},
    )


def block_stop(index: int) -> Tuple[str, Dict[str, Any]]:
    return ("content_block_stop", {"type": "content_block_stop", "index": index})


def message_delta(stop_reason: str = "end_turn", output_tokens: int = 5) -> Tuple[str, Dict[str, Any]]:
    return (
        "message_delta",
        {"type": "message_delta", "delta": {"stop_reason": stop_reason, "stop_sequence": None}, "usage": {"output_tokens": output_tokens}},
    )


def message_stop() -> Tuple[str, Dict[str, Any]]:
    return ("message_stop", {"type": "message_stop"})


class _Sse:
    """Namespace handed to tests through the ``sse`` fixture."""

    encode = staticmethod(encode_sse)
    message_start = staticmethod(message_start)
    text_start = staticmethod(text_start)
    tool_start = staticmethod(tool_start)
    text_delta = staticmethod(text_delta)
    json_delta = staticmethod(json_delta)
    block_stop = staticmethod(block_stop)
    message_delta = staticmethod(message_delta)
    message_stop = staticmethod(message_stop)

    @staticmethod
    def hello_events() -> List[Tuple[str, Dict[str, Any]]]:
        return [
            message_start(),
            text_start(0),
            text_delta(0, "Hel"),
            text_delta(0, "lo"),
            block_stop(0),
            message_delta(),
            message_stop(),
        ]


@pytest.fixture()
def sse() -> type:
    return _Sse


@pytest.fixture()
def make_response():
    return FakeResponse


@pytest.fixture()
def make_transport():
    return FakeTransport


@pytest.fixture()
def make_provider():
    """Factory for an ``AnthropicProvider`` bound to a fake transport."""

    def _make(transport: Any, **overrides: Any) -> AnthropicProvider:
        kwargs: Dict[str, Any] = {
            "api_key": "test-key",  # pragma: allowlist secret - test credential
            "api_version": "2023-06-01",
            "model": TEST_MODEL,
            "transport": transport,
        }
        kwargs.update(overrides)
        return AnthropicProvider(**kwargs)

    return _make


@pytest.fixture()
def log_capture() -> Iterator[List[logging.LogRecord]]:
    """Collect records emitted on the shared ``chat_adapter`` logger."""
    records: List[logging.LogRecord] = []
    handler = logging.Handler(level=logging.DEBUG)
    handler.emit = lambda record: records.append(record)  # type: ignore[method-assign]
    logger = logging.getLogger("chat_adapter")
    previous = logger.level
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)
    try:
        yield records
    finally:
        logger.removeHandler(handler)
        logger.setLevel(previous)


def events_named(records: Sequence[logging.LogRecord], event: str) -> List[Dict[str, Any]]:
    """Decode captured JSON log lines whose ``event`` equals ``event``."""
    out = []
    for r in records:
        try:
            payload = json.loads(r.getMessage())
        except ValueError:
            continue
        if isinstance(payload, dict) and payload.get("event") == event:
            out.append(payload)
    return out


@pytest.fixture()
def log_events():
    return events_named
