"""SSE framing must be independent of how the body is chunked."""
from __future__ import annotations

import pytest

from chat_adapter.base.streaming import SseDecoder, SseEvent, iter_sse_events

BODY = (
    b"event: message_start\n"
    b'data: {"type":"message_start"}\n'
    b"\n"
    b": keep-alive comment\n"
    b"event: content_block_delta\r\n"
    b'data: {"text":"h\xc3\xa9llo"}\r\n'
    b"\r\n"
)


def _split_every(data: bytes, n: int):
    return [data[i : i + n] for i in range(0, len(data), n)]


@pytest.mark.parametrize("size", [1, 2, 3, 7, 1024])
def test_events_survive_any_chunking(size):
    events = list(iter_sse_events(_split_every(BODY, size)))
    assert events == [  # nosec B101
        SseEvent(event="message_start", data='{"type":"message_start"}'),
        SseEvent(event="content_block_delta", data='{"text":"héllo"}'),
    ]


def test_crlf_split_across_chunks_is_one_line_break():
    dec = SseDecoder()
    out = dec.feed(b"event: ping\r")
    out += dec.feed(b"\ndata: {}\r")
    out += dec.feed(b"\n\r\n")
    assert out == [SseEvent(event="ping", data="{}")]  # nosec B101


def test_multiline_data_is_joined_with_newline():
    out = SseDecoder().feed(b"data: first\ndata:second\n\n")
    assert out == [SseEvent(event="message", data="first\nsecond")]  # nosec B101


def test_event_without_data_is_not_dispatched():
    assert SseDecoder().feed(b"event: ping\n\n") == []  # nosec B101


def test_unterminated_trailing_event_is_dropped():
    dec = SseDecoder()
    assert dec.feed(b"event: message_stop\ndata: {}") == []  # nosec B101
    assert dec.finish() == []  # nosec B101


def test_id_field_is_tracked():
    dec = SseDecoder()
    out = dec.feed(b"id: 7\ndata: x\n\n")
    assert out[0].id == "7" and dec.last_event_id == "7"  # nosec B101


def test_event_json_helper():
    assert SseEvent(data='{"a": 1}').json() == {"a": 1}  # nosec B101
