"""Stream decoder state machine: scripted event sequences in, events and responses out."""
from __future__ import annotations

import logging

import pytest

from chat_adapter.anthropic import DecoderState, StreamDecoder
from chat_adapter.base.errors import ProtocolError, RateLimitError, TransportError, UpstreamError
from chat_adapter.base.models import TextPart, ToolInvocation
from chat_adapter.base.streaming import BLOCK_STOP, TEXT_DELTA, TOOL_ARGUMENTS_DELTA, TOOL_USE_START


def _feed_all(decoder, events):
    out = []
    for name, payload in events:
        out.extend(decoder.feed(name, payload))
    return out


def _open() -> StreamDecoder:
    d = StreamDecoder(model="claude-sonnet-4-5")
    d.open()
    return d


def test_state_transitions(sse):
    d = StreamDecoder()
    assert d.state is DecoderState.IDLE  # nosec B101
    d.open()
    assert d.state is DecoderState.OPEN  # nosec B101
    d.feed(*sse.message_start())
    assert d.state is DecoderState.RECEIVING  # nosec B101
    _feed_all(d, sse.hello_events()[1:])
    assert d.state is DecoderState.CLOSED  # nosec B101


def test_text_round_trip(sse):
    d = _open()
    events = _feed_all(d, sse.hello_events())
    assert [e.kind for e in events] == [TEXT_DELTA, TEXT_DELTA, BLOCK_STOP]  # nosec B101
    assert [e.delta for e in events if e.kind == TEXT_DELTA] == ["Hel", "lo"]  # nosec B101
    resp = d.result()
    assert resp.content == [TextPart("Hello")]  # nosec B101
    assert resp.stop_reason == "end_turn" and resp.message_id == "msg_1"  # nosec B101
    assert not resp.incomplete  # nosec B101


def test_tool_use_round_trip(sse):
    d = _open()
    events = _feed_all(
        d,
        [
            sse.message_start(),
            sse.tool_start(0, "t1", "get_weather"),
            sse.json_delta(0, '{"loc'),
            sse.json_delta(0, 'ation":"SF"}'),
            sse.block_stop(0),
            sse.message_delta("tool_use"),
            sse.message_stop(),
        ],
    )
    assert events[0].kind == TOOL_USE_START and events[0].tool_name == "get_weather"  # nosec B101
    assert [e.delta for e in events if e.kind == TOOL_ARGUMENTS_DELTA] == ['{"loc', 'ation":"SF"}']  # nosec B101
    resp = d.result()
    assert resp.content == [ToolInvocation(id="t1", name="get_weather", arguments={"location": "SF"})]  # nosec B101
    assert resp.stop_reason == "tool_use"  # nosec B101


def test_usage_accumulates_across_events(sse):
    d = _open()
    _feed_all(
        d,
        [
            sse.message_start(input_tokens=25),
            sse.text_start(0),
            sse.block_stop(0),
            sse.message_delta(output_tokens=7),
            sse.message_delta(output_tokens=3),
            sse.message_stop(),
        ],
    )
    usage = d.result().usage
    assert usage.input_tokens == 25  # nosec B101
    assert usage.output_tokens == 1 + 7 + 3  # nosec B101


def test_delta_to_closed_block_is_protocol_error(sse):
    d = _open()
    _feed_all(d, [sse.message_start(), sse.text_start(0), sse.text_delta(0, "a"), sse.block_stop(0)])
    with pytest.raises(ProtocolError, match="closed"):
        d.feed(*sse.text_delta(0, "b"))
    assert d.state is DecoderState.FAILED  # nosec B101
    assert d.error.partial.incomplete  # nosec B101
    assert d.error.partial.text == "a"  # nosec B101


def test_delta_without_block_is_protocol_error(sse):
    d = _open()
    d.feed(*sse.message_start())
    with pytest.raises(ProtocolError, match="no content block"):
        d.feed(*sse.text_delta(0, "x"))


def test_delta_kind_mismatch_is_protocol_error(sse):
    d = _open()
    _feed_all(d, [sse.message_start(), sse.tool_start(0, "t1", "f")])
    with pytest.raises(ProtocolError):
        d.feed(*sse.text_delta(0, "x"))


def test_out_of_order_block_index_is_protocol_error(sse):
    d = _open()
    d.feed(*sse.message_start())
    with pytest.raises(ProtocolError, match="out of order"):
        d.feed(*sse.text_start(1))


def test_events_after_close_are_rejected(sse):
    d = _open()
    _feed_all(d, sse.hello_events())
    with pytest.raises(ProtocolError):
        d.feed(*sse.text_start(1))
    assert d.state is DecoderState.CLOSED  # nosec B101


def test_feed_before_open_fails(sse):
    d = StreamDecoder()
    with pytest.raises(ProtocolError):
        d.feed(*sse.message_start())
    with pytest.raises(ProtocolError):
        d.open()


def test_message_stop_with_open_block_is_protocol_error(sse):
    d = _open()
    _feed_all(d, [sse.message_start(), sse.text_start(0)])
    with pytest.raises(ProtocolError, match="unclosed"):
        d.feed(*sse.message_stop())


def test_vendor_error_event_fails_without_raising(sse):
    d = _open()
    _feed_all(d, [sse.message_start(), sse.text_start(0), sse.text_delta(0, "partial")])
    out = d.feed("error", {"type": "error", "error": {"type": "overloaded_error", "message": "Overloaded"}})
    assert out == []  # nosec B101
    assert d.state is DecoderState.FAILED  # nosec B101
    assert isinstance(d.error, UpstreamError) and d.error.vendor_type == "overloaded_error"  # nosec B101
    assert d.error.partial.text == "partial"  # nosec B101


def test_vendor_rate_limit_event(sse):
    d = _open()
    d.feed("error", {"type": "error", "error": {"type": "rate_limit_error", "message": "slow"}})
    assert isinstance(d.error, RateLimitError) and d.error.retryable  # nosec B101


def test_ping_and_unknown_events_are_ignored(sse):
    logger = logging.getLogger("chat_adapter.tests.decoder")
    logger.setLevel(logging.DEBUG)
    records = []
    handler = logging.Handler(level=logging.DEBUG)
    handler.emit = lambda r: records.append(r.getMessage())  # type: ignore[method-assign]
    logger.addHandler(handler)
    try:
        d = StreamDecoder(logger=logger)
        d.open()
        assert d.feed("ping", {"type": "ping"}) == []  # nosec B101
        assert d.feed("future_event", {"type": "future_event"}) == []  # nosec B101
    finally:
        logger.removeHandler(handler)
    assert any("decoder.unknown_event" in r and "future_event" in r for r in records)  # nosec B101
    assert d.state is DecoderState.RECEIVING  # nosec B101


def test_event_name_falls_back_to_payload_type(sse):
    d = _open()
    _, payload = sse.message_start()
    d.feed(None, payload)
    d.feed("message", sse.text_start(0)[1])
    assert len(d.accumulator.blocks) == 1  # nosec B101


def test_unmodelled_blocks_are_skipped(sse):
    d = _open()
    events = _feed_all(
        d,
        [
            sse.message_start(),
            ("content_block_start", {"type": "content_block_start", "index": 0, "content_block": {"type": "thinking", "thinking": ""}}),
            ("content_block_delta", {"type": "content_block_delta", "index": 0, "delta": {"type": "thinking_delta", "thinking": "hmm"}}),
            sse.block_stop(0),
            sse.text_start(1),
            sse.text_delta(1, "answer"),
            sse.block_stop(1),
            sse.message_delta(),
            sse.message_stop(),
        ],
    )
    assert [e.index for e in events] == [1, 1]  # nosec B101
    assert d.result().content == [TextPart("answer")]  # nosec B101


def test_fail_transport_marks_partial_incomplete(sse):
    d = _open()
    _feed_all(d, [sse.message_start(), sse.text_start(0), sse.text_delta(0, "Hel")])
    err = d.fail_transport(ConnectionResetError("reset"))
    assert isinstance(err, TransportError) and err.retryable  # nosec B101
    assert d.state is DecoderState.FAILED  # nosec B101
    assert err.partial.incomplete and err.partial.text == "Hel"  # nosec B101


def test_result_requires_closed_state(sse):
    d = _open()
    d.feed(*sse.message_start())
    with pytest.raises(ProtocolError):
        d.result()
    assert d.partial_result().incomplete  # nosec B101
