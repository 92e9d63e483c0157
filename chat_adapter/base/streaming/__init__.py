"""Streaming primitives: SSE framing, caller events and the stream controller."""

from .sse import SseDecoder, SseEvent, iter_sse_events
from .stream_controller import StreamController
from .streaming import (
    BLOCK_STOP,
    EVENT_KINDS,
    FINISH,
    TEXT_DELTA,
    TOOL_ARGUMENTS_DELTA,
    TOOL_USE_START,
    ChatStreamEvent,
    collect_text,
)

__all__ = [
    "SseDecoder",
    "SseEvent",
    "iter_sse_events",
    "StreamController",
    "BLOCK_STOP",
    "EVENT_KINDS",
    "FINISH",
    "TEXT_DELTA",
    "TOOL_ARGUMENTS_DELTA",
    "TOOL_USE_START",
    "ChatStreamEvent",
    "collect_text",
]
