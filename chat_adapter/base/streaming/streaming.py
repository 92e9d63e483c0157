"""Caller-facing streaming event type.

The decoder owns the mutable accumulator; callers only ever see immutable
``ChatStreamEvent`` values flowing one way. A stream is a finite sequence of
incremental events followed by exactly one terminal event (``finish=True``)
that carries either the final response or the error.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Optional

from ..models import AssembledResponse

# Event kinds.
TEXT_DELTA = "text_delta"
TOOL_USE_START = "tool_use_start"
TOOL_ARGUMENTS_DELTA = "tool_arguments_delta"
BLOCK_STOP = "block_stop"
FINISH = "finish"

EVENT_KINDS = (TEXT_DELTA, TOOL_USE_START, TOOL_ARGUMENTS_DELTA, BLOCK_STOP, FINISH)


@dataclass(frozen=True)
class ChatStreamEvent:
    """An incremental delta or the terminal event of a streaming call.

    Fields:
      provider: canonical provider name
      model: model id requested by the caller
      kind: one of ``EVENT_KINDS``
      index: content block index the event refers to (None for terminal events)
      delta: text or raw partial-JSON fragment
      tool_use_id / tool_name: set on ``tool_use_start``
      finish: True on the terminal event only
      response: final ``AssembledResponse`` on success
      error: classified error (``ProviderError`` or ``CancelledError``) on failure
      partial: best-effort incomplete response accompanying ``error``
    """

    provider: str
    model: str
    kind: str
    index: Optional[int] = None
    delta: Optional[str] = None
    tool_use_id: Optional[str] = None
    tool_name: Optional[str] = None
    finish: bool = False
    response: Optional[AssembledResponse] = None
    error: Optional[BaseException] = None
    partial: Optional[AssembledResponse] = None

    def is_error(self) -> bool:
        return self.error is not None

    @property
    def code(self) -> Optional[str]:
        """Error code string of the terminal error, if any."""
        if self.error is None:
            return None
        code: Any = getattr(self.error, "code", None)
        return getattr(code, "value", None) or "cancelled"


def collect_text(events: Iterable[ChatStreamEvent]) -> str:
    """Concatenate the text deltas of an event sequence (live-display view)."""
    return "".join(e.delta or "" for e in events if e.kind == TEXT_DELTA)


__all__ = [
    "TEXT_DELTA",
    "TOOL_USE_START",
    "TOOL_ARGUMENTS_DELTA",
    "BLOCK_STOP",
    "FINISH",
    "EVENT_KINDS",
    "ChatStreamEvent",
    "collect_text",
]
