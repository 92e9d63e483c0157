"""Incremental server-sent-events framing.

Turns an arbitrary chunking of response bytes into complete ``SseEvent``
records. Chunk boundaries may fall anywhere: inside a multi-byte UTF-8
sequence, inside a line, or between the ``\\r`` and ``\\n`` of a CRLF pair.

Framing rules follow the EventSource format:
- lines end with ``\\r\\n``, ``\\r`` or ``\\n``;
- a blank line dispatches the pending event (if it has any ``data``);
- lines starting with ``:`` are comments;
- ``data`` lines are joined with ``\\n``; a single leading space after the
  colon is dropped;
- an unterminated event at end of stream is discarded.
"""

from __future__ import annotations

import codecs
import json
import re
from dataclasses import dataclass
from typing import Any, Iterable, Iterator, List, Optional

_EOL = re.compile(r"\r\n|\r|\n")


@dataclass(frozen=True)
class SseEvent:
    """One dispatched event: its name and raw ``data`` text."""

    event: str = "message"
    data: str = ""
    id: Optional[str] = None

    def json(self) -> Any:
        """Parse ``data`` as JSON (raises ``json.JSONDecodeError``)."""
        return json.loads(self.data)


class SseDecoder:
    """Stateful byte-to-event decoder for a single response body."""

    def __init__(self) -> None:
        self._utf8 = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._buffer = ""
        self._event: Optional[str] = None
        self._data: List[str] = []
        self._last_id: Optional[str] = None

    @property
    def last_event_id(self) -> Optional[str]:
        return self._last_id

    def feed(self, chunk: bytes) -> List[SseEvent]:
        """Consume one chunk and return every event it completed."""
        self._buffer += self._utf8.decode(chunk)
        return self._drain(final=False)

    def finish(self) -> List[SseEvent]:
        """Flush decoder state at end of stream.

        A trailing line without terminator is still processed, but an event
        not followed by a blank line is dropped.
        """
        self._buffer += self._utf8.decode(b"", final=True)
        out = self._drain(final=True)
        self._event, self._data = None, []
        return out

    def _drain(self, *, final: bool) -> List[SseEvent]:
        out: List[SseEvent] = []
        buf = self._buffer
        start = 0
        while True:
            m = _EOL.search(buf, start)
            if m is None:
                break
            # A lone trailing CR may be the first half of a CRLF split across chunks.
            if not final and m.group() == "\r" and m.end() == len(buf):
                break
            evt = self._process_line(buf[start:m.start()])
            if evt is not None:
                out.append(evt)
            start = m.end()
        rest = buf[start:]
        if final and rest:
            self._process_line(rest)
            rest = ""
        self._buffer = rest
        return out

    def _process_line(self, line: str) -> Optional[SseEvent]:
        if not line:
            return self._dispatch()
        if line.startswith(":"):
            return None
        name, sep, value = line.partition(":")
        if sep and value.startswith(" "):
            value = value[1:]
        if name == "event":
            self._event = value
        elif name == "data":
            self._data.append(value)
        elif name == "id" and "\0" not in value:
            self._last_id = value
        return None

    def _dispatch(self) -> Optional[SseEvent]:
        event, data = self._event, self._data
        self._event, self._data = None, []
        if not data:
            return None
        return SseEvent(event=event or "message", data="\n".join(data), id=self._last_id)


def iter_sse_events(chunks: Iterable[bytes]) -> Iterator[SseEvent]:
    """Convenience generator decoding a whole chunk iterable."""
    decoder = SseDecoder()
    for chunk in chunks:
        yield from decoder.feed(chunk)
    yield from decoder.finish()


__all__ = ["SseEvent", "SseDecoder", "iter_sse_events"]
