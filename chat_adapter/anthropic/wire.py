"""Anthropic Messages API wire shapes.

Plain frozen dataclasses describing exactly what is sent on the wire. They are
produced by the normalizer and request builder and serialized once by the
provider; nothing downstream mutates them.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Dict, List, Literal, Optional, Tuple

VendorRole = Literal["user", "assistant"]


@dataclass(frozen=True)
class VendorMessage:
    """One conversation turn in vendor form. ``content`` is never empty."""

    role: VendorRole
    content: Tuple[Dict[str, Any], ...]

    def to_dict(self) -> Dict[str, Any]:
        return {"role": self.role, "content": [dict(b) for b in self.content]}


@dataclass(frozen=True)
class VendorRequest:
    """Body of ``POST /v1/messages``.

    ``to_dict`` omits every optional field that is unset, so the vendor never
    receives ``null`` values and ``tools`` is absent when no tools were given.
    """

    model: str
    messages: Tuple[VendorMessage, ...]
    max_tokens: int
    system: Optional[str] = None
    temperature: Optional[float] = None
    top_p: Optional[float] = None
    top_k: Optional[int] = None
    stop_sequences: Optional[Tuple[str, ...]] = None
    tools: Optional[Tuple[Dict[str, Any], ...]] = None
    stream: bool = False

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {
            "model": self.model,
            "max_tokens": self.max_tokens,
            "messages": [m.to_dict() for m in self.messages],
        }
        optional: Dict[str, Any] = {
            "system": self.system,
            "temperature": self.temperature,
            "top_p": self.top_p,
            "top_k": self.top_k,
            "stop_sequences": list(self.stop_sequences) if self.stop_sequences else None,
            "tools": [dict(t) for t in self.tools] if self.tools else None,
        }
        body.update({k: v for k, v in optional.items() if v is not None})
        if self.stream:
            body["stream"] = True
        return body

    def to_json_bytes(self) -> bytes:
        return json.dumps(self.to_dict(), ensure_ascii=False, separators=(",", ":")).encode("utf-8")

    @property
    def has_images(self) -> bool:
        return any(_contains_image(m.content) for m in self.messages)


def _contains_image(blocks: Any) -> bool:
    for block in blocks:
        if block.get("type") == "image":
            return True
        nested = block.get("content")
        if isinstance(nested, list) and _contains_image(nested):
            return True
    return False


def blocks_contain_image(blocks: List[Dict[str, Any]] | Tuple[Dict[str, Any], ...]) -> bool:
    """True when any block, or any block nested in a tool result, is an image."""
    return _contains_image(blocks)


__all__ = ["VendorRole", "VendorMessage", "VendorRequest", "blocks_contain_image"]
