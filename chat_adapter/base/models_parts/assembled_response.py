"""
AssembledResponse DTO: the final, internal shape of one model turn.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from .content_part import TextPart, ToolInvocation
from .provider_metadata import ProviderMetadata
from .usage import Usage


@dataclass
class AssembledResponse:
    """Ordered text segments interleaved with completed tool invocations.

    Attributes:
        content: Text and tool-invocation parts in the order the model produced them.
        stop_reason: Vendor stop reason (``"end_turn"``, ``"tool_use"``, ...).
        stop_sequence: The stop sequence that ended generation, if any.
        usage: Accumulated token counters.
        message_id: Vendor message identifier.
        model: Model identifier reported by the vendor.
        incomplete: True for best-effort partial results surfaced with an error.
        meta: Call metadata.
    """

    content: List[Union[TextPart, ToolInvocation]] = field(default_factory=list)
    stop_reason: Optional[str] = None
    stop_sequence: Optional[str] = None
    usage: Usage = field(default_factory=Usage)
    message_id: Optional[str] = None
    model: Optional[str] = None
    incomplete: bool = False
    meta: Optional[ProviderMetadata] = None

    @property
    def text(self) -> str:
        """All text parts joined in order."""
        return "".join(p.text for p in self.content if isinstance(p, TextPart))

    @property
    def tool_invocations(self) -> List[ToolInvocation]:
        return [p for p in self.content if isinstance(p, ToolInvocation)]

    @property
    def malformed_tool_invocations(self) -> List[ToolInvocation]:
        return [p for p in self.tool_invocations if p.malformed]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "content": [p.to_dict() for p in self.content],
            "stop_reason": self.stop_reason,
            "stop_sequence": self.stop_sequence,
            "usage": self.usage.to_dict(),
            "message_id": self.message_id,
            "model": self.model,
            "incomplete": self.incomplete,
            "meta": self.meta.to_dict() if self.meta else None,
        }


__all__ = ["AssembledResponse"]
