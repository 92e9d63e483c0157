"""
Vendor-neutral content part variants.

A conversation message is an ordered list of parts. Each variant is a frozen
dataclass with a ``type`` tag so callers can dispatch with ``isinstance`` or
on ``part.type``. None of them carries vendor-specific shape; the vendor
package maps them to wire blocks.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, ClassVar, Dict, List, Literal, Mapping, Optional, Union

if TYPE_CHECKING:
    from ..errors_parts.provider_error import MalformedToolArgumentsError


ContentPartType = Literal["text", "image", "tool_use", "tool_result"]


@dataclass(frozen=True)
class TextPart:
    """Plain text."""

    text: str

    type: ClassVar[ContentPartType] = "text"

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type, "text": self.text}


@dataclass(frozen=True)
class ImagePart:
    """Inline image attachment.

    Attributes:
        media_type: MIME type such as ``"image/png"``.
        data: Base64-encoded image bytes (no ``data:`` URI prefix).
    """

    media_type: str
    data: str

    type: ClassVar[ContentPartType] = "image"

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type, "media_type": self.media_type, "data": self.data}


@dataclass(frozen=True)
class ToolInvocation:
    """A model-issued request to call an externally defined tool.

    As caller input, ``arguments`` may be a mapping or a JSON string. In an
    assembled response it is always a parsed mapping; when the vendor sent
    arguments that do not parse, ``arguments`` is empty, ``raw_arguments``
    keeps the received text and ``error`` holds the recovery error.
    """

    id: str
    name: str
    arguments: Union[Mapping[str, Any], str] = field(default_factory=dict)
    raw_arguments: Optional[str] = field(default=None, compare=False)
    error: Optional["MalformedToolArgumentsError"] = field(default=None, compare=False)

    type: ClassVar[ContentPartType] = "tool_use"

    @property
    def malformed(self) -> bool:
        """True when the arguments could not be parsed."""
        return self.error is not None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "type": self.type,
            "id": self.id,
            "name": self.name,
            "arguments": dict(self.arguments) if isinstance(self.arguments, Mapping) else self.arguments,
        }
        if self.malformed:
            data["malformed"] = True
            data["raw_arguments"] = self.raw_arguments
        return data


@dataclass(frozen=True)
class ToolResult:
    """Outcome of a tool call, sent back to the model.

    ``content`` is either a string or a list of text/image parts.
    """

    tool_use_id: str
    content: Union[str, List[Union[TextPart, ImagePart]]] = ""
    is_error: bool = False

    type: ClassVar[ContentPartType] = "tool_result"

    def to_dict(self) -> Dict[str, Any]:
        content = self.content if isinstance(self.content, str) else [p.to_dict() for p in self.content]
        return {
            "type": self.type,
            "tool_use_id": self.tool_use_id,
            "content": content,
            "is_error": self.is_error,
        }


ContentPart = Union[TextPart, ImagePart, ToolInvocation, ToolResult]

CONTENT_PART_TYPES = (TextPart, ImagePart, ToolInvocation, ToolResult)


__all__ = [
    "ContentPart",
    "ContentPartType",
    "CONTENT_PART_TYPES",
    "TextPart",
    "ImagePart",
    "ToolInvocation",
    "ToolResult",
]
