"""Provider-agnostic data model (stable import path).

Re-exports the DTOs defined under ``models_parts``.
"""

from .models_parts import (
    CONTENT_PART_TYPES,
    AssembledResponse,
    ChatRequest,
    ContentPart,
    ContentPartType,
    ImagePart,
    Message,
    ProviderMetadata,
    Role,
    ROLES,
    TextPart,
    ToolInvocation,
    ToolResult,
    Usage,
)

__all__ = [
    "CONTENT_PART_TYPES",
    "AssembledResponse",
    "ChatRequest",
    "ContentPart",
    "ContentPartType",
    "ImagePart",
    "Message",
    "ProviderMetadata",
    "Role",
    "ROLES",
    "TextPart",
    "ToolInvocation",
    "ToolResult",
    "Usage",
]
