"""Models parts package public surface.

`chat_adapter.base.models` remains the primary stable import path.
"""

from .content_part import (
    CONTENT_PART_TYPES,
    ContentPart,
    ContentPartType,
    ImagePart,
    TextPart,
    ToolInvocation,
    ToolResult,
)
from .message import Message, Role, ROLES
from .usage import Usage
from .provider_metadata import ProviderMetadata
from .assembled_response import AssembledResponse
from .chat_request import ChatRequest

__all__ = [
    "CONTENT_PART_TYPES",
    "ContentPart",
    "ContentPartType",
    "TextPart",
    "ImagePart",
    "ToolInvocation",
    "ToolResult",
    "Message",
    "Role",
    "ROLES",
    "Usage",
    "ProviderMetadata",
    "AssembledResponse",
    "ChatRequest",
]
