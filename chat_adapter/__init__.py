"""chat_adapter: vendor-neutral chat interface over the Anthropic Messages API."""

from .anthropic import AnthropicProvider
from .base.models import (
    AssembledResponse,
    ChatRequest,
    ImagePart,
    Message,
    TextPart,
    ToolInvocation,
    ToolResult,
    Usage,
)

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "AnthropicProvider",
    "AssembledResponse",
    "ChatRequest",
    "ImagePart",
    "Message",
    "TextPart",
    "ToolInvocation",
    "ToolResult",
    "Usage",
]
