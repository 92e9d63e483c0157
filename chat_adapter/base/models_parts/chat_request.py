"""
ChatRequest DTO: the inbound contract from the conversation layer.

The provider validates sampling fields through ``SamplingParams`` and tool
definitions through ``ToolSchema`` before anything touches the network.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Mapping, Optional, Sequence, Union

from .message import Message


@dataclass
class ChatRequest:
    """Vendor-neutral chat request.

    Attributes:
        model: Target model identifier.
        messages: Ordered conversation, system messages included.
        max_tokens: Completion budget. Required; there is no default.
        tools: Optional tool definitions (``ToolSchema`` or plain mappings).
        temperature: Optional sampling temperature.
        top_p: Optional nucleus sampling threshold.
        top_k: Optional top-k sampling cutoff.
        stop_sequences: Optional custom stop sequences.
    """

    model: str
    messages: List[Message]
    max_tokens: Optional[int] = None
    tools: Optional[Sequence[Union[Mapping[str, Any], Any]]] = None
    temperature: Optional[float] = None
    top_p: Optional[float] = None
    top_k: Optional[int] = None
    stop_sequences: Optional[List[str]] = None


__all__ = ["ChatRequest"]
