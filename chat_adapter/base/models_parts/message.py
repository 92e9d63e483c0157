"""
Conversation message DTO.

Defines the `Message` dataclass and the `Role` literal. Content is an ordered
list of content parts; a plain string is accepted as shorthand for a single
`TextPart` and normalized on construction.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Sequence, Union

from .content_part import ContentPart, TextPart


# Roles accepted from the conversation layer.
Role = Literal["system", "user", "assistant"]

ROLES = ("system", "user", "assistant")


@dataclass(frozen=True)
class Message:
    """A vendor-neutral conversation message.

    Attributes:
        role: The author role (``"system"``, ``"user"`` or ``"assistant"``).
        content: Ordered content parts. Stored as a tuple so a message stays
            immutable once handed to the adapter.
    """

    role: Role
    content: Sequence[ContentPart]

    def __init__(self, role: Role, content: Union[str, Sequence[ContentPart]]) -> None:
        parts = (TextPart(content),) if isinstance(content, str) else tuple(content)
        object.__setattr__(self, "role", role)
        object.__setattr__(self, "content", parts)


__all__ = ["Message", "Role", "ROLES"]
