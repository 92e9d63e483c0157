"""Conversation -> vendor message normalization.

Rules enforced here (the vendor rejects requests that break them):

* System messages never become turns. Their text is joined, in order, into a
  separate system prompt. ``system_prompt_mode="leading_user_turn"`` is the
  explicit opt-in for targets without a system channel: the joined text is
  prepended as a synthetic user turn instead.
* Adjacent messages with the same role are merged into one turn, content in
  original order.
* The first turn must be ``user`` and no merged turn may be empty.
* Every content part maps to exactly one vendor block.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from ..base.dto import SystemPromptMode
from ..base.errors import ValidationError
from ..base.models import (
    ROLES,
    ImagePart,
    Message,
    TextPart,
    ToolInvocation,
    ToolResult,
)
from ..config.defaults import SYSTEM_PROMPT_SEPARATOR
from .wire import VendorMessage, blocks_contain_image

PROVIDER = "anthropic"


@dataclass(frozen=True)
class NormalizedConversation:
    """Normalizer output: optional system prompt plus alternating turns."""

    system_prompt: Optional[str]
    messages: Tuple[VendorMessage, ...]

    @property
    def has_images(self) -> bool:
        return any(blocks_contain_image(m.content) for m in self.messages)


def _image_block(part: ImagePart) -> Dict[str, Any]:
    return {
        "type": "image",
        "source": {"type": "base64", "media_type": part.media_type, "data": part.data},
    }


def _tool_arguments(part: ToolInvocation) -> Dict[str, Any]:
    args = part.arguments
    if isinstance(args, str):
        try:
            args = json.loads(args) if args.strip() else {}
        except json.JSONDecodeError as exc:
            raise ValidationError(
                f"tool invocation {part.id!r} has arguments that are not valid JSON: {exc.msg}",
                provider=PROVIDER,
            ) from exc
    if not isinstance(args, Mapping):
        raise ValidationError(
            f"tool invocation {part.id!r} arguments must be a JSON object", provider=PROVIDER
        )
    return dict(args)


def _tool_result_block(part: ToolResult) -> Dict[str, Any]:
    if isinstance(part.content, str):
        content: Any = part.content
    else:
        content = []
        for nested in part.content:
            if isinstance(nested, TextPart):
                content.append({"type": "text", "text": nested.text})
            elif isinstance(nested, ImagePart):
                content.append(_image_block(nested))
            else:
                raise ValidationError(
                    f"tool result {part.tool_use_id!r} may only contain text or image parts",
                    provider=PROVIDER,
                )
    block: Dict[str, Any] = {"type": "tool_result", "tool_use_id": part.tool_use_id, "content": content}
    if part.is_error:
        block["is_error"] = True
    return block


def to_vendor_block(part: Any) -> Dict[str, Any]:
    """Map one content part to its vendor block."""
    if isinstance(part, TextPart):
        return {"type": "text", "text": part.text}
    if isinstance(part, ImagePart):
        return _image_block(part)
    if isinstance(part, ToolInvocation):
        return {"type": "tool_use", "id": part.id, "name": part.name, "input": _tool_arguments(part)}
    if isinstance(part, ToolResult):
        return _tool_result_block(part)
    raise ValidationError(f"unsupported content part: {type(part).__name__}", provider=PROVIDER)


def _system_text(message: Message) -> str:
    texts: List[str] = []
    for part in message.content:
        if not isinstance(part, TextPart):
            raise ValidationError("system messages may only contain text parts", provider=PROVIDER)
        texts.append(part.text)
    return "".join(texts)


def normalize(
    messages: Sequence[Message],
    *,
    system_prompt_mode: SystemPromptMode = "channel",
) -> NormalizedConversation:
    """Normalize a conversation into vendor turns.

    Args:
        messages: The caller's conversation, system messages included.
        system_prompt_mode: ``"channel"`` (default) or ``"leading_user_turn"``.

    Returns:
        NormalizedConversation with the joined system prompt (``None`` when
        there is none, or when it was folded into a leading user turn).

    Raises:
        ValidationError: unknown role or part, a non-text system part, a
            conversation whose first turn is not ``user``, or an empty turn.
    """
    if system_prompt_mode not in ("channel", "leading_user_turn"):
        raise ValidationError(f"unknown system_prompt_mode: {system_prompt_mode!r}", provider=PROVIDER)

    system_chunks: List[str] = []
    turns: List[Tuple[str, List[Dict[str, Any]]]] = []
    for position, message in enumerate(messages):
        if message.role not in ROLES:
            raise ValidationError(
                f"message {position} has unknown role {message.role!r}", provider=PROVIDER
            )
        if message.role == "system":
            system_chunks.append(_system_text(message))
            continue
        blocks = [to_vendor_block(p) for p in message.content]
        if turns and turns[-1][0] == message.role:
            turns[-1][1].extend(blocks)
        else:
            turns.append((message.role, blocks))

    system_prompt = SYSTEM_PROMPT_SEPARATOR.join(system_chunks) if system_chunks else None
    if system_prompt is not None and system_prompt_mode == "leading_user_turn":
        lead = {"type": "text", "text": system_prompt}
        if turns and turns[0][0] == "user":
            turns[0][1].insert(0, lead)
        else:
            turns.insert(0, ("user", [lead]))
        system_prompt = None

    if not turns:
        raise ValidationError("conversation contains no user or assistant messages", provider=PROVIDER)
    if turns[0][0] != "user":
        raise ValidationError(
            f"first turn must come from the user, got {turns[0][0]!r}", provider=PROVIDER
        )
    for position, (role, blocks) in enumerate(turns):
        if not blocks:
            raise ValidationError(f"turn {position} ({role}) has no content", provider=PROVIDER)

    return NormalizedConversation(
        system_prompt=system_prompt,
        messages=tuple(VendorMessage(role=role, content=tuple(blocks)) for role, blocks in turns),  # type: ignore[arg-type]
    )


__all__ = ["NormalizedConversation", "normalize", "to_vendor_block"]
