"""Accumulator -> ``AssembledResponse``.

Tool arguments are only validated here, never while streaming. A tool block
whose buffer does not parse into a JSON object is kept in the response with
empty arguments, its raw text, and a ``MalformedToolArgumentsError`` attached;
sibling blocks are unaffected.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Mapping, Optional, Union

from ..base.errors import MalformedToolArgumentsError, ProtocolError
from ..base.logging import LogContext, get_logger, normalized_log_event
from ..base.models import AssembledResponse, TextPart, ToolInvocation
from .accumulator import BlockKind, BlockUnderConstruction, StreamAccumulator

PROVIDER = "anthropic"

_logger = get_logger("anthropic.assembler")


def _parse_arguments(block: BlockUnderConstruction) -> Dict[str, Any]:
    raw = block.buffer
    if not raw.strip():
        return dict(block.initial_input)
    value = json.loads(raw)
    if not isinstance(value, dict):
        raise ValueError(f"expected a JSON object, got {type(value).__name__}")
    return value


def _tool_invocation(
    block: BlockUnderConstruction,
    *,
    model: Optional[str],
    logger: logging.Logger,
    ctx: Optional[LogContext],
) -> ToolInvocation:
    try:
        arguments = _parse_arguments(block)
    except ValueError as exc:
        raw = block.buffer
        err = MalformedToolArgumentsError(
            f"tool {block.tool_name!r} ({block.tool_use_id}) sent arguments that are not a JSON object: {exc}",
            provider=PROVIDER,
            model=model,
            tool_use_id=block.tool_use_id,
            tool_name=block.tool_name,
            raw_arguments=raw,
            raw=exc,
        )
        normalized_log_event(
            logger,
            "assemble.malformed_tool_arguments",
            ctx,
            phase="finalize",
            error_code=err.code.value,
            level=logging.WARNING,
            tool_use_id=block.tool_use_id,
            tool_name=block.tool_name,
            raw_length=len(raw),
        )
        return ToolInvocation(
            id=block.tool_use_id or "",
            name=block.tool_name or "",
            arguments={},
            raw_arguments=raw,
            error=err,
        )
    return ToolInvocation(
        id=block.tool_use_id or "",
        name=block.tool_name or "",
        arguments=arguments,
        raw_arguments=block.buffer or None,
    )


def assemble(
    accumulator: StreamAccumulator,
    *,
    incomplete: bool = False,
    logger: Optional[logging.Logger] = None,
    ctx: Optional[LogContext] = None,
) -> AssembledResponse:
    """Finalize an accumulator.

    Args:
        accumulator: State folded by the decoder.
        incomplete: Build a best-effort partial from an accumulator that never
            reached ``message_stop``. Text blocks are kept even if still open
            (their text was already delivered); unfinished tool blocks are
            dropped.

    Raises:
        ProtocolError: when called on an unfinished accumulator without
            ``incomplete=True``.
    """
    if not accumulator.complete and not incomplete:
        raise ProtocolError("cannot assemble a response before message_stop", provider=PROVIDER, model=accumulator.model)
    log = logger or _logger
    content: List[Union[TextPart, ToolInvocation]] = []
    for block in accumulator.blocks:
        if block.kind is BlockKind.TEXT:
            content.append(TextPart(block.buffer))
        elif block.kind is BlockKind.TOOL_USE and not block.open:
            content.append(_tool_invocation(block, model=accumulator.model, logger=log, ctx=ctx))
    return AssembledResponse(
        content=content,
        stop_reason=accumulator.stop_reason,
        stop_sequence=accumulator.stop_sequence,
        usage=accumulator.usage,
        message_id=accumulator.message_id,
        model=accumulator.model,
        incomplete=incomplete or not accumulator.complete,
    )


def accumulate_message(body: Any) -> StreamAccumulator:
    """Fold a complete (non-streamed) vendor ``message`` body into an accumulator."""
    if not isinstance(body, Mapping) or not isinstance(body.get("content"), list):
        raise ProtocolError("response body is not a vendor message", provider=PROVIDER, raw=body)
    acc = StreamAccumulator(
        message_id=body.get("id"),
        model=body.get("model"),
        stop_reason=body.get("stop_reason"),
        stop_sequence=body.get("stop_sequence"),
    )
    acc.usage.add(body.get("usage") if isinstance(body.get("usage"), Mapping) else None)
    for item in body["content"]:
        if not isinstance(item, Mapping):
            raise ProtocolError("content block is not an object", provider=PROVIDER, raw=body)
        btype = item.get("type")
        if btype == "text":
            block = acc.add_block(BlockKind.TEXT)
            block.append(str(item.get("text", "")))
        elif btype == "tool_use":
            initial = item.get("input")
            block = acc.add_block(
                BlockKind.TOOL_USE,
                tool_use_id=item.get("id"),
                tool_name=item.get("name"),
                initial_input=dict(initial) if isinstance(initial, Mapping) else {},
            )
            if initial is not None and not isinstance(initial, Mapping):
                block.append(json.dumps(initial))
        else:
            block = acc.add_block(BlockKind.IGNORED, vendor_type=str(btype))
        block.close()
    acc.complete = True
    return acc


def assemble_message(
    body: Any,
    *,
    logger: Optional[logging.Logger] = None,
    ctx: Optional[LogContext] = None,
) -> AssembledResponse:
    """Assemble a non-streamed response through the same path as streams."""
    return assemble(accumulate_message(body), logger=logger, ctx=ctx)


__all__ = ["assemble", "accumulate_message", "assemble_message"]
