"""Mutable per-call stream accumulator.

Owned by exactly one ``StreamDecoder`` for the lifetime of one call and never
shared. Blocks are tagged by :class:`BlockKind`, so the decoder checks a
delta's target with one comparison instead of nested conditionals.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from ..base.models import Usage


class BlockKind(str, Enum):
    TEXT = "text"
    TOOL_USE = "tool_use"
    # Vendor block types this adapter does not model (e.g. "thinking").
    IGNORED = "ignored"


@dataclass
class BlockUnderConstruction:
    """One content block being built from deltas."""

    index: int
    kind: BlockKind
    open: bool = True
    tool_use_id: Optional[str] = None
    tool_name: Optional[str] = None
    initial_input: Dict[str, Any] = field(default_factory=dict)
    vendor_type: Optional[str] = None
    _fragments: List[str] = field(default_factory=list, repr=False)

    def append(self, fragment: str) -> None:
        self._fragments.append(fragment)

    @property
    def buffer(self) -> str:
        """Text (TEXT) or raw argument JSON (TOOL_USE) received so far."""
        return "".join(self._fragments)

    def close(self) -> None:
        self.open = False


@dataclass
class StreamAccumulator:
    """Blocks under construction plus message-level metadata."""

    blocks: List[BlockUnderConstruction] = field(default_factory=list)
    message_id: Optional[str] = None
    model: Optional[str] = None
    stop_reason: Optional[str] = None
    stop_sequence: Optional[str] = None
    usage: Usage = field(default_factory=Usage)
    complete: bool = False

    def add_block(self, kind: BlockKind, **attrs: Any) -> BlockUnderConstruction:
        block = BlockUnderConstruction(index=len(self.blocks), kind=kind, **attrs)
        self.blocks.append(block)
        return block

    def block_at(self, index: int) -> Optional[BlockUnderConstruction]:
        if 0 <= index < len(self.blocks):
            return self.blocks[index]
        return None

    def open_blocks(self) -> List[BlockUnderConstruction]:
        return [b for b in self.blocks if b.open]


__all__ = ["BlockKind", "BlockUnderConstruction", "StreamAccumulator"]
