"""
Token usage counters reported by the vendor.
"""
from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import Any, Dict, Mapping, Optional


@dataclass
class Usage:
    """Running token counters for one call.

    Vendors may report counts progressively (once at message start, again on
    each message delta), so counters are added with :meth:`add` rather than
    overwritten.
    """

    input_tokens: int = 0
    output_tokens: int = 0
    cache_creation_input_tokens: int = 0
    cache_read_input_tokens: int = 0

    @property
    def total_tokens(self) -> int:
        return self.input_tokens + self.output_tokens

    def add(self, counts: Optional[Mapping[str, Any]]) -> "Usage":
        """Add the integer counters present in ``counts``; unknown keys are ignored."""
        for key, value in (counts or {}).items():
            if key in _FIELDS and isinstance(value, int) and not isinstance(value, bool):
                setattr(self, key, getattr(self, key) + value)
        return self

    def to_dict(self) -> Dict[str, int]:
        data = asdict(self)
        data["total_tokens"] = self.total_tokens
        return data


_FIELDS = frozenset(
    ("input_tokens", "output_tokens", "cache_creation_input_tokens", "cache_read_input_tokens")
)


__all__ = ["Usage"]
