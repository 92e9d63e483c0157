"""Immutable latency aggregate snapshot."""

from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class LatencyStatsSnapshot:
    count: int
    total_ms: int
    min_ms: Optional[int]
    max_ms: Optional[int]
    avg_ms: Optional[float]

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


__all__ = ["LatencyStatsSnapshot"]
