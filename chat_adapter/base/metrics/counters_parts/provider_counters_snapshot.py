"""Immutable snapshot of per-provider invocation counters."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict

from .latency_stats_snapshot import LatencyStatsSnapshot


@dataclass(frozen=True)
class ProviderCountersSnapshot:
    """Point-in-time view of :class:`ProviderInvocationCounters`.

    ``failure_by_code`` is keyed by ``ErrorCode`` value (e.g. ``"rate_limit"``).
    """

    provider: str
    total: int
    success: int
    failure: int
    cancelled: int
    in_flight: int
    streamed: int
    failure_by_code: Dict[str, int] = field(default_factory=dict)
    latency: LatencyStatsSnapshot | None = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "provider": self.provider,
            "total": self.total,
            "success": self.success,
            "failure": self.failure,
            "cancelled": self.cancelled,
            "in_flight": self.in_flight,
            "streamed": self.streamed,
            "failure_by_code": dict(self.failure_by_code),
            "latency": self.latency.to_dict() if self.latency else None,
        }


__all__ = ["ProviderCountersSnapshot"]
