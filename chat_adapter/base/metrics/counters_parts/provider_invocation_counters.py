"""Thread-safe in-memory counters for provider invocations.

One instance per provider object. Every call records exactly one start and
exactly one outcome (success, failure or cancelled), so ``in_flight`` returns
to zero once all calls have finished.
"""

from __future__ import annotations

from threading import RLock
from typing import Dict, Optional

from .latency_stats_snapshot import LatencyStatsSnapshot
from .provider_counters_snapshot import ProviderCountersSnapshot


class ProviderInvocationCounters:
    """Lifecycle counters with latency aggregates."""

    __slots__ = (
        "_provider",
        "_lock",
        "_total",
        "_success",
        "_failure",
        "_cancelled",
        "_in_flight",
        "_streamed",
        "_failure_by_code",
        "_latency_count",
        "_latency_total",
        "_latency_min",
        "_latency_max",
    )

    def __init__(self, provider: str):
        self._provider = provider
        self._lock = RLock()
        self._reset()
        self._in_flight = 0

    def _reset(self) -> None:
        self._total = 0
        self._success = 0
        self._failure = 0
        self._cancelled = 0
        self._streamed = 0
        self._failure_by_code: Dict[str, int] = {}
        self._latency_count = 0
        self._latency_total = 0
        self._latency_min: Optional[int] = None
        self._latency_max: Optional[int] = None

    def record_start(self, *, streamed: bool = False) -> None:
        with self._lock:
            self._total += 1
            self._in_flight += 1
            if streamed:
                self._streamed += 1

    def record_success(self, latency_ms: int) -> None:
        with self._lock:
            self._success += 1
            self._in_flight = max(0, self._in_flight - 1)
            self._update_latency(latency_ms)

    def record_failure(self, error_code: str, latency_ms: Optional[int] = None) -> None:
        """Record a failed invocation under its canonical error code."""
        with self._lock:
            self._failure += 1
            self._failure_by_code[error_code] = self._failure_by_code.get(error_code, 0) + 1
            self._in_flight = max(0, self._in_flight - 1)
            if latency_ms is not None:
                self._update_latency(latency_ms)

    def record_cancelled(self) -> None:
        with self._lock:
            self._cancelled += 1
            self._in_flight = max(0, self._in_flight - 1)

    def _update_latency(self, latency_ms: int) -> None:
        if latency_ms < 0:
            return
        if self._latency_min is None or latency_ms < self._latency_min:
            self._latency_min = latency_ms
        if self._latency_max is None or latency_ms > self._latency_max:
            self._latency_max = latency_ms
        self._latency_count += 1
        self._latency_total += latency_ms

    def snapshot(self, reset: bool = False) -> ProviderCountersSnapshot:
        """Return an immutable snapshot.

        Args:
            reset: Zero every counter after the snapshot, except ``in_flight``.
        """
        with self._lock:
            avg_ms = self._latency_total / self._latency_count if self._latency_count else None
            snap = ProviderCountersSnapshot(
                provider=self._provider,
                total=self._total,
                success=self._success,
                failure=self._failure,
                cancelled=self._cancelled,
                in_flight=self._in_flight,
                streamed=self._streamed,
                failure_by_code=dict(self._failure_by_code),
                latency=LatencyStatsSnapshot(
                    count=self._latency_count,
                    total_ms=self._latency_total,
                    min_ms=self._latency_min,
                    max_ms=self._latency_max,
                    avg_ms=avg_ms,
                ),
            )
            if reset:
                self._reset()
            return snap


__all__ = ["ProviderInvocationCounters"]
