"""In-memory invocation metrics."""

from .counters_parts.latency_stats_snapshot import LatencyStatsSnapshot
from .counters_parts.provider_counters_snapshot import ProviderCountersSnapshot
from .counters_parts.provider_invocation_counters import ProviderInvocationCounters

__all__ = ["LatencyStatsSnapshot", "ProviderCountersSnapshot", "ProviderInvocationCounters"]
