"""
Provider Metrics - Injected request counters.

Each collector instance owns its counters. Nothing is stored at class or
module level, so two pipelines never share tallies unless they share the
collector explicitly.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass

from .models import ProviderOutcome

logger = logging.getLogger(__name__)

__all__ = ["InMemoryMetrics", "NullMetrics", "ProviderStats"]


@dataclass
class ProviderStats:
    """Counters for a single provider."""

    total: int = 0
    successful: int = 0
    failed: int = 0
    total_seconds: float = 0.0

    @property
    def success_rate(self) -> float:
        """Percentage of successful calls."""
        if self.total == 0:
            return 0.0
        return self.successful / self.total * 100

    @property
    def average_seconds(self) -> float:
        if self.total == 0:
            return 0.0
        return self.total_seconds / self.total


class InMemoryMetrics:
    """
    Per-instance metrics collector.

    Example:
        >>> metrics = InMemoryMetrics()
        >>> metrics.record("openai", ProviderOutcome.SUCCESS, 0.8)
        >>> metrics.stats("openai").success_rate
        100.0
    """

    def __init__(self) -> None:
        self._stats: dict[str, ProviderStats] = defaultdict(ProviderStats)

    def record(
        self,
        provider_name: str,
        outcome: ProviderOutcome,
        duration_seconds: float,
    ) -> None:
        stats = self._stats[provider_name]
        stats.total += 1
        stats.total_seconds += duration_seconds
        if outcome is ProviderOutcome.SUCCESS:
            stats.successful += 1
        else:
            stats.failed += 1

        logger.debug(
            "Provider metrics %s: outcome=%s duration=%.3fs total=%d ok=%d failed=%d",
            provider_name,
            outcome.value,
            duration_seconds,
            stats.total,
            stats.successful,
            stats.failed,
        )

    def stats(self, provider_name: str) -> ProviderStats:
        """Get counters for one provider (zeroed if never called)."""
        return self._stats.get(provider_name, ProviderStats())

    def snapshot(self) -> dict[str, dict[str, float]]:
        """Export all counters as plain data."""
        return {
            name: {
                "total": stats.total,
                "successful": stats.successful,
                "failed": stats.failed,
                "success_rate": stats.success_rate,
                "average_seconds": stats.average_seconds,
            }
            for name, stats in self._stats.items()
        }


class NullMetrics:
    """Collector that discards everything."""

    def record(
        self,
        provider_name: str,
        outcome: ProviderOutcome,
        duration_seconds: float,
    ) -> None:
        return None
