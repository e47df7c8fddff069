"""
Statistics collection for anyroute.

Provides thread-safe counters for routing decisions and packet dispatch.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, fields
from threading import RLock
from typing import Dict, Optional


@dataclass
class RoutingStats:
    """Counters for routing and forwarding."""

    # Table lookups
    routes_resolved: int = 0
    routes_missed: int = 0

    # Switch dispatch
    packets_forwarded: int = 0
    packets_dropped: int = 0
    packets_dropped_hop_limit: int = 0

    # Queue nodes
    packets_enqueued: int = 0


class StatsCollector:
    """
    Thread-safe statistics collector.

    Counters are keyed by RoutingStats field name; unknown names are ignored.
    """

    def __init__(self):
        self._lock = RLock()
        self._stats = RoutingStats()
        self._start_time = time.time()

    def increment(self, stat_name: str, amount: int = 1) -> None:
        """Increment a counter by name."""
        with self._lock:
            if hasattr(self._stats, stat_name):
                current = getattr(self._stats, stat_name)
                setattr(self._stats, stat_name, current + amount)

    def get_stats(self) -> Dict[str, int]:
        """Get a copy of all counters."""
        with self._lock:
            snapshot = {f.name: getattr(self._stats, f.name) for f in fields(self._stats)}
            snapshot["uptime_seconds"] = int(time.time() - self._start_time)
            return snapshot

    def reset(self) -> None:
        """Reset all statistics."""
        with self._lock:
            self._stats = RoutingStats()
            self._start_time = time.time()

    def format_summary(self) -> str:
        """Format statistics as a human-readable summary."""
        stats = self.get_stats()
        uptime = stats["uptime_seconds"]
        hours, remainder = divmod(uptime, 3600)
        minutes, seconds = divmod(remainder, 60)

        return "\n".join([
            f"[STATS] Uptime: {hours}h {minutes}m {seconds}s",
            f"  Routes: resolved={stats['routes_resolved']} missed={stats['routes_missed']}",
            f"  Packets: forwarded={stats['packets_forwarded']} "
            f"dropped={stats['packets_dropped']} "
            f"hop_limit={stats['packets_dropped_hop_limit']} "
            f"enqueued={stats['packets_enqueued']}",
        ])


# Global instance
_stats_collector: Optional[StatsCollector] = None


def get_stats_collector() -> StatsCollector:
    """Get global stats collector (lazily initialized)."""
    global _stats_collector
    if _stats_collector is None:
        _stats_collector = StatsCollector()
    return _stats_collector


def stat_route_resolved() -> None:
    """Record a table lookup that found a next hop."""
    get_stats_collector().increment("routes_resolved")


def stat_route_missed() -> None:
    """Record a table lookup that found nothing."""
    get_stats_collector().increment("routes_missed")


def stat_packet_forwarded() -> None:
    """Record a packet handed to a next hop."""
    get_stats_collector().increment("packets_forwarded")


def stat_packet_dropped() -> None:
    """Record a packet dropped for lack of a route."""
    get_stats_collector().increment("packets_dropped")


def stat_hop_limit_drop() -> None:
    """Record a packet dropped because its hop budget ran out."""
    get_stats_collector().increment("packets_dropped_hop_limit")


def stat_packet_enqueued() -> None:
    """Record a packet accepted into a queue node."""
    get_stats_collector().increment("packets_enqueued")
