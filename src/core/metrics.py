from __future__ import annotations

"""Relay request and event counters.

Provides a lightweight, thread-safe collector for:
- HTTP response times and status counts per method + route template
- Named event counters (status updates received, rejected writes, lookup misses)

Requests that match no route are folded into a single UNMATCHED_ROUTE entry and
unknown verbs into "OTHER", so arbitrary paths and methods cannot grow the
tables. Exported via snapshot().
"""

import threading
import time
from dataclasses import dataclass, field
from typing import Dict, Tuple, Any

UNMATCHED_ROUTE = "<unmatched>"
KNOWN_METHODS = frozenset({"GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"})


@dataclass
class RouteStat:
    """Latency and status tally for one method + route."""

    count: int = 0
    total_s: float = 0.0
    max_s: float = 0.0
    last_s: float = 0.0
    status_counts: Dict[str, int] = field(default_factory=dict)

    def add(self, status_code: int, duration_s: float) -> None:
        self.count += 1
        self.total_s += duration_s
        self.last_s = duration_s
        self.max_s = max(self.max_s, duration_s)
        sc = str(status_code)
        self.status_counts[sc] = self.status_counts.get(sc, 0) + 1

    def as_dict(self) -> Dict[str, Any]:
        return {
            "count": self.count,
            "avg_ms": (self.total_s / self.count * 1000.0) if self.count else 0.0,
            "max_ms": self.max_s * 1000.0,
            "last_ms": self.last_s * 1000.0,
            "status_counts": dict(self.status_counts),
        }


class MetricsCollector:
    """Thread-safe in-process metrics collector."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._routes: Dict[Tuple[str, str], RouteStat] = {}
        self._http_total: int = 0
        self._events: Dict[str, int] = {}
        self._start_monotonic: float = time.monotonic()
        self._start_time_s: float = time.time()

    def increment_event(self, key: str, count: int = 1) -> None:
        """Increment a named event counter by count (default 1)."""
        if not key:
            return
        with self._lock:
            self._events[key] = int(self._events.get(key, 0)) + int(count)

    def event_count(self, key: str) -> int:
        with self._lock:
            return int(self._events.get(key, 0))

    def record_http(self, method: str, route: str, status_code: int, duration_s: float) -> None:
        verb = method.upper()
        key = (verb if verb in KNOWN_METHODS else "OTHER", route or UNMATCHED_ROUTE)
        with self._lock:
            stat = self._routes.get(key)
            if stat is None:
                stat = self._routes[key] = RouteStat()
            stat.add(status_code, duration_s)
            self._http_total += 1

    def uptime_s(self) -> float:
        return max(0.0, time.monotonic() - self._start_monotonic)

    def snapshot(self) -> Dict[str, Any]:
        with self._lock:
            return {
                "process": {
                    "started_at": self._start_time_s,
                    "uptime_s": self.uptime_s(),
                },
                "http": {
                    "total_count": self._http_total,
                    "by_route": {f"{m}:{r}": stat.as_dict() for (m, r), stat in self._routes.items()},
                },
                "events": dict(self._events),
            }


# Singleton instance exported for app-wide use
metrics = MetricsCollector()

__all__ = ["metrics", "MetricsCollector", "RouteStat", "UNMATCHED_ROUTE"]
