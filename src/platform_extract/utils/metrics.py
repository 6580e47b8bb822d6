"""
In-memory extraction metrics.

Counters and timings for item throughput, dropped items, per-item
failures and pacing waits, without an external metrics backend. Every
observation may carry a platform label; reading without a label sums
over all platforms.
"""

import threading
import time
from collections import Counter
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator

# Label used for observations made outside any platform
UNLABELED = ""


@dataclass
class TimingStats:
    """Aggregate of timing observations in milliseconds."""

    count: int = 0
    total_ms: float = 0.0
    min_ms: float = float("inf")
    max_ms: float = 0.0

    @property
    def avg_ms(self) -> float:
        return self.total_ms / self.count if self.count else 0.0

    def record(self, duration_ms: float) -> None:
        self.count += 1
        self.total_ms += duration_ms
        self.min_ms = min(self.min_ms, duration_ms)
        self.max_ms = max(self.max_ms, duration_ms)

    def merged(self, other: "TimingStats") -> "TimingStats":
        return TimingStats(
            count=self.count + other.count,
            total_ms=self.total_ms + other.total_ms,
            min_ms=min(self.min_ms, other.min_ms),
            max_ms=max(self.max_ms, other.max_ms),
        )

    def to_dict(self) -> dict:
        return {
            "count": self.count,
            "avg_ms": round(self.avg_ms, 2),
            "min_ms": round(self.min_ms, 2) if self.count else 0.0,
            "max_ms": round(self.max_ms, 2),
        }


class Metrics:
    """
    Process-wide metrics collector.

    Example:
        >>> metrics = Metrics.get()
        >>> metrics.increment("items_extracted", platform="xiaohongshu")
        >>> metrics.get_counter("items_extracted")
        1
        >>> with metrics.timer("extraction_latency_ms", platform="google"):
        ...     result = extractor.extract(document)
    """

    _instance: "Metrics | None" = None

    def __init__(self) -> None:
        self._counters: Counter[tuple[str, str]] = Counter()
        self._timings: dict[tuple[str, str], TimingStats] = {}
        self._lock = threading.Lock()

    @classmethod
    def get(cls) -> "Metrics":
        """Get the global metrics instance, creating it on first use."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Clear all counters and timings."""
        if cls._instance is not None:
            with cls._instance._lock:
                cls._instance._counters.clear()
                cls._instance._timings.clear()

    def increment(self, name: str, value: int = 1, platform: str | None = None) -> int:
        key = (name, platform or UNLABELED)
        with self._lock:
            self._counters[key] += value
            return self._counters[key]

    def get_counter(self, name: str, platform: str | None = None) -> int:
        """Counter value for one platform, or the total when platform is None."""
        with self._lock:
            if platform is not None:
                return self._counters[(name, platform)]
            return sum(v for (n, _), v in self._counters.items() if n == name)

    def observe(self, name: str, duration_ms: float, platform: str | None = None) -> None:
        with self._lock:
            key = (name, platform or UNLABELED)
            self._timings.setdefault(key, TimingStats()).record(duration_ms)

    def get_timing(self, name: str, platform: str | None = None) -> TimingStats | None:
        """
        A copy of the timing statistics for a metric.

        Without a platform, observations of every platform are merged.
        Returns None when nothing was observed.
        """
        with self._lock:
            matching = [
                stats
                for (n, label), stats in self._timings.items()
                if n == name and (platform is None or label == platform)
            ]
        if not matching:
            return None

        result = TimingStats()
        for stats in matching:
            result = result.merged(stats)
        return result

    @contextmanager
    def timer(self, name: str, platform: str | None = None) -> Iterator[None]:
        """Time the enclosed block and record it under ``name``."""
        start = time.perf_counter()
        try:
            yield
        finally:
            self.observe(name, (time.perf_counter() - start) * 1000, platform)

    def snapshot(self) -> dict:
        """Counters and timings grouped by platform label."""
        with self._lock:
            counters: dict[str, dict[str, int]] = {}
            for (name, label), value in self._counters.items():
                counters.setdefault(label or "all", {})[name] = value
            timings: dict[str, dict[str, dict]] = {}
            for (name, label), stats in self._timings.items():
                timings.setdefault(label or "all", {})[name] = stats.to_dict()
        return {"counters": counters, "timings": timings}


def increment_items_extracted(platform: str | None = None, count: int = 1) -> None:
    Metrics.get().increment("items_extracted", count, platform)


def increment_items_dropped(platform: str | None = None, count: int = 1) -> None:
    """Items discarded because their cleaned content was too short."""
    Metrics.get().increment("items_dropped", count, platform)


def increment_item_failures(platform: str | None = None, count: int = 1) -> None:
    """Items skipped because extraction raised."""
    Metrics.get().increment("item_failures", count, platform)


def observe_pacing_wait(duration_ms: float, platform: str | None = None) -> None:
    Metrics.get().observe("pacing_wait_ms", duration_ms, platform)


@contextmanager
def time_extraction(platform: str | None = None) -> Iterator[None]:
    """Time one extraction call."""
    with Metrics.get().timer("extraction_latency_ms", platform):
        yield
