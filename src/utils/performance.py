"""
Performance monitoring and benchmarking utilities.

Routing latencies are kept in bounded sample windows so that a
long-running server reports recent percentiles rather than an average
over its whole lifetime. Process resource usage comes from psutil.
"""

import logging
import statistics
import threading
import time
from collections import Counter, deque
from contextlib import contextmanager
from typing import Any, Callable, Deque, Dict, Iterable

import psutil

logger = logging.getLogger(__name__)

DEFAULT_WINDOW = 10000
_MB = 1024 * 1024


class PerformanceMonitor:
    """
    Collects latency samples and request counters for the router.

    Safe to share between the Flask worker threads and the WebSocket
    event loop.
    """

    def __init__(self, window: int = DEFAULT_WINDOW):
        """
        Args:
            window: Number of most recent samples kept per metric
        """
        self.window = window
        self._samples: Dict[str, Deque[float]] = {}
        self._counters: Counter = Counter()
        self._lock = threading.Lock()
        self._process = psutil.Process()
        self._started = time.monotonic()
        self._baseline_rss = self._process.memory_info().rss

        logger.debug(f"Performance monitor initialized (window={window})")

    def record_metric(self, name: str, value: float) -> None:
        """Add one sample to a metric's window."""
        with self._lock:
            samples = self._samples.get(name)
            if samples is None:
                samples = self._samples[name] = deque(maxlen=self.window)
            samples.append(value)

    def increment_counter(self, name: str, value: int = 1) -> None:
        """Add value to a counter."""
        with self._lock:
            self._counters[name] += value

    def get_counter(self, name: str) -> int:
        with self._lock:
            return self._counters[name]

    def get_metric_stats(self, name: str) -> Dict[str, float]:
        """
        Summarize the current window of one metric.

        Returns:
            count, min, max, avg and the p50/p95/p99 percentiles
        """
        with self._lock:
            values = list(self._samples.get(name, ()))
        return _summarize(values)

    def get_system_stats(self) -> Dict[str, Any]:
        """Resource usage of the current process, empty if unavailable."""
        try:
            with self._process.oneshot():
                rss = self._process.memory_info().rss
                return {
                    "memory_rss_mb": rss / _MB,
                    "memory_growth_mb": (rss - self._baseline_rss) / _MB,
                    "memory_percent": self._process.memory_percent(),
                    "cpu_percent": self._process.cpu_percent(),
                    "thread_count": self._process.num_threads(),
                }
        except psutil.Error as e:
            logger.error(f"Error getting system stats: {str(e)}")
            return {}

    def get_summary(self) -> Dict[str, Any]:
        """Counters, metric summaries and process stats in one dict."""
        with self._lock:
            counters = dict(self._counters)
            windows = {name: list(values) for name, values in self._samples.items() if values}

        summary = {
            "uptime_seconds": time.monotonic() - self._started,
            "counters": counters,
            "metrics": {name: _summarize(values) for name, values in windows.items()},
        }
        summary.update(self.get_system_stats())
        return summary

    def reset(self) -> None:
        """Drop all samples and counters and restart the uptime clock."""
        with self._lock:
            self._samples.clear()
            self._counters.clear()
            self._started = time.monotonic()
            self._baseline_rss = self._process.memory_info().rss


def _percentile(ordered: list, fraction: float) -> float:
    # Nearest-rank on an already sorted list
    index = min(len(ordered) - 1, max(0, int(round(fraction * len(ordered))) - 1))
    return ordered[index]


def _summarize(values: Iterable[float]) -> Dict[str, float]:
    ordered = sorted(values)
    if not ordered:
        return {"count": 0, "min": 0, "max": 0, "avg": 0, "p50": 0, "p95": 0, "p99": 0}
    return {
        "count": len(ordered),
        "min": ordered[0],
        "max": ordered[-1],
        "avg": statistics.fmean(ordered),
        "p50": _percentile(ordered, 0.50),
        "p95": _percentile(ordered, 0.95),
        "p99": _percentile(ordered, 0.99),
    }


@contextmanager
def measure_latency(monitor: PerformanceMonitor, operation_name: str):
    """
    Time the wrapped block in milliseconds.

    The sample is recorded as "<operation_name>_latency_ms", also when
    the block raises. The yielded dict receives "latency_ms" on exit.
    """
    timing = {}
    started = time.perf_counter()
    try:
        yield timing
    finally:
        timing["latency_ms"] = (time.perf_counter() - started) * 1000
        monitor.record_metric(f"{operation_name}_latency_ms", timing["latency_ms"])


def benchmark_function(func: Callable, *args, iterations: int = 100, warmup: int = 10,
                       **kwargs) -> Dict[str, float]:
    """
    Call func repeatedly and report its latency distribution.

    Args:
        func: Function to benchmark
        *args: Positional arguments for func
        iterations: Number of timed calls
        warmup: Untimed calls made first
        **kwargs: Keyword arguments for func

    Returns:
        The _summarize() keys plus "std", all in milliseconds
    """
    for _ in range(min(warmup, iterations)):
        func(*args, **kwargs)

    timings = []
    for _ in range(iterations):
        started = time.perf_counter()
        func(*args, **kwargs)
        timings.append((time.perf_counter() - started) * 1000)

    result = _summarize(timings)
    result["std"] = statistics.pstdev(timings) if timings else 0
    return result


# Shared by the REST and WebSocket APIs
performance_monitor = PerformanceMonitor()


def get_performance_monitor() -> PerformanceMonitor:
    """Get the global performance monitor instance."""
    return performance_monitor
