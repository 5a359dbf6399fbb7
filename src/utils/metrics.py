"""Metrics collection for game data synchronization.

This module provides a thread-safe metrics collector for timing dataset
refreshes and recording how many records each published snapshot holds.
"""

import inspect
import logging
import statistics
import threading
import time
import uuid
from collections import defaultdict
from collections.abc import Callable
from contextlib import contextmanager
from functools import wraps
from typing import TypeVar

F = TypeVar("F", bound=Callable)


class MetricCategories:
    """Pre-defined metric category prefixes."""

    STARTUP = "startup"  # startup.* - process startup timing
    SYNC = "gamedata"  # gamedata.sync.<dataset> - refresh timing and sizes


class MetricsCollector:
    """Collects and reports performance metrics for operations.

    Thread-safe singleton.

    Usage:
        metrics = get_metrics()

        with metrics.time_operation("gamedata.sync.stage"):
            await provider.sync_stages()

        metrics.record("gamedata.count.stage", 1520)
        print(metrics.report())
    """

    _instance: "MetricsCollector | None" = None
    _lock = threading.Lock()

    def __new__(cls) -> "MetricsCollector":
        """Create or return the singleton instance."""
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = super().__new__(cls)
                    cls._instance._initialize()
        return cls._instance

    def _initialize(self) -> None:
        self._metrics: dict[str, list[float]] = defaultdict(list)
        self._active_timers: dict[str, tuple[str, float]] = {}
        self._metrics_lock = threading.Lock()
        self._timers_lock = threading.Lock()

    def start_timer(self, operation: str) -> str:
        """Start timing an operation and return its timer ID."""
        timer_id = uuid.uuid4().hex
        with self._timers_lock:
            self._active_timers[timer_id] = (operation, time.perf_counter())
        return timer_id

    def stop_timer(self, timer_id: str) -> float:
        """Stop a timer, record the elapsed time and return it in milliseconds.

        Raises:
            ValueError: If timer_id is not found
        """
        end_time = time.perf_counter()
        with self._timers_lock:
            if timer_id not in self._active_timers:
                raise ValueError(f"Timer ID not found: {timer_id}")
            operation, start_time = self._active_timers.pop(timer_id)

        duration_ms = (end_time - start_time) * 1000
        self.record(operation, duration_ms)
        return duration_ms

    @contextmanager
    def time_operation(self, operation: str):
        """Context manager recording the duration of the enclosed block."""
        timer_id = self.start_timer(operation)
        try:
            yield
        finally:
            self.stop_timer(timer_id)

    def record(self, metric: str, value: float) -> None:
        with self._metrics_lock:
            self._metrics[metric].append(value)

    def get_stats(self, metric: str) -> dict:
        """Get count, min, max, avg, last, p50 and p95 for a metric."""
        with self._metrics_lock:
            values = list(self._metrics.get(metric, []))

        if not values:
            return {
                "count": 0,
                "min": 0.0,
                "max": 0.0,
                "avg": 0.0,
                "last": 0.0,
                "p50": 0.0,
                "p95": 0.0,
            }

        sorted_values = sorted(values)
        count = len(sorted_values)
        return {
            "count": count,
            "min": sorted_values[0],
            "max": sorted_values[-1],
            "avg": statistics.mean(sorted_values),
            "last": values[-1],
            "p50": sorted_values[min(int(count * 0.50), count - 1)],
            "p95": sorted_values[min(int(count * 0.95), count - 1)],
        }

    def get_all_metrics(self) -> dict[str, list[float]]:
        """Return a copy of every recorded series."""
        with self._metrics_lock:
            return {k: list(v) for k, v in self._metrics.items()}

    def clear(self) -> None:
        """Clear all collected metrics and active timers."""
        with self._metrics_lock:
            self._metrics.clear()
        with self._timers_lock:
            self._active_timers.clear()

    def report(self, logger: logging.Logger | None = None) -> str:
        """Generate a human-readable report of metrics.

        Series under ``*.count.*`` are sizes and are shown without units;
        everything else is a duration in milliseconds.

        Args:
            logger: Optional logger to write the report to
        """
        lines = ["=" * 60, "METRICS REPORT", "=" * 60]

        all_metrics = self.get_all_metrics()
        if not all_metrics:
            lines.append("No metrics collected.")

        for metric_name in sorted(all_metrics):
            stats = self.get_stats(metric_name)
            if ".count." in metric_name:
                lines.append(
                    f"  {metric_name}: last={stats['last']:.0f}, "
                    f"min={stats['min']:.0f}, max={stats['max']:.0f}"
                )
            else:
                lines.append(
                    f"  {metric_name}: count={stats['count']}, "
                    f"avg={stats['avg']:.2f}ms, p95={stats['p95']:.2f}ms, "
                    f"max={stats['max']:.2f}ms"
                )

        lines.append("=" * 60)
        report = "\n".join(lines)

        if logger:
            for line in lines:
                logger.info(line)

        return report


def get_metrics(metrics: "MetricsCollector | None" = None) -> MetricsCollector:
    """Get the singleton MetricsCollector instance.

    Args:
        metrics: Optional MetricsCollector to install as the singleton.
    """
    if metrics is not None:
        MetricsCollector._instance = metrics
        return metrics
    return MetricsCollector()


def timed(operation: str | None = None) -> Callable[[F], F]:
    """Decorator recording the execution time of a sync or async function.

    Args:
        operation: Metric name; defaults to the function's qualified name.
    """

    def decorator(func: F) -> F:
        op_name = operation or f"{func.__module__}.{func.__qualname__}"

        @wraps(func)
        async def async_wrapper(*args, **kwargs):
            with get_metrics().time_operation(op_name):
                return await func(*args, **kwargs)

        @wraps(func)
        def sync_wrapper(*args, **kwargs):
            with get_metrics().time_operation(op_name):
                return func(*args, **kwargs)

        if inspect.iscoroutinefunction(func):
            return async_wrapper  # type: ignore
        return sync_wrapper  # type: ignore

    return decorator


def reset_metrics() -> None:
    """Reset the metrics collector singleton.

    Primarily for testing.
    """
    MetricsCollector._instance = None
