"""Tests for the metrics collector module."""

import asyncio
import logging
import threading
import time
from unittest.mock import MagicMock

import pytest

from utils.metrics import (
    MetricCategories,
    MetricsCollector,
    get_metrics,
    reset_metrics,
    timed,
)


class TestTimingOperations:
    """Tests for timer start/stop and the context manager."""

    def test_start_and_stop_timer(self, metrics):
        timer_id = metrics.start_timer("gamedata.sync.stage")
        time.sleep(0.01)
        duration = metrics.stop_timer(timer_id)

        assert duration >= 9
        assert metrics.get_stats("gamedata.sync.stage")["count"] == 1

    def test_stop_unknown_timer_raises(self, metrics):
        with pytest.raises(ValueError, match="Timer ID not found"):
            metrics.stop_timer("missing")

    def test_context_manager_records_on_exception(self, metrics):
        with pytest.raises(RuntimeError):
            with metrics.time_operation("gamedata.sync.zone"):
                raise RuntimeError("boom")

        assert metrics.get_stats("gamedata.sync.zone")["count"] == 1


class TestStatistics:
    def test_empty_metric_returns_zeros(self, metrics):
        stats = metrics.get_stats("never.recorded")

        assert stats["count"] == 0
        assert stats["avg"] == 0.0
        assert stats["last"] == 0.0

    def test_min_max_avg_last(self, metrics):
        for value in (30, 10, 20):
            metrics.record("gamedata.count.stage", value)

        stats = metrics.get_stats("gamedata.count.stage")

        assert stats["count"] == 3
        assert stats["min"] == 10
        assert stats["max"] == 30
        assert stats["avg"] == 20
        assert stats["last"] == 20

    def test_percentiles(self, metrics):
        for value in range(1, 101):
            metrics.record("latency", float(value))

        stats = metrics.get_stats("latency")

        assert stats["p50"] == 51.0
        assert 95.0 <= stats["p95"] <= 96.0

    def test_concurrent_records_are_not_lost(self, metrics):
        def worker():
            for _ in range(200):
                metrics.record("threads", 1.0)

        threads = [threading.Thread(target=worker) for _ in range(5)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert metrics.get_stats("threads")["count"] == 1000


class TestTimedDecorator:
    def test_sync_function(self, metrics):
        @timed("startup.load")
        def load():
            return 42

        assert load() == 42
        assert metrics.get_stats("startup.load")["count"] == 1

    def test_async_function(self, metrics):
        @timed("startup.initial_sync")
        async def sync():
            await asyncio.sleep(0)
            return "done"

        assert asyncio.run(sync()) == "done"
        assert metrics.get_stats("startup.initial_sync")["count"] == 1

    def test_default_operation_name(self, metrics):
        @timed()
        def helper():
            return None

        helper()

        names = list(metrics.get_all_metrics())
        assert len(names) == 1
        assert names[0].endswith("helper")

    def test_preserves_metadata_and_records_failures(self, metrics):
        @timed("failing")
        def failing():
            """Docstring."""
            raise ValueError("nope")

        assert failing.__name__ == "failing"
        assert failing.__doc__ == "Docstring."
        with pytest.raises(ValueError):
            failing()
        assert metrics.get_stats("failing")["count"] == 1


class TestReport:
    def test_empty_report(self, metrics):
        assert "No metrics collected." in metrics.report()

    def test_counts_and_durations_formatted_differently(self, metrics):
        metrics.record(f"{MetricCategories.SYNC}.count.stage", 1520)
        metrics.record(f"{MetricCategories.SYNC}.sync.stage", 12.5)

        report = metrics.report()

        assert "gamedata.count.stage: last=1520, min=1520, max=1520" in report
        assert "gamedata.sync.stage: count=1, avg=12.50ms" in report

    def test_report_logs_every_line(self, metrics):
        metrics.record("x", 1.0)
        logger = MagicMock(spec=logging.Logger)

        report = metrics.report(logger=logger)

        assert logger.info.call_count == len(report.splitlines())


class TestSingleton:
    def test_get_metrics_returns_same_instance(self, metrics):
        assert get_metrics() is metrics
        assert MetricsCollector() is metrics

    def test_reset_metrics_gives_fresh_collector(self, metrics):
        metrics.record("x", 1.0)

        reset_metrics()
        fresh = get_metrics()

        assert fresh is not metrics
        assert fresh.get_all_metrics() == {}

    def test_clear_removes_metrics_and_timers(self, metrics):
        metrics.record("x", 1.0)
        timer_id = metrics.start_timer("pending")

        metrics.clear()

        assert metrics.get_all_metrics() == {}
        with pytest.raises(ValueError):
            metrics.stop_timer(timer_id)
