"""
Unit tests for MetricsCollector.

Tests metrics collection functionality including:
- Thread-safety under concurrent access
- Bounded storage with LRU eviction
- The timed_operation decorator
"""

import threading

import pytest
from pymongo.errors import OperationFailure

from mdb_docs.observability.metrics import (
    MetricsCollector,
    get_metrics_collector,
    record_operation,
    timed_operation,
)


class TestMetricsCollectorThreadSafety:
    """Test thread-safety of metrics collection."""

    def test_concurrent_record_operation(self):
        """Test that concurrent record_operation calls are thread-safe."""
        collector = MetricsCollector()
        num_threads = 10
        operations_per_thread = 100
        barrier = threading.Barrier(num_threads)

        def record_operations(thread_id: int):
            barrier.wait()
            for i in range(operations_per_thread):
                collector.record_operation(
                    f"test.operation.{thread_id}",
                    duration_ms=10.0 + i,
                    success=True,
                    thread_id=thread_id,
                )

        threads = [
            threading.Thread(target=record_operations, args=(i,)) for i in range(num_threads)
        ]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        metrics = collector.get_metrics()
        total_recorded = sum(m["count"] for m in metrics["metrics"].values())
        assert total_recorded == num_threads * operations_per_thread


class TestMetricsCollectorBehaviour:
    """Test aggregation and eviction."""

    def test_lru_eviction(self):
        """Test that the oldest key is evicted at capacity."""
        collector = MetricsCollector(max_metrics=2)
        collector.record_operation("a", 1.0)
        collector.record_operation("b", 1.0)
        collector.record_operation("a", 1.0)
        collector.record_operation("c", 1.0)

        keys = set(collector.get_metrics()["metrics"])
        assert keys == {"a", "c"}

    def test_error_rate_and_summary(self):
        collector = MetricsCollector()
        collector.record_operation("documents.get_one", 10.0, success=True, collection_name="x")
        collector.record_operation("documents.get_one", 30.0, success=False, collection_name="y")

        summary = collector.get_summary()["summary"]["documents.get_one"]
        assert summary["count"] == 2
        assert summary["error_count"] == 1
        assert summary["error_rate_percent"] == 50.0
        assert summary["avg_duration_ms"] == 20.0
        assert collector.get_operation_count("documents.get_one") == 2

    def test_global_collector(self):
        record_operation("global.op", 5.0)
        assert get_metrics_collector().get_operation_count("global.op") == 1


class TestTimedOperation:
    """Test the timed_operation decorator."""

    @pytest.mark.asyncio
    async def test_async_success(self):
        @timed_operation("test.async")
        async def do_work(x):
            return x * 2

        assert await do_work(2) == 4
        assert do_work.__name__ == "do_work"
        assert get_metrics_collector().get_operation_count("test.async") == 1

    @pytest.mark.asyncio
    async def test_async_failure_recorded_and_raised(self):
        @timed_operation("test.async_fail")
        async def fail():
            raise OperationFailure("boom")

        with pytest.raises(OperationFailure):
            await fail()

        metrics = get_metrics_collector().get_metrics("test.async_fail")["metrics"]
        assert metrics["test.async_fail"]["error_count"] == 1

    def test_sync(self):
        @timed_operation("test.sync")
        def add(a, b):
            return a + b

        assert add(1, 2) == 3
        assert get_metrics_collector().get_operation_count("test.sync") == 1
