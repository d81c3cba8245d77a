"""
Metrics collection for MDB_DOCS.

Every document store operation is timed and recorded here so callers can
inspect call counts, latencies and error rates per operation.
"""

import functools
import inspect
import logging
import threading
import time
from collections import OrderedDict
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from pymongo.errors import PyMongoError

from .logging import log_operation

logger = logging.getLogger(__name__)


@dataclass
class OperationMetrics:
    """Metrics for a single operation."""

    operation_name: str
    count: int = 0
    total_duration_ms: float = 0.0
    min_duration_ms: float = float("inf")
    max_duration_ms: float = 0.0
    error_count: int = 0
    last_execution: datetime | None = None

    @property
    def avg_duration_ms(self) -> float:
        """Calculate average duration in milliseconds."""
        return self.total_duration_ms / self.count if self.count > 0 else 0.0

    @property
    def error_rate(self) -> float:
        """Calculate error rate as percentage."""
        return (self.error_count / self.count * 100) if self.count > 0 else 0.0

    def record(self, duration_ms: float, success: bool = True) -> None:
        """Record a single operation execution."""
        self.count += 1
        self.total_duration_ms += duration_ms
        self.min_duration_ms = min(self.min_duration_ms, duration_ms)
        self.max_duration_ms = max(self.max_duration_ms, duration_ms)
        if not success:
            self.error_count += 1
        self.last_execution = datetime.now()

    def to_dict(self) -> dict[str, Any]:
        """Convert metrics to dictionary."""
        return {
            "operation": self.operation_name,
            "count": self.count,
            "avg_duration_ms": round(self.avg_duration_ms, 2),
            "min_duration_ms": (
                round(self.min_duration_ms, 2) if self.min_duration_ms != float("inf") else 0.0
            ),
            "max_duration_ms": round(self.max_duration_ms, 2),
            "error_count": self.error_count,
            "error_rate_percent": round(self.error_rate, 2),
            "last_execution": (self.last_execution.isoformat() if self.last_execution else None),
        }


class MetricsCollector:
    """
    Thread-safe, LRU-bounded collector of per-operation metrics.
    """

    def __init__(self, max_metrics: int = 10000):
        """
        Initialize the metrics collector.

        Args:
            max_metrics: Maximum number of metric keys to store before evicting
                the least recently used one.
        """
        self._metrics: OrderedDict[str, OperationMetrics] = OrderedDict()
        self._lock = threading.Lock()
        self._max_metrics = max_metrics

    def record_operation(
        self, operation_name: str, duration_ms: float, success: bool = True, **tags: Any
    ) -> None:
        """
        Record an operation execution.

        Args:
            operation_name: Name of the operation (e.g., "documents.get_page")
            duration_ms: Duration in milliseconds
            success: Whether the operation succeeded
            **tags: Additional tags for filtering (collection_name, etc.)
        """
        key = operation_name
        if tags:
            tag_str = "_".join(f"{k}={v}" for k, v in sorted(tags.items()))
            key = f"{operation_name}[{tag_str}]"

        with self._lock:
            is_new = key not in self._metrics

            if is_new and len(self._metrics) >= self._max_metrics:
                self._metrics.popitem(last=False)

            if is_new:
                self._metrics[key] = OperationMetrics(operation_name=operation_name)
            else:
                self._metrics.move_to_end(key)

            self._metrics[key].record(duration_ms, success)

    def get_metrics(self, operation_name: str | None = None) -> dict[str, Any]:
        """
        Get metrics for operations.

        Args:
            operation_name: Optional operation name prefix to filter by

        Returns:
            Dictionary of metrics
        """
        with self._lock:
            if operation_name:
                metrics = {
                    k: v.to_dict() for k, v in self._metrics.items() if k.startswith(operation_name)
                }
            else:
                metrics = {k: v.to_dict() for k, v in self._metrics.items()}

            for key in metrics:
                self._metrics.move_to_end(key)

            total_operations = len(self._metrics)

        return {
            "timestamp": datetime.now().isoformat(),
            "metrics": metrics,
            "total_operations": total_operations,
        }

    def get_summary(self) -> dict[str, Any]:
        """
        Get metrics aggregated by operation name (tags folded together).
        """
        with self._lock:
            aggregated: dict[str, OperationMetrics] = {}

            for metric in self._metrics.values():
                base_name = metric.operation_name
                if base_name not in aggregated:
                    aggregated[base_name] = OperationMetrics(operation_name=base_name)

                agg = aggregated[base_name]
                agg.count += metric.count
                agg.total_duration_ms += metric.total_duration_ms
                agg.min_duration_ms = min(agg.min_duration_ms, metric.min_duration_ms)
                agg.max_duration_ms = max(agg.max_duration_ms, metric.max_duration_ms)
                agg.error_count += metric.error_count
                if metric.last_execution and (
                    not agg.last_execution or metric.last_execution > agg.last_execution
                ):
                    agg.last_execution = metric.last_execution

            total_operations = len(self._metrics)
            summary = {name: m.to_dict() for name, m in aggregated.items()}

        return {
            "timestamp": datetime.now().isoformat(),
            "total_operations": total_operations,
            "summary": summary,
        }

    def reset(self) -> None:
        """Reset all metrics."""
        with self._lock:
            self._metrics.clear()

    def get_operation_count(self, operation_name: str) -> int:
        """Get the count of executions for an operation."""
        with self._lock:
            return sum(
                metric.count
                for metric in self._metrics.values()
                if metric.operation_name == operation_name
            )


# Global metrics collector instance
_metrics_collector: MetricsCollector | None = None
_collector_lock = threading.Lock()


def get_metrics_collector() -> MetricsCollector:
    """Get or create the global metrics collector."""
    global _metrics_collector
    if _metrics_collector is None:
        with _collector_lock:
            if _metrics_collector is None:
                _metrics_collector = MetricsCollector()
    return _metrics_collector


def record_operation(
    operation_name: str, duration_ms: float, success: bool = True, **tags: Any
) -> None:
    """
    Record an operation in the global metrics collector.

    Args:
        operation_name: Name of the operation
        duration_ms: Duration in milliseconds
        success: Whether the operation succeeded
        **tags: Additional tags
    """
    get_metrics_collector().record_operation(operation_name, duration_ms, success, **tags)


def timed_operation(operation_name: str, **tags: Any):
    """
    Decorator to automatically time and record an operation.

    Usage:
        @timed_operation("documents.get_page")
        async def get_page(self, ...):
            ...
    """

    # Failures of the wrapped call; the exception is re-raised after recording
    _OPERATION_FAILURES = (
        PyMongoError,
        RuntimeError,
        ValueError,
        TypeError,
        KeyError,
        AttributeError,
        LookupError,
        OSError,
        TimeoutError,
    )

    def decorator(func: Callable) -> Callable:
        if inspect.iscoroutinefunction(func):

            @functools.wraps(func)
            async def async_wrapper(*args, **kwargs):
                start_time = time.time()
                success = True
                try:
                    return await func(*args, **kwargs)
                except _OPERATION_FAILURES:
                    success = False
                    raise
                finally:
                    duration_ms = (time.time() - start_time) * 1000
                    record_operation(operation_name, duration_ms, success, **tags)
                    log_operation(
                        logger, operation_name, logging.DEBUG, success, duration_ms, **tags
                    )

            return async_wrapper

        @functools.wraps(func)
        def sync_wrapper(*args, **kwargs):
            start_time = time.time()
            success = True
            try:
                return func(*args, **kwargs)
            except _OPERATION_FAILURES:
                success = False
                raise
            finally:
                duration_ms = (time.time() - start_time) * 1000
                record_operation(operation_name, duration_ms, success, **tags)
                log_operation(
                    logger, operation_name, logging.DEBUG, success, duration_ms, **tags
                )

        return sync_wrapper

    return decorator
