"""
Observability components.

Provides structured logging, operation metrics and a health check.
"""

from .health import HealthCheckResult, HealthStatus, check_store_health
from .logging import (
    ContextualLoggerAdapter,
    correlation_scope,
    get_correlation_id,
    get_logger,
    get_logging_context,
    log_operation,
    store_context,
)
from .metrics import (
    MetricsCollector,
    OperationMetrics,
    get_metrics_collector,
    record_operation,
    timed_operation,
)

__all__ = [
    # Metrics
    "MetricsCollector",
    "OperationMetrics",
    "get_metrics_collector",
    "record_operation",
    "timed_operation",
    # Logging
    "get_correlation_id",
    "correlation_scope",
    "store_context",
    "get_logging_context",
    "ContextualLoggerAdapter",
    "get_logger",
    "log_operation",
    # Health
    "HealthStatus",
    "HealthCheckResult",
    "check_store_health",
]
