"""
Health check utilities for MDB_DOCS.
"""

import asyncio
import logging
import time
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

from pymongo.errors import ConnectionFailure, OperationFailure, ServerSelectionTimeoutError

logger = logging.getLogger(__name__)


class HealthStatus(str, Enum):
    """Health status enumeration."""

    HEALTHY = "healthy"
    UNHEALTHY = "unhealthy"


@dataclass
class HealthCheckResult:
    """Result of a health check."""

    name: str
    status: HealthStatus
    message: str
    details: dict[str, Any] | None = None
    timestamp: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "name": self.name,
            "status": self.status.value,
            "message": self.message,
            "details": self.details,
            "timestamp": self.timestamp.isoformat(),
        }


async def check_store_health(store: Any | None, timeout_seconds: float = 5.0) -> HealthCheckResult:
    """
    Ping the database behind a DocumentStore.

    Args:
        store: DocumentStore instance (or None if not configured)
        timeout_seconds: Timeout for the ping

    Returns:
        HealthCheckResult
    """
    if store is None:
        return HealthCheckResult(
            name="mongodb",
            status=HealthStatus.UNHEALTHY,
            message="Document store not configured",
        )

    start_time = time.time()
    try:
        await asyncio.wait_for(store.ping(), timeout=timeout_seconds)
    except asyncio.TimeoutError:
        return HealthCheckResult(
            name="mongodb",
            status=HealthStatus.UNHEALTHY,
            message=f"MongoDB ping timed out after {timeout_seconds}s",
        )
    except (ConnectionFailure, ServerSelectionTimeoutError, OperationFailure) as e:
        logger.warning(f"MongoDB health check failed: {e}")
        return HealthCheckResult(
            name="mongodb",
            status=HealthStatus.UNHEALTHY,
            message=f"MongoDB connection failed: {e}",
            details={"error_type": type(e).__name__},
        )

    return HealthCheckResult(
        name="mongodb",
        status=HealthStatus.HEALTHY,
        message="MongoDB is responding",
        details={
            "db_name": store.db_name,
            "latency_ms": round((time.time() - start_time) * 1000, 2),
        },
    )
