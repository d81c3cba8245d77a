"""
Connection management for MDB_DOCS.

This module owns the AsyncIOMotorClient: it builds the client from a
StoreConfig, verifies it with a ping, and closes it on shutdown.
"""

import logging
import time

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo.errors import ConfigurationError as MongoConfigurationError
from pymongo.errors import ConnectionFailure, OperationFailure, ServerSelectionTimeoutError

from ..constants import DEFAULT_MAX_IDLE_TIME_MS
from ..exceptions import InitializationError
from ..observability import get_logger as get_contextual_logger
from ..observability import record_operation
from ..settings import StoreConfig

logger = logging.getLogger(__name__)
contextual_logger = get_contextual_logger(__name__)


class ConnectionManager:
    """
    Manages the MongoDB client lifecycle.

    ``connect()`` is synchronous and performs no I/O (the driver connects
    lazily on first use); ``verify()`` pings the server.
    """

    def __init__(self, config: StoreConfig) -> None:
        """
        Initialize the connection manager.

        Args:
            config: Validated store configuration
        """
        self.config = config

        self._mongo_client: AsyncIOMotorClient | None = None
        self._mongo_db: AsyncIOMotorDatabase | None = None
        self._connected: bool = False

    def connect(self) -> AsyncIOMotorClient:
        """
        Create the MongoDB client and select the database.

        Returns:
            The AsyncIOMotorClient

        Raises:
            InitializationError: If the driver rejects the connection settings
        """
        if self._connected:
            logger.warning("ConnectionManager already connected. Skipping re-connection.")
            return self._mongo_client

        contextual_logger.info(
            "Creating MongoDB client",
            extra={
                "db_name": self.config.db_name,
                "max_pool_size": self.config.max_pool_size,
                "min_pool_size": self.config.min_pool_size,
            },
        )

        client_kwargs = {
            "serverSelectionTimeoutMS": self.config.server_selection_timeout_ms,
            "appname": self.config.app_name,
            "maxPoolSize": self.config.max_pool_size,
            "minPoolSize": self.config.min_pool_size,
            "maxIdleTimeMS": DEFAULT_MAX_IDLE_TIME_MS,
            "retryWrites": True,
            "retryReads": True,
        }
        client_kwargs.update(self.config.client_options)

        try:
            self._mongo_client = AsyncIOMotorClient(self.config.mongo_uri, **client_kwargs)
        except (MongoConfigurationError, ConnectionFailure, TypeError, ValueError) as e:
            contextual_logger.critical(
                "MongoDB client creation failed",
                extra={"error_type": type(e).__name__, "error": str(e)},
                exc_info=True,
            )
            raise InitializationError(
                f"Failed to create MongoDB client: {e}",
                mongo_uri=self.config.mongo_uri,
                db_name=self.config.db_name,
                context={"error_type": type(e).__name__},
            ) from e

        self._mongo_db = self._mongo_client[self.config.db_name]
        self._connected = True
        return self._mongo_client

    async def verify(self) -> None:
        """
        Ping the server to make sure the connection works.

        Raises:
            InitializationError: If the server cannot be reached
        """
        start_time = time.time()
        try:
            await self.client.admin.command("ping")
        except (ConnectionFailure, ServerSelectionTimeoutError, OperationFailure) as e:
            duration_ms = (time.time() - start_time) * 1000
            record_operation("connection.verify", duration_ms, success=False)
            contextual_logger.critical(
                "MongoDB connection failed",
                extra={
                    "error_type": type(e).__name__,
                    "error": str(e),
                    "duration_ms": round(duration_ms, 2),
                },
                exc_info=True,
            )
            raise InitializationError(
                f"Failed to connect to MongoDB: {e}",
                mongo_uri=self.config.mongo_uri,
                db_name=self.config.db_name,
                context={"error_type": type(e).__name__},
            ) from e

        duration_ms = (time.time() - start_time) * 1000
        record_operation("connection.verify", duration_ms, success=True)
        contextual_logger.info(
            "MongoDB connection verified",
            extra={"db_name": self.config.db_name, "duration_ms": round(duration_ms, 2)},
        )

    def close(self) -> None:
        """
        Close the MongoDB client.

        This method is idempotent - it's safe to call multiple times.
        """
        if not self._connected:
            return

        if self._mongo_client is not None:
            self._mongo_client.close()
            contextual_logger.info("MongoDB connection closed.")

        self._connected = False
        self._mongo_client = None
        self._mongo_db = None

    @property
    def client(self) -> AsyncIOMotorClient:
        """
        Get the MongoDB client.

        Raises:
            RuntimeError: If connect() has not been called
        """
        if not self._connected:
            raise RuntimeError("ConnectionManager not connected. Call connect() first.")
        return self._mongo_client

    @property
    def db(self) -> AsyncIOMotorDatabase:
        """
        Get the MongoDB database.

        Raises:
            RuntimeError: If connect() has not been called
        """
        if not self._connected:
            raise RuntimeError("ConnectionManager not connected. Call connect() first.")
        return self._mongo_db

    @property
    def connected(self) -> bool:
        """Check if the client has been created."""
        return self._connected
