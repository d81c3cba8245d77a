"""
Settings for MDB_DOCS.

Settings come from explicit arguments first, then from environment
variables. A plain mapping of settings can be turned into a StoreConfig with
``StoreConfig.from_settings``; keys it does not recognise are forwarded
verbatim to the ``AsyncIOMotorClient`` constructor.
"""

import os
from collections.abc import Mapping
from typing import Any

from .constants import (
    DEFAULT_APP_NAME,
    DEFAULT_MAX_POOL_SIZE,
    DEFAULT_MIN_POOL_SIZE,
    DEFAULT_SERVER_SELECTION_TIMEOUT_MS,
)
from .exceptions import ConfigurationError

_TRUE_VALUES = ("1", "true", "yes", "on")


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in _TRUE_VALUES


class StoreConfig:
    """
    Document store configuration.

    Example:
        # Using environment variables
        config = StoreConfig()
        store = DocumentStore.from_config(config)

        # Or using direct parameters
        config = StoreConfig(
            mongo_uri="mongodb://localhost:27017",
            db_name="my_db",
        )
    """

    FIELDS = (
        "mongo_uri",
        "db_name",
        "max_pool_size",
        "min_pool_size",
        "server_selection_timeout_ms",
        "app_name",
        "use_transactions",
    )

    def __init__(
        self,
        mongo_uri: str | None = None,
        db_name: str | None = None,
        max_pool_size: int | None = None,
        min_pool_size: int | None = None,
        server_selection_timeout_ms: int | None = None,
        app_name: str | None = None,
        use_transactions: bool | None = None,
        client_options: dict[str, Any] | None = None,
    ):
        """
        Initialize configuration.

        Args:
            mongo_uri: MongoDB connection URI (defaults to MONGO_URI env var)
            db_name: Database name (defaults to DB_NAME env var)
            max_pool_size: Maximum connection pool size (defaults to 50 or MONGO_MAX_POOL_SIZE)
            min_pool_size: Minimum connection pool size (defaults to 10 or MONGO_MIN_POOL_SIZE)
            server_selection_timeout_ms: Server selection timeout in ms (defaults to 5000)
            app_name: Application name sent to the server (defaults to MDB_DOCS)
            use_transactions: Run move() inside a multi-document transaction
                (defaults to True or MDB_DOCS_USE_TRANSACTIONS)
            client_options: Extra keyword arguments for AsyncIOMotorClient
        """
        self.mongo_uri = mongo_uri or os.getenv("MONGO_URI", "")
        self.db_name = db_name or os.getenv("DB_NAME", "")
        self.max_pool_size = max_pool_size or int(
            os.getenv("MONGO_MAX_POOL_SIZE", str(DEFAULT_MAX_POOL_SIZE))
        )
        self.min_pool_size = min_pool_size or int(
            os.getenv("MONGO_MIN_POOL_SIZE", str(DEFAULT_MIN_POOL_SIZE))
        )
        self.server_selection_timeout_ms = server_selection_timeout_ms or int(
            os.getenv(
                "MONGO_SERVER_SELECTION_TIMEOUT_MS", str(DEFAULT_SERVER_SELECTION_TIMEOUT_MS)
            )
        )
        self.app_name = app_name or os.getenv("MDB_DOCS_APP_NAME", DEFAULT_APP_NAME)
        if use_transactions is None:
            use_transactions = _env_flag("MDB_DOCS_USE_TRANSACTIONS", True)
        self.use_transactions = use_transactions
        self.client_options = dict(client_options or {})

    @classmethod
    def from_settings(cls, settings: "StoreConfig | Mapping[str, Any] | None") -> "StoreConfig":
        """
        Build a StoreConfig from a settings record.

        Args:
            settings: A StoreConfig (returned as is), a mapping, or None
                (environment only)

        Returns:
            StoreConfig instance
        """
        if isinstance(settings, StoreConfig):
            return settings
        if settings is None:
            return cls()
        if not isinstance(settings, Mapping):
            raise ConfigurationError(
                "settings must be a StoreConfig or a mapping",
                config_value=type(settings).__name__,
            )

        known = {k: v for k, v in settings.items() if k in cls.FIELDS}
        extra = {k: v for k, v in settings.items() if k not in cls.FIELDS}
        client_options = dict(extra.pop("client_options", None) or {})
        client_options.update(extra)
        return cls(**known, client_options=client_options)

    def validate(self) -> None:
        """
        Validate configuration values.

        Raises:
            ConfigurationError: If required configuration is missing or invalid
        """
        if not self.mongo_uri:
            raise ConfigurationError(
                "mongo_uri is required (set MONGO_URI environment variable or pass directly)",
                config_key="mongo_uri",
            )

        if not self.db_name:
            raise ConfigurationError(
                "db_name is required (set DB_NAME environment variable or pass directly)",
                config_key="db_name",
            )

        if self.max_pool_size < 1:
            raise ConfigurationError(
                f"max_pool_size must be >= 1, got {self.max_pool_size}",
                config_key="max_pool_size",
                config_value=self.max_pool_size,
            )

        if self.min_pool_size < 1:
            raise ConfigurationError(
                f"min_pool_size must be >= 1, got {self.min_pool_size}",
                config_key="min_pool_size",
                config_value=self.min_pool_size,
            )

        if self.min_pool_size > self.max_pool_size:
            raise ConfigurationError(
                f"min_pool_size ({self.min_pool_size}) cannot be greater than "
                f"max_pool_size ({self.max_pool_size})",
                config_key="min_pool_size",
                config_value=self.min_pool_size,
            )

        if self.server_selection_timeout_ms < 1000:
            raise ConfigurationError(
                f"server_selection_timeout_ms must be >= 1000, got "
                f"{self.server_selection_timeout_ms}",
                config_key="server_selection_timeout_ms",
                config_value=self.server_selection_timeout_ms,
            )

    def __repr__(self) -> str:
        return (
            f"StoreConfig(db_name={self.db_name!r}, max_pool_size={self.max_pool_size}, "
            f"min_pool_size={self.min_pool_size}, use_transactions={self.use_transactions})"
        )
