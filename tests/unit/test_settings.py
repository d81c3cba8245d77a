"""
Unit tests for StoreConfig.
"""

import pytest

from mdb_docs.exceptions import ConfigurationError
from mdb_docs.settings import StoreConfig


@pytest.fixture
def clean_env(monkeypatch):
    """Remove store-related environment variables."""
    for name in (
        "MONGO_URI",
        "DB_NAME",
        "MONGO_MAX_POOL_SIZE",
        "MONGO_MIN_POOL_SIZE",
        "MONGO_SERVER_SELECTION_TIMEOUT_MS",
        "MDB_DOCS_APP_NAME",
        "MDB_DOCS_USE_TRANSACTIONS",
    ):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestStoreConfigDefaults:
    """Test defaults and environment variables."""

    def test_defaults(self, clean_env):
        config = StoreConfig()

        assert config.mongo_uri == ""
        assert config.db_name == ""
        assert config.max_pool_size == 50
        assert config.min_pool_size == 10
        assert config.server_selection_timeout_ms == 5000
        assert config.app_name == "MDB_DOCS"
        assert config.use_transactions is True
        assert config.client_options == {}

    def test_environment(self, clean_env):
        clean_env.setenv("MONGO_URI", "mongodb://env:27017")
        clean_env.setenv("DB_NAME", "env_db")
        clean_env.setenv("MONGO_MAX_POOL_SIZE", "20")
        clean_env.setenv("MDB_DOCS_USE_TRANSACTIONS", "false")

        config = StoreConfig()

        assert config.mongo_uri == "mongodb://env:27017"
        assert config.db_name == "env_db"
        assert config.max_pool_size == 20
        assert config.use_transactions is False

    def test_arguments_override_environment(self, clean_env):
        clean_env.setenv("DB_NAME", "env_db")
        assert StoreConfig(db_name="arg_db").db_name == "arg_db"


class TestFromSettings:
    """Test building a StoreConfig from a settings record."""

    def test_store_config_passthrough(self):
        config = StoreConfig(mongo_uri="mongodb://x", db_name="db")
        assert StoreConfig.from_settings(config) is config

    def test_mapping_splits_client_options(self, clean_env):
        config = StoreConfig.from_settings(
            {
                "mongo_uri": "mongodb://x",
                "db_name": "db",
                "use_transactions": False,
                "tls": True,
                "client_options": {"w": "majority"},
            }
        )

        assert config.mongo_uri == "mongodb://x"
        assert config.use_transactions is False
        assert config.client_options == {"w": "majority", "tls": True}

    def test_none_uses_environment(self, clean_env):
        clean_env.setenv("DB_NAME", "env_db")
        assert StoreConfig.from_settings(None).db_name == "env_db"

    def test_rejects_other_types(self):
        with pytest.raises(ConfigurationError):
            StoreConfig.from_settings("mongodb://x")


class TestValidate:
    """Test StoreConfig.validate."""

    def test_valid(self):
        StoreConfig(mongo_uri="mongodb://x", db_name="db", max_pool_size=10, min_pool_size=1).validate()

    def test_missing_uri(self, clean_env):
        with pytest.raises(ConfigurationError) as exc_info:
            StoreConfig(db_name="db").validate()
        assert exc_info.value.config_key == "mongo_uri"

    def test_missing_db_name(self, clean_env):
        with pytest.raises(ConfigurationError) as exc_info:
            StoreConfig(mongo_uri="mongodb://x").validate()
        assert exc_info.value.config_key == "db_name"

    def test_min_greater_than_max(self):
        config = StoreConfig(mongo_uri="mongodb://x", db_name="db", max_pool_size=5, min_pool_size=6)
        with pytest.raises(ConfigurationError) as exc_info:
            config.validate()
        assert exc_info.value.config_key == "min_pool_size"

    def test_timeout_too_small(self):
        config = StoreConfig(mongo_uri="mongodb://x", db_name="db", server_selection_timeout_ms=10)
        with pytest.raises(ConfigurationError) as exc_info:
            config.validate()
        assert exc_info.value.config_value == 10
