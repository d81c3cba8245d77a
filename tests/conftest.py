"""
Pytest configuration and shared fixtures for MDB_DOCS tests.

This module provides:
- Mock Motor client, database, collection, cursor and session fixtures
- A DocumentStore wired to those mocks
- Isolation of the process-wide default store and metrics between tests
"""

from typing import Any, Dict
from unittest.mock import AsyncMock, MagicMock

import pytest
from motor.motor_asyncio import AsyncIOMotorCollection

import mdb_docs.api as api_module
from mdb_docs.documents import DocumentStore
from mdb_docs.observability import get_metrics_collector

# ============================================================================
# MOCK MOTOR FIXTURES
# ============================================================================


def make_cursor(docs=None) -> MagicMock:
    """Create a chainable mock cursor whose to_list returns ``docs``."""
    cursor = MagicMock()
    cursor.skip.return_value = cursor
    cursor.limit.return_value = cursor
    cursor.sort.return_value = cursor
    cursor.to_list = AsyncMock(return_value=list(docs or []))
    return cursor


def make_collection(name: str) -> MagicMock:
    """Create a mock Motor collection with async CRUD methods."""
    collection = MagicMock(spec=AsyncIOMotorCollection)
    collection.name = name
    collection.find = MagicMock(return_value=make_cursor())
    collection.find_one = AsyncMock(return_value=None)
    collection.insert_one = AsyncMock(return_value=MagicMock(inserted_id="new_id"))
    collection.replace_one = AsyncMock(
        return_value=MagicMock(matched_count=0, modified_count=0, upserted_id="doc_1")
    )
    collection.delete_one = AsyncMock(return_value=MagicMock(deleted_count=1))
    return collection


@pytest.fixture
def collections() -> Dict[str, MagicMock]:
    """Collections handed out by the mock database, keyed by name."""
    return {}


@pytest.fixture
def mock_mongo_database(collections: Dict[str, MagicMock]) -> MagicMock:
    """Create a mock database whose item access returns mock collections."""
    db = MagicMock()
    db.name = "test_db"
    db.__getitem__.side_effect = lambda name: collections.setdefault(name, make_collection(name))
    db.command = AsyncMock(return_value={"ok": 1})
    return db


@pytest.fixture
def mock_transaction() -> MagicMock:
    """Async context manager returned by session.start_transaction()."""
    transaction = MagicMock()
    transaction.__aenter__ = AsyncMock(return_value=transaction)
    transaction.__aexit__ = AsyncMock(return_value=False)
    return transaction


@pytest.fixture
def mock_session(mock_transaction: MagicMock) -> MagicMock:
    """Async context manager returned by ``await client.start_session()``."""
    session = MagicMock()
    session.__aenter__ = AsyncMock(return_value=session)
    session.__aexit__ = AsyncMock(return_value=False)
    session.start_transaction = MagicMock(return_value=mock_transaction)
    return session


@pytest.fixture
def mock_mongo_client(mock_session: MagicMock) -> MagicMock:
    """Create a mock Motor client."""
    client = MagicMock()
    client.admin.command = AsyncMock(return_value={"ok": 1})
    client.start_session = AsyncMock(return_value=mock_session)
    return client


# ============================================================================
# STORE FIXTURES
# ============================================================================


@pytest.fixture
def store(mock_mongo_database: MagicMock, mock_mongo_client: MagicMock) -> DocumentStore:
    """DocumentStore with transactional moves over mocked Motor objects."""
    return DocumentStore(mock_mongo_database, client=mock_mongo_client)


@pytest.fixture
def sequential_store(mock_mongo_database: MagicMock) -> DocumentStore:
    """DocumentStore with transactions disabled."""
    return DocumentStore(mock_mongo_database, use_transactions=False)


@pytest.fixture
def store_settings() -> Dict[str, Any]:
    """Provide default settings for DocumentStore.from_config."""
    return {
        "mongo_uri": "mongodb://localhost:27017",
        "db_name": "test_db",
        "max_pool_size": 10,
        "min_pool_size": 1,
    }


@pytest.fixture(autouse=True)
def isolate_global_state():
    """Reset the default store and the metrics collector around each test."""
    api_module._default_store = None
    get_metrics_collector().reset()
    yield
    api_module._default_store = None
    get_metrics_collector().reset()


@pytest.fixture
def cursor_factory():
    """Build chainable mock cursors returning the given documents."""
    return make_cursor
