"""
Process-wide default document store.

For code that prefers free functions over passing a DocumentStore around:
call ``config()`` once at startup, then use the module-level operations.

Usage:
    import mdb_docs

    mdb_docs.config({"mongo_uri": "mongodb://localhost:27017", "db_name": "app"})
    posts = await mdb_docs.get_page("posts", page_index=1)
    await mdb_docs.remove_one("posts", posts[0]["documentId"])
"""

import logging
import threading
from collections.abc import Mapping
from typing import Any

from motor.motor_asyncio import AsyncIOMotorClient
from pymongo.results import UpdateResult

from .documents import DocumentStore
from .exceptions import ConfigurationError
from .settings import StoreConfig

logger = logging.getLogger(__name__)

# Global default store
_default_store: DocumentStore | None = None
# threading.Lock so configuration is safe from any thread, not just one event loop
_config_lock = threading.Lock()


def config(settings: StoreConfig | Mapping[str, Any] | None = None) -> DocumentStore:
    """
    Create the process-wide default store and return it.

    Args:
        settings: StoreConfig or settings mapping. Unknown mapping keys are
            forwarded to the AsyncIOMotorClient constructor.

    Returns:
        The configured DocumentStore

    Raises:
        ConfigurationError: If a store is already configured (call reset()
            first) or the settings are invalid
    """
    global _default_store

    with _config_lock:
        if _default_store is not None:
            raise ConfigurationError(
                "Document store is already configured. Call reset() before configuring again."
            )
        _default_store = DocumentStore.from_config(settings)
        logger.info(f"Default document store configured for database '{_default_store.db_name}'")
        return _default_store


def set_store(store: DocumentStore) -> DocumentStore:
    """
    Install an already-built DocumentStore as the default.

    Raises:
        ConfigurationError: If a store is already configured
    """
    global _default_store

    with _config_lock:
        if _default_store is not None:
            raise ConfigurationError(
                "Document store is already configured. Call reset() before configuring again."
            )
        _default_store = store
        return store


def reset() -> None:
    """
    Close and forget the default store. Safe to call when none is configured.
    """
    global _default_store

    with _config_lock:
        store, _default_store = _default_store, None
    if store is not None:
        store.close()
        logger.info("Default document store reset")


def get_store() -> DocumentStore:
    """
    Return the default store.

    Raises:
        ConfigurationError: If config() has not been called
    """
    store = _default_store
    if store is None:
        raise ConfigurationError("Document store is not configured. Call config() first.")
    return store


def get_client() -> AsyncIOMotorClient | None:
    """Return the raw AsyncIOMotorClient behind the default store."""
    return get_store().client


async def get_page(
    collection_name: str,
    page_index: int,
    count: int | None = None,
    where: Any = None,
    order_by: Any = None,
) -> list[dict[str, Any]]:
    return await get_store().get_page(
        collection_name, page_index, count=count, where=where, order_by=order_by
    )


async def get_specifics(collection_name: str, ids: Any = None) -> list[dict[str, Any]]:
    return await get_store().get_specifics(collection_name, ids)


async def get_one(collection_name: str, where: Any = None) -> dict[str, Any] | None:
    return await get_store().get_one(collection_name, where)


async def is_exist_doc(collection_name: str, where: Any = None) -> bool:
    return await get_store().is_exist_doc(collection_name, where)


async def insert_one(collection_name: str, obj: Mapping[str, Any]) -> str:
    return await get_store().insert_one(collection_name, obj)


async def set_one(collection_name: str, document_id: str, obj: Mapping[str, Any]) -> UpdateResult:
    return await get_store().set_one(collection_name, document_id, obj)


async def move(from_collection: str, to_collection: str, document_id: str) -> str:
    return await get_store().move(from_collection, to_collection, document_id)


async def remove_one(collection_name: str, document_id: str) -> None:
    await get_store().remove_one(collection_name, document_id)
