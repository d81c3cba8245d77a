"""
MDB_DOCS - MongoDB document helpers

Thin async convenience layer over Motor: paginated reads, lookups,
existence checks, inserts, upserts, moves between collections and deletes.
"""

from .api import (
    config,
    get_client,
    get_one,
    get_page,
    get_specifics,
    get_store,
    insert_one,
    is_exist_doc,
    move,
    remove_one,
    reset,
    set_one,
    set_store,
)
from .documents import MISSING, DocumentStore, QueryCondition
from .exceptions import (
    ConfigurationError,
    DocumentNotFoundError,
    DocumentStoreError,
    InitializationError,
    PartialMoveError,
    QueryConditionError,
)
from .settings import StoreConfig

__version__ = "0.1.0"

__all__ = [
    # Store
    "DocumentStore",
    "StoreConfig",
    "QueryCondition",
    "MISSING",
    # Default store
    "config",
    "set_store",
    "reset",
    "get_store",
    "get_client",
    # Operations
    "get_page",
    "get_specifics",
    "get_one",
    "is_exist_doc",
    "insert_one",
    "set_one",
    "move",
    "remove_one",
    # Errors
    "DocumentStoreError",
    "ConfigurationError",
    "InitializationError",
    "QueryConditionError",
    "DocumentNotFoundError",
    "PartialMoveError",
]
