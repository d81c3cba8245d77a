"""
Constants for MDB_DOCS.

This module contains the shared constants used across the codebase to avoid
magic numbers and improve maintainability.
"""

from typing import Final

# ============================================================================
# PAGINATION CONSTANTS
# ============================================================================

DEFAULT_PAGE_COUNT: Final[int] = 25
"""Number of documents returned by get_page when no count is given."""

MAX_SPECIFIC_IDS: Final[int] = 25
"""Maximum number of ids get_specifics will fetch; extra ids are ignored."""

# ============================================================================
# DOCUMENT SHAPE CONSTANTS
# ============================================================================

DOCUMENT_ID_KEY: Final[str] = "documentId"
"""Key under which a document's id is exposed to callers."""

MONGO_ID_KEY: Final[str] = "_id"
"""MongoDB primary key field."""

# ============================================================================
# ORDERING CONSTANTS
# ============================================================================

ORDER_ASCENDING: Final[str] = "asc"
ORDER_DESCENDING: Final[str] = "desc"

# ============================================================================
# DATABASE CONSTANTS
# ============================================================================

# Connection pool defaults
DEFAULT_MAX_POOL_SIZE: Final[int] = 50
"""Default maximum MongoDB connection pool size."""

DEFAULT_MIN_POOL_SIZE: Final[int] = 10
"""Default minimum MongoDB connection pool size."""

DEFAULT_SERVER_SELECTION_TIMEOUT_MS: Final[int] = 5000
"""Default server selection timeout in milliseconds."""

DEFAULT_MAX_IDLE_TIME_MS: Final[int] = 45000
"""Default maximum idle time before closing connections (milliseconds)."""

DEFAULT_APP_NAME: Final[str] = "MDB_DOCS"
"""Application name reported to the server in the connection handshake."""
