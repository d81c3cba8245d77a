"""
Document operations.

Provides the DocumentStore client object together with the helpers it uses
to normalize input and shape output.
"""

from .conditions import (
    SUPPORTED_OPERATORS,
    QueryCondition,
    build_filter,
    build_sort,
    normalize_conditions,
)
from .normalize import MISSING, as_list, replace_missing_with_none, shape_document, to_object_id
from .store import DocumentStore

__all__ = [
    "DocumentStore",
    # Conditions
    "QueryCondition",
    "SUPPORTED_OPERATORS",
    "build_filter",
    "build_sort",
    "normalize_conditions",
    # Normalization
    "MISSING",
    "as_list",
    "replace_missing_with_none",
    "shape_document",
    "to_object_id",
]
