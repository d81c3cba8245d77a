"""
Input normalization and output shaping for documents.

MongoDB would silently drop a field set to a placeholder, so callers mark a
field as intentionally empty with ``MISSING`` and it is written as an
explicit ``None``.
"""

from collections.abc import Iterable, Mapping
from typing import Any

from bson import ObjectId

from ..constants import DOCUMENT_ID_KEY, MONGO_ID_KEY


class _Missing:
    """Marker for a field whose value is absent."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False

    def __copy__(self):
        return self

    def __deepcopy__(self, memo):
        return self

    def __reduce__(self):
        return (_Missing, ())


MISSING = _Missing()


def is_missing(value: Any) -> bool:
    """True for MISSING and None."""
    return value is None or value is MISSING


def replace_missing_with_none(obj: Mapping[str, Any]) -> dict[str, Any]:
    """
    Return a shallow copy of ``obj`` with every MISSING value set to None.

    Only top-level fields are touched; the input mapping is not modified.
    """
    return {key: (None if is_missing(value) else value) for key, value in obj.items()}


def as_list(value: Any) -> list[Any]:
    """
    Normalize "one item or a sequence of items" into a list.

    Strings and mappings count as a single item. None becomes an empty list.
    """
    if value is None:
        return []
    if isinstance(value, (str, bytes, Mapping)):
        return [value]
    if isinstance(value, Iterable):
        return list(value)
    return [value]


def to_object_id(document_id: Any) -> Any:
    """
    Convert a document id string to the value stored in ``_id``.

    Valid ObjectId strings become ObjectId; any other id is used as is.
    """
    if isinstance(document_id, ObjectId):
        return document_id
    if isinstance(document_id, str) and ObjectId.is_valid(document_id):
        return ObjectId(document_id)
    return document_id


def shape_document(doc: Mapping[str, Any] | None) -> dict[str, Any] | None:
    """
    Turn a raw MongoDB document into ``{"documentId": ..., **fields}``.

    Returns None when ``doc`` is None.
    """
    if doc is None:
        return None
    fields = {key: value for key, value in doc.items() if key != MONGO_ID_KEY}
    return {DOCUMENT_ID_KEY: str(doc[MONGO_ID_KEY]), **fields}
