"""
Query conditions.

A condition is a ``(field, operator, value)`` triple using the comparison
operators below. Conditions are translated into a MongoDB filter and
combined with AND.

``!=`` and ``not-in`` only match documents that have the field: a missing
field never satisfies them.

Usage:
    from mdb_docs.documents.conditions import QueryCondition, build_filter

    build_filter([("age", ">=", 18), ("status", "in", ["active", "trial"])])
    # {"$and": [{"age": {"$gte": 18}}, {"status": {"$in": ["active", "trial"]}}]}
"""

from collections.abc import Iterable, Mapping
from typing import Any, NamedTuple

from pymongo import ASCENDING, DESCENDING

from ..constants import DOCUMENT_ID_KEY, MONGO_ID_KEY, ORDER_ASCENDING, ORDER_DESCENDING
from ..exceptions import QueryConditionError
from .normalize import to_object_id


class QueryCondition(NamedTuple):
    """A single ``field operator value`` filter."""

    field: str
    op: str
    value: Any


def _require_list(op: str, value: Any) -> list[Any]:
    if isinstance(value, (str, bytes, Mapping)) or not isinstance(value, Iterable):
        raise QueryConditionError(
            f"Operator '{op}' requires a list of values", condition=(op, value)
        )
    return list(value)


_OPERATORS = {
    "<": lambda v: {"$lt": v},
    "<=": lambda v: {"$lte": v},
    "==": lambda v: {"$eq": v},
    "!=": lambda v: {"$ne": v, "$exists": True},
    ">=": lambda v: {"$gte": v},
    ">": lambda v: {"$gt": v},
    "array-contains": lambda v: {"$elemMatch": {"$eq": v}},
    "in": lambda v: {"$in": _require_list("in", v)},
    "not-in": lambda v: {"$nin": _require_list("not-in", v), "$exists": True},
    "array-contains-any": lambda v: {"$in": _require_list("array-contains-any", v)},
}

SUPPORTED_OPERATORS = tuple(_OPERATORS)

_ORDER_DIRECTIONS = {ORDER_ASCENDING: ASCENDING, ORDER_DESCENDING: DESCENDING}


def _is_single_condition(value: Any) -> bool:
    if isinstance(value, QueryCondition):
        return True
    return (
        isinstance(value, (tuple, list))
        and len(value) == 3
        and isinstance(value[0], str)
        and isinstance(value[1], str)
    )


def _storage_field(field: str) -> str:
    return MONGO_ID_KEY if field == DOCUMENT_ID_KEY else field


def to_condition(value: Any) -> QueryCondition:
    """
    Coerce a triple into a QueryCondition, checking field and operator.

    Raises:
        QueryConditionError: If the value is not a valid condition
    """
    if not _is_single_condition(value):
        raise QueryConditionError(
            "A condition must be a (field, operator, value) triple", condition=value
        )
    field, op, cond_value = value
    if not field:
        raise QueryConditionError("Condition field must not be empty", condition=value)
    if op not in _OPERATORS:
        raise QueryConditionError(
            f"Unsupported operator '{op}'. Supported: {', '.join(SUPPORTED_OPERATORS)}",
            condition=value,
        )
    return QueryCondition(field, op, cond_value)


def normalize_conditions(where: Any) -> list[QueryCondition]:
    """
    Normalize zero, one or many conditions into a list.

    ``where`` may be None, a single triple, or a sequence of triples.
    """
    if where is None:
        return []
    if _is_single_condition(where):
        return [to_condition(where)]
    if isinstance(where, (str, bytes, Mapping)) or not isinstance(where, Iterable):
        raise QueryConditionError(
            "where must be a condition triple or a list of them", condition=where
        )
    return [to_condition(item) for item in where]


def condition_to_filter(condition: QueryCondition) -> dict[str, Any]:
    """Translate one condition into a MongoDB filter clause."""
    field = _storage_field(condition.field)
    value = condition.value
    if field == MONGO_ID_KEY:
        if isinstance(value, (list, tuple, set)):
            value = [to_object_id(v) for v in value]
        else:
            value = to_object_id(value)
    return {field: _OPERATORS[condition.op](value)}


def build_filter(where: Any) -> dict[str, Any]:
    """
    Build a MongoDB filter from zero, one or many conditions.

    Returns:
        ``{}`` for no conditions, the clause itself for one, ``$and`` otherwise
    """
    clauses = [condition_to_filter(c) for c in normalize_conditions(where)]
    if not clauses:
        return {}
    if len(clauses) == 1:
        return clauses[0]
    return {"$and": clauses}


_DIRECTION_WORDS = ("asc", "ascending", "desc", "descending")


def _is_pair(order_by: Any) -> bool:
    if not (
        isinstance(order_by, (tuple, list))
        and len(order_by) == 2
        and isinstance(order_by[0], str)
        and isinstance(order_by[1], str)
    ):
        return False
    # a 2-tuple of strings is always (field, direction); a list only when
    # its second item is a valid direction
    return isinstance(order_by, tuple) or order_by[1] in _ORDER_DIRECTIONS


def _sort_key(item: Any) -> tuple[str, int]:
    if isinstance(item, str):
        if item.lower() in _DIRECTION_WORDS:
            raise QueryConditionError(
                f"'{item}' is a sort direction, not a field. "
                f"Pass (field, '{ORDER_ASCENDING}' | '{ORDER_DESCENDING}') as a tuple",
                condition=item,
            )
        return _storage_field(item), ASCENDING
    if isinstance(item, (tuple, list)) and len(item) == 2 and isinstance(item[0], str):
        field, direction = item
        if direction not in _ORDER_DIRECTIONS:
            raise QueryConditionError(
                f"Order direction must be '{ORDER_ASCENDING}' or '{ORDER_DESCENDING}'",
                condition=item,
            )
        return _storage_field(field), _ORDER_DIRECTIONS[direction]
    raise QueryConditionError(
        "order_by must be a field name or a (field, direction) pair", condition=item
    )


def build_sort(order_by: Any) -> list[tuple[str, int]] | None:
    """
    Build a pymongo sort specification.

    ``order_by`` may be None, a field name, a ``(field, "asc" | "desc")``
    pair, or a sequence of those. Directions are case-sensitive; anything
    else raises QueryConditionError.
    """
    if order_by is None:
        return None
    if isinstance(order_by, str) or _is_pair(order_by):
        return [_sort_key(order_by)]
    if isinstance(order_by, (tuple, list)):
        return [_sort_key(item) for item in order_by]
    raise QueryConditionError(
        "order_by must be a field name or a (field, direction) pair", condition=order_by
    )
