"""Comparison, set and range operators for MongoDB query compilation."""

from __future__ import annotations

from typing import Any

from ...exceptions import MongoQueryError
from ...operators import ConditionOperator

_MONGO_OP_MAP: dict[ConditionOperator, str] = {
    ConditionOperator.EQUALS: "$eq",
    ConditionOperator.GREATER_THAN: "$gt",
    ConditionOperator.GREATER_THAN_EQUAL: "$gte",
    ConditionOperator.LESS_THAN: "$lt",
    ConditionOperator.LESS_THAN_EQUAL: "$lte",
}


def compile_standard(field: str, op: str, val: Any) -> dict[str, Any] | None:
    """Compile comparison operators to MongoDB query fragments."""
    try:
        cond_op = ConditionOperator(op)
    except ValueError:
        return None

    mongo_op = _MONGO_OP_MAP.get(cond_op)
    if mongo_op:
        return {field: {mongo_op: val}}

    if cond_op == ConditionOperator.IN:
        if isinstance(val, (list, tuple, set, frozenset)):
            return {field: {"$in": list(val)}}
        return {field: {"$in": [val]}}

    if cond_op == ConditionOperator.BETWEEN:
        lo, hi = _validate_range_operand(val)
        return {field: {"$gte": lo, "$lte": hi}}

    return None


def _validate_range_operand(val: Any) -> tuple[Any, Any]:
    if not isinstance(val, (list, tuple)) or len(val) != 2:
        raise MongoQueryError("between requires a list or tuple of two values")
    return val[0], val[1]
