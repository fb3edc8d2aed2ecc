"""String operators -> $regex."""

from __future__ import annotations

import re
from typing import Any

from ...exceptions import MongoQueryError
from ...operators import ConditionOperator

_STRING_OPERATORS = frozenset(
    {
        ConditionOperator.LIKE,
        ConditionOperator.STARTS_WITH,
        ConditionOperator.ENDS_WITH,
        ConditionOperator.CONTAINS,
    }
)


def _like_to_regex(val: str) -> str:
    """SQL LIKE: ``%`` = any run, ``_`` = single char; everything else literal."""
    parts = []
    for ch in val:
        if ch == "%":
            parts.append(".*")
        elif ch == "_":
            parts.append(".")
        else:
            parts.append(re.escape(ch))
    return "^" + "".join(parts) + "$"


def compile_string(field: str, op: str, val: Any) -> dict[str, Any] | None:
    """Compile string operators to MongoDB $regex. Returns None if not a string op."""
    try:
        cond_op = ConditionOperator(op)
    except ValueError:
        return None
    if cond_op not in _STRING_OPERATORS:
        return None
    if not isinstance(val, str):
        raise MongoQueryError(f"String operator {op} requires string value")
    if cond_op == ConditionOperator.CONTAINS:
        return {field: {"$regex": re.escape(val)}}
    if cond_op == ConditionOperator.STARTS_WITH:
        return {field: {"$regex": "^" + re.escape(val)}}
    if cond_op == ConditionOperator.ENDS_WITH:
        return {field: {"$regex": re.escape(val) + "$"}}
    return {field: {"$regex": _like_to_regex(val)}}
