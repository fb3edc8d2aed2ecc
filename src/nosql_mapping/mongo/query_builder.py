"""Compile condition trees to MongoDB filter and sort documents."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any

from ..condition import Sort
from ..exceptions import MongoQueryError
from ..operators import Direction
from .operators import compile_standard, compile_string

LeafCompiler = Callable[[str, str, Any], "dict[str, Any] | None"]

#: Tried in order; the first non-``None`` fragment wins.
LEAF_COMPILERS: tuple[LeafCompiler, ...] = (compile_standard, compile_string)

_LOGICAL = {"and": "$and", "or": "$or"}


def compile_leaf(node: dict[str, Any]) -> dict[str, Any]:
    """``{"op", "attr", "val"}`` -> ``{attr: {<mongo op>: val}}``."""
    attr = node.get("attr")
    if not attr:
        raise MongoQueryError(f"Condition missing 'attr': {node}")
    op = node.get("op", "")
    val = node.get("val")
    for compiler in LEAF_COMPILERS:
        fragment = compiler(attr, op, val)
        if fragment is not None:
            return fragment
    raise MongoQueryError(f"Unsupported operator {op!r} on '{attr}'")


def compile_tree(node: dict[str, Any]) -> dict[str, Any]:
    if not isinstance(node, dict):
        raise MongoQueryError("Condition node must be a dict")
    op = str(node.get("op", "")).lower()
    children = node.get("conditions") or []

    if op in _LOGICAL:
        compiled = [compile_tree(child) for child in children]
        return {_LOGICAL[op]: compiled} if compiled else {}
    if op == "not":
        # $nor over a single branch negates it, including missing fields.
        inner = compile_tree(children[0]) if children else {}
        return {"$nor": [inner]} if inner else {}
    return compile_leaf(node)


class MongoQueryBuilder:
    """Turns :class:`Condition` trees and :class:`Sort` lists into pymongo args."""

    def build_match(self, condition: Any) -> dict[str, Any]:
        """
        Filter document for ``find()`` / ``delete_many()``.

        Accepts a condition (anything with ``to_dict()``), its AST dict, or
        ``None`` for "match everything".
        """
        if condition is None:
            return {}
        if isinstance(condition, dict):
            ast = condition
        elif hasattr(condition, "to_dict"):
            ast = condition.to_dict()
        else:
            raise MongoQueryError(
                f"Cannot build a filter from {type(condition).__name__}"
            )
        return compile_tree(ast) if ast else {}

    def build_sort(self, sorts: Sequence[Sort] | None) -> list[tuple[str, int]]:
        """``[(field, 1 | -1), ...]`` for ``Cursor.sort``."""
        return [
            (s.field, -1 if s.direction is Direction.DESC else 1) for s in sorts or ()
        ]
