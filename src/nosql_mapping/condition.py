"""Condition value objects produced by query derivation.

A ``Condition`` is a single predicate on one persisted field.  Conditions
compose with ``&``, ``|`` and ``~`` into ``CompositeCondition`` trees, and
serialise to the ``{"op", "attr", "val"}`` / ``{"op", "conditions"}`` AST
consumed by :class:`~nosql_mapping.mongo.query_builder.MongoQueryBuilder`.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Union

from .operators import ConditionOperator, Direction

_AND = "and"
_OR = "or"


class _Composable:
    def __and__(self, other: AnyCondition) -> CompositeCondition:
        return CompositeCondition.of(_AND, self, other)  # type: ignore[arg-type]

    def __or__(self, other: AnyCondition) -> CompositeCondition:
        return CompositeCondition.of(_OR, self, other)  # type: ignore[arg-type]


@dataclass(frozen=True)
class Condition(_Composable):
    """One predicate: persisted field, operator and (converted) value."""

    field: str
    operator: ConditionOperator
    value: Any
    negated: bool = False

    def __invert__(self) -> Condition:
        return replace(self, negated=not self.negated)

    def to_dict(self) -> dict[str, Any]:
        leaf = {
            "op": self.operator.value,
            "attr": self.field,
            "val": self.value,
        }
        if self.negated:
            return {"op": "not", "conditions": [leaf]}
        return leaf


@dataclass(frozen=True)
class CompositeCondition(_Composable):
    """Logical AND / OR over child conditions."""

    op: str
    conditions: tuple[AnyCondition, ...]

    @classmethod
    def of(cls, op: str, *conditions: AnyCondition) -> CompositeCondition:
        """Build a composite, flattening children that use the same operator."""
        if op not in (_AND, _OR):
            raise ValueError(f"Unsupported logical operator: {op!r}")
        flat: list[AnyCondition] = []
        for c in conditions:
            if isinstance(c, CompositeCondition) and c.op == op:
                flat.extend(c.conditions)
            else:
                flat.append(c)
        return cls(op, tuple(flat))

    def to_dict(self) -> dict[str, Any]:
        return {
            "op": self.op,
            "conditions": [c.to_dict() for c in self.conditions],
        }


AnyCondition = Union[Condition, CompositeCondition]


def and_(*conditions: AnyCondition) -> AnyCondition:
    """Conjunction; a single condition is returned as-is."""
    if len(conditions) == 1:
        return conditions[0]
    return CompositeCondition.of(_AND, *conditions)


def or_(*conditions: AnyCondition) -> AnyCondition:
    """Disjunction; a single condition is returned as-is."""
    if len(conditions) == 1:
        return conditions[0]
    return CompositeCondition.of(_OR, *conditions)


@dataclass(frozen=True)
class Sort:
    """Ordering on one persisted field."""

    field: str
    direction: Direction = Direction.ASC
