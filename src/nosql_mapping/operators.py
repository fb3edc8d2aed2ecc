"""Condition operators and the method-name keywords that select them."""

from __future__ import annotations

from enum import Enum


class ConditionOperator(str, Enum):
    """Operators a derived query condition can carry."""

    # Comparison
    EQUALS = "="
    GREATER_THAN = ">"
    GREATER_THAN_EQUAL = ">="
    LESS_THAN = "<"
    LESS_THAN_EQUAL = "<="
    IN = "in"
    BETWEEN = "between"

    # String matching
    LIKE = "like"
    STARTS_WITH = "startswith"
    ENDS_WITH = "endswith"
    CONTAINS = "contains"


class Direction(str, Enum):
    """Sort direction."""

    ASC = "asc"
    DESC = "desc"


_BASE_KEYWORDS: dict[str, ConditionOperator] = {
    "Equals": ConditionOperator.EQUALS,
    "GreaterThan": ConditionOperator.GREATER_THAN,
    "GreaterThanEqual": ConditionOperator.GREATER_THAN_EQUAL,
    "LessThan": ConditionOperator.LESS_THAN,
    "LessThanEqual": ConditionOperator.LESS_THAN_EQUAL,
    "Like": ConditionOperator.LIKE,
    "StartsWith": ConditionOperator.STARTS_WITH,
    "EndsWith": ConditionOperator.ENDS_WITH,
    "Contains": ConditionOperator.CONTAINS,
    "Between": ConditionOperator.BETWEEN,
    "In": ConditionOperator.IN,
}


def _build_keywords() -> tuple[tuple[str, ConditionOperator, bool], ...]:
    entries: list[tuple[str, ConditionOperator, bool]] = []
    for keyword, operator in _BASE_KEYWORDS.items():
        entries.append((keyword, operator, False))
        entries.append((f"Not{keyword}", operator, True))
    # A bare trailing ``Not`` is "not equals".
    entries.append(("Not", ConditionOperator.EQUALS, True))
    # Longest suffix first: GreaterThanEqual before GreaterThan, NotIn before In.
    entries.sort(key=lambda entry: len(entry[0]), reverse=True)
    return tuple(entries)


#: ``(suffix, operator, negated)`` triples, longest suffix first.
OPERATOR_KEYWORDS: tuple[tuple[str, ConditionOperator, bool], ...] = _build_keywords()

#: Operators whose argument is a collection rather than a scalar.
COLLECTION_OPERATORS: frozenset[ConditionOperator] = frozenset(
    {ConditionOperator.IN, ConditionOperator.BETWEEN}
)
