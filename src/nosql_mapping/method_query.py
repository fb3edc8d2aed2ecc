"""Parse repository method names into condition tokens.

Both snake_case and camelCase names are accepted::

    find_by_name_and_age_greater_than_order_by_name_desc
    findByNameAndAgeGreaterThanOrderByNameDesc

Conditions are grouped Or-of-Ands: ``a_and_b_or_c`` reads as
``(a AND b) OR c``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache

from .exceptions import MethodQueryError
from .operators import Direction
from .tokens import camelize


class QueryAction(str, Enum):
    """What a derived method does with the matched documents."""

    FIND = "find"
    DELETE = "delete"
    COUNT = "count"
    EXISTS = "exists"


_ACTIONS = "|".join(a.value for a in QueryAction)
_SNAKE_PREFIX = re.compile(rf"^({_ACTIONS})_by_(.+)$")
_CAMEL_PREFIX = re.compile(rf"^({_ACTIONS})By([A-Z].*)$")
_CAMEL_OR = re.compile(r"(?<=[a-z0-9])Or(?=[A-Z])")
_CAMEL_AND = re.compile(r"(?<=[a-z0-9])And(?=[A-Z])")
_CAMEL_ORDER_BY = re.compile(r"(?<=[a-z0-9])OrderBy(?=[A-Z])")
_DIRECTED = re.compile(r"(.+?)(Asc|Desc)(?=[A-Z]|$)")


@dataclass(frozen=True)
class OrderToken:
    """One ``OrderBy`` entry: field segment and direction."""

    field: str
    direction: Direction = Direction.ASC


@dataclass(frozen=True)
class MethodQuery:
    """Structure of a derived-query method name."""

    method_name: str
    action: QueryAction
    groups: tuple[tuple[str, ...], ...]
    order_by: tuple[OrderToken, ...] = ()

    @property
    def tokens(self) -> tuple[str, ...]:
        """Condition tokens in argument order."""
        return tuple(t for group in self.groups for t in group)

    @classmethod
    def parse(cls, method_name: str) -> MethodQuery:
        return _parse(method_name)

    @staticmethod
    def is_query_method(name: str) -> bool:
        return bool(_SNAKE_PREFIX.match(name) or _CAMEL_PREFIX.match(name))


@lru_cache(maxsize=512)
def _parse(method_name: str) -> MethodQuery:
    snake = _SNAKE_PREFIX.match(method_name)
    if snake:
        action, body = snake.groups()
        conditions, _, ordering = body.partition("_order_by_")
        groups = [
            [camelize(t) for t in group.split("_and_")]
            for group in conditions.split("_or_")
        ]
        order_parts = [camelize(p) for p in ordering.split("_and_")] if ordering else []
    else:
        camel = _CAMEL_PREFIX.match(method_name)
        if camel is None:
            raise MethodQueryError(
                method_name,
                f"expected a name starting with one of "
                f"{', '.join(a.value + '_by_' for a in QueryAction)}",
            )
        action, body = camel.groups()
        conditions, *rest = _CAMEL_ORDER_BY.split(body, maxsplit=1)
        groups = [_CAMEL_AND.split(group) for group in _CAMEL_OR.split(conditions)]
        order_parts = rest

    if any(not t for group in groups for t in group):
        raise MethodQueryError(method_name, "empty condition between connectors")

    order_by: list[OrderToken] = []
    for part in order_parts:
        order_by.extend(_parse_order(method_name, part))

    return MethodQuery(
        method_name=method_name,
        action=QueryAction(action),
        groups=tuple(tuple(group) for group in groups),
        order_by=tuple(order_by),
    )


def _parse_order(method_name: str, part: str) -> list[OrderToken]:
    tokens: list[OrderToken] = []
    pos = 0
    for m in _DIRECTED.finditer(part):
        if m.start() != pos:
            break
        direction = Direction.DESC if m.group(2) == "Desc" else Direction.ASC
        tokens.append(OrderToken(m.group(1), direction))
        pos = m.end()
    tail = part[pos:]
    if tail:
        tokens.append(OrderToken(tail))
    if not tokens:
        raise MethodQueryError(method_name, "empty OrderBy clause")
    return tokens
