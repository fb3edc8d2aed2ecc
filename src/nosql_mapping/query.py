"""Document queries and their derivation from repository method names."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from .condition import AnyCondition, Sort, and_, or_
from .exceptions import MethodQueryError
from .method_query import MethodQuery, QueryAction
from .processor import TokenProcessor, default_processor

if TYPE_CHECKING:
    from .converters import Converters
    from .mapping import ClassMapping

logger = logging.getLogger("nosql_mapping.query")


@dataclass(frozen=True)
class DocumentQuery:
    """
    A select over one collection.

    Attributes:
        collection: Target collection name.
        condition: Filter tree; ``None`` selects every document.
        sorts: Ordering, applied in list order.
        skip: Number of documents to skip.
        limit: Maximum number of documents; ``None`` means no limit.
    """

    collection: str
    condition: AnyCondition | None = None
    sorts: tuple[Sort, ...] = field(default_factory=tuple)
    skip: int = 0
    limit: int | None = None


@dataclass(frozen=True)
class DocumentDeleteQuery:
    """A delete over one collection; ``condition=None`` deletes everything."""

    collection: str
    condition: AnyCondition | None = None


@dataclass(frozen=True)
class TranslatedQuery:
    """Result of deriving a query from a method call."""

    action: QueryAction
    query: DocumentQuery

    def as_delete(self) -> DocumentDeleteQuery:
        return DocumentDeleteQuery(self.query.collection, self.query.condition)


class MethodQueryTranslator:
    """
    Derive a :class:`DocumentQuery` from a method name and its arguments.

    Each condition token is handed to the token processor together with
    the position of the argument it consumes; the resulting conditions are
    combined Or-of-Ands.
    """

    def __init__(self, processor: TokenProcessor | None = None) -> None:
        self._processor = processor or default_processor

    def translate(
        self,
        method_name: str,
        args: Sequence[Any],
        mapping: ClassMapping,
        converters: Converters,
    ) -> TranslatedQuery:
        parsed = MethodQuery.parse(method_name)
        expected = len(parsed.tokens)
        if len(args) != expected:
            raise MethodQueryError(
                method_name,
                f"expected {expected} argument(s), got {len(args)}",
            )

        index = 0
        groups: list[AnyCondition] = []
        for group in parsed.groups:
            conditions: list[AnyCondition] = []
            for token in group:
                conditions.append(
                    self._processor.process(
                        token, index, args, method_name, mapping, converters
                    )
                )
                index += 1
            groups.append(and_(*conditions))

        sorts = tuple(
            Sort(
                mapping.get_field(o.field, method_name=method_name).persisted_name,
                o.direction,
            )
            for o in parsed.order_by
        )
        query = DocumentQuery(
            collection=mapping.collection,
            condition=or_(*groups),
            sorts=sorts,
            limit=1 if parsed.action is QueryAction.EXISTS else None,
        )
        logger.debug(
            "Derived %s query on %s from %s: %s",
            parsed.action.value,
            mapping.collection,
            method_name,
            query.condition.to_dict() if query.condition is not None else None,
        )
        return TranslatedQuery(parsed.action, query)
