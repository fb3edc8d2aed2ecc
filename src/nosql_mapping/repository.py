"""Repositories with query methods derived from their names.

Any attribute named ``find_by_*``, ``count_by_*``, ``exists_by_*`` or
``delete_by_*`` (or the camelCase equivalents) is answered with a query
built from the name::

    people = DocumentRepository(Person, template)
    people.find_by_name_and_age_greater_than("Ada", 30)
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from .method_query import MethodQuery, QueryAction
from .query import DocumentQuery, MethodQueryTranslator

if TYPE_CHECKING:
    from .mapping import ClassMapping
    from .query import TranslatedQuery
    from .reactive.observable import Observable
    from .reactive.template import ReactiveDocumentTemplate
    from .template import DocumentTemplate

logger = logging.getLogger("nosql_mapping.repository")

T = TypeVar("T")


class _DerivedQueries(ABC, Generic[T]):
    """Shared method-name dispatch for sync and reactive repositories."""

    def __init__(
        self,
        entity_cls: type[T],
        template: DocumentTemplate,
        translator: MethodQueryTranslator | None = None,
    ) -> None:
        self.entity_cls = entity_cls
        self._mapping: ClassMapping = template.mappings.get(entity_cls)
        self._converters = template.converters
        self._translator = translator or MethodQueryTranslator()

    @property
    def mapping(self) -> ClassMapping:
        return self._mapping

    def _all(self) -> DocumentQuery:
        return DocumentQuery(collection=self._mapping.collection)

    def _translate(self, method_name: str, args: tuple[Any, ...]) -> TranslatedQuery:
        return self._translator.translate(
            method_name, args, self._mapping, self._converters
        )

    @abstractmethod
    def _execute(self, translated: TranslatedQuery) -> Any:
        """Run a derived query and shape its result for the caller."""

    def __getattr__(self, name: str) -> Callable[..., Any]:
        if name.startswith("_") or not MethodQuery.is_query_method(name):
            raise AttributeError(
                f"{type(self).__name__!r} object has no attribute {name!r}"
            )
        # Fail on malformed names at lookup, not at first call.
        MethodQuery.parse(name)

        def derived(*args: Any) -> Any:
            return self._execute(self._translate(name, args))

        derived.__name__ = name
        return derived


class DocumentRepository(_DerivedQueries[T]):
    """Blocking repository over a :class:`DocumentTemplate`."""

    def __init__(
        self,
        entity_cls: type[T],
        template: DocumentTemplate,
        *,
        translator: MethodQueryTranslator | None = None,
    ) -> None:
        super().__init__(entity_cls, template, translator)
        self._template = template

    def save(self, entity: T) -> T:
        """Insert a new entity, or replace the stored one with the same id."""
        entity_id = getattr(entity, self._mapping.id_field.name)
        if entity_id is not None and self.exists_by_id(entity_id):
            return self._template.update(entity)
        return self._template.insert(entity)

    def save_all(self, entities: Iterable[T]) -> list[T]:
        return [self.save(e) for e in entities]

    def find_by_id(self, entity_id: Any) -> T | None:
        return self._template.find(self.entity_cls, entity_id)

    def exists_by_id(self, entity_id: Any) -> bool:
        return self.find_by_id(entity_id) is not None

    def delete_by_id(self, entity_id: Any) -> None:
        self._template.delete_by_id(self.entity_cls, entity_id)

    def find_all(self) -> list[T]:
        return list(self._template.select(self._all()))

    def count(self) -> int:
        return self._template.count(self.entity_cls)

    def _execute(self, translated: TranslatedQuery) -> Any:
        action = translated.action
        logger.debug("%s %s", action.value, self._mapping.collection)
        if action is QueryAction.FIND:
            return list(self._template.select(translated.query))
        if action is QueryAction.COUNT:
            return self._template.count_matching(translated.query)
        if action is QueryAction.EXISTS:
            return self._template.count_matching(translated.query) > 0
        return self._template.delete(translated.as_delete())


class ReactiveDocumentRepository(_DerivedQueries[T]):
    """Repository whose every result is an :class:`Observable`."""

    def __init__(
        self,
        entity_cls: type[T],
        template: ReactiveDocumentTemplate,
        *,
        translator: MethodQueryTranslator | None = None,
    ) -> None:
        super().__init__(entity_cls, template.template, translator)
        self._template = template
        # Multi-step operations (save) run as one blocking unit off the loop.
        self._blocking = DocumentRepository(
            entity_cls, template.template, translator=self._translator
        )

    def save(self, entity: T) -> Observable[T]:
        return self._template.call(self._blocking.save, entity)

    def save_all(self, entities: Iterable[T]) -> Observable[T]:
        items = list(entities)
        return self._template.stream(lambda: self._blocking.save_all(items))

    def find_by_id(self, entity_id: Any) -> Observable[T]:
        return self._template.find(self.entity_cls, entity_id)

    def exists_by_id(self, entity_id: Any) -> Observable[bool]:
        return self._template.call(self._blocking.exists_by_id, entity_id)

    def delete_by_id(self, entity_id: Any) -> Observable[None]:
        return self._template.delete_by_id(self.entity_cls, entity_id)

    def find_all(self) -> Observable[T]:
        return self._template.select(self._all())

    def count(self) -> Observable[int]:
        return self._template.count(self.entity_cls)

    def _execute(self, translated: TranslatedQuery) -> Any:
        action = translated.action
        if action is QueryAction.FIND:
            return self._template.select(translated.query)
        if action is QueryAction.COUNT:
            return self._template.count_matching(translated.query)
        if action is QueryAction.EXISTS:
            return self._template.count_matching(translated.query).map(
                lambda n: n > 0
            )
        return self._template.delete(translated.as_delete())
