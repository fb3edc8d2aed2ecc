"""Reactive document template: the blocking template behind Observables."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING, Any, TypeVar

from .observable import Observable

if TYPE_CHECKING:
    from concurrent.futures import Executor

    from ..query import DocumentDeleteQuery, DocumentQuery
    from ..template import DocumentTemplate

logger = logging.getLogger("nosql_mapping.reactive")

T = TypeVar("T")


class ReactiveDocumentTemplate:
    """
    Every :class:`DocumentTemplate` operation as an :class:`Observable`.

    Blocking calls run on *executor* (the event loop's default executor when
    ``None``) only once the observable is consumed; exceptions raised by the
    template surface where the observable is awaited or iterated.
    """

    def __init__(
        self,
        template: DocumentTemplate,
        *,
        executor: Executor | None = None,
    ) -> None:
        self._template = template
        self._executor = executor

    @property
    def template(self) -> DocumentTemplate:
        return self._template

    def call(self, fn: Callable[..., Any], *args: Any) -> Observable[Any]:
        """Run any blocking callable the way template operations run."""
        return Observable.from_call(fn, *args, executor=self._executor)

    def stream(self, factory: Callable[[], Iterable[T]]) -> Observable[T]:
        """Stream a blocking iterable the way ``select`` does."""
        return Observable.from_iterable(factory, executor=self._executor)

    def insert(self, entity: T) -> Observable[T]:
        return self.call(self._template.insert, entity)

    def insert_all(self, entities: Iterable[T]) -> Observable[T]:
        items = list(entities)
        return self.stream(lambda: self._template.insert_all(items))

    def update(self, entity: T) -> Observable[T]:
        return self.call(self._template.update, entity)

    def update_all(self, entities: Iterable[T]) -> Observable[T]:
        items = list(entities)
        return self.stream(lambda: self._template.update_all(items))

    def delete(self, query: DocumentDeleteQuery) -> Observable[int]:
        return self.call(self._template.delete, query)

    def delete_by_id(self, entity_cls: type[Any], entity_id: Any) -> Observable[None]:
        return self.call(self._template.delete_by_id, entity_cls, entity_id)

    def select(self, query: DocumentQuery) -> Observable[Any]:
        return self.stream(lambda: self._template.select(query))

    def single_result(self, query: DocumentQuery) -> Observable[Any]:
        return self.call(self._template.single_result, query)

    def find(self, entity_cls: type[T], entity_id: Any) -> Observable[T]:
        return self.call(self._template.find, entity_cls, entity_id)

    def count(self, target: type[Any] | str) -> Observable[int]:
        return self.call(self._template.count, target)

    def count_matching(self, query: DocumentQuery) -> Observable[int]:
        return self.call(self._template.count_matching, query)


def reactive_template(
    template: DocumentTemplate,
    *,
    executor: Executor | None = None,
) -> ReactiveDocumentTemplate:
    """Wrap a blocking template for async callers."""
    if template is None:
        raise ValueError("template parameter is required")
    logger.debug("Wrapping %s as a reactive template", type(template).__name__)
    return ReactiveDocumentTemplate(template, executor=executor)
