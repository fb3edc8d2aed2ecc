"""Cold async stream over a blocking call.

An ``Observable`` does nothing until it is consumed.  It can be consumed
as a stream (``async for``) or as a single value (``await``)::

    async for person in template.select(query):
        ...

    person = await template.find(Person, "p1")
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator, Callable, Generator, Iterable
from contextlib import aclosing
from typing import TYPE_CHECKING, Any, Generic, TypeVar

if TYPE_CHECKING:
    from concurrent.futures import Executor

T = TypeVar("T")
R = TypeVar("R")

_DONE = object()


class Observable(Generic[T]):
    """Lazy, re-subscribable async sequence of values."""

    def __init__(self, source: Callable[[], AsyncIterator[T]]) -> None:
        self._source = source

    # -- construction --------------------------------------------------------

    @classmethod
    def from_call(
        cls,
        fn: Callable[..., Any],
        *args: Any,
        executor: Executor | None = None,
    ) -> Observable[Any]:
        """
        Emit the result of ``fn(*args)`` run on *executor*.

        A ``None`` result completes the observable without emitting.
        """

        async def _source() -> AsyncIterator[Any]:
            loop = asyncio.get_running_loop()
            result = await loop.run_in_executor(executor, lambda: fn(*args))
            if result is not None:
                yield result

        return cls(_source)

    @classmethod
    def from_iterable(
        cls,
        factory: Callable[[], Iterable[T]],
        *,
        executor: Executor | None = None,
    ) -> Observable[T]:
        """
        Stream the items of ``factory()``, pulling each one on *executor*.

        Stopping early closes the underlying iterator.
        """

        async def _source() -> AsyncIterator[T]:
            loop = asyncio.get_running_loop()
            iterator = await loop.run_in_executor(executor, lambda: iter(factory()))
            in_flight = False
            try:
                while True:
                    in_flight = True
                    item = await loop.run_in_executor(executor, next, iterator, _DONE)
                    in_flight = False
                    if item is _DONE:
                        return
                    yield item
            finally:
                close = getattr(iterator, "close", None)
                # A cancelled pull may still be running in the executor.
                if close is not None and not in_flight:
                    await loop.run_in_executor(executor, close)

        return cls(_source)

    @classmethod
    def just(cls, *values: T) -> Observable[T]:
        async def _source() -> AsyncIterator[T]:
            for v in values:
                yield v

        return cls(_source)

    # -- consumption ---------------------------------------------------------

    def __aiter__(self) -> AsyncIterator[T]:
        return self._source()

    def __await__(self) -> Generator[Any, None, T | None]:
        return self.first().__await__()

    async def first(self) -> T | None:
        """First emitted value, or ``None`` when nothing is emitted."""
        async with aclosing(self._source()) as stream:  # type: ignore[type-var]
            async for value in stream:
                return value
        return None

    async def to_list(self) -> list[T]:
        return [value async for value in self._source()]

    # -- operators -----------------------------------------------------------

    def map(self, fn: Callable[[T], R]) -> Observable[R]:
        def _source() -> AsyncIterator[R]:
            return _mapped(self._source(), fn)

        return Observable(_source)


async def _mapped(
    source: AsyncIterator[T], fn: Callable[[T], R]
) -> AsyncIterator[R]:
    async with aclosing(source) as stream:  # type: ignore[type-var]
        async for value in stream:
            yield fn(value)
