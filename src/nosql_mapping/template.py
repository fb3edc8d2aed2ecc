"""Synchronous document template over MongoDB."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable, Iterator
from typing import TYPE_CHECKING, Any, TypeVar

from bson.errors import BSONError
from pymongo.errors import PyMongoError

from .converters import Converters, default_converters
from .exceptions import MongoPersistenceError, NonUniqueResultError
from .mapping import ClassMapping, ClassMappings
from .mongo.mapper import DocumentEntityMapper
from .mongo.query_builder import MongoQueryBuilder

if TYPE_CHECKING:
    from pydantic import BaseModel
    from pymongo.collection import Collection
    from pymongo.database import Database

    from .query import DocumentDeleteQuery, DocumentQuery

logger = logging.getLogger("nosql_mapping.template")

T = TypeVar("T", bound="BaseModel")

# Unencodable values surface from bson, not as PyMongoError.
_DRIVER_ERRORS = (PyMongoError, BSONError)


class DocumentTemplate(ABC):
    """Entity-level CRUD and query operations on a document store."""

    def __init__(
        self,
        *,
        mappings: ClassMappings | None = None,
        converters: Converters | None = None,
    ) -> None:
        self.mappings = mappings or ClassMappings()
        self.converters = converters or default_converters()

    @abstractmethod
    def insert(self, entity: T) -> T: ...

    def insert_all(self, entities: Iterable[T]) -> list[T]:
        return [self.insert(e) for e in entities]

    @abstractmethod
    def update(self, entity: T) -> T: ...

    def update_all(self, entities: Iterable[T]) -> list[T]:
        return [self.update(e) for e in entities]

    @abstractmethod
    def delete(self, query: DocumentDeleteQuery) -> int:
        """Delete every document the query matches; return the count."""

    @abstractmethod
    def delete_by_id(self, entity_cls: type[Any], entity_id: Any) -> None: ...

    @abstractmethod
    def select(self, query: DocumentQuery) -> Iterator[Any]:
        """Lazily yield entities matching the query."""

    def single_result(self, query: DocumentQuery) -> Any | None:
        """
        Return the one entity matching *query*, or ``None``.

        Raises :class:`NonUniqueResultError` when more than one matches.
        """
        results = self.select(query)
        try:
            first = next(results, None)
            if first is not None and next(results, None) is not None:
                raise NonUniqueResultError(
                    f"Query on '{query.collection}' returned more than one result"
                )
            return first
        finally:
            close = getattr(results, "close", None)
            if close is not None:
                close()

    @abstractmethod
    def find(self, entity_cls: type[T], entity_id: Any) -> T | None: ...

    @abstractmethod
    def count(self, target: type[Any] | str) -> int:
        """Number of documents in an entity's collection (or a named one)."""

    @abstractmethod
    def count_matching(self, query: DocumentQuery) -> int: ...


class MongoDocumentTemplate(DocumentTemplate):
    """:class:`DocumentTemplate` over a PyMongo ``Database``."""

    def __init__(
        self,
        database: Database[Any],
        *,
        mappings: ClassMappings | None = None,
        converters: Converters | None = None,
        query_builder: MongoQueryBuilder | None = None,
    ) -> None:
        super().__init__(mappings=mappings, converters=converters)
        self._database = database
        self._query_builder = query_builder or MongoQueryBuilder()
        self._mappers: dict[type[Any], DocumentEntityMapper] = {}

    # -- helpers -------------------------------------------------------------

    def _mapper(self, entity_cls: type[Any]) -> DocumentEntityMapper:
        mapper = self._mappers.get(entity_cls)
        if mapper is None:
            mapping = self.mappings.get(entity_cls)
            mapper = DocumentEntityMapper(mapping, self.converters)
            self._mappers[entity_cls] = mapper
        return mapper

    def _collection(self, name: str) -> Collection[Any]:
        return self._database.get_collection(name)

    def _mapping_for(self, collection: str) -> ClassMapping:
        mapping = self.mappings.find_by_collection(collection)
        if mapping is None:
            raise MongoPersistenceError(
                f"No entity mapping registered for collection '{collection}'"
            )
        return mapping

    # -- writes --------------------------------------------------------------

    def insert(self, entity: T) -> T:
        mapper = self._mapper(type(entity))
        doc = mapper.to_doc(entity)
        logger.debug("insert into %s: %s", mapper.mapping.collection, doc.get("_id"))
        try:
            self._collection(mapper.mapping.collection).insert_one(doc)
        except _DRIVER_ERRORS as e:
            raise MongoPersistenceError(str(e)) from e
        return entity

    def insert_all(self, entities: Iterable[T]) -> list[T]:
        items = list(entities)
        if not items:
            return []
        by_collection: dict[str, list[dict[str, Any]]] = {}
        for entity in items:
            mapper = self._mapper(type(entity))
            by_collection.setdefault(mapper.mapping.collection, []).append(
                mapper.to_doc(entity)
            )
        try:
            for name, docs in by_collection.items():
                logger.debug("insert %d document(s) into %s", len(docs), name)
                self._collection(name).insert_many(docs)
        except _DRIVER_ERRORS as e:
            raise MongoPersistenceError(str(e)) from e
        return items

    def update(self, entity: T) -> T:
        mapper = self._mapper(type(entity))
        doc = mapper.to_doc(entity)
        id_filter = mapper.id_filter(mapper.id_of(entity))
        logger.debug("update %s: %s", mapper.mapping.collection, id_filter)
        try:
            self._collection(mapper.mapping.collection).replace_one(
                id_filter, doc, upsert=True
            )
        except _DRIVER_ERRORS as e:
            raise MongoPersistenceError(str(e)) from e
        return entity

    def delete(self, query: DocumentDeleteQuery) -> int:
        match = self._query_builder.build_match(query.condition)
        logger.debug("delete from %s where %s", query.collection, match)
        try:
            result = self._collection(query.collection).delete_many(match)
        except _DRIVER_ERRORS as e:
            raise MongoPersistenceError(str(e)) from e
        return int(result.deleted_count)

    def delete_by_id(self, entity_cls: type[Any], entity_id: Any) -> None:
        mapper = self._mapper(entity_cls)
        try:
            self._collection(mapper.mapping.collection).delete_one(
                mapper.id_filter(entity_id)
            )
        except _DRIVER_ERRORS as e:
            raise MongoPersistenceError(str(e)) from e

    # -- reads ---------------------------------------------------------------

    def select(self, query: DocumentQuery) -> Iterator[Any]:
        mapping = self._mapping_for(query.collection)
        mapper = self._mapper(mapping.entity_cls)
        match = self._query_builder.build_match(query.condition)
        sort = self._query_builder.build_sort(query.sorts)
        logger.debug(
            "select from %s where %s sort %s skip %s limit %s",
            query.collection,
            match,
            sort,
            query.skip,
            query.limit,
        )
        return self._iterate(mapper, query, match, sort)

    def _iterate(
        self,
        mapper: DocumentEntityMapper,
        query: DocumentQuery,
        match: dict[str, Any],
        sort: list[tuple[str, int]],
    ) -> Iterator[Any]:
        try:
            cursor = self._collection(query.collection).find(match)
            if sort:
                cursor = cursor.sort(sort)
            if query.skip:
                cursor = cursor.skip(query.skip)
            if query.limit is not None:
                cursor = cursor.limit(query.limit)
            try:
                for doc in cursor:
                    yield mapper.from_doc(doc)
            finally:
                cursor.close()
        except _DRIVER_ERRORS as e:
            raise MongoPersistenceError(str(e)) from e

    def find(self, entity_cls: type[T], entity_id: Any) -> T | None:
        mapper = self._mapper(entity_cls)
        try:
            doc = self._collection(mapper.mapping.collection).find_one(
                mapper.id_filter(entity_id)
            )
        except _DRIVER_ERRORS as e:
            raise MongoPersistenceError(str(e)) from e
        if doc is None:
            return None
        entity: T = mapper.from_doc(doc)
        return entity

    def count(self, target: type[Any] | str) -> int:
        if isinstance(target, str):
            name = target
        else:
            name = self.mappings.get(target).collection
        try:
            return int(self._collection(name).count_documents({}))
        except _DRIVER_ERRORS as e:
            raise MongoPersistenceError(str(e)) from e

    def count_matching(self, query: DocumentQuery) -> int:
        match = self._query_builder.build_match(query.condition)
        kwargs: dict[str, Any] = {}
        if query.skip:
            kwargs["skip"] = query.skip
        if query.limit is not None:
            kwargs["limit"] = query.limit
        try:
            collection = self._collection(query.collection)
            return int(collection.count_documents(match, **kwargs))
        except _DRIVER_ERRORS as e:
            raise MongoPersistenceError(str(e)) from e
