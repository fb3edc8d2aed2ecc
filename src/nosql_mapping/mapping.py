"""Explicit per-entity field tables.

A :class:`ClassMapping` is built once per entity type, either by hand or
from a pydantic model, and then only read.  It answers the questions query
derivation needs: does a field exist, what is it called in the document,
and what type does the entity declare for it.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel

from .exceptions import FieldNotFoundError, IdNotFoundError

logger = logging.getLogger("nosql_mapping.mapping")

ID_DOCUMENT_FIELD = "_id"


def normalise_name(name: str) -> str:
    """Key used to match ``FirstName`` / ``firstName`` / ``first_name``."""
    return name.replace("_", "").lower()


@dataclass(frozen=True)
class FieldMapping:
    """One entity field and where it lives in the document."""

    name: str
    persisted_name: str
    type: Any = None
    is_id: bool = False


class ClassMapping:
    """Field table for one entity class."""

    def __init__(
        self,
        entity_cls: type[Any],
        fields: Iterable[FieldMapping],
        *,
        collection: str | None = None,
    ) -> None:
        self.entity_cls = entity_cls
        self.collection = collection or entity_cls.__name__
        self._fields: dict[str, FieldMapping] = {}
        self._normalised: dict[str, FieldMapping] = {}
        for f in fields:
            if f.name in self._fields:
                raise ValueError(
                    f"Duplicate field '{f.name}' in mapping of {entity_cls.__name__}"
                )
            self._fields[f.name] = f
            self._normalised.setdefault(normalise_name(f.name), f)

    @classmethod
    def from_model(
        cls,
        model_cls: type[BaseModel],
        *,
        collection: str | None = None,
        id_field: str = "id",
    ) -> ClassMapping:
        """
        Build the mapping of a pydantic model.

        A field alias becomes the persisted name; the id field persists as
        ``_id``.  The collection defaults to ``__collection__`` on the model,
        then to the class name.
        """
        fields = []
        for name, info in model_cls.model_fields.items():
            is_id = name == id_field
            persisted = ID_DOCUMENT_FIELD if is_id else (info.alias or name)
            fields.append(
                FieldMapping(
                    name=name,
                    persisted_name=persisted,
                    type=info.annotation,
                    is_id=is_id,
                )
            )
        collection = collection or getattr(model_cls, "__collection__", None)
        return cls(model_cls, fields, collection=collection)

    # -- lookups -------------------------------------------------------------

    @property
    def entity_name(self) -> str:
        return self.entity_cls.__name__

    @property
    def fields(self) -> tuple[FieldMapping, ...]:
        return tuple(self._fields.values())

    def field_names(self) -> list[str]:
        return list(self._fields)

    def field_exists(self, name: str) -> bool:
        return self.find_field(name) is not None

    def find_field(self, name: str) -> FieldMapping | None:
        """Look a field up by its declared name or a CamelCase segment of it."""
        found = self._fields.get(name)
        if found is not None:
            return found
        return self._normalised.get(normalise_name(name))

    def get_field(self, name: str, *, method_name: str | None = None) -> FieldMapping:
        found = self.find_field(name)
        if found is None:
            raise FieldNotFoundError(
                name, self.entity_name, self.field_names(), method_name=method_name
            )
        return found

    def resolved_name(self, name: str) -> str:
        return self.get_field(name).persisted_name

    def field_type(self, name: str) -> Any:
        return self.get_field(name).type

    @property
    def id_field(self) -> FieldMapping:
        for f in self._fields.values():
            if f.is_id:
                return f
        raise IdNotFoundError(self.entity_name)

    def __repr__(self) -> str:
        return (
            f"ClassMapping({self.entity_name}, collection={self.collection!r}, "
            f"fields={self.field_names()!r})"
        )


class ClassMappings:
    """Cache of :class:`ClassMapping` per pydantic entity class."""

    def __init__(self, *, id_field: str = "id") -> None:
        self._id_field = id_field
        self._mappings: dict[type[Any], ClassMapping] = {}
        self._lock = threading.Lock()

    def register(self, mapping: ClassMapping) -> ClassMapping:
        with self._lock:
            self._mappings[mapping.entity_cls] = mapping
        return mapping

    def get(self, entity_cls: type[Any]) -> ClassMapping:
        mapping = self._mappings.get(entity_cls)
        if mapping is not None:
            return mapping
        with self._lock:
            mapping = self._mappings.get(entity_cls)
            if mapping is None:
                if not (
                    isinstance(entity_cls, type) and issubclass(entity_cls, BaseModel)
                ):
                    raise TypeError(
                        f"No mapping registered for {entity_cls!r} and it is not "
                        "a pydantic model"
                    )
                mapping = ClassMapping.from_model(entity_cls, id_field=self._id_field)
                self._mappings[entity_cls] = mapping
                logger.debug("Built %r", mapping)
        return mapping

    def find_by_collection(self, collection: str) -> ClassMapping | None:
        with self._lock:
            candidates = list(self._mappings.values())
        for mapping in candidates:
            if mapping.collection == collection:
                return mapping
        return None
