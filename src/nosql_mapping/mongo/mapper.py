"""Entity ↔ document mapping driven by a ClassMapping."""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING, Any

from bson.decimal128 import Decimal128

if TYPE_CHECKING:
    from pydantic import BaseModel

    from ..converters import Converters
    from ..mapping import ClassMapping


class DocumentEntityMapper:
    """
    Pydantic entity ↔ MongoDB document.

    Uses ``model_dump(mode='python')`` to keep native types; PyMongo converts
    datetime/UUID/bytes to BSON itself.  Field names follow the mapping's
    persisted names, registered converters run per field, and any remaining
    ``Decimal`` is stored as ``Decimal128``.
    """

    def __init__(self, mapping: ClassMapping, converters: Converters) -> None:
        self.mapping = mapping
        self._converters = converters

    def to_doc(self, entity: BaseModel) -> dict[str, Any]:
        data = entity.model_dump(mode="python")
        doc: dict[str, Any] = {}
        for f in self.mapping.fields:
            if f.name not in data:
                continue
            value = self._converters.to_database(f.name, data[f.name], f.type)
            doc[f.persisted_name] = _serialize(value)
        return doc

    def from_doc(self, doc: dict[str, Any]) -> Any:
        model_fields = self.mapping.entity_cls.model_fields
        values: dict[str, Any] = {}
        for f in self.mapping.fields:
            if f.persisted_name not in doc:
                continue
            value = _deserialize(doc[f.persisted_name])
            # pydantic validates aliased fields by alias
            info = model_fields.get(f.name)
            key = (info.alias if info is not None else None) or f.name
            values[key] = self._converters.to_entity(f.name, value, f.type)
        return self.mapping.entity_cls.model_validate(values)

    def id_filter(self, entity_id: Any) -> dict[str, Any]:
        id_field = self.mapping.id_field
        value = self._converters.to_database(id_field.name, entity_id, id_field.type)
        return {id_field.persisted_name: value}

    def id_of(self, entity: BaseModel) -> Any:
        return getattr(entity, self.mapping.id_field.name)


def _serialize(value: Any) -> Any:
    if isinstance(value, Decimal):
        return Decimal128(str(value))
    if isinstance(value, dict):
        return {k: _serialize(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_serialize(v) for v in value]
    return value


def _deserialize(value: Any) -> Any:
    if isinstance(value, Decimal128):
        return value.to_decimal()
    if isinstance(value, dict):
        return {k: _deserialize(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_deserialize(v) for v in value]
    return value
