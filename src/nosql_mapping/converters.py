"""Attribute converters and the per-field converter registry."""

from __future__ import annotations

import threading
import types
from collections.abc import Callable
from decimal import Decimal
from typing import Any, Union, get_args, get_origin

from bson.decimal128 import Decimal128


class AttributeConverter:
    """Translate a field value between its entity and persisted form."""

    def to_database(self, value: Any) -> Any:
        return value

    def to_entity(self, value: Any) -> Any:
        return value


class FunctionConverter(AttributeConverter):
    """Converter built from plain callables."""

    def __init__(
        self,
        to_database: Callable[[Any], Any],
        to_entity: Callable[[Any], Any] | None = None,
    ) -> None:
        self._to_database = to_database
        self._to_entity = to_entity

    def to_database(self, value: Any) -> Any:
        return self._to_database(value)

    def to_entity(self, value: Any) -> Any:
        if self._to_entity is None:
            return value
        return self._to_entity(value)


class DecimalConverter(AttributeConverter):
    """``Decimal`` ↔ BSON ``Decimal128``, preserving precision."""

    def to_database(self, value: Any) -> Any:
        if isinstance(value, Decimal):
            return Decimal128(str(value))
        return value

    def to_entity(self, value: Any) -> Any:
        if isinstance(value, Decimal128):
            return value.to_decimal()
        return value


ConverterLike = Union[AttributeConverter, Callable[[Any], Any]]


def _coerce(converter: ConverterLike) -> AttributeConverter:
    if isinstance(converter, AttributeConverter):
        return converter
    if callable(converter):
        return FunctionConverter(converter)
    raise TypeError(
        f"Expected AttributeConverter or callable, got {type(converter).__name__}"
    )


def _declared_class(field_type: Any) -> type | None:
    """``Decimal``, ``Optional[Decimal]`` and ``Decimal | None`` -> ``Decimal``."""
    if isinstance(field_type, type) and get_origin(field_type) is None:
        return field_type
    if get_origin(field_type) in (Union, types.UnionType):
        members = [a for a in get_args(field_type) if a is not type(None)]
        if len(members) == 1 and isinstance(members[0], type):
            return members[0]
    return None


class Converters:
    """
    Registry of converters keyed by field name, with type-keyed fallbacks.

    Lookups are read-only and safe to share between threads once the
    registry has been populated.
    """

    def __init__(self) -> None:
        self._by_field: dict[str, AttributeConverter] = {}
        self._by_type: dict[type, AttributeConverter] = {}
        self._lock = threading.Lock()

    def register(self, field_name: str, converter: ConverterLike) -> Converters:
        with self._lock:
            self._by_field[field_name] = _coerce(converter)
        return self

    def register_type(self, python_type: type, converter: ConverterLike) -> Converters:
        with self._lock:
            self._by_type[python_type] = _coerce(converter)
        return self

    def converter_for(
        self, name: str, field_type: Any = None
    ) -> AttributeConverter | None:
        """Return the converter for *name*, falling back to *field_type*."""
        converter = self._by_field.get(name)
        if converter is not None:
            return converter
        declared = _declared_class(field_type)
        if declared is None:
            return None
        return self._by_type.get(declared)

    def to_database(self, name: str, value: Any, field_type: Any = None) -> Any:
        converter = self.converter_for(name, field_type)
        if converter is None:
            return value
        return converter.to_database(value)

    def to_entity(self, name: str, value: Any, field_type: Any = None) -> Any:
        converter = self.converter_for(name, field_type)
        if converter is None:
            return value
        return converter.to_entity(value)

    def __contains__(self, name: object) -> bool:
        return name in self._by_field

    def __len__(self) -> int:
        return len(self._by_field) + len(self._by_type)


def default_converters() -> Converters:
    """Registry with the built-in type converters."""
    return Converters().register_type(Decimal, DecimalConverter())
