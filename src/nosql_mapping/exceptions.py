"""
Mapping exception hierarchy.

Every exception inherits from ``MappingError`` and provides ``to_dict()``
for API-friendly error responses.
"""

from __future__ import annotations

from difflib import get_close_matches
from typing import Any


class MappingError(Exception):
    """Root exception for the mapping layer."""

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.__class__.__name__,
            "message": str(self),
        }


class FieldNotFoundError(MappingError):
    """
    A query token names a field the entity does not map.

    Uses fuzzy matching to suggest similar mapped field names.

    Example error message::

        Field 'nmae' not found on 'Person' (method 'find_by_nmae').
        Did you mean one of these?
          • name

        Available fields: age, id, name
    """

    def __init__(
        self,
        invalid_field: str,
        entity_name: str,
        available_fields: list[str],
        method_name: str | None = None,
        cutoff: float = 0.6,
    ) -> None:
        self.invalid_field = invalid_field
        self.entity_name = entity_name
        self.available_fields = available_fields
        self.method_name = method_name

        normalised = {f.replace("_", "").lower(): f for f in available_fields}
        matches = get_close_matches(
            invalid_field.replace("_", "").lower(),
            list(normalised),
            n=5,
            cutoff=cutoff,
        )
        self.suggestions = [normalised[m] for m in matches]

        super().__init__(self._build_message())

    def _build_message(self) -> str:
        head = f"Field '{self.invalid_field}' not found on '{self.entity_name}'"
        if self.method_name:
            head += f" (method '{self.method_name}')"
        lines = [head + "."]
        if self.suggestions:
            lines.append("Did you mean one of these?")
            for s in self.suggestions:
                lines.append(f"  • {s}")

        sorted_fields = sorted(self.available_fields)
        preview = ", ".join(sorted_fields[:15])
        if len(sorted_fields) > 15:
            preview += ", ..."
        lines.append(f"Available fields: {preview}")
        return "\n".join(lines)

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "FIELD_NOT_FOUND",
            "field": self.invalid_field,
            "entity": self.entity_name,
            "method": self.method_name,
            "suggestions": self.suggestions,
            "available_fields": sorted(self.available_fields),
        }


class MethodQueryError(MappingError):
    """A repository method name cannot be turned into a query."""

    def __init__(self, method_name: str, reason: str) -> None:
        self.method_name = method_name
        self.reason = reason
        super().__init__(f"Cannot derive a query from '{method_name}': {reason}")

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "METHOD_QUERY_ERROR",
            "method": self.method_name,
            "reason": self.reason,
        }


class IdNotFoundError(MappingError):
    """The entity declares no id field."""

    def __init__(self, entity_name: str) -> None:
        self.entity_name = entity_name
        super().__init__(f"Entity '{entity_name}' does not declare an id field")


class NonUniqueResultError(MappingError):
    """A single-result query matched more than one document."""


class MongoPersistenceError(MappingError):
    """Base for MongoDB access errors."""


class MongoConnectionError(MongoPersistenceError):
    """Raised when connection to MongoDB fails."""


class MongoQueryError(MongoPersistenceError):
    """Raised when a condition cannot be compiled or a query fails."""
