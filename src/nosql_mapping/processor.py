"""Token processor: one method-name token plus its argument -> one Condition."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Any, Protocol

from .condition import Condition
from .operators import COLLECTION_OPERATORS, ConditionOperator
from .tokens import MethodToken

if TYPE_CHECKING:
    from .converters import AttributeConverter, Converters
    from .mapping import ClassMapping


class TokenProcessor(Protocol):
    """Turns a parsed method-name fragment into a query condition."""

    def process(
        self,
        token: str,
        index: int,
        args: Sequence[Any],
        method_name: str,
        mapping: ClassMapping,
        converters: Converters,
    ) -> Condition: ...


class DocumentTokenProcessor:
    """
    Default :class:`TokenProcessor`.

    Stateless: one instance may be shared between threads and calls.
    """

    def process(
        self,
        token: str,
        index: int,
        args: Sequence[Any],
        method_name: str,
        mapping: ClassMapping,
        converters: Converters,
    ) -> Condition:
        """
        Build the condition for *token*, reading only ``args[index]``.

        Raises :class:`~nosql_mapping.exceptions.FieldNotFoundError` when the
        token's field is not mapped.  ``None`` collaborators and an index
        outside ``args`` are caller bugs and fail fast.
        """
        if not token:
            raise ValueError("token is required")
        if mapping is None:
            raise ValueError("mapping is required")
        if converters is None:
            raise ValueError("converters is required")
        if not 0 <= index < len(args):
            raise IndexError(
                f"Argument index {index} out of range for {len(args)} argument(s) "
                f"of '{method_name}'"
            )

        parsed = MethodToken.parse(token, mapping)
        field = mapping.get_field(parsed.field, method_name=method_name)

        value = args[index]
        converter = converters.converter_for(field.name, field.type)
        if converter is not None:
            value = _convert(converter, parsed.operator, value)

        return Condition(
            field=field.persisted_name,
            operator=parsed.operator,
            value=value,
            negated=parsed.negated,
        )


def _convert(
    converter: AttributeConverter, operator: ConditionOperator, value: Any
) -> Any:
    # In / Between carry several field values; convert each, same container.
    if operator in COLLECTION_OPERATORS and isinstance(
        value, (list, tuple, set, frozenset)
    ):
        return type(value)(converter.to_database(v) for v in value)
    return converter.to_database(value)


#: Shared default instance.
default_processor = DocumentTokenProcessor()
