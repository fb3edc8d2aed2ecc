"""Method-name tokens: one field plus an optional operator keyword."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from .operators import OPERATOR_KEYWORDS, ConditionOperator

if TYPE_CHECKING:
    from .mapping import ClassMapping


def camelize(segment: str) -> str:
    """``age_greater_than`` / ``ageGreaterThan`` -> ``AgeGreaterThan``."""
    if "_" in segment:
        return "".join(part[:1].upper() + part[1:] for part in segment.split("_"))
    return segment[:1].upper() + segment[1:]


@dataclass(frozen=True)
class MethodToken:
    """
    A predicate fragment such as ``AgeGreaterThan`` split into its parts.

    ``keyword`` is the matched operator suffix, or ``None`` when the whole
    token is the field name and the operator defaults to equals.
    """

    raw: str
    field: str
    operator: ConditionOperator = ConditionOperator.EQUALS
    negated: bool = False
    keyword: str | None = None

    @classmethod
    def candidates(cls, raw: str) -> list[MethodToken]:
        """
        Every way to read *raw*, most specific first.

        Suffixes are matched case-sensitively at the end of the CamelCase
        token, longest keyword first; the unsplit token comes last.
        """
        token = camelize(raw)
        found: list[MethodToken] = []
        for keyword, operator, negated in OPERATOR_KEYWORDS:
            if len(token) > len(keyword) and token.endswith(keyword):
                found.append(
                    cls(
                        raw=raw,
                        field=token[: -len(keyword)],
                        operator=operator,
                        negated=negated,
                        keyword=keyword,
                    )
                )
        found.append(cls(raw=raw, field=token))
        return found

    @classmethod
    def parse(cls, raw: str, mapping: ClassMapping | None = None) -> MethodToken:
        """
        Split *raw* into field and operator.

        With a *mapping*, the first candidate whose field is mapped wins, so
        a field literally named ``title_like`` is not read as ``title`` +
        ``Like``.  Without one, or when nothing matches, the longest suffix
        wins.
        """
        if not raw:
            raise ValueError("token must be a non-empty string")
        options = cls.candidates(raw)
        if mapping is not None:
            for option in options:
                if mapping.field_exists(option.field):
                    return option
        return options[0]
