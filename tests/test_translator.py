"""Tests for deriving document queries from method calls."""

from __future__ import annotations

import pytest

from nosql_mapping.condition import CompositeCondition, Condition, Sort
from nosql_mapping.exceptions import FieldNotFoundError, MethodQueryError
from nosql_mapping.method_query import QueryAction
from nosql_mapping.operators import ConditionOperator, Direction
from nosql_mapping.processor import DocumentTokenProcessor
from nosql_mapping.query import DocumentDeleteQuery, MethodQueryTranslator

EQ = ConditionOperator.EQUALS
GT = ConditionOperator.GREATER_THAN


class RecordingProcessor(DocumentTokenProcessor):
    def __init__(self) -> None:
        self.calls: list[tuple[str, int]] = []

    def process(self, token, index, args, method_name, mapping, converters):
        self.calls.append((token, index))
        return super().process(token, index, args, method_name, mapping, converters)


@pytest.fixture
def translator() -> MethodQueryTranslator:
    return MethodQueryTranslator()


def test_single_condition(translator, person_mapping, converters):
    result = translator.translate("find_by_name", ("Ada",), person_mapping, converters)
    assert result.action is QueryAction.FIND
    assert result.query.collection == "people"
    assert result.query.condition == Condition("name", EQ, "Ada")
    assert result.query.limit is None


def test_and_conditions(translator, person_mapping, converters):
    result = translator.translate(
        "find_by_name_and_age_greater_than", ("Ada", 30), person_mapping, converters
    )
    assert result.query.condition == CompositeCondition(
        "and", (Condition("name", EQ, "Ada"), Condition("age", GT, 30))
    )


def test_or_of_ands(translator, person_mapping, converters):
    result = translator.translate(
        "findByNameAndAgeOrCity", ("Ada", 36, "Nuenen"), person_mapping, converters
    )
    assert result.query.condition == CompositeCondition(
        "or",
        (
            CompositeCondition(
                "and", (Condition("name", EQ, "Ada"), Condition("age", EQ, 36))
            ),
            Condition("city", EQ, "Nuenen"),
        ),
    )


def test_tokens_consume_arguments_in_order(person_mapping, converters):
    processor = RecordingProcessor()
    MethodQueryTranslator(processor).translate(
        "find_by_name_and_age_greater_than_or_city",
        ("Ada", 30, "London"),
        person_mapping,
        converters,
    )
    assert processor.calls == [("Name", 0), ("AgeGreaterThan", 1), ("City", 2)]


def test_order_by_uses_persisted_names(translator, person_mapping, converters):
    result = translator.translate(
        "find_by_city_order_by_email_desc_and_age",
        ("London",),
        person_mapping,
        converters,
    )
    assert result.query.sorts == (
        Sort("emailAddress", Direction.DESC),
        Sort("age", Direction.ASC),
    )


def test_exists_limits_to_one(translator, person_mapping, converters):
    result = translator.translate(
        "exists_by_name", ("Ada",), person_mapping, converters
    )
    assert result.action is QueryAction.EXISTS
    assert result.query.limit == 1


def test_delete_query(translator, person_mapping, converters):
    result = translator.translate(
        "delete_by_city", ("London",), person_mapping, converters
    )
    assert result.action is QueryAction.DELETE
    assert result.as_delete() == DocumentDeleteQuery(
        "people", Condition("city", EQ, "London")
    )


@pytest.mark.parametrize("args", [(), ("Ada",), ("Ada", 30, "extra")])
def test_argument_count_must_match(translator, person_mapping, converters, args):
    with pytest.raises(MethodQueryError, match="expected 2 argument"):
        translator.translate(
            "find_by_name_and_age", args, person_mapping, converters
        )


def test_unknown_order_field(translator, person_mapping, converters):
    with pytest.raises(FieldNotFoundError) as exc_info:
        translator.translate(
            "find_by_name_order_by_nmae", ("Ada",), person_mapping, converters
        )
    assert exc_info.value.method_name == "find_by_name_order_by_nmae"
