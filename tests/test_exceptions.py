"""Tests for the exception hierarchy and its serialisation."""

from __future__ import annotations

from nosql_mapping.exceptions import (
    FieldNotFoundError,
    IdNotFoundError,
    MappingError,
    MethodQueryError,
    MongoConnectionError,
    MongoPersistenceError,
    MongoQueryError,
    NonUniqueResultError,
)

FIELDS = ["id", "name", "age", "city", "email_address"]


class TestFieldNotFoundError:
    def test_message_names_field_entity_and_method(self):
        err = FieldNotFoundError("nmae", "Person", FIELDS, method_name="find_by_nmae")
        message = str(err)
        assert message.startswith(
            "Field 'nmae' not found on 'Person' (method 'find_by_nmae')."
        )
        assert "Did you mean one of these?" in message
        assert "Available fields: age, city, email_address, id, name" in message

    def test_suggestions_ignore_case_and_underscores(self):
        err = FieldNotFoundError("EmailAdress", "Person", FIELDS)
        assert err.suggestions == ["email_address"]

    def test_no_suggestions_for_unrelated_name(self):
        err = FieldNotFoundError("zzz", "Person", FIELDS)
        assert err.suggestions == []
        assert "Did you mean" not in str(err)

    def test_long_field_list_is_truncated(self):
        fields = [f"f{i:02d}" for i in range(20)]
        err = FieldNotFoundError("x", "Wide", fields)
        assert str(err).endswith(", ...")

    def test_to_dict(self):
        err = FieldNotFoundError("nmae", "Person", FIELDS, method_name="find_by_nmae")
        data = err.to_dict()
        assert data["error"] == "FIELD_NOT_FOUND"
        assert data["field"] == "nmae"
        assert data["entity"] == "Person"
        assert data["method"] == "find_by_nmae"
        assert data["suggestions"] == ["name"]
        assert data["available_fields"] == sorted(FIELDS)


def test_method_query_error():
    err = MethodQueryError("find_by_", "expected a name")
    assert str(err) == "Cannot derive a query from 'find_by_': expected a name"
    assert err.to_dict() == {
        "error": "METHOD_QUERY_ERROR",
        "method": "find_by_",
        "reason": "expected a name",
    }


def test_default_to_dict_uses_class_name():
    err = NonUniqueResultError("two results")
    assert err.to_dict() == {"error": "NonUniqueResultError", "message": "two results"}


def test_hierarchy():
    assert issubclass(FieldNotFoundError, MappingError)
    assert issubclass(IdNotFoundError, MappingError)
    assert issubclass(MongoConnectionError, MongoPersistenceError)
    assert issubclass(MongoQueryError, MongoPersistenceError)
    assert issubclass(MongoPersistenceError, MappingError)
    assert "Person" in str(IdNotFoundError("Person"))
