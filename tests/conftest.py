"""Shared fixtures: sample entities and an in-process MongoDB (mongomock)."""

from __future__ import annotations

import mongomock
import pytest

from nosql_mapping.converters import Converters, default_converters
from nosql_mapping.mapping import ClassMapping, ClassMappings
from nosql_mapping.template import MongoDocumentTemplate
from sample_entities import Article, Person


@pytest.fixture
def person_mapping() -> ClassMapping:
    return ClassMapping.from_model(Person)


@pytest.fixture
def article_mapping() -> ClassMapping:
    return ClassMapping.from_model(Article)


@pytest.fixture
def converters() -> Converters:
    """Empty registry: values pass through unchanged."""
    return Converters()


@pytest.fixture
def database():
    client = mongomock.MongoClient()
    yield client.get_database("test_db")
    client.close()


@pytest.fixture
def template(database) -> MongoDocumentTemplate:
    return MongoDocumentTemplate(
        database, mappings=ClassMappings(), converters=default_converters()
    )


@pytest.fixture
def people() -> list[Person]:
    return [
        Person(id="p1", name="Ada", age=36, city="London", email="ada@example.com"),
        Person(id="p2", name="Alan", age=41, city="London"),
        Person(id="p3", name="Grace", age=85, city="Arlington"),
        Person(id="p4", name="Edsger", age=72, city="Nuenen"),
    ]
