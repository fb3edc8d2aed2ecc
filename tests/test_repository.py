"""Tests for repositories with name-derived query methods."""

from __future__ import annotations

from decimal import Decimal

import pytest

from nosql_mapping.exceptions import FieldNotFoundError, MethodQueryError
from nosql_mapping.reactive import reactive_template
from nosql_mapping.repository import (
    DocumentRepository,
    ReactiveDocumentRepository,
    _DerivedQueries,
)
from sample_entities import Person, Wallet


def names(entities) -> list[str]:
    return sorted(e.name for e in entities)


@pytest.fixture
def repo(template, people) -> DocumentRepository[Person]:
    repository = DocumentRepository(Person, template)
    repository.save_all(people)
    return repository


@pytest.fixture
def reactive_repo(template) -> ReactiveDocumentRepository[Person]:
    return ReactiveDocumentRepository(Person, reactive_template(template))


class TestCrud:
    def test_save_inserts_then_updates(self, repo):
        repo.save(Person(id="p1", name="Ada", age=37))
        assert repo.count() == 4
        assert repo.find_by_id("p1").age == 37

    def test_find_all(self, repo):
        assert names(repo.find_all()) == ["Ada", "Alan", "Edsger", "Grace"]

    def test_exists_and_delete_by_id(self, repo):
        assert repo.exists_by_id("p2") is True
        repo.delete_by_id("p2")
        assert repo.exists_by_id("p2") is False
        assert repo.find_by_id("p2") is None

    def test_mapping_exposed(self, repo):
        assert repo.mapping.collection == "people"


class TestDerivedQueries:
    def test_find_by_field(self, repo):
        assert names(repo.find_by_city("London")) == ["Ada", "Alan"]

    def test_find_by_aliased_field(self, repo):
        assert names(repo.find_by_email("ada@example.com")) == ["Ada"]

    def test_camel_case_with_ordering(self, repo):
        found = repo.findByAgeGreaterThanOrderByAgeDesc(40)
        assert [p.name for p in found] == ["Grace", "Edsger", "Alan"]

    def test_and(self, repo):
        assert names(repo.find_by_city_and_age_less_than("London", 40)) == ["Ada"]

    def test_or(self, repo):
        found = repo.find_by_name_or_city("Grace", "Nuenen")
        assert names(found) == ["Edsger", "Grace"]

    def test_between(self, repo):
        assert names(repo.find_by_age_between((40, 80))) == ["Alan", "Edsger"]

    def test_not_in(self, repo):
        assert names(repo.find_by_city_not_in(["London"])) == ["Edsger", "Grace"]

    def test_not(self, repo):
        assert names(repo.find_by_name_not("Ada")) == ["Alan", "Edsger", "Grace"]

    @pytest.mark.parametrize(
        ("method", "arg", "expected"),
        [
            ("find_by_name_like", "A%", ["Ada", "Alan"]),
            ("find_by_name_starts_with", "Gr", ["Grace"]),
            ("find_by_name_ends_with", "er", ["Edsger"]),
            ("find_by_name_contains", "la", ["Alan"]),
        ],
    )
    def test_string_matching(self, repo, method, arg, expected):
        assert names(getattr(repo, method)(arg)) == expected

    def test_count_and_exists(self, repo):
        assert repo.count_by_city("London") == 2
        assert repo.exists_by_name("Ada") is True
        assert repo.exists_by_name("Barbara") is False

    def test_delete_returns_count(self, repo):
        assert repo.delete_by_city("London") == 2
        assert repo.count() == 2

    def test_method_name_kept(self, repo):
        assert repo.find_by_city.__name__ == "find_by_city"

    def test_find_by_optional_decimal(self, template):
        wallets = DocumentRepository(Wallet, template)
        wallets.save(Wallet(id="w1", balance=Decimal("10.50")))
        wallets.save(Wallet(id="w2"))
        found = wallets.find_by_balance(Decimal("10.50"))
        assert [w.id for w in found] == ["w1"]
        assert found[0].balance == Decimal("10.50")


class TestInvalidCalls:
    def test_dispatch_base_is_abstract(self, template):
        with pytest.raises(TypeError):
            _DerivedQueries(Person, template)

    def test_non_query_attribute(self, repo):
        with pytest.raises(AttributeError):
            repo.search("Ada")
        assert not hasattr(repo, "_hidden")

    def test_wrong_argument_count(self, repo):
        with pytest.raises(MethodQueryError, match="expected 1 argument"):
            repo.find_by_name()

    def test_unknown_field(self, repo):
        with pytest.raises(FieldNotFoundError) as exc_info:
            repo.find_by_salary_greater_than(10)
        assert exc_info.value.method_name == "find_by_salary_greater_than"

    def test_malformed_name_fails_on_lookup(self, repo):
        with pytest.raises(MethodQueryError):
            getattr(repo, "find_by_name_and_")


class TestReactiveRepository:
    @pytest.mark.asyncio
    async def test_save_and_query(self, reactive_repo, people):
        saved = await reactive_repo.save_all(people).to_list()
        assert len(saved) == 4
        london = [p.name async for p in reactive_repo.find_by_city("London")]
        assert sorted(london) == ["Ada", "Alan"]
        assert await reactive_repo.count_by_city("London") == 2
        assert await reactive_repo.count() == 4

    @pytest.mark.asyncio
    async def test_exists(self, reactive_repo, people):
        await reactive_repo.save(people[0])
        assert await reactive_repo.exists_by_name("Ada") is True
        assert await reactive_repo.exists_by_name("Alan") is False
        assert await reactive_repo.exists_by_id("p1") is True

    @pytest.mark.asyncio
    async def test_find_and_delete(self, reactive_repo, people):
        await reactive_repo.save_all(people).to_list()
        assert (await reactive_repo.find_by_id("p3")).name == "Grace"
        assert await reactive_repo.delete_by_city("London") == 2
        await reactive_repo.delete_by_id("p3")
        remaining = await reactive_repo.find_all().to_list()
        assert [p.name for p in remaining] == ["Edsger"]

    def test_invalid_call_fails_before_subscription(self, reactive_repo):
        with pytest.raises(FieldNotFoundError):
            reactive_repo.find_by_salary(1)
