"""Tests for QueryEngine: filtered, paginated, ordered search."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

import pytest

from jobreg.domain.errors import ValidationError
from jobreg.domain.types import EntityKind
from jobreg.infrastructure.registry import Registry
from jobreg.services.application import ApplicationService
from jobreg.services.query import DEFAULT_PAGE_SIZE, QueryEngine

APP = EntityKind.APPLICATION
CMD = EntityKind.COMMAND


def _ids(registry: Registry, kind: EntityKind, **kwargs: Any) -> list[str | None]:
    with registry.transaction() as txn:
        return [e.id for e in QueryEngine(txn.store).find(kind, **kwargs)]


class TestFilters:
    def test_no_filters_returns_all_most_recent_first(self, seeded: Registry) -> None:
        assert _ids(seeded, APP) == ["app3", "app2", "app1"]
        assert _ids(seeded, CMD) == ["command2", "command3", "command1"]

    def test_name(self, seeded: Registry) -> None:
        assert _ids(seeded, CMD, name="hive_11_prod") == ["command2"]

    def test_user(self, seeded: Registry) -> None:
        assert _ids(seeded, APP, user="tgianos") == ["app3", "app1"]
        assert _ids(seeded, CMD, user="tgianos") == ["command3", "command1"]

    def test_statuses(self, seeded: Registry) -> None:
        assert _ids(seeded, APP, statuses=["active", "DEPRECATED"]) == ["app3", "app2"]

    def test_unknown_status(self, seeded: Registry) -> None:
        with pytest.raises(ValidationError):
            _ids(seeded, EntityKind.CLUSTER, statuses=["ACTIVE"])

    def test_updated_bounds_inclusive(self, seeded: Registry) -> None:
        assert _ids(
            seeded,
            APP,
            min_updated="2014-07-02T00:00:00.000000+00:00",
            max_updated="2014-07-02T00:00:00.000000+00:00",
        ) == ["app2"]


class TestTags:
    @pytest.mark.parametrize(
        ("tags", "expected"),
        [
            (["prod"], ["app3", "app2", "app1"]),
            (["prod", "yarn"], ["app2", "app1"]),
            (["spark"], ["app2"]),
            (["somethingThatWouldNeverReallyExist"], []),
            ([], ["app3", "app2", "app1"]),
            (None, ["app3", "app2", "app1"]),
        ],
    )
    def test_application_tags(
        self, seeded: Registry, tags: Iterable[str] | None, expected: list[str]
    ) -> None:
        assert _ids(seeded, APP, tags=tags) == expected

    @pytest.mark.parametrize(
        ("tags", "expected"),
        [
            (["prod"], ["command2", "command3", "command1"]),
            (["prod", "pig"], ["command3", "command1"]),
            (["hive"], ["command2"]),
            (["hive", "somethingThatWouldNeverReallyExist"], []),
        ],
    )
    def test_command_tags(self, seeded: Registry, tags: list[str], expected: list[str]) -> None:
        assert _ids(seeded, CMD, tags=tags) == expected

    def test_adding_a_tag_never_widens(self, seeded: Registry) -> None:
        base = set(_ids(seeded, CMD, tags=["prod"]))
        narrowed = set(_ids(seeded, CMD, tags=["prod", "tez"]))
        assert narrowed <= base


class TestPagination:
    def test_page_index(self, seeded: Registry) -> None:
        assert _ids(seeded, APP, page=0, page_size=2) == ["app3", "app2"]
        assert _ids(seeded, APP, page=1, page_size=2) == ["app1"]
        assert _ids(seeded, APP, page=2, page_size=2) == []

    def test_negative_page_clamped(self, seeded: Registry) -> None:
        assert _ids(seeded, APP, page=-3, page_size=1) == ["app3"]

    @pytest.mark.parametrize("page_size", [0, -5000])
    def test_non_positive_page_size_is_empty(self, seeded: Registry, page_size: int) -> None:
        assert _ids(seeded, APP, page_size=page_size) == []

    def test_offset_beyond_sql_range_is_empty(self, seeded: Registry) -> None:
        assert _ids(seeded, APP, page=10**17, page_size=1000) == []

    def test_huge_page_size_clamped(self, seeded: Registry) -> None:
        assert _ids(seeded, APP, page_size=10**20) == ["app3", "app2", "app1"]

    def test_huge_page_through_service(self, seeded: Registry) -> None:
        result = ApplicationService(seeded).find(page=10**17, page_size=1000)
        assert result.ok
        assert result.data == {"count": 0, "items": []}

    def test_default_page_size(self) -> None:
        assert DEFAULT_PAGE_SIZE == 64


class TestOrdering:
    def test_order_by_name_ascending(self, seeded: Registry) -> None:
        assert _ids(seeded, APP, order_by="name", descending=False) == ["app2", "app3", "app1"]

    def test_unknown_sort_key(self, seeded: Registry) -> None:
        with pytest.raises(ValidationError):
            _ids(seeded, APP, order_by="status")

    def test_mutation_moves_to_front(self, seeded: Registry) -> None:
        with seeded.transaction() as txn:
            txn.store.touch(APP, "app1", "2099-01-01T00:00:00.000000+00:00")
        assert _ids(seeded, APP)[0] == "app1"
