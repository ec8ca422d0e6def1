"""Tests for EntityStore: row-level persistence."""

from __future__ import annotations

import pytest

from jobreg.domain.entities import Application, Command
from jobreg.domain.errors import NotFoundError, StoreError, ValidationError
from jobreg.domain.types import AttributeName, EntityKind
from jobreg.infrastructure.database.schema import applications
from jobreg.infrastructure.registry import Registry

APP = EntityKind.APPLICATION
CMD = EntityKind.COMMAND
CLU = EntityKind.CLUSTER


class TestGet:
    def test_hydrates_sets(self, seeded: Registry) -> None:
        with seeded.transaction() as txn:
            app = txn.store.get(APP, "app1")
        assert isinstance(app, Application)
        assert app.tags == {"app1", "tez", "prod", "yarn"}
        assert len(app.configs) == 2
        assert len(app.jars) == 2

    def test_command_owner(self, seeded: Registry) -> None:
        with seeded.transaction() as txn:
            cmd = txn.store.get(CMD, "command1")
        assert isinstance(cmd, Command)
        assert cmd.application_id == "app1"

    def test_missing_raises(self, registry: Registry) -> None:
        with pytest.raises(NotFoundError), registry.transaction() as txn:
            txn.store.get(APP, "nope")

    def test_get_many_preserves_order_and_skips_missing(self, seeded: Registry) -> None:
        with seeded.transaction() as txn:
            found = txn.store.get_many(CMD, ["command3", "missing", "command1"])
        assert [c.id for c in found] == ["command3", "command1"]

    def test_exists_and_count(self, seeded: Registry) -> None:
        with seeded.transaction() as txn:
            assert txn.store.exists(CLU, "cluster1")
            assert not txn.store.exists(CLU, "app1")
            assert txn.store.count(APP) == 3


class TestFind:
    def test_default_order_is_most_recent_first(self, seeded: Registry) -> None:
        with seeded.transaction() as txn:
            ids = [a.id for a in txn.store.find(APP)]
        assert ids == ["app3", "app2", "app1"]

    def test_ascending_with_tie_break(self, seeded: Registry) -> None:
        # All three share the same created timestamp; id breaks the tie.
        with seeded.transaction() as txn:
            ids = [a.id for a in txn.store.find(APP, order_by="created", descending=False)]
        assert ids == ["app1", "app2", "app3"]

    def test_criteria_offset_limit(self, seeded: Registry) -> None:
        with seeded.transaction() as txn:
            found = txn.store.find(
                APP, [applications.c.user == "tgianos"], offset=1, limit=5
            )
        assert [a.id for a in found] == ["app1"]


class TestSave:
    def test_requires_id(self, registry: Registry) -> None:
        app = Application(name="tez", user="u", version="1", status="ACTIVE")
        with pytest.raises(ValidationError), registry.transaction() as txn:
            txn.store.save(app)

    def test_requires_timestamps(self, registry: Registry) -> None:
        app = Application(id="a", name="tez", user="u", version="1", status="ACTIVE")
        with pytest.raises(ValidationError), registry.transaction() as txn:
            txn.store.save(app)

    def test_update_rewrites_sets(self, seeded: Registry) -> None:
        with seeded.transaction() as txn:
            app = txn.store.get(APP, "app2")
            txn.store.save(app.model_copy(update={"user": "x", "jars": frozenset()}))
        with seeded.transaction() as txn:
            app = txn.store.get(APP, "app2")
        assert app.user == "x"
        assert app.jars == frozenset()
        assert app.tags == {"app2", "spark", "prod", "yarn"}


class TestAttributes:
    def test_read_write(self, seeded: Registry) -> None:
        with seeded.transaction() as txn:
            txn.store.write_attribute(CLU, "cluster1", AttributeName.JARS, ["b", "a", "a"])
            assert txn.store.read_attribute(CLU, "cluster1", AttributeName.JARS) == {"a", "b"}

    def test_touch(self, seeded: Registry) -> None:
        with seeded.transaction() as txn:
            txn.store.touch(APP, "app1", "2099-01-01T00:00:00.000000+00:00")
            assert txn.store.find(APP)[0].id == "app1"


class TestAssociation:
    def test_linked_in_position_order(self, seeded: Registry) -> None:
        with seeded.transaction() as txn:
            assert txn.store.linked_command_ids("cluster1") == ["command1", "command2", "command3"]
            assert txn.store.linked_cluster_ids("command2") == ["cluster1", "cluster2"]

    def test_link_is_idempotent(self, seeded: Registry) -> None:
        with seeded.transaction() as txn:
            assert txn.store.link("cluster2", "command2") is False
            assert txn.store.link("cluster2", "command1") is True
            assert txn.store.linked_command_ids("cluster2") == ["command2", "command3", "command1"]

    def test_unlink(self, seeded: Registry) -> None:
        with seeded.transaction() as txn:
            assert txn.store.unlink("cluster1", "command2") is True
            assert txn.store.unlink("cluster1", "command2") is False
            assert txn.store.linked_command_ids("cluster1") == ["command1", "command3"]

    def test_unlink_all(self, seeded: Registry) -> None:
        with seeded.transaction() as txn:
            assert txn.store.unlink_all_for_command("command3") == ["cluster1", "cluster2"]
            assert txn.store.unlink_all_for_cluster("cluster2") == ["command2"]
            assert txn.store.linked_cluster_ids("command3") == []


class TestOwner:
    def test_owned_command_ids(self, seeded: Registry) -> None:
        with seeded.transaction() as txn:
            assert txn.store.owned_command_ids("app1") == ["command1"]
            assert txn.store.owned_command_ids("app2") == []

    def test_set_owner_none(self, seeded: Registry) -> None:
        with seeded.transaction() as txn:
            txn.store.set_owner("command1", None, "2099-01-01T00:00:00.000000+00:00")
            assert txn.store.get(CMD, "command1").application_id is None  # type: ignore[attr-defined]


class TestDelete:
    def test_delete_returns_entity(self, seeded: Registry) -> None:
        with seeded.transaction() as txn:
            removed = txn.store.delete(APP, "app2")
            assert removed.id == "app2"
            assert not txn.store.exists(APP, "app2")

    def test_foreign_keys_reject_orphans(self, seeded: Registry) -> None:
        """Deleting a referenced row without the cascade fails and rolls back."""
        with pytest.raises(StoreError), seeded.transaction() as txn:
            txn.store.delete(APP, "app1")
        with seeded.transaction() as txn:
            assert txn.store.exists(APP, "app1")
