"""EntityStore: row-level persistence for applications, commands, and clusters.

The store is bound to one ``Connection`` inside an open transaction
(see :meth:`Registry.transaction`). Each method is atomic with respect
to the rows it touches; multi-entity consistency (cascades, forced
tags, association symmetry) belongs to the components that sequence
these calls inside a single transaction.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import TYPE_CHECKING, Any

from sqlalchemy import delete, func, insert, select, update

from jobreg.domain.entities import ENTITY_TYPES, Entity
from jobreg.domain.errors import NotFoundError, ValidationError
from jobreg.domain.types import AttributeName, EntityKind
from jobreg.infrastructure.database.schema import (
    ATTRIBUTE_TABLES,
    ENTITY_TABLES,
    cluster_commands,
    commands,
)

if TYPE_CHECKING:
    from sqlalchemy import ColumnElement, Connection, Table

_SET_FIELDS = frozenset(attr.value for attr in AttributeName)


class EntityStore:
    """Get/find/save/delete by identifier and by predicate for every entity kind."""

    def __init__(self, conn: Connection) -> None:
        self._conn = conn

    @property
    def conn(self) -> Connection:
        return self._conn

    # ------------------------------------------------------------------
    # Entity rows
    # ------------------------------------------------------------------

    def exists(self, kind: EntityKind, entity_id: str) -> bool:
        table = ENTITY_TABLES[kind]
        row = self._conn.execute(select(table.c.id).where(table.c.id == entity_id)).first()
        return row is not None

    def get(self, kind: EntityKind, entity_id: str) -> Entity:
        """Fetch one entity with its attribute sets, or raise ``NotFoundError``."""
        table = ENTITY_TABLES[kind]
        row = self._conn.execute(select(table).where(table.c.id == entity_id)).mappings().first()
        if row is None:
            raise NotFoundError.for_entity(kind, entity_id)
        return self._hydrate(kind, [dict(row)])[0]

    def get_many(self, kind: EntityKind, entity_ids: Sequence[str]) -> list[Entity]:
        """Fetch entities for *entity_ids*, preserving the given order.

        Ids that do not resolve are skipped.
        """
        if not entity_ids:
            return []
        table = ENTITY_TABLES[kind]
        rows = self._conn.execute(select(table).where(table.c.id.in_(entity_ids))).mappings()
        by_id = {entity.id: entity for entity in self._hydrate(kind, [dict(r) for r in rows])}
        return [by_id[eid] for eid in entity_ids if eid in by_id]

    def find(
        self,
        kind: EntityKind,
        criteria: Iterable[ColumnElement[bool]] = (),
        *,
        order_by: str = "updated",
        descending: bool = True,
        offset: int = 0,
        limit: int | None = None,
    ) -> list[Entity]:
        """Return entities matching every clause in *criteria*, ordered and sliced.

        Ties on *order_by* are broken by ``id`` in the same direction so
        pagination is stable.
        """
        table = ENTITY_TABLES[kind]
        primary = table.c[order_by]
        if descending:
            ordering = (primary.desc(), table.c.id.desc())
        else:
            ordering = (primary.asc(), table.c.id.asc())

        stmt = select(table).where(*criteria).order_by(*ordering)
        if offset:
            stmt = stmt.offset(offset)
        if limit is not None:
            stmt = stmt.limit(limit)

        rows = self._conn.execute(stmt).mappings().all()
        return self._hydrate(kind, [dict(row) for row in rows])

    def count(self, kind: EntityKind) -> int:
        table = ENTITY_TABLES[kind]
        return int(self._conn.execute(select(func.count()).select_from(table)).scalar_one())

    def save(self, entity: Entity) -> Entity:
        """Insert or update *entity* and rewrite its attribute sets."""
        if entity.id is None:
            raise ValidationError(f"Cannot save {entity.kind} without an id", kind=entity.kind)
        if entity.created is None or entity.updated is None:
            raise ValidationError(
                f"Cannot save {entity.kind} without timestamps",
                kind=entity.kind,
                entity_id=entity.id,
            )

        table = ENTITY_TABLES[entity.kind]
        values = entity.model_dump(mode="json", exclude=set(_SET_FIELDS))
        if self.exists(entity.kind, entity.id):
            self._conn.execute(update(table).where(table.c.id == entity.id).values(**values))
        else:
            self._conn.execute(insert(table).values(**values))

        for attr in AttributeName:
            self.write_attribute(entity.kind, entity.id, attr, entity.attribute(attr))
        return entity

    def delete(self, kind: EntityKind, entity_id: str) -> Entity:
        """Remove one entity row and its attribute rows; return what was removed.

        References held by other entities (owner pointers, cluster
        membership) must already be cleared or the foreign keys reject
        the delete.
        """
        removed = self.get(kind, entity_id)
        for attr in AttributeName:
            table = ATTRIBUTE_TABLES[(kind, attr)]
            self._conn.execute(delete(table).where(table.c.entity_id == entity_id))
        table = ENTITY_TABLES[kind]
        self._conn.execute(delete(table).where(table.c.id == entity_id))
        return removed

    def delete_all(self, kind: EntityKind) -> list[Entity]:
        """Remove every row of *kind*, most recently updated first."""
        return [self.delete(kind, entity.id) for entity in self.find(kind) if entity.id]

    def touch(self, kind: EntityKind, entity_id: str, timestamp: str) -> None:
        """Refresh the ``updated`` timestamp of one row."""
        table = ENTITY_TABLES[kind]
        self._conn.execute(update(table).where(table.c.id == entity_id).values(updated=timestamp))

    # ------------------------------------------------------------------
    # Attribute sets
    # ------------------------------------------------------------------

    def read_attribute(
        self, kind: EntityKind, entity_id: str, attr: AttributeName
    ) -> frozenset[str]:
        table = ATTRIBUTE_TABLES[(kind, attr)]
        rows = self._conn.execute(select(table.c.value).where(table.c.entity_id == entity_id))
        return frozenset(str(row.value) for row in rows)

    def write_attribute(
        self,
        kind: EntityKind,
        entity_id: str,
        attr: AttributeName,
        values: Iterable[str],
    ) -> None:
        """Replace the stored members of one attribute set."""
        table = ATTRIBUTE_TABLES[(kind, attr)]
        self._conn.execute(delete(table).where(table.c.entity_id == entity_id))
        members = sorted(set(values))
        if members:
            self._conn.execute(
                insert(table), [{"entity_id": entity_id, "value": v} for v in members]
            )

    # ------------------------------------------------------------------
    # Command -> Application owner reference
    # ------------------------------------------------------------------

    def set_owner(self, command_id: str, application_id: str | None, timestamp: str) -> None:
        self._conn.execute(
            update(commands)
            .where(commands.c.id == command_id)
            .values(application_id=application_id, updated=timestamp)
        )

    def owned_command_ids(self, application_id: str) -> list[str]:
        rows = self._conn.execute(
            select(commands.c.id)
            .where(commands.c.application_id == application_id)
            .order_by(commands.c.updated.desc(), commands.c.id.desc())
        )
        return [str(row.id) for row in rows]

    # ------------------------------------------------------------------
    # Cluster <-> Command association
    # ------------------------------------------------------------------

    def linked_command_ids(self, cluster_id: str) -> list[str]:
        """Command ids of a cluster in association order."""
        rows = self._conn.execute(
            select(cluster_commands.c.command_id)
            .where(cluster_commands.c.cluster_id == cluster_id)
            .order_by(cluster_commands.c.position)
        )
        return [str(row.command_id) for row in rows]

    def linked_cluster_ids(self, command_id: str) -> list[str]:
        rows = self._conn.execute(
            select(cluster_commands.c.cluster_id)
            .where(cluster_commands.c.command_id == command_id)
            .order_by(cluster_commands.c.cluster_id)
        )
        return [str(row.cluster_id) for row in rows]

    def link(self, cluster_id: str, command_id: str) -> bool:
        """Append *command_id* to the cluster. Returns False if already linked."""
        existing = self._conn.execute(
            select(cluster_commands.c.command_id).where(
                cluster_commands.c.cluster_id == cluster_id,
                cluster_commands.c.command_id == command_id,
            )
        ).first()
        if existing is not None:
            return False

        last = self._conn.execute(
            select(func.max(cluster_commands.c.position)).where(
                cluster_commands.c.cluster_id == cluster_id
            )
        ).scalar_one_or_none()
        position = 0 if last is None else int(last) + 1
        self._conn.execute(
            insert(cluster_commands).values(
                cluster_id=cluster_id, command_id=command_id, position=position
            )
        )
        return True

    def unlink(self, cluster_id: str, command_id: str) -> bool:
        """Remove one association row. Returns False if there was none."""
        result = self._conn.execute(
            delete(cluster_commands).where(
                cluster_commands.c.cluster_id == cluster_id,
                cluster_commands.c.command_id == command_id,
            )
        )
        return bool(result.rowcount)

    def unlink_all_for_cluster(self, cluster_id: str) -> list[str]:
        """Drop every association of a cluster; return the command ids released."""
        released = self.linked_command_ids(cluster_id)
        self._conn.execute(
            delete(cluster_commands).where(cluster_commands.c.cluster_id == cluster_id)
        )
        return released

    def unlink_all_for_command(self, command_id: str) -> list[str]:
        """Drop every association of a command; return the cluster ids released."""
        released = self.linked_cluster_ids(command_id)
        self._conn.execute(
            delete(cluster_commands).where(cluster_commands.c.command_id == command_id)
        )
        return released

    # ------------------------------------------------------------------
    # Hydration
    # ------------------------------------------------------------------

    def _attribute_map(
        self, kind: EntityKind, attr: AttributeName, entity_ids: list[str]
    ) -> dict[str, set[str]]:
        table: Table = ATTRIBUTE_TABLES[(kind, attr)]
        rows = self._conn.execute(
            select(table.c.entity_id, table.c.value).where(table.c.entity_id.in_(entity_ids))
        )
        members: dict[str, set[str]] = {}
        for row in rows:
            members.setdefault(str(row.entity_id), set()).add(str(row.value))
        return members

    def _hydrate(self, kind: EntityKind, rows: list[dict[str, Any]]) -> list[Entity]:
        if not rows:
            return []
        ids = [str(row["id"]) for row in rows]
        sets = {attr: self._attribute_map(kind, attr, ids) for attr in AttributeName}
        model = ENTITY_TYPES[kind]
        entities: list[Entity] = []
        for row in rows:
            payload = dict(row)
            for attr in AttributeName:
                payload[attr.value] = frozenset(sets[attr].get(str(row["id"]), ()))
            entities.append(model.model_validate(payload))
        return entities
