"""SQLAlchemy Core table definitions for the jobreg database.

One table per entity kind, one child table per (kind, attribute set),
and a single association table between clusters and commands. The
association rows are the only record of cluster membership, so both
directions of the many-to-many are always read from the same data.
"""

from __future__ import annotations

from sqlalchemy import (
    Column,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    Table,
    Text,
    UniqueConstraint,
)

from jobreg.domain.types import AttributeName, EntityKind

metadata = MetaData()


def _entity_columns() -> list[Column]:
    return [
        Column("id", Text, primary_key=True),
        Column("name", Text, nullable=False),
        Column("user", Text, nullable=False),
        Column("version", Text, nullable=False),
        Column("status", Text, nullable=False),
        Column("created", Text, nullable=False),  # ISO-8601, microseconds
        Column("updated", Text, nullable=False),
    ]


applications = Table("applications", metadata, *_entity_columns())

commands = Table(
    "commands",
    metadata,
    *_entity_columns(),
    Column("executable", Text, nullable=False),
    Column("job_type", Text),
    Column("application_id", Text, ForeignKey("applications.id")),
)

clusters = Table(
    "clusters",
    metadata,
    *_entity_columns(),
    Column("cluster_type", Text),
)

cluster_commands = Table(
    "cluster_commands",
    metadata,
    Column("cluster_id", Text, ForeignKey("clusters.id"), nullable=False),
    Column("command_id", Text, ForeignKey("commands.id"), nullable=False),
    Column("position", Integer, nullable=False),
    UniqueConstraint("cluster_id", "command_id"),
)

ENTITY_TABLES: dict[EntityKind, Table] = {
    EntityKind.APPLICATION: applications,
    EntityKind.COMMAND: commands,
    EntityKind.CLUSTER: clusters,
}


def _attribute_table(kind: EntityKind, attr: AttributeName) -> Table:
    parent = ENTITY_TABLES[kind]
    table = Table(
        f"{kind.value}_{attr.value}",
        metadata,
        Column("entity_id", Text, ForeignKey(f"{parent.name}.id"), nullable=False),
        Column("value", Text, nullable=False),
        UniqueConstraint("entity_id", "value"),
    )
    Index(f"ix_{table.name}_value", table.c.value)
    return table


ATTRIBUTE_TABLES: dict[tuple[EntityKind, AttributeName], Table] = {
    (kind, attr): _attribute_table(kind, attr) for kind in EntityKind for attr in AttributeName
}

# ---------------------------------------------------------------------------
# Indexes for frequently filtered columns
# ---------------------------------------------------------------------------

for _table in ENTITY_TABLES.values():
    Index(f"ix_{_table.name}_name", _table.c.name)
    Index(f"ix_{_table.name}_user", _table.c.user)
    Index(f"ix_{_table.name}_updated", _table.c.updated)

Index("ix_commands_application_id", commands.c.application_id)
Index("ix_cluster_commands_command", cluster_commands.c.command_id)
