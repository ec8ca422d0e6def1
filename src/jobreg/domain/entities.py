"""Pydantic models for registry entities and their partial-update patches.

Entities are frozen value objects. Mutation happens by building a new
model with ``model_copy(update=...)`` and handing it to the store.
Relationships are identifier-based: a Command stores its owning
Application's id, and every inverse lookup is computed on demand.
"""

from __future__ import annotations

from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field, field_serializer

from jobreg.domain.types import (
    ApplicationStatus,
    AttributeName,
    ClusterStatus,
    CommandStatus,
    EntityKind,
)


class Entity(BaseModel):
    """Shape shared by Application, Command, and Cluster."""

    model_config = ConfigDict(frozen=True)

    kind: ClassVar[EntityKind]

    id: str | None = None
    name: str
    user: str
    version: str
    tags: frozenset[str] = Field(default_factory=frozenset)
    configs: frozenset[str] = Field(default_factory=frozenset)
    jars: frozenset[str] = Field(default_factory=frozenset)
    created: str | None = None
    updated: str | None = None

    @field_serializer("tags", "configs", "jars")
    def _serialize_set(self, values: frozenset[str]) -> list[str]:
        return sorted(values)

    def attribute(self, attr: AttributeName) -> frozenset[str]:
        """Current members of the attribute set *attr*."""
        return getattr(self, attr.value)


class Application(Entity):
    kind: ClassVar[EntityKind] = EntityKind.APPLICATION

    status: ApplicationStatus


class Command(Entity):
    kind: ClassVar[EntityKind] = EntityKind.COMMAND

    status: CommandStatus
    executable: str
    job_type: str | None = None
    application_id: str | None = None  # owner reference


class Cluster(Entity):
    kind: ClassVar[EntityKind] = EntityKind.CLUSTER

    status: ClusterStatus
    cluster_type: str | None = None


# ---------------------------------------------------------------------------
# Patches: None means "leave unchanged"
# ---------------------------------------------------------------------------


class EntityPatch(BaseModel):
    """Partial update for an entity.

    ``id`` may be supplied but must equal the target id. Set-valued
    fields, when present, replace the current set.
    """

    model_config = ConfigDict(frozen=True)

    id: str | None = None
    name: str | None = None
    user: str | None = None
    version: str | None = None
    tags: frozenset[str] | None = None
    configs: frozenset[str] | None = None
    jars: frozenset[str] | None = None

    def field_changes(self) -> dict[str, Any]:
        """Non-None scalar fields to overwrite on the target entity."""
        set_fields = {attr.value for attr in AttributeName}
        return {
            key: value
            for key, value in self
            if value is not None and key != "id" and key not in set_fields
        }

    def attribute_changes(self) -> dict[AttributeName, frozenset[str]]:
        """Attribute sets to replace, keyed by attribute name."""
        changes: dict[AttributeName, frozenset[str]] = {}
        for attr in AttributeName:
            values = getattr(self, attr.value)
            if values is not None:
                changes[attr] = values
        return changes


class ApplicationPatch(EntityPatch):
    status: ApplicationStatus | None = None


class CommandPatch(EntityPatch):
    status: CommandStatus | None = None
    executable: str | None = None
    job_type: str | None = None


class ClusterPatch(EntityPatch):
    status: ClusterStatus | None = None
    cluster_type: str | None = None


ENTITY_TYPES: dict[EntityKind, type[Entity]] = {
    EntityKind.APPLICATION: Application,
    EntityKind.COMMAND: Command,
    EntityKind.CLUSTER: Cluster,
}

PATCH_TYPES: dict[EntityKind, type[EntityPatch]] = {
    EntityKind.APPLICATION: ApplicationPatch,
    EntityKind.COMMAND: CommandPatch,
    EntityKind.CLUSTER: ClusterPatch,
}
