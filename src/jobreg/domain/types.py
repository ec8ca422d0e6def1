"""Entity kinds, per-kind status enums, and attribute-set names."""

from __future__ import annotations

from enum import StrEnum


class EntityKind(StrEnum):
    """The three kinds of record held by the registry."""

    APPLICATION = "application"
    COMMAND = "command"
    CLUSTER = "cluster"


class ApplicationStatus(StrEnum):
    ACTIVE = "ACTIVE"
    DEPRECATED = "DEPRECATED"
    INACTIVE = "INACTIVE"


class CommandStatus(StrEnum):
    ACTIVE = "ACTIVE"
    DEPRECATED = "DEPRECATED"
    INACTIVE = "INACTIVE"


class ClusterStatus(StrEnum):
    UP = "UP"
    OUT_OF_SERVICE = "OUT_OF_SERVICE"
    TERMINATED = "TERMINATED"


class AttributeName(StrEnum):
    """Set-valued attributes carried by every entity kind."""

    TAGS = "tags"
    CONFIGS = "configs"
    JARS = "jars"


STATUS_TYPES: dict[EntityKind, type[StrEnum]] = {
    EntityKind.APPLICATION: ApplicationStatus,
    EntityKind.COMMAND: CommandStatus,
    EntityKind.CLUSTER: ClusterStatus,
}
