"""Typed payload contracts for the service boundary.

These models validate payload shapes before they leave the service
layer so key regressions (for example ``items`` vs ``results``) fail
fast in tests and during development.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING, Any, TypeVar

from pydantic import BaseModel, ConfigDict

if TYPE_CHECKING:
    from jobreg.domain.entities import Entity

T = TypeVar("T", bound=BaseModel)


def dump_validated(model_cls: type[T], data: dict[str, Any]) -> dict[str, Any]:
    """Validate *data* against *model_cls* and return a normalized payload dict."""
    model = model_cls.model_validate(data)
    return model.model_dump(mode="json")


class EntityItem(BaseModel):
    """One entity as returned by get/create/update/delete."""

    model_config = ConfigDict(extra="allow")

    id: str
    name: str
    user: str
    version: str
    status: str
    tags: list[str]
    configs: list[str]
    jars: list[str]
    created: str
    updated: str


class EntityListData(BaseModel):
    """Payload contract for find, delete-all, and relationship lookups."""

    count: int
    items: list[EntityItem]


class AttributeSetData(BaseModel):
    """Payload contract for the five attribute-set operations."""

    id: str
    kind: str
    attribute: str
    count: int
    values: list[str]


def entity_payload(entity: Entity) -> dict[str, Any]:
    return dump_validated(EntityItem, entity.model_dump(mode="json"))


def entity_list_payload(entities: Iterable[Entity]) -> dict[str, Any]:
    items = [entity.model_dump(mode="json") for entity in entities]
    return dump_validated(EntityListData, {"count": len(items), "items": items})


def attribute_payload(
    kind: str, entity_id: str, attribute: str, values: Iterable[str]
) -> dict[str, Any]:
    members = sorted(values)
    return dump_validated(
        AttributeSetData,
        {
            "id": entity_id,
            "kind": str(kind),
            "attribute": str(attribute),
            "count": len(members),
            "values": members,
        },
    )
