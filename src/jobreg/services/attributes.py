"""AttributeSetManager: the five set operations for tags, configs, and jars.

One contract parameterized by (kind, id, attribute). Every operation
checks its arguments before touching the store, then resolves the
entity, then applies the effect. Tags always keep the entity's own
``id`` and ``name``; :func:`enforce_protected_tags` is applied at every
write so no path can strip them.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING

from jobreg.domain.errors import ValidationError
from jobreg.domain.tags import enforce_protected_tags, is_protected_tag
from jobreg.domain.types import AttributeName, EntityKind
from jobreg.services._helpers import (
    now_iso,
    require_attribute,
    require_id,
    require_kind,
    require_values,
)

if TYPE_CHECKING:
    from jobreg.domain.entities import Entity
    from jobreg.infrastructure.store import EntityStore

logger = logging.getLogger(__name__)


class AttributeSetManager:
    """Sole writer of entity attribute sets."""

    def __init__(self, store: EntityStore) -> None:
        self._store = store

    def get(
        self, kind: EntityKind | str, entity_id: str | None, attr: AttributeName | str
    ) -> frozenset[str]:
        kind, entity_id, attr = self._check(kind, entity_id, attr)
        return self._store.get(kind, entity_id).attribute(attr)

    def add(
        self,
        kind: EntityKind | str,
        entity_id: str | None,
        attr: AttributeName | str,
        values: Iterable[str] | None,
    ) -> frozenset[str]:
        """Union *values* into the set. An empty collection is a no-op union."""
        kind, entity_id, attr = self._check(kind, entity_id, attr)
        members = require_values(kind, entity_id, attr, values)
        entity = self._store.get(kind, entity_id)
        return self._write(entity, attr, entity.attribute(attr) | members)

    def replace(
        self,
        kind: EntityKind | str,
        entity_id: str | None,
        attr: AttributeName | str,
        values: Iterable[str] | None,
    ) -> frozenset[str]:
        """Make the set exactly *values* (plus ``{id, name}`` for tags)."""
        kind, entity_id, attr = self._check(kind, entity_id, attr)
        members = require_values(kind, entity_id, attr, values)
        entity = self._store.get(kind, entity_id)
        return self._write(entity, attr, members)

    def remove_one(
        self,
        kind: EntityKind | str,
        entity_id: str | None,
        attr: AttributeName | str,
        value: str | None,
    ) -> frozenset[str]:
        """Remove a single member.

        None, or a value that is not a member, leaves the set unchanged
        and succeeds. Removing a tag equal to the entity's id or name is
        rejected.
        """
        kind, entity_id, attr = self._check(kind, entity_id, attr)
        entity = self._store.get(kind, entity_id)
        current = entity.attribute(attr)

        if (
            value is not None
            and attr is AttributeName.TAGS
            and is_protected_tag(entity_id, entity.name, value)
        ):
            raise ValidationError(
                f"Cannot delete tag {value!r}: it is the {kind}'s own id or name",
                kind=kind,
                entity_id=entity_id,
            )
        if value is None or value not in current:
            return current
        return self._write(entity, attr, current - {value})

    def remove_all(
        self, kind: EntityKind | str, entity_id: str | None, attr: AttributeName | str
    ) -> frozenset[str]:
        """Empty the set; tags fall back to exactly ``{id, name}``."""
        kind, entity_id, attr = self._check(kind, entity_id, attr)
        entity = self._store.get(kind, entity_id)
        return self._write(entity, attr, frozenset())

    # ------------------------------------------------------------------

    @staticmethod
    def _check(
        kind: EntityKind | str, entity_id: str | None, attr: AttributeName | str
    ) -> tuple[EntityKind, str, AttributeName]:
        resolved = require_kind(kind)
        return resolved, require_id(resolved, entity_id), require_attribute(resolved, attr)

    def _write(self, entity: Entity, attr: AttributeName, values: frozenset[str]) -> frozenset[str]:
        assert entity.id is not None
        if attr is AttributeName.TAGS:
            values = enforce_protected_tags(entity.id, entity.name, values)
        self._store.write_attribute(entity.kind, entity.id, attr, values)
        self._store.touch(entity.kind, entity.id, now_iso())
        logger.debug("Wrote %d %s for %s %s", len(values), attr.value, entity.kind, entity.id)
        return values
