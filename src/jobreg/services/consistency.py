"""ConsistencyEnforcer: cascades applied when entities are deleted.

- Application: owned commands are detached (owner cleared), never deleted.
- Command: removed from every cluster it belongs to.
- Cluster: removed from every command's cluster list; commands are kept.

All cascades run inside the caller's transaction, so a failure partway
through leaves nothing half-deleted.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from jobreg.domain.types import EntityKind
from jobreg.services._helpers import now_iso, require_id, require_kind

if TYPE_CHECKING:
    from jobreg.domain.entities import Entity
    from jobreg.infrastructure.store import EntityStore

logger = logging.getLogger(__name__)


class ConsistencyEnforcer:
    """Deletes entities while keeping every reference to them valid."""

    def __init__(self, store: EntityStore) -> None:
        self._store = store

    def delete(self, kind: EntityKind | str, entity_id: str | None) -> Entity:
        kind = require_kind(kind)
        entity_id = require_id(kind, entity_id)
        self._store.get(kind, entity_id)
        self._cascade(kind, entity_id)
        return self._store.delete(kind, entity_id)

    def delete_all(self, kind: EntityKind | str) -> list[Entity]:
        """Delete every entity of *kind*; returned most recently updated first."""
        kind = require_kind(kind)
        removed: list[Entity] = []
        for entity in self._store.find(kind):
            assert entity.id is not None
            self._cascade(kind, entity.id)
            removed.append(self._store.delete(kind, entity.id))
        if removed:
            logger.info("Deleted all %d %s records", len(removed), kind)
        return removed

    def _cascade(self, kind: EntityKind, entity_id: str) -> None:
        now = now_iso()
        if kind is EntityKind.APPLICATION:
            detached = self._store.owned_command_ids(entity_id)
            for command_id in detached:
                self._store.set_owner(command_id, None, now)
            if detached:
                logger.info(
                    "Detached %d command(s) from application %s: %s",
                    len(detached),
                    entity_id,
                    ", ".join(detached),
                )
        elif kind is EntityKind.COMMAND:
            released = self._store.unlink_all_for_command(entity_id)
            for cluster_id in released:
                self._store.touch(EntityKind.CLUSTER, cluster_id, now)
            if released:
                logger.info(
                    "Removed command %s from %d cluster(s)", entity_id, len(released)
                )
        else:
            released = self._store.unlink_all_for_cluster(entity_id)
            for command_id in released:
                self._store.touch(EntityKind.COMMAND, command_id, now)
            if released:
                logger.info(
                    "Released %d command(s) from cluster %s", len(released), entity_id
                )
