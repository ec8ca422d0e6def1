"""RelationshipGraph: owner references and cluster membership.

Two associations, both identifier-based:

- Command -> Application: the only stored pointer (``commands.application_id``).
  ``get_commands_for_application`` computes the inverse on demand.
- Cluster <-> Command: one row per membership in ``cluster_commands``.
  Both directions are read from the same rows, so a cluster's command
  list and a command's cluster list cannot disagree.

Every mutation touches ``updated`` on each entity whose relationships
changed.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING, cast

from jobreg.domain.entities import Application, Cluster, Command
from jobreg.domain.errors import NotFoundError, ValidationError
from jobreg.domain.ids import is_blank
from jobreg.domain.types import EntityKind
from jobreg.services._helpers import now_iso, require_id

if TYPE_CHECKING:
    from jobreg.infrastructure.store import EntityStore

logger = logging.getLogger(__name__)

APP = EntityKind.APPLICATION
CMD = EntityKind.COMMAND
CLU = EntityKind.CLUSTER


class RelationshipGraph:
    """Sole writer of owner references and cluster/command associations."""

    def __init__(self, store: EntityStore) -> None:
        self._store = store

    # ------------------------------------------------------------------
    # Command -> Application
    # ------------------------------------------------------------------

    def set_owner_application(
        self, command_id: str | None, application: Application | str | None
    ) -> Application:
        """Point the command at *application*, replacing any previous owner."""
        command_id = require_id(CMD, command_id)
        if application is None:
            raise ValidationError(
                "No application entered. Unable to continue.", kind=CMD, entity_id=command_id
            )
        application_id = application.id if isinstance(application, Application) else application
        application_id = require_id(APP, application_id)

        self._require(CMD, command_id)
        owner = cast(Application, self._store.get(APP, application_id))
        self._store.set_owner(command_id, application_id, now_iso())
        logger.debug("Command %s now owned by application %s", command_id, application_id)
        return owner

    def get_owner_application(self, command_id: str | None) -> Application:
        command_id = require_id(CMD, command_id)
        command = cast(Command, self._store.get(CMD, command_id))
        if command.application_id is None:
            raise NotFoundError(
                f"No application set for command with ID: {command_id}",
                kind=CMD,
                entity_id=command_id,
            )
        return cast(Application, self._store.get(APP, command.application_id))

    def remove_owner_application(self, command_id: str | None) -> Application:
        """Clear the owner reference and return the application that was removed."""
        owner = self.get_owner_application(command_id)
        assert command_id is not None
        self._store.set_owner(command_id, None, now_iso())
        logger.debug("Command %s detached from application %s", command_id, owner.id)
        return owner

    def get_commands_for_application(self, application_id: str | None) -> list[Command]:
        """Commands whose owner is *application_id*; empty if none."""
        application_id = require_id(APP, application_id)
        self._require(APP, application_id)
        ids = self._store.owned_command_ids(application_id)
        return cast(list[Command], self._store.get_many(CMD, ids))

    # ------------------------------------------------------------------
    # Cluster <-> Command
    # ------------------------------------------------------------------

    def add_commands_to_cluster(
        self, cluster_id: str | None, command_ids: Iterable[str] | None
    ) -> list[Command]:
        """Append commands to the cluster in the order given; members are kept once."""
        cluster_id = require_id(CLU, cluster_id)
        ids = self.require_command_ids(cluster_id, command_ids)
        self._require(CLU, cluster_id)
        for command_id in ids:
            self._require(CMD, command_id)

        now = now_iso()
        for command_id in ids:
            if self._store.link(cluster_id, command_id):
                self._store.touch(CMD, command_id, now)
        self._store.touch(CLU, cluster_id, now)
        return self._commands_of(cluster_id)

    def replace_commands_for_cluster(
        self, cluster_id: str | None, command_ids: Iterable[str] | None
    ) -> list[Command]:
        """Make the cluster's command list exactly *command_ids*, in that order."""
        cluster_id = require_id(CLU, cluster_id)
        ids = self.require_command_ids(cluster_id, command_ids)
        self._require(CLU, cluster_id)
        for command_id in ids:
            self._require(CMD, command_id)

        now = now_iso()
        for released in self._store.unlink_all_for_cluster(cluster_id):
            self._store.touch(CMD, released, now)
        for command_id in ids:
            if self._store.link(cluster_id, command_id):
                self._store.touch(CMD, command_id, now)
        self._store.touch(CLU, cluster_id, now)
        return self._commands_of(cluster_id)

    def remove_command_from_cluster(
        self, cluster_id: str | None, command_id: str | None
    ) -> list[Command]:
        """Drop one membership. Removing a non-member leaves the cluster unchanged."""
        cluster_id = require_id(CLU, cluster_id)
        command_id = require_id(CMD, command_id)
        self._require(CLU, cluster_id)
        self._require(CMD, command_id)

        if self._store.unlink(cluster_id, command_id):
            now = now_iso()
            self._store.touch(CLU, cluster_id, now)
            self._store.touch(CMD, command_id, now)
        return self._commands_of(cluster_id)

    def remove_all_commands_for_cluster(self, cluster_id: str | None) -> list[Command]:
        cluster_id = require_id(CLU, cluster_id)
        self._require(CLU, cluster_id)

        now = now_iso()
        for released in self._store.unlink_all_for_cluster(cluster_id):
            self._store.touch(CMD, released, now)
        self._store.touch(CLU, cluster_id, now)
        return []

    def get_commands_for_cluster(self, cluster_id: str | None) -> list[Command]:
        cluster_id = require_id(CLU, cluster_id)
        self._require(CLU, cluster_id)
        return self._commands_of(cluster_id)

    def get_clusters_for_command(self, command_id: str | None) -> list[Cluster]:
        command_id = require_id(CMD, command_id)
        self._require(CMD, command_id)
        ids = self._store.linked_cluster_ids(command_id)
        return cast(list[Cluster], self._store.get_many(CLU, ids))

    # ------------------------------------------------------------------

    def _require(self, kind: EntityKind, entity_id: str) -> None:
        if not self._store.exists(kind, entity_id):
            raise NotFoundError.for_entity(kind, entity_id)

    @staticmethod
    def require_command_ids(cluster_id: str, command_ids: Iterable[str] | None) -> list[str]:
        if command_ids is None or isinstance(command_ids, str):
            raise ValidationError(
                "No commands entered. Unable to continue.", kind=CLU, entity_id=cluster_id
            )
        ids = list(dict.fromkeys(command_ids))
        if any(is_blank(command_id) for command_id in ids):
            raise ValidationError(
                "Blank command id in list. Unable to continue.", kind=CLU, entity_id=cluster_id
            )
        return ids

    def _commands_of(self, cluster_id: str) -> list[Command]:
        ids = self._store.linked_command_ids(cluster_id)
        return cast(list[Command], self._store.get_many(CMD, ids))
