"""ClusterService: clusters and their ordered command lists.

Every method returns the cluster's command list as it stands after the
change, in association order.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

from jobreg.domain.types import EntityKind
from jobreg.services._helpers import require_id
from jobreg.services.contracts import entity_list_payload
from jobreg.services.entities import EntityService
from jobreg.services.relationships import RelationshipGraph
from jobreg.services.result import ServiceResult
from jobreg.services.telemetry import traced

if TYPE_CHECKING:
    from jobreg.infrastructure.registry import RegistryTransaction


class ClusterService(EntityService):
    kind = EntityKind.CLUSTER

    @traced
    def add_commands(
        self, cluster_id: str | None, command_ids: Iterable[str] | None
    ) -> ServiceResult:
        """Append commands; ids that are already members are reported as warnings."""

        def work(txn: RegistryTransaction, warnings: list[str]) -> dict[str, Any]:
            target = require_id(self.kind, cluster_id)
            ids = RelationshipGraph.require_command_ids(target, command_ids)
            members = set(txn.store.linked_command_ids(target))
            warnings.extend(
                f"Command {cid} is already in cluster {target}" for cid in ids if cid in members
            )
            commands = RelationshipGraph(txn.store).add_commands_to_cluster(target, ids)
            return entity_list_payload(commands)

        return self._execute("add_commands_for_cluster", work)

    @traced
    def get_commands(self, cluster_id: str | None) -> ServiceResult:
        def work(txn: RegistryTransaction, warnings: list[str]) -> dict[str, Any]:
            commands = RelationshipGraph(txn.store).get_commands_for_cluster(cluster_id)
            return entity_list_payload(commands)

        return self._execute("get_commands_for_cluster", work)

    @traced
    def replace_commands(
        self, cluster_id: str | None, command_ids: Iterable[str] | None
    ) -> ServiceResult:
        def work(txn: RegistryTransaction, warnings: list[str]) -> dict[str, Any]:
            graph = RelationshipGraph(txn.store)
            return entity_list_payload(graph.replace_commands_for_cluster(cluster_id, command_ids))

        return self._execute("update_commands_for_cluster", work)

    @traced
    def remove_command(self, cluster_id: str | None, command_id: str | None) -> ServiceResult:
        def work(txn: RegistryTransaction, warnings: list[str]) -> dict[str, Any]:
            graph = RelationshipGraph(txn.store)
            return entity_list_payload(graph.remove_command_from_cluster(cluster_id, command_id))

        return self._execute("remove_command_for_cluster", work)

    @traced
    def remove_all_commands(self, cluster_id: str | None) -> ServiceResult:
        def work(txn: RegistryTransaction, warnings: list[str]) -> dict[str, Any]:
            graph = RelationshipGraph(txn.store)
            return entity_list_payload(graph.remove_all_commands_for_cluster(cluster_id))

        return self._execute("remove_all_commands_for_cluster", work)
