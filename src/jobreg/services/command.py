"""CommandService: commands, their owning application, and their clusters."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from jobreg.domain.types import EntityKind
from jobreg.services.contracts import entity_list_payload, entity_payload
from jobreg.services.entities import EntityService
from jobreg.services.relationships import RelationshipGraph
from jobreg.services.result import ServiceResult
from jobreg.services.telemetry import traced

if TYPE_CHECKING:
    from jobreg.domain.entities import Application
    from jobreg.infrastructure.registry import RegistryTransaction


class CommandService(EntityService):
    kind = EntityKind.COMMAND

    @traced
    def set_application(
        self, command_id: str | None, application: Application | str | None
    ) -> ServiceResult:
        """Point the command at an application, replacing any previous owner.

        *application* may be an :class:`Application` or its id.
        """

        def work(txn: RegistryTransaction, warnings: list[str]) -> dict[str, Any]:
            graph = RelationshipGraph(txn.store)
            return entity_payload(graph.set_owner_application(command_id, application))

        return self._execute("set_application_for_command", work)

    @traced
    def get_application(self, command_id: str | None) -> ServiceResult:
        def work(txn: RegistryTransaction, warnings: list[str]) -> dict[str, Any]:
            return entity_payload(RelationshipGraph(txn.store).get_owner_application(command_id))

        return self._execute("get_application_for_command", work)

    @traced
    def remove_application(self, command_id: str | None) -> ServiceResult:
        """Clear the owner reference; the removed application is returned."""

        def work(txn: RegistryTransaction, warnings: list[str]) -> dict[str, Any]:
            graph = RelationshipGraph(txn.store)
            return entity_payload(graph.remove_owner_application(command_id))

        return self._execute("remove_application_for_command", work)

    @traced
    def get_clusters(self, command_id: str | None) -> ServiceResult:
        def work(txn: RegistryTransaction, warnings: list[str]) -> dict[str, Any]:
            clusters = RelationshipGraph(txn.store).get_clusters_for_command(command_id)
            return entity_list_payload(clusters)

        return self._execute("get_clusters_for_command", work)
