"""ApplicationService: applications and the commands that point at them."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from jobreg.domain.types import EntityKind
from jobreg.services.contracts import entity_list_payload
from jobreg.services.entities import EntityService
from jobreg.services.relationships import RelationshipGraph
from jobreg.services.result import ServiceResult
from jobreg.services.telemetry import traced

if TYPE_CHECKING:
    from jobreg.infrastructure.registry import RegistryTransaction


class ApplicationService(EntityService):
    kind = EntityKind.APPLICATION

    @traced
    def get_commands(self, application_id: str | None) -> ServiceResult:
        """Commands owned by the application, most recently updated first."""

        def work(txn: RegistryTransaction, warnings: list[str]) -> dict[str, Any]:
            commands = RelationshipGraph(txn.store).get_commands_for_application(application_id)
            return entity_list_payload(commands)

        return self._execute("get_commands_for_application", work)
