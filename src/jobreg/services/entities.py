"""EntityService: CRUD, search, and attribute-set operations for one kind.

Concrete services bind ``kind``. Every public method runs as a single
transaction through :meth:`BaseService._execute` and returns a
``ServiceResult``; core errors become failed results there.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING, Any, ClassVar

from jobreg.domain.entities import ENTITY_TYPES, PATCH_TYPES, Command, Entity, EntityPatch
from jobreg.domain.errors import ConflictError, ValidationError
from jobreg.domain.ids import generate_id, is_blank
from jobreg.domain.tags import enforce_protected_tags
from jobreg.domain.types import AttributeName, EntityKind
from jobreg.services._helpers import now_iso, require_id, require_values
from jobreg.services.attributes import AttributeSetManager
from jobreg.services.base import BaseService
from jobreg.services.consistency import ConsistencyEnforcer
from jobreg.services.contracts import attribute_payload, entity_list_payload, entity_payload
from jobreg.services.query import QueryEngine
from jobreg.services.relationships import RelationshipGraph
from jobreg.services.result import ServiceResult
from jobreg.services.telemetry import traced

if TYPE_CHECKING:
    from jobreg.infrastructure.registry import RegistryTransaction

logger = logging.getLogger(__name__)

# Scalar fields that may never be blank, per kind
_REQUIRED_TEXT: dict[EntityKind, tuple[str, ...]] = {
    EntityKind.APPLICATION: ("name", "user", "version"),
    EntityKind.COMMAND: ("name", "user", "version", "executable"),
    EntityKind.CLUSTER: ("name", "user", "version"),
}


class EntityService(BaseService):
    """Operations shared by applications, commands, and clusters."""

    kind: ClassVar[EntityKind]

    # ------------------------------------------------------------------
    # CRUD
    # ------------------------------------------------------------------

    @traced
    def create(self, entity: Entity | None) -> ServiceResult:
        """Persist a new entity.

        The id is generated when absent or blank. Tags always gain the
        entity's id and name. A command's ``application_id``, when set,
        must name an existing application. Blank members in any attribute
        set are rejected.
        """
        kind = self.kind

        def work(txn: RegistryTransaction, warnings: list[str]) -> dict[str, Any]:
            candidate = self._require_entity(entity)
            self._require_text(candidate.model_dump(include=set(_REQUIRED_TEXT[kind])))

            entity_id = candidate.id if candidate.id and not is_blank(candidate.id) else generate_id()
            for attr in AttributeName:
                require_values(kind, entity_id, attr, candidate.attribute(attr))
            if txn.store.exists(kind, entity_id):
                raise ConflictError(
                    f"A {kind} with id {entity_id} already exists", kind=kind, entity_id=entity_id
                )

            now = now_iso()
            updates: dict[str, Any] = {
                "id": entity_id,
                "tags": enforce_protected_tags(entity_id, candidate.name, candidate.tags),
                "created": now,
                "updated": now,
            }
            owner = None
            if isinstance(candidate, Command):
                owner = candidate.application_id
                updates["application_id"] = None

            txn.store.save(candidate.model_copy(update=updates))
            if owner is not None:
                RelationshipGraph(txn.store).set_owner_application(entity_id, owner)
            logger.debug("Created %s %s", kind, entity_id)
            return entity_payload(txn.store.get(kind, entity_id))

        return self._execute(f"create_{kind}", work)

    @traced
    def get(self, entity_id: str | None) -> ServiceResult:
        kind = self.kind

        def work(txn: RegistryTransaction, warnings: list[str]) -> dict[str, Any]:
            return entity_payload(txn.store.get(kind, require_id(kind, entity_id)))

        return self._execute(f"get_{kind}", work)

    @traced
    def update(self, entity_id: str | None, patch: EntityPatch | None) -> ServiceResult:
        """Apply the non-None fields of *patch* to an existing entity.

        Set-valued fields replace the current set. When the name changes
        without a tags patch, the old name tag is dropped and the new one
        forced in.
        """
        kind = self.kind

        def work(txn: RegistryTransaction, warnings: list[str]) -> dict[str, Any]:
            target_id = require_id(kind, entity_id)
            if patch is None:
                raise ValidationError(
                    f"No {kind} information entered. Unable to continue.",
                    kind=kind,
                    entity_id=target_id,
                )
            if not isinstance(patch, PATCH_TYPES[kind]):
                raise ValidationError(
                    f"Expected {PATCH_TYPES[kind].__name__}, got {type(patch).__name__}",
                    kind=kind,
                    entity_id=target_id,
                )
            if patch.id is not None and patch.id != target_id:
                raise ConflictError(
                    f"Patch id {patch.id} does not match {kind} id {target_id}",
                    kind=kind,
                    entity_id=target_id,
                )

            changes = patch.field_changes()
            self._require_text({k: v for k, v in changes.items() if k in _REQUIRED_TEXT[kind]})
            current = txn.store.get(kind, target_id)

            attribute_changes = patch.attribute_changes()
            renamed = "name" in changes and changes["name"] != current.name
            if renamed and AttributeName.TAGS not in attribute_changes:
                attribute_changes[AttributeName.TAGS] = current.tags - {current.name}

            txn.store.save(current.model_copy(update={**changes, "updated": now_iso()}))
            attributes = AttributeSetManager(txn.store)
            for attr, values in attribute_changes.items():
                attributes.replace(kind, target_id, attr, values)
            return entity_payload(txn.store.get(kind, target_id))

        return self._execute(f"update_{kind}", work)

    @traced
    def delete(self, entity_id: str | None) -> ServiceResult:
        kind = self.kind

        def work(txn: RegistryTransaction, warnings: list[str]) -> dict[str, Any]:
            return entity_payload(ConsistencyEnforcer(txn.store).delete(kind, entity_id))

        return self._execute(f"delete_{kind}", work)

    @traced
    def delete_all(self) -> ServiceResult:
        kind = self.kind

        def work(txn: RegistryTransaction, warnings: list[str]) -> dict[str, Any]:
            return entity_list_payload(ConsistencyEnforcer(txn.store).delete_all(kind))

        return self._execute(f"delete_all_{kind}s", work)

    @traced
    def find(
        self,
        *,
        name: str | None = None,
        user: str | None = None,
        tags: Iterable[str] | None = None,
        statuses: Iterable[str] | None = None,
        min_updated: str | None = None,
        max_updated: str | None = None,
        page: int = 0,
        page_size: int | None = None,
        order_by: str | None = None,
        descending: bool = True,
    ) -> ServiceResult:
        """Search this kind. ``page_size`` defaults to ``[query] default_page_size``."""
        kind = self.kind
        size = self._registry.settings.query.default_page_size if page_size is None else page_size

        def work(txn: RegistryTransaction, warnings: list[str]) -> dict[str, Any]:
            found = QueryEngine(txn.store).find(
                kind,
                name=name,
                user=user,
                tags=tags,
                statuses=statuses,
                min_updated=min_updated,
                max_updated=max_updated,
                page=page,
                page_size=size,
                order_by=order_by,
                descending=descending,
            )
            return entity_list_payload(found)

        return self._execute(f"find_{kind}s", work)

    # ------------------------------------------------------------------
    # Attribute sets
    # ------------------------------------------------------------------

    @traced
    def get_attribute(self, entity_id: str | None, attr: AttributeName | str) -> ServiceResult:
        kind = self.kind

        def work(txn: RegistryTransaction, warnings: list[str]) -> dict[str, Any]:
            values = AttributeSetManager(txn.store).get(kind, entity_id, attr)
            return attribute_payload(kind, str(entity_id), attr, values)

        return self._execute(f"get_{kind}_{attr}", work)

    @traced
    def add_attribute(
        self, entity_id: str | None, attr: AttributeName | str, values: Iterable[str] | None
    ) -> ServiceResult:
        kind = self.kind

        def work(txn: RegistryTransaction, warnings: list[str]) -> dict[str, Any]:
            members = AttributeSetManager(txn.store).add(kind, entity_id, attr, values)
            return attribute_payload(kind, str(entity_id), attr, members)

        return self._execute(f"add_{kind}_{attr}", work)

    @traced
    def replace_attribute(
        self, entity_id: str | None, attr: AttributeName | str, values: Iterable[str] | None
    ) -> ServiceResult:
        kind = self.kind

        def work(txn: RegistryTransaction, warnings: list[str]) -> dict[str, Any]:
            members = AttributeSetManager(txn.store).replace(kind, entity_id, attr, values)
            return attribute_payload(kind, str(entity_id), attr, members)

        return self._execute(f"update_{kind}_{attr}", work)

    @traced
    def remove_attribute(
        self, entity_id: str | None, attr: AttributeName | str, value: str | None
    ) -> ServiceResult:
        kind = self.kind

        def work(txn: RegistryTransaction, warnings: list[str]) -> dict[str, Any]:
            manager = AttributeSetManager(txn.store)
            before = manager.get(kind, entity_id, attr)
            members = manager.remove_one(kind, entity_id, attr, value)
            if value is not None and value not in before:
                warnings.append(f"{value!r} was not in {attr}; nothing removed")
            return attribute_payload(kind, str(entity_id), attr, members)

        return self._execute(f"remove_{kind}_{attr}", work)

    @traced
    def remove_all_attribute(
        self, entity_id: str | None, attr: AttributeName | str
    ) -> ServiceResult:
        kind = self.kind

        def work(txn: RegistryTransaction, warnings: list[str]) -> dict[str, Any]:
            members = AttributeSetManager(txn.store).remove_all(kind, entity_id, attr)
            return attribute_payload(kind, str(entity_id), attr, members)

        return self._execute(f"remove_all_{kind}_{attr}", work)

    # ------------------------------------------------------------------

    def _require_entity(self, entity: Entity | None) -> Entity:
        if entity is None:
            raise ValidationError(
                f"No {self.kind} entered. Unable to continue.", kind=self.kind
            )
        expected = ENTITY_TYPES[self.kind]
        if not isinstance(entity, expected):
            raise ValidationError(
                f"Expected {expected.__name__}, got {type(entity).__name__}", kind=self.kind
            )
        return entity

    def _require_text(self, fields: dict[str, Any]) -> None:
        for field, value in fields.items():
            if value is None or is_blank(str(value)):
                raise ValidationError(
                    f"No {self.kind} {field} entered. Unable to continue.", kind=self.kind
                )
