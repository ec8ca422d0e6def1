"""Registry error taxonomy.

Core components raise these; the service layer converts them into
``ServiceResult`` failures at its boundary. Each error carries the
entity kind and id it concerns so callers can act on it.
"""

from __future__ import annotations

from typing import Any, ClassVar


class RegistryError(Exception):
    """Base class for every failure raised by the registry core."""

    code: ClassVar[str] = "REGISTRY_ERROR"

    def __init__(
        self,
        message: str,
        *,
        kind: str | None = None,
        entity_id: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.kind = kind
        self.entity_id = entity_id

    @property
    def detail(self) -> dict[str, Any]:
        detail: dict[str, Any] = {}
        if self.kind is not None:
            detail["kind"] = str(self.kind)
        if self.entity_id is not None:
            detail["id"] = self.entity_id
        return detail


class ValidationError(RegistryError):
    """A required argument is missing or malformed, or a protected invariant would break."""

    code = "VALIDATION_FAILED"


class NotFoundError(RegistryError):
    """The entity, or a related entity it references, does not exist."""

    code = "NOT_FOUND"

    @classmethod
    def for_entity(cls, kind: str, entity_id: str) -> NotFoundError:
        return cls(f"No {kind} found with ID: {entity_id}", kind=kind, entity_id=entity_id)


class ConflictError(RegistryError):
    """The id already exists, or a patch id disagrees with the target id."""

    code = "CONFLICT"


class StoreError(RegistryError):
    """The backing store failed."""

    code = "STORE_ERROR"
