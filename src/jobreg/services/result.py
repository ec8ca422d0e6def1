"""What every public registry operation hands back.

A call to ApplicationService, CommandService, ClusterService or
InitService never raises a ``RegistryError`` and never returns None.
It returns a ``ServiceResult`` whose ``op`` names the operation
(``find_clusters``, ``add_commands_for_cluster``, ...). On success
``data`` holds a payload validated by :mod:`jobreg.services.contracts`;
on failure ``error`` says which rule was broken and for which entity.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field

ErrorCode = Literal["VALIDATION_FAILED", "NOT_FOUND", "CONFLICT", "STORE_ERROR", "REGISTRY_ERROR"]


class ServiceError(BaseModel):
    """Why a registry operation was refused.

    ``code`` mirrors the ``code`` of the raised ``RegistryError``.
    ``detail`` holds ``kind`` and ``id`` when the failure concerns a
    particular entity, e.g. ``{"kind": "command", "id": "command9"}``.
    """

    model_config = {"frozen": True}

    code: ErrorCode
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)


class ServiceResult(BaseModel):
    """Outcome of one registry operation, committed or rolled back as a unit.

    Attributes:
        ok: True when the transaction committed.
        op: Operation name, e.g. ``"remove_all_cluster_tags"``.
        data: Entity, entity list, attribute set, or init report.
        warnings: Requests that succeeded without effect, such as adding a
            command a cluster already holds.
        error: Set when ``ok`` is False.
        meta: ``{"telemetry": ...}`` when ``--verbose`` tracing is on.
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None
    meta: dict[str, Any] | None = None
