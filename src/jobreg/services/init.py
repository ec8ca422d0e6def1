"""InitService: create the registry database and report what it holds."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from jobreg.domain.types import EntityKind
from jobreg.services.base import BaseService
from jobreg.services.result import ServiceResult
from jobreg.services.telemetry import traced

if TYPE_CHECKING:
    from jobreg.infrastructure.registry import RegistryTransaction


class InitService(BaseService):
    """Opening a Registry creates any missing tables; this reports the result."""

    @traced
    def init_registry(self) -> ServiceResult:
        def work(txn: RegistryTransaction, warnings: list[str]) -> dict[str, Any]:
            data: dict[str, Any] = {"path": str(self._registry.db_path)}
            for kind in EntityKind:
                data[f"{kind}s"] = txn.store.count(kind)
            return data

        return self._execute("init_registry", work)
