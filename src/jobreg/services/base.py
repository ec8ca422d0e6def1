"""BaseService: abstract foundation for all jobreg services.

Every service receives a :class:`Registry` at construction time and owns
its transaction boundary: one public call, one transaction. Registry
errors raised by the core are converted into failed ``ServiceResult``
objects here, after the transaction has rolled back.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from jobreg.domain.errors import RegistryError, StoreError
from jobreg.services.result import ServiceError, ServiceResult

if TYPE_CHECKING:
    from jobreg.infrastructure.registry import Registry, RegistryTransaction

logger = logging.getLogger(__name__)

Work = Callable[["RegistryTransaction", list[str]], dict[str, Any]]


class BaseService:
    """Abstract base for all service-layer classes.

    Usage::

        class ApplicationService(EntityService):
            def get_commands(self, application_id: str) -> ServiceResult:
                return self._execute("get_commands_for_application", work)
    """

    def __init__(self, registry: Registry) -> None:
        self._registry = registry

    def _execute(self, op: str, work: Work) -> ServiceResult:
        """Run *work* inside one transaction and wrap the outcome.

        *work* receives the transaction and a warnings list, and returns
        the success payload. Any ``RegistryError`` it raises rolls the
        transaction back and becomes a failed result.
        """
        warnings: list[str] = []
        try:
            with self._registry.transaction() as txn:
                data = work(txn, warnings)
        except RegistryError as exc:
            return _failure(op, exc)
        return ServiceResult(ok=True, op=op, data=data, warnings=warnings)


def _failure(op: str, exc: RegistryError) -> ServiceResult:
    level = logging.ERROR if isinstance(exc, StoreError) else logging.INFO
    logger.log(level, "%s failed [%s]: %s", op, exc.code, exc.message)
    return ServiceResult(
        ok=False,
        op=op,
        error=ServiceError(code=exc.code, message=exc.message, detail=exc.detail),
    )
