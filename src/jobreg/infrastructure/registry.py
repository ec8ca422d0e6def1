"""Registry: the repository with a single transactional boundary.

The Registry is the single dependency injected into every service. It
owns the database engine and hands out :class:`RegistryTransaction`
objects through :meth:`Registry.transaction`:

- Commit when the block exits normally.
- Roll back on any exception, so a cascade that fails halfway leaves
  the store as if the operation never started.
- Release the connection on every exit path.
- Translate driver failures into :class:`StoreError`.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from sqlalchemy.exc import SQLAlchemyError

from jobreg.domain.errors import StoreError
from jobreg.infrastructure.database.engine import init_database
from jobreg.infrastructure.store import EntityStore

if TYPE_CHECKING:
    from collections.abc import Iterator

    from sqlalchemy import Connection
    from sqlalchemy.engine import Engine

    from jobreg.config.settings import RegistrySettings

logger = logging.getLogger(__name__)


@dataclass
class RegistryTransaction:
    """Active transaction: the raw connection plus the store bound to it."""

    conn: Connection
    store: EntityStore


class Registry:
    """Repository encapsulating database access for all entity kinds.

    Constructed once at CLI startup from :class:`RegistrySettings` and
    stored on the click context. Services receive the Registry via
    their :class:`BaseService` constructor.
    """

    def __init__(self, settings: RegistrySettings) -> None:
        self._settings = settings
        self._engine: Engine = init_database(self.db_path, echo=settings.database.echo)

    @property
    def root(self) -> Path:
        """Directory that relative database paths resolve against."""
        return self._settings.root

    @property
    def db_path(self) -> Path:
        path = Path(self._settings.database.path)
        return path if path.is_absolute() else self.root / path

    @property
    def engine(self) -> Engine:
        """The underlying SQLAlchemy engine (for direct access when needed)."""
        return self._engine

    @property
    def settings(self) -> RegistrySettings:
        return self._settings

    def close(self) -> None:
        """Dispose of pooled connections."""
        self._engine.dispose()

    @contextmanager
    def transaction(self) -> Iterator[RegistryTransaction]:
        """Scoped transaction spanning every store call made inside the block.

        Usage::

            with registry.transaction() as txn:
                txn.store.save(entity)
                txn.store.link(cluster_id, command_id)
                # Both commit on success, both roll back on failure.

        Registry errors raised inside the block propagate unchanged after
        the rollback; SQLAlchemy errors are re-raised as ``StoreError``.
        """
        try:
            with self._engine.begin() as conn:
                yield RegistryTransaction(conn=conn, store=EntityStore(conn))
        except SQLAlchemyError as exc:
            logger.error("Store failure, transaction rolled back: %s", exc)
            raise StoreError(f"Store failure: {exc}") from exc
