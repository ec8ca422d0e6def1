"""QueryEngine: filtered, paginated, ordered search over one entity kind.

Filters combine with AND. ``tags`` is a superset test: one
``id IN (SELECT entity_id ... WHERE value = :tag)`` clause per tag,
so each extra tag can only narrow the result.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING

from sqlalchemy import select

from jobreg.domain.errors import ValidationError
from jobreg.domain.types import STATUS_TYPES, AttributeName, EntityKind
from jobreg.infrastructure.database.schema import ATTRIBUTE_TABLES, ENTITY_TABLES
from jobreg.services._helpers import require_kind

if TYPE_CHECKING:
    from sqlalchemy import ColumnElement

    from jobreg.domain.entities import Entity
    from jobreg.infrastructure.store import EntityStore

DEFAULT_PAGE_SIZE = 64

SORT_KEYS = ("updated", "created", "name", "user", "version", "id")

# Largest value SQLite accepts as a bound parameter for LIMIT and OFFSET
MAX_SQL_INT = 2**63 - 1


class QueryEngine:
    """Builds search criteria and hands them to the store."""

    def __init__(self, store: EntityStore) -> None:
        self._store = store

    def find(
        self,
        kind: EntityKind | str,
        *,
        name: str | None = None,
        user: str | None = None,
        tags: Iterable[str] | None = None,
        statuses: Iterable[str] | None = None,
        min_updated: str | None = None,
        max_updated: str | None = None,
        page: int = 0,
        page_size: int = DEFAULT_PAGE_SIZE,
        order_by: str | None = None,
        descending: bool = True,
    ) -> list[Entity]:
        """Return one page of entities matching every given filter.

        Args:
            kind: Entity kind to search.
            name: Exact name match.
            user: Exact user match.
            tags: Every tag must be present on the entity.
            statuses: Entity status must be one of these.
            min_updated: Inclusive lower bound on ``updated``.
            max_updated: Inclusive upper bound on ``updated``.
            page: Zero-based page index; negative values mean 0.
            page_size: Rows per page; zero or negative returns nothing. Pages
                past the largest SQL integer offset are empty.
            order_by: One of ``SORT_KEYS``; defaults to ``updated``.
            descending: Sort direction.
        """
        kind = require_kind(kind)
        sort_key = order_by or "updated"
        if sort_key not in SORT_KEYS:
            raise ValidationError(
                f"Unknown sort key {sort_key!r}. Expected one of: {', '.join(SORT_KEYS)}",
                kind=kind,
            )

        page = max(page, 0)
        page_size = min(max(page_size, 0), MAX_SQL_INT)
        offset = page * page_size
        if page_size == 0 or offset > MAX_SQL_INT:
            return []

        criteria = self._criteria(
            kind,
            name=name,
            user=user,
            tags=tags,
            statuses=statuses,
            min_updated=min_updated,
            max_updated=max_updated,
        )
        return self._store.find(
            kind,
            criteria,
            order_by=sort_key,
            descending=descending,
            offset=offset,
            limit=page_size,
        )

    @staticmethod
    def _criteria(
        kind: EntityKind,
        *,
        name: str | None,
        user: str | None,
        tags: Iterable[str] | None,
        statuses: Iterable[str] | None,
        min_updated: str | None,
        max_updated: str | None,
    ) -> list[ColumnElement[bool]]:
        table = ENTITY_TABLES[kind]
        criteria: list[ColumnElement[bool]] = []

        if name is not None:
            criteria.append(table.c.name == name)
        if user is not None:
            criteria.append(table.c.user == user)

        tag_table = ATTRIBUTE_TABLES[(kind, AttributeName.TAGS)]
        for tag in sorted(set(tags or ())):
            members = select(tag_table.c.entity_id).where(tag_table.c.value == tag)
            criteria.append(table.c.id.in_(members))

        if statuses:
            criteria.append(table.c.status.in_(_resolve_statuses(kind, statuses)))

        if min_updated is not None:
            criteria.append(table.c.updated >= min_updated)
        if max_updated is not None:
            criteria.append(table.c.updated <= max_updated)
        return criteria


def _resolve_statuses(kind: EntityKind, statuses: Iterable[str]) -> list[str]:
    enum = STATUS_TYPES[kind]
    resolved: list[str] = []
    for status in statuses:
        try:
            resolved.append(enum(str(status).upper()).value)
        except ValueError:
            allowed = ", ".join(member.value for member in enum)
            raise ValidationError(
                f"Unknown {kind} status {status!r}. Expected one of: {allowed}", kind=kind
            ) from None
    return resolved
