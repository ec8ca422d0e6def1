"""Shared service-layer helper functions."""

from __future__ import annotations

import threading
from collections.abc import Iterable
from datetime import UTC, datetime, timedelta

from jobreg.domain.errors import ValidationError
from jobreg.domain.ids import is_blank
from jobreg.domain.types import AttributeName, EntityKind

_clock_lock = threading.Lock()
_last_stamp: datetime | None = None


def now_iso() -> str:
    """Current UTC time as ISO 8601 with microseconds.

    Strictly increasing within the process so recency ordering never
    ties between two writes made back to back.
    """
    global _last_stamp
    with _clock_lock:
        now = datetime.now(UTC)
        if _last_stamp is not None and now <= _last_stamp:
            now = _last_stamp + timedelta(microseconds=1)
        _last_stamp = now
    return now.isoformat(timespec="microseconds")


def require_id(kind: EntityKind | str, entity_id: str | None, *, label: str = "id") -> str:
    """Return *entity_id* or raise ``ValidationError`` if it is None or blank."""
    if entity_id is None or is_blank(entity_id):
        raise ValidationError(f"No {kind} {label} entered. Unable to continue.", kind=str(kind))
    return entity_id


def require_kind(kind: EntityKind | str) -> EntityKind:
    try:
        return EntityKind(kind)
    except ValueError:
        raise ValidationError(f"Unknown entity kind: {kind!r}") from None


def require_attribute(kind: EntityKind, attr: AttributeName | str) -> AttributeName:
    try:
        return AttributeName(attr)
    except ValueError:
        allowed = ", ".join(a.value for a in AttributeName)
        raise ValidationError(
            f"Unknown attribute {attr!r} for {kind}. Expected one of: {allowed}",
            kind=kind,
        ) from None


def require_values(
    kind: EntityKind, entity_id: str, attr: AttributeName, values: Iterable[str] | None
) -> frozenset[str]:
    """Validate a collection of attribute members; None is rejected, empty is fine."""
    if values is None:
        raise ValidationError(
            f"No {attr.value} entered. Unable to continue.", kind=kind, entity_id=entity_id
        )
    if isinstance(values, str):
        raise ValidationError(
            f"{attr.value} must be a collection of strings, not a single string",
            kind=kind,
            entity_id=entity_id,
        )
    members = frozenset(values)
    if any(not isinstance(v, str) or is_blank(v) for v in members):
        raise ValidationError(
            f"Blank value in {attr.value}. Unable to continue.", kind=kind, entity_id=entity_id
        )
    return members
