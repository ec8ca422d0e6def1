"""Entity identifier generation and validation.

INVARIANT: IDs are permanent. Once assigned, an ID never changes.
"""

from __future__ import annotations

import uuid


def generate_id() -> str:
    """Generate a new entity id: a canonical hyphenated UUID4, 36 characters."""
    return str(uuid.uuid4())


def is_blank(value: str | None) -> bool:
    """True if *value* is None, empty, or whitespace only."""
    return value is None or not value.strip()
