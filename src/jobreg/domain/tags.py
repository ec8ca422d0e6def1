"""Protected-tag rule.

Every entity carries its own ``id`` and ``name`` as tags. They are
re-inserted at every tag-mutation boundary and cannot be removed.
"""

from __future__ import annotations

from collections.abc import Iterable


def protected_tags(entity_id: str, name: str) -> frozenset[str]:
    """Tags that an entity always carries."""
    return frozenset({entity_id, name})


def enforce_protected_tags(entity_id: str, name: str, tags: Iterable[str]) -> frozenset[str]:
    """Return *tags* with the entity's ``id`` and ``name`` forced in.

    Examples:
        >>> sorted(enforce_protected_tags("app1", "tez", {"prod"}))
        ['app1', 'prod', 'tez']
        >>> sorted(enforce_protected_tags("app1", "tez", []))
        ['app1', 'tez']
    """
    return frozenset(tags) | protected_tags(entity_id, name)


def is_protected_tag(entity_id: str, name: str, tag: str) -> bool:
    """True if *tag* is one of the entity's permanent tags."""
    return tag in protected_tags(entity_id, name)
