"""Cross-entity existence checks."""

from __future__ import annotations

from typing import Any

from storekit.errors import NotFoundError

from .base import EntityManager


def exists(manager: EntityManager, record_id: Any) -> bool:
    """Return whether ``record_id`` exists in ``manager``'s collection.

    Only a missing record counts as ``False``; storage failures propagate so an
    unavailable store is never mistaken for a dangling reference.
    """

    try:
        manager.get_by_id(record_id)
    except NotFoundError:
        return False
    return True


def require(manager: EntityManager, record_id: Any, message: str) -> None:
    if not exists(manager, record_id):
        raise NotFoundError(message)
