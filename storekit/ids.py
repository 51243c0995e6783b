"""Identifier allocation for record collections."""
from __future__ import annotations

from numbers import Real
from typing import Any, Sequence

from .errors import ValidationError


def next_id(records: Sequence[Any]) -> int:
    """Return ``max(id) + 1`` over ``records`` (``1`` for an empty collection).

    Records without a numeric ``id`` do not move the maximum. Ids are derived
    from the current maximum only, so deleting the highest record frees its id
    for the next insert.
    """

    if not isinstance(records, (list, tuple)):
        raise ValidationError("invalid collection")

    max_id = 0
    for item in records:
        if not isinstance(item, dict):
            continue
        candidate = item.get("id")
        if isinstance(candidate, bool) or not isinstance(candidate, Real):
            continue
        if candidate > max_id:
            max_id = candidate
    return int(max_id) + 1
