"""Coercion helpers for loosely typed form and JSON input."""
from __future__ import annotations

from typing import Any, Optional

from .errors import ValidationError

TRUE_LITERALS = frozenset({"true", "on", "yes", "1"})
FALSE_LITERALS = frozenset({"false", "off", "no", "0"})


def coerce_bool(value: Any, field: str = "value") -> bool:
    """Map an accepted boolean literal to ``True``/``False``.

    Accepts real booleans, the integers ``0``/``1`` and the strings in
    ``TRUE_LITERALS``/``FALSE_LITERALS`` (case-insensitive). Anything else is
    rejected instead of silently becoming ``False``.
    """

    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        token = value.strip().lower()
        if token in TRUE_LITERALS:
            return True
        if token in FALSE_LITERALS:
            return False
    raise ValidationError(f"{field} must be a boolean literal, got {value!r}")


def to_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return None
