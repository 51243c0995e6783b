"""Result wrapper for callers that prefer values over exceptions."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Generic, Optional, TypeVar

from .errors import ShopError

T = TypeVar("T")


@dataclass(frozen=True)
class Outcome(Generic[T]):
    """Either a successful ``value`` or a tagged ``error``."""

    value: Optional[T] = None
    error: Optional[ShopError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def status(self) -> int:
        return 200 if self.error is None else self.error.status

    def unwrap(self) -> T:
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]


def attempt(func: Callable[..., T], *args: Any, **kwargs: Any) -> Outcome[T]:
    """Run ``func`` and capture any :class:`ShopError` as a failed outcome.

    Exceptions outside the ``ShopError`` hierarchy are programming errors and
    propagate untouched.
    """

    try:
        return Outcome(value=func(*args, **kwargs))
    except ShopError as exc:
        return Outcome(error=exc)
