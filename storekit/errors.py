"""Error kinds raised by the collection store and the entity managers.

Every error carries a status-like ``status`` code so transport adapters can
translate it without inspecting the message:

* ``ValidationError`` (400): caller supplied data failed a required-field or
  shape check.
* ``NotFoundError`` (404): lookup by id failed.
* ``StorageError`` (500): loading or replacing a collection failed.
* ``AssetError`` (500): deleting an uploaded asset failed.
"""
from __future__ import annotations

from typing import Any, Dict


class ShopError(RuntimeError):
    """Base class for all errors surfaced to callers of the managers."""

    status: int = 500

    def __init__(self, message: str, status: int | None = None):
        super().__init__(message)
        self.message = message
        if status is not None:
            self.status = status

    @property
    def kind(self) -> str:
        return type(self).__name__

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind, "status": self.status, "message": self.message}


class ValidationError(ShopError):
    status = 400


class NotFoundError(ShopError):
    status = 404


class StorageError(ShopError):
    """Raised when a persistence operation fails."""

    status = 500


class AssetError(ShopError):
    status = 500

