"""Entity-agnostic building blocks for the shop backend."""

from .assets import AssetStore
from .coerce import coerce_bool, to_int
from .errors import (  # noqa: F401
    AssetError,
    NotFoundError,
    ShopError,
    StorageError,
    ValidationError,
)
from .ids import next_id
from .results import Outcome, attempt
from .storage import CollectionStore

__all__ = [
    "AssetStore",
    "CollectionStore",
    "Outcome",
    "attempt",
    "coerce_bool",
    "to_int",
    "next_id",
    "ShopError",
    "ValidationError",
    "NotFoundError",
    "StorageError",
    "AssetError",
]
