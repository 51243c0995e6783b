"""Stock-keeping units and their thumbnail assets.

A sku's thumbnail file exists in asset storage exactly while the sku record
references it:

* a freshly uploaded asset is discarded if the insert or update fails for any
  reason, before the original error is re-raised;
* the previous asset is removed only after the update carrying the new one has
  been written;
* deleting a sku removes its asset first.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional

from storekit.assets import AssetStore
from storekit.storage import CollectionStore

from ..models import SkuModel, SkuUpdateModel
from .base import EntityManager


class SkuManager(EntityManager):
    collection = "skus"
    label = "sku"
    required_fields = ("name", "price", "availability")
    create_model = SkuModel
    update_model = SkuUpdateModel

    def __init__(self, store: CollectionStore, assets: AssetStore):
        super().__init__(store)
        self._assets = assets

    @property
    def assets(self) -> AssetStore:
        return self._assets

    def insert_one(self, data: Mapping[str, Any], asset: Optional[str] = None) -> dict:
        """Create a sku; ``asset`` is the filename of an already stored upload."""

        try:
            return self._insert(data, thumbnail=asset)
        except Exception:
            self._assets.discard(asset)
            raise

    def update_one_by_id(self, sku_id: Any, data: Mapping[str, Any], asset: Optional[str] = None) -> dict:
        previous: dict = {}

        def remember(current: dict) -> None:
            previous.update(current)

        try:
            extra = {"thumbnail": asset} if asset else {}
            record = self._update(sku_id, data, before=remember, **extra)
        except Exception:
            if asset != previous.get("thumbnail"):
                self._assets.discard(asset)
            raise

        old_thumbnail = previous.get("thumbnail")
        if asset and old_thumbnail and old_thumbnail != record.get("thumbnail"):
            # Record already references the new asset; removal failure only logs.
            self._assets.discard(old_thumbnail)
        return record

    def delete_one_by_id(self, sku_id: Any) -> None:
        with self.store.locked(self.collection):
            sku = self.get_by_id(sku_id)
            thumbnail = sku.get("thumbnail")
            if thumbnail:
                self._assets.remove(thumbnail)
            self._remove(sku_id)
