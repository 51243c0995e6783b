"""Customer orders and their sku lines."""

from __future__ import annotations

from typing import Any, Mapping, Optional

from storekit.storage import CollectionStore

from ..models import OrderModel
from .base import EntityManager
from .references import require
from .skus import SkuManager


class OrderManager(EntityManager):
    collection = "orders"
    label = "order"
    required_fields = ("skuList", "customer", "orderDate")
    create_model = OrderModel

    def __init__(self, store: CollectionStore, skus: Optional[SkuManager] = None):
        super().__init__(store)
        # When set, sku ids are checked on add_line; otherwise they are taken as given.
        self._skus = skus

    def insert_one(self, data: Mapping[str, Any]) -> dict:
        return self._insert(data)

    def add_line(self, order_id: Any, sku_id: Any, quantity: Any = 1) -> dict:
        check = None
        if self._skus is not None:
            skus = self._skus

            def check(sid: Any) -> None:
                require(skus, sid, "sku not found")

        return self._add_line(order_id, "skuList", "skuId", sku_id, quantity, check=check)

    def delete_one_by_id(self, order_id: Any) -> None:
        self._remove(order_id)
