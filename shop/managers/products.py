"""Product catalog operations."""

from __future__ import annotations

from typing import Any, Mapping

from ..models import ProductModel, ProductUpdateModel
from .base import EntityManager


class ProductManager(EntityManager):
    collection = "products"
    label = "product"
    required_fields = ("title", "description", "code", "price", "stock", "category")
    create_model = ProductModel
    update_model = ProductUpdateModel
    supports_limit = True

    def insert_one(self, data: Mapping[str, Any]) -> dict:
        return self._insert(data)

    def update_one_by_id(self, product_id: Any, data: Mapping[str, Any]) -> dict:
        return self._update(product_id, data)

    def delete_one_by_id(self, product_id: Any) -> None:
        self._remove(product_id)
