"""Shopping carts: creation and product lines."""

from __future__ import annotations

from typing import Any

from .base import EntityManager
from .products import ProductManager
from .references import require


class CartManager(EntityManager):
    collection = "carts"
    label = "cart"

    def __init__(self, store, products: ProductManager):
        super().__init__(store)
        self._products = products

    def create_cart(self) -> dict:
        return self._append({"products": []})

    def add_line(self, cart_id: Any, product_id: Any, quantity: Any = 1) -> dict:
        """Add ``quantity`` of a product to the cart.

        The product must exist at the time it is added. Deleting it later
        leaves the line in place.
        """

        return self._add_line(
            cart_id,
            "products",
            "productId",
            product_id,
            quantity,
            check=lambda pid: require(self._products, pid, "product not found"),
        )
