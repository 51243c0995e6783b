"""Entity managers for the shop collections."""

from .base import EntityManager
from .carts import CartManager
from .orders import OrderManager
from .products import ProductManager
from .references import exists
from .skus import SkuManager

__all__ = [
    "EntityManager",
    "CartManager",
    "OrderManager",
    "ProductManager",
    "SkuManager",
    "exists",
]
