"""Wire the stores and managers together from configuration."""

from __future__ import annotations

from dataclasses import dataclass

from storekit.assets import AssetStore
from storekit.config import ShopConfig
from storekit.storage import CollectionStore

from .managers import CartManager, OrderManager, ProductManager, SkuManager

COLLECTIONS = ("products", "carts", "orders", "skus")


@dataclass(slots=True)
class Shop:
    """One shared store plus the four entity managers built on it."""

    store: CollectionStore
    assets: AssetStore
    products: ProductManager
    carts: CartManager
    orders: OrderManager
    skus: SkuManager

    @classmethod
    def build(
        cls,
        store: CollectionStore,
        assets: AssetStore,
        *,
        strict_order_references: bool = False,
    ) -> "Shop":
        for name in COLLECTIONS:
            store.ensure(name)
        products = ProductManager(store)
        skus = SkuManager(store, assets)
        return cls(
            store=store,
            assets=assets,
            products=products,
            carts=CartManager(store, products),
            orders=OrderManager(store, skus if strict_order_references else None),
            skus=skus,
        )

    @classmethod
    def from_config(cls, config: ShopConfig) -> "Shop":
        return cls.build(
            CollectionStore(config.data_dir, backups=config.backups),
            AssetStore(config.asset_dir),
            strict_order_references=config.strict_order_references,
        )
