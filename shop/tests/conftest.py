import pytest

from storekit.assets import AssetStore
from storekit.storage import CollectionStore

from shop.registry import Shop


@pytest.fixture
def store(tmp_path):
    return CollectionStore(tmp_path / "data", backups=2)


@pytest.fixture
def assets(tmp_path):
    return AssetStore(tmp_path / "img")


@pytest.fixture
def shop(store, assets):
    return Shop.build(store, assets)


@pytest.fixture
def upload(assets):
    """Place a fake uploaded file in asset storage and return its name."""

    def _upload(name: str = "thumb.png", content: bytes = b"img") -> str:
        assets.path_for(name).write_bytes(content)
        return name

    return _upload


@pytest.fixture
def product_payload():
    return {
        "title": "Desk Lamp",
        "description": "Warm light",
        "code": "LAMP-01",
        "price": "39.5",
        "stock": "12",
        "category": "lighting",
    }
