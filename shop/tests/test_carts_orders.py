import pytest

from storekit.assets import AssetStore
from storekit.errors import NotFoundError, StorageError, ValidationError
from storekit.storage import CollectionStore

from shop.managers import exists
from shop.registry import Shop


@pytest.fixture
def product_ids(shop, product_payload):
    return [shop.products.insert_one({**product_payload, "code": f"P{i}"})["id"] for i in range(7)]


# ---------------------------------------------------------------------------
# Carts
# ---------------------------------------------------------------------------
def test_create_cart_is_empty(shop):
    cart = shop.carts.create_cart()
    assert cart == {"id": 1, "products": []}
    assert shop.carts.create_cart()["id"] == 2
    assert shop.carts.get_all() == [{"id": 1, "products": []}, {"id": 2, "products": []}]


def test_add_line_increments_or_appends(shop, product_ids):
    cart = shop.carts.create_cart()
    shop.carts.add_line(cart["id"], 5)
    updated = shop.carts.add_line(cart["id"], "5")
    assert updated["products"] == [{"productId": 5, "quantity": 2}]

    updated = shop.carts.add_line(cart["id"], 7)
    assert updated["products"] == [
        {"productId": 5, "quantity": 2},
        {"productId": 7, "quantity": 1},
    ]
    assert shop.carts.get_by_id(cart["id"]) == updated


def test_add_line_with_quantity(shop, product_ids):
    cart = shop.carts.create_cart()
    shop.carts.add_line(cart["id"], 2, quantity=3)
    updated = shop.carts.add_line(cart["id"], 2, quantity="2")
    assert updated["products"] == [{"productId": 2, "quantity": 5}]


@pytest.mark.parametrize("quantity", [0, -1, "lots"])
def test_add_line_rejects_bad_quantity(shop, product_ids, quantity):
    cart = shop.carts.create_cart()
    with pytest.raises(ValidationError):
        shop.carts.add_line(cart["id"], 1, quantity=quantity)
    assert shop.carts.get_by_id(cart["id"])["products"] == []


def test_add_line_unknown_product(shop, product_ids):
    cart = shop.carts.create_cart()
    with pytest.raises(NotFoundError) as excinfo:
        shop.carts.add_line(cart["id"], 99)
    assert excinfo.value.status == 404
    assert excinfo.value.message == "product not found"
    assert shop.carts.get_by_id(cart["id"])["products"] == []


def test_add_line_unknown_cart(shop, product_ids):
    with pytest.raises(NotFoundError) as excinfo:
        shop.carts.add_line(42, 1)
    assert "cart not found" in excinfo.value.message


def test_cart_keeps_line_after_product_deleted(shop, product_ids):
    cart = shop.carts.create_cart()
    shop.carts.add_line(cart["id"], 3)
    shop.products.delete_one_by_id(3)
    assert shop.carts.get_by_id(cart["id"])["products"] == [{"productId": 3, "quantity": 1}]


def test_get_cart_missing_is_404(shop):
    with pytest.raises(NotFoundError) as excinfo:
        shop.carts.get_by_id(1)
    assert excinfo.value.status == 404


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------
ORDER = {
    "skuList": [{"skuId": "4", "quantity": "2"}, {"skuId": 9}],
    "customer": "Casey Shopper",
    "orderDate": "2024-05-01",
}


def test_insert_order_coerces_lines(shop):
    order = shop.orders.insert_one(ORDER)
    assert order == {
        "id": 1,
        "skuList": [{"skuId": 4, "quantity": 2}, {"skuId": 9, "quantity": 1}],
        "customer": "Casey Shopper",
        "orderDate": "2024-05-01",
    }
    assert shop.orders.get_by_id(1) == order


def test_insert_order_merges_duplicate_skus(shop):
    order = shop.orders.insert_one(
        {**ORDER, "skuList": [{"skuId": 4, "quantity": 1}, {"skuId": 4, "quantity": 3}]}
    )
    assert order["skuList"] == [{"skuId": 4, "quantity": 4}]


def test_insert_order_missing_fields(shop):
    with pytest.raises(ValidationError) as excinfo:
        shop.orders.insert_one({"customer": "Casey"})
    assert excinfo.value.message == "missing required fields: skuList, orderDate"


def test_insert_order_rejects_malformed_lines(shop):
    with pytest.raises(ValidationError):
        shop.orders.insert_one({**ORDER, "skuList": [{"quantity": 1}]})
    with pytest.raises(ValidationError):
        shop.orders.insert_one({**ORDER, "skuList": "4,9"})


def test_order_add_line(shop):
    order = shop.orders.insert_one(ORDER)
    updated = shop.orders.add_line(order["id"], 4)
    assert updated["skuList"][0] == {"skuId": 4, "quantity": 3}
    updated = shop.orders.add_line(order["id"], "11", 5)
    assert updated["skuList"][-1] == {"skuId": 11, "quantity": 5}


def test_order_add_line_does_not_check_skus_by_default(shop):
    order = shop.orders.insert_one(ORDER)
    updated = shop.orders.add_line(order["id"], 500)
    assert {"skuId": 500, "quantity": 1} in updated["skuList"]


def test_order_add_line_strict_references(tmp_path):
    strict = Shop.build(
        CollectionStore(tmp_path / "data"),
        AssetStore(tmp_path / "img"),
        strict_order_references=True,
    )
    sku = strict.skus.insert_one({"name": "Red M", "price": 10, "availability": True})
    order = strict.orders.insert_one(ORDER)

    with pytest.raises(NotFoundError) as excinfo:
        strict.orders.add_line(order["id"], 500)
    assert excinfo.value.message == "sku not found"

    updated = strict.orders.add_line(order["id"], sku["id"])
    assert {"skuId": sku["id"], "quantity": 1} in updated["skuList"]


def test_order_delete_and_404(shop):
    order = shop.orders.insert_one(ORDER)
    shop.orders.delete_one_by_id(order["id"])
    with pytest.raises(NotFoundError) as excinfo:
        shop.orders.get_by_id(order["id"])
    assert excinfo.value.status == 404
    with pytest.raises(NotFoundError):
        shop.orders.add_line(order["id"], 4)


# ---------------------------------------------------------------------------
# Reference validation
# ---------------------------------------------------------------------------
def test_exists_reports_missing_as_false(shop, product_ids):
    assert exists(shop.products, 1) is True
    assert exists(shop.products, 100) is False
    assert exists(shop.products, "nope") is False


def test_exists_propagates_storage_errors(shop, store):
    store.path_for("products").write_text("not-json", encoding="utf-8")
    with pytest.raises(StorageError):
        exists(shop.products, 1)
