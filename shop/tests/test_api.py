import io

import pytest

from storekit.config import load_shop_config

from shop.api import create_app


@pytest.fixture
def client(tmp_path, shop):
    config = load_shop_config(tmp_path, {"ALLOWED_ORIGINS": "http://localhost"})
    app = create_app(config, shop)
    app.config.update(TESTING=True)
    return app.test_client()


def test_product_crud_envelope(client, product_payload):
    created = client.post("/api/products", json=product_payload)
    assert created.status_code == 201
    body = created.get_json()
    assert body["status"] == "success"
    assert body["payload"]["id"] == 1
    assert body["payload"]["price"] == 39.5

    listed = client.get("/api/products?limit=1")
    assert listed.status_code == 200
    assert len(listed.get_json()["payload"]) == 1

    updated = client.put("/api/products/1", json={"stock": 3})
    assert updated.get_json()["payload"]["stock"] == 3

    deleted = client.delete("/api/products/1")
    assert deleted.status_code == 200
    assert deleted.get_json() == {"status": "success"}

    missing = client.get("/api/products/1")
    assert missing.status_code == 404
    assert missing.get_json()["status"] == "error"


def test_validation_error_maps_to_400(client, product_payload):
    payload = dict(product_payload)
    payload.pop("category")
    response = client.post("/api/products", json=payload)
    assert response.status_code == 400
    assert response.get_json() == {"status": "error", "message": "missing required fields: category"}


def test_cart_routes(client, product_payload):
    client.post("/api/products", json=product_payload)
    cart = client.post("/api/carts").get_json()["payload"]
    assert cart == {"id": 1, "products": []}

    client.post("/api/carts/1/product/1")
    response = client.post("/api/carts/1/product/1", json={"quantity": 2})
    assert response.get_json()["payload"]["products"] == [{"productId": 1, "quantity": 3}]

    unknown = client.post("/api/carts/1/product/9")
    assert unknown.status_code == 404
    assert unknown.get_json()["message"] == "product not found"

    assert client.get("/api/carts/1").status_code == 200
    assert len(client.get("/api/carts").get_json()["payload"]) == 1


def test_order_routes(client):
    order = {"skuList": [{"skuId": 1, "quantity": 1}], "customer": "Casey", "orderDate": "2024-05-01"}
    assert client.post("/api/orders", json=order).status_code == 201
    response = client.post("/api/orders/1/sku/1", json={"quantity": "4"})
    assert response.get_json()["payload"]["skuList"] == [{"skuId": 1, "quantity": 5}]
    assert client.delete("/api/orders/1").status_code == 200
    assert client.get("/api/orders/1").status_code == 404


def test_sku_upload_lifecycle(client, assets):
    created = client.post(
        "/api/skus",
        data={
            "name": "Tee Red M",
            "price": "19.9",
            "availability": "on",
            "file": (io.BytesIO(b"first"), "red.png"),
        },
        content_type="multipart/form-data",
    )
    assert created.status_code == 201
    sku = created.get_json()["payload"]
    old_name = sku["thumbnail"]
    assert old_name.endswith("red.png")
    assert assets.exists(old_name)

    updated = client.put(
        "/api/skus/1",
        data={"price": "21", "file": (io.BytesIO(b"second"), "blue.png")},
        content_type="multipart/form-data",
    )
    assert updated.status_code == 200
    new_name = updated.get_json()["payload"]["thumbnail"]
    assert new_name.endswith("blue.png")
    assert assets.exists(new_name)
    assert not assets.exists(old_name)

    assert client.delete("/api/skus/1").status_code == 200
    assert not assets.exists(new_name)


def test_sku_upload_removed_when_insert_rejected(client, assets):
    response = client.post(
        "/api/skus",
        data={"name": "No price", "availability": "on", "file": (io.BytesIO(b"x"), "x.png")},
        content_type="multipart/form-data",
    )
    assert response.status_code == 400
    assert list(assets.root.iterdir()) == []


def test_unknown_route_uses_error_envelope(client):
    response = client.get("/api/nowhere")
    assert response.status_code == 404
    assert response.get_json()["status"] == "error"


def test_empty_limit_lists_everything(client, product_payload):
    for _ in range(3):
        client.post("/api/products", json=product_payload)
    response = client.get("/api/products?limit=")
    assert response.status_code == 200
    assert len(response.get_json()["payload"]) == 3
    assert client.get("/api/products?limit=many").status_code == 400


def test_sku_form_update_with_blank_fields(client):
    client.post(
        "/api/skus",
        data={"name": "Tee Red M", "price": "19.9", "availability": "on"},
        content_type="multipart/form-data",
    )
    response = client.put(
        "/api/skus/1",
        data={"name": "Tee Red L", "price": "", "availability": ""},
        content_type="multipart/form-data",
    )
    assert response.status_code == 200
    sku = response.get_json()["payload"]
    assert sku["name"] == "Tee Red L"
    assert sku["price"] == 19.9
    assert sku["availability"] is True
