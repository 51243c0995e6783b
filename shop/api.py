"""Flask JSON API over the entity managers.

The routes are thin: they collect request input, call one manager operation
through :func:`storekit.results.attempt` and map the outcome to the
``{"status": ..., "payload"|"message": ...}`` envelope, using the error's own
status code. Uploaded sku images are stored before the manager call; from
then on the manager owns their cleanup.
"""

from __future__ import annotations

from typing import Any, Callable, Optional

from flask import Blueprint, Flask, current_app, jsonify, request
from flask_cors import CORS
from flask_talisman import Talisman
from werkzeug.exceptions import HTTPException

from storekit.config import ShopConfig
from storekit.errors import ShopError
from storekit.logger import get_logger
from storekit.results import Outcome, attempt

from .registry import Shop

_logger = get_logger(__name__)

api = Blueprint("api", __name__, url_prefix="/api")


def _shop() -> Shop:
    return current_app.extensions["shop"]


def _payload() -> dict:
    if request.is_json:
        data = request.get_json(silent=True)
        return data if isinstance(data, dict) else {}
    return request.form.to_dict()


def _respond(outcome: Outcome, status: int = 200):
    if outcome.ok:
        body: dict[str, Any] = {"status": "success"}
        if outcome.value is not None:
            body["payload"] = outcome.value
        return jsonify(body), status
    error = outcome.error
    if error.status >= 500:
        _logger.error(f"{request.method} {request.path} failed: {error}")
    return jsonify({"status": "error", "message": error.message}), error.status


def _run(func: Callable[..., Any], *args: Any, status: int = 200, **kwargs: Any):
    return _respond(attempt(func, *args, **kwargs), status)


def _store_upload() -> Optional[str]:
    upload = request.files.get("file")
    if upload is None or not upload.filename:
        return None
    return _shop().assets.save(upload.stream, upload.filename)


# ---------------------------------------------------------------------------
# Products
# ---------------------------------------------------------------------------
@api.route("/products", methods=["GET"])
def list_products():
    return _run(_shop().products.get_all, request.args.get("limit"))


@api.route("/products/<pid>", methods=["GET"])
def get_product(pid):
    return _run(_shop().products.get_by_id, pid)


@api.route("/products", methods=["POST"])
def create_product():
    return _run(_shop().products.insert_one, _payload(), status=201)


@api.route("/products/<pid>", methods=["PUT"])
def update_product(pid):
    return _run(_shop().products.update_one_by_id, pid, _payload())


@api.route("/products/<pid>", methods=["DELETE"])
def delete_product(pid):
    return _run(_shop().products.delete_one_by_id, pid)


# ---------------------------------------------------------------------------
# Carts
# ---------------------------------------------------------------------------
@api.route("/carts", methods=["GET"])
def list_carts():
    return _run(_shop().carts.get_all)


@api.route("/carts", methods=["POST"])
def create_cart():
    return _run(_shop().carts.create_cart, status=201)


@api.route("/carts/<cid>", methods=["GET"])
def get_cart(cid):
    return _run(_shop().carts.get_by_id, cid)


@api.route("/carts/<cid>/product/<pid>", methods=["POST"])
def add_product_to_cart(cid, pid):
    quantity = _payload().get("quantity")
    return _run(_shop().carts.add_line, cid, pid, quantity)


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------
@api.route("/orders", methods=["GET"])
def list_orders():
    return _run(_shop().orders.get_all)


@api.route("/orders/<oid>", methods=["GET"])
def get_order(oid):
    return _run(_shop().orders.get_by_id, oid)


@api.route("/orders", methods=["POST"])
def create_order():
    return _run(_shop().orders.insert_one, _payload(), status=201)


@api.route("/orders/<oid>/sku/<sid>", methods=["POST"])
def add_sku_to_order(oid, sid):
    quantity = _payload().get("quantity")
    return _run(_shop().orders.add_line, oid, sid, quantity)


@api.route("/orders/<oid>", methods=["DELETE"])
def delete_order(oid):
    return _run(_shop().orders.delete_one_by_id, oid)


# ---------------------------------------------------------------------------
# Skus
# ---------------------------------------------------------------------------
@api.route("/skus", methods=["GET"])
def list_skus():
    return _run(_shop().skus.get_all)


@api.route("/skus/<sid>", methods=["GET"])
def get_sku(sid):
    return _run(_shop().skus.get_by_id, sid)


@api.route("/skus", methods=["POST"])
def create_sku():
    try:
        asset = _store_upload()
    except ShopError as exc:
        return _respond(Outcome(error=exc))
    return _run(_shop().skus.insert_one, _payload(), asset, status=201)


@api.route("/skus/<sid>", methods=["PUT"])
def update_sku(sid):
    try:
        asset = _store_upload()
    except ShopError as exc:
        return _respond(Outcome(error=exc))
    return _run(_shop().skus.update_one_by_id, sid, _payload(), asset)


@api.route("/skus/<sid>", methods=["DELETE"])
def delete_sku(sid):
    return _run(_shop().skus.delete_one_by_id, sid)


@api.app_errorhandler(HTTPException)
def http_error(exc: HTTPException):
    return jsonify({"status": "error", "message": exc.description}), exc.code


# ---------------------------------------------------------------------------
# App factory
# ---------------------------------------------------------------------------
def create_app(config: ShopConfig, shop: Optional[Shop] = None) -> Flask:
    app = Flask(__name__)
    app.config.update(
        MAX_CONTENT_LENGTH=config.max_content_length,
        PREFERRED_URL_SCHEME="https" if config.force_tls else "http",
    )
    app.extensions["shop"] = shop or Shop.from_config(config)

    CORS(app, resources={r"/api/*": {"origins": list(config.allowed_origins)}})
    Talisman(app, content_security_policy=None, force_https=config.force_tls)

    app.register_blueprint(api)
    return app
