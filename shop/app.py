"""Entry point for the shop JSON API.

- Products, carts, orders and skus are persisted to JSON collections under
  ``DATA_DIR`` (default ``./data``) with rotating backups.
- Sku thumbnails are stored flat in ``ASSET_DIR`` (default ``./data/img``).
- Configuration is read from the environment and an optional ``.env`` file
  next to this module; see :mod:`storekit.config`.
"""

from __future__ import annotations

import os
from pathlib import Path

from storekit.config import load_shop_config
from storekit.logger import get_logger

from .api import create_app

BASE_DIR = Path(__file__).resolve().parent

_logger = get_logger(__name__)

config = load_shop_config(BASE_DIR)
app = create_app(config)


if __name__ == "__main__":
    host = os.environ.get("API_HOST", "127.0.0.1")
    port = int(os.environ.get("API_PORT", "8080"))
    _logger.info(f"Serving shop API on {host}:{port} (data in {config.data_dir})")
    app.run(host=host, port=port)
