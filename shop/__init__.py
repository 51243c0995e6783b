"""Product, cart, order and sku management over JSON collections."""
