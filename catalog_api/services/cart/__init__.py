"""
Cart engine: tiered pricing, totals and persisted quantities.
"""

from catalog_api.services.cart.pricing import Cart, CartTotals, TierPrices, unit_price
from catalog_api.services.cart.storage import CartStorage, JsonFileStore, MemoryStore

__all__ = [
    "Cart",
    "CartTotals",
    "TierPrices",
    "unit_price",
    "CartStorage",
    "JsonFileStore",
    "MemoryStore",
]
