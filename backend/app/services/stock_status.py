"""Product availability status derivation.

Single source of truth for a product's status. Called on every product
write (to refresh the cached ``Product.status`` column) and again by the
dashboard aggregator, which never trusts the cached value.
"""
from __future__ import annotations

from datetime import datetime

from backend.app.core.timeutils import as_utc
from backend.app.models.inventory import ProductStatus


def classify_stock_status(
    quantity: int,
    threshold: int | None,
    expiry: datetime | None,
    now: datetime,
) -> ProductStatus:
    """Derive the status label; first matching rule wins.

    1. expiry set and ``expiry <= now``  -> EXPIRED
    2. ``quantity == 0``                 -> OUT_OF_STOCK
    3. threshold set and ``quantity <= threshold`` -> LOW_STOCK
    4. otherwise                         -> IN_STOCK

    Callers coerce malformed numbers to 0 and clamp quantity at 0 first,
    so this never raises.
    """
    if expiry is not None and as_utc(expiry) <= as_utc(now):
        return ProductStatus.EXPIRED
    if quantity == 0:
        return ProductStatus.OUT_OF_STOCK
    if threshold is not None and quantity <= threshold:
        return ProductStatus.LOW_STOCK
    return ProductStatus.IN_STOCK


def is_available(status: ProductStatus) -> bool:
    """Sellable statuses counted as "in stock" on the KPI strip."""
    return status in (ProductStatus.IN_STOCK, ProductStatus.LOW_STOCK)
