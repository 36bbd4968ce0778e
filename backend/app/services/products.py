"""Product persistence; keeps the cached status in step with its inputs."""
from __future__ import annotations

import csv
import io
import logging
import math
from datetime import datetime
from typing import Any
from uuid import UUID

from sqlalchemy.orm import Session

from backend.app.core.timeutils import (
    INT_MAX,
    ZERO,
    coerce_datetime,
    coerce_decimal,
    coerce_int,
    coerce_optional_int,
)
from backend.app.models.inventory import Product, ProductStatus
from backend.app.services.stock_status import classify_stock_status

logger = logging.getLogger(__name__)

# Inputs to classify_stock_status; touching any of them refreshes status
STATUS_FIELDS = frozenset({"quantity", "threshold", "expiry_date"})
UPDATABLE_FIELDS = frozenset({
    "name", "sku", "category", "unit_price", "unit", "image_url",
}) | STATUS_FIELDS

def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


def refresh_status(product: Product, now: datetime) -> ProductStatus:
    """Recompute ``product.status`` from its current fields."""
    product.status = classify_stock_status(
        product.quantity, product.threshold, product.expiry_date, now,
    )
    return product.status


def list_products(
    db: Session, page: int = 1, limit: int = 10, search: str = "",
) -> dict[str, Any]:
    query = db.query(Product)
    if search:
        query = query.filter(Product.name.ilike(f"%{search}%"))
    total = query.count()
    items = (
        query.order_by(Product.created_at.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return {
        "items": items,
        "total": total,
        "page": page,
        "limit": limit,
        "total_pages": math.ceil(total / limit),
    }


def get_product(db: Session, product_id: UUID) -> Product | None:
    return db.query(Product).filter(Product.id == product_id).first()


def create_product(db: Session, data: dict[str, Any], now: datetime) -> Product:
    """Insert a product; malformed numbers coerce to 0, threshold defaults to 0."""
    name = (data.get("name") or "").strip()
    if not name:
        raise ValueError("Product name is required")

    threshold = coerce_optional_int(data.get("threshold"))
    product = Product(
        name=name,
        sku=_blank_to_none(data.get("sku")),
        category=_blank_to_none(data.get("category")),
        unit_price=max(coerce_decimal(data.get("unit_price")), ZERO),
        quantity=max(0, coerce_int(data.get("quantity"))),
        unit=_blank_to_none(data.get("unit")),
        threshold=0 if threshold is None else max(0, threshold),
        expiry_date=coerce_datetime(data.get("expiry_date")),
        image_url=_blank_to_none(data.get("image_url")),
        created_at=now,
        updated_at=now,
    )
    refresh_status(product, now)
    db.add(product)
    db.commit()
    db.refresh(product)
    logger.info("Created product %s (%s, status=%s)", product.id, product.name, product.status.value)
    return product


def update_product(
    db: Session, product_id: UUID, updates: dict[str, Any], now: datetime,
) -> Product | None:
    product = get_product(db, product_id)
    if product is None:
        return None

    for key, value in updates.items():
        if key not in UPDATABLE_FIELDS:
            continue
        if key == "quantity":
            value = max(0, coerce_int(value))
        elif key == "threshold":
            value = coerce_optional_int(value)
            value = None if value is None else max(0, value)
        elif key == "expiry_date":
            value = coerce_datetime(value)
        elif key == "unit_price":
            value = max(coerce_decimal(value), ZERO)
        elif key == "name":
            value = (value or "").strip() or product.name
        else:
            value = _blank_to_none(value)
        setattr(product, key, value)

    refresh_status(product, now)
    product.updated_at = now
    db.commit()
    db.refresh(product)
    logger.info("Updated product %s (status=%s)", product.id, product.status.value)
    return product


def order_product_quantity(
    db: Session, product_id: UUID, delta: Any, now: datetime,
) -> Product | None:
    """Apply a signed stock delta; stock never drops below zero."""
    product = get_product(db, product_id)
    if product is None:
        return None
    quantity = coerce_int(product.quantity) + coerce_int(delta)
    product.quantity = min(INT_MAX, max(0, quantity))
    refresh_status(product, now)
    product.updated_at = now
    db.commit()
    db.refresh(product)
    return product


def delete_product(db: Session, product_id: UUID) -> bool:
    product = get_product(db, product_id)
    if product is None:
        return False
    db.delete(product)
    db.commit()
    logger.info("Deleted product %s", product_id)
    return True


def mark_expired_products(db: Session, now: datetime) -> int:
    """Zero the stock of products past expiry whose cache says otherwise."""
    stale = (
        db.query(Product)
        .filter(
            Product.expiry_date.is_not(None),
            Product.expiry_date <= now,
            Product.status != ProductStatus.EXPIRED,
        )
        .all()
    )
    for product in stale:
        product.quantity = 0
        refresh_status(product, now)
        product.updated_at = now
    db.commit()
    if stale:
        logger.info("Marked %d products as expired", len(stale))
    return len(stale)


def parse_products_csv(text: str) -> list[dict[str, Any]]:
    """Rows of a header-led CSV as product payload dicts."""
    rows = [r for r in csv.reader(io.StringIO(text.strip())) if any(c.strip() for c in r)]
    if not rows:
        raise ValueError("Empty CSV")
    if len(rows) < 2:
        raise ValueError("CSV must include header and at least one row")

    header = [h.strip().lower() for h in rows[0]]
    payloads: list[dict[str, Any]] = []
    for cols in rows[1:]:
        row = {key: (cols[i].strip() if i < len(cols) else None) for i, key in enumerate(header)}
        payloads.append({
            "name": row.get("name"),
            "unit_price": row.get("price"),
            "quantity": row.get("quantity"),
            "unit": row.get("unit"),
            "threshold": row.get("threshold"),
            "expiry_date": row.get("expirydate"),
            "sku": row.get("sku"),
            "category": row.get("category"),
        })
    return payloads


def import_products_csv(db: Session, text: str, now: datetime) -> list[Product]:
    payloads = parse_products_csv(text)
    for line_no, payload in enumerate(payloads, start=2):
        if not (payload["name"] or "").strip():
            raise ValueError(f"CSV row {line_no}: name is required")
    created = [create_product(db, payload, now) for payload in payloads]
    logger.info("Imported %d products from CSV", len(created))
    return created
