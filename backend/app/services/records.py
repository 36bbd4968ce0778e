"""Read side of the storage collaborator.

Loads ORM rows into immutable value records that the analytics engine
consumes, so the engine itself never touches a session. Storage
failures surface as :class:`AnalyticsSourceError`.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from backend.app.core.errors import AnalyticsSourceError
from backend.app.core.timeutils import as_utc, coerce_decimal, coerce_int
from backend.app.models.inventory import Product
from backend.app.models.invoice import Invoice, InvoiceStatus

logger = logging.getLogger(__name__)


# ─── Value records ───────────────────────────────────────────────────────────


@dataclass(frozen=True)
class ProductRecord:
    name: str
    quantity: int
    threshold: int | None = 0
    expiry_date: datetime | None = None
    category: str | None = None
    unit_price: Decimal = Decimal("0")


@dataclass(frozen=True)
class LineItemRecord:
    name: str
    quantity: int
    line_total: Decimal = Decimal("0")


@dataclass(frozen=True)
class InvoiceRecord:
    total: Decimal
    status: InvoiceStatus
    created_at: datetime
    items: tuple[LineItemRecord, ...] = field(default_factory=tuple)
    viewed_at: datetime | None = None

    @property
    def is_paid(self) -> bool:
        return self.status == InvoiceStatus.PAID


# ─── Row → record conversion ────────────────────────────────────────────────


def product_record(product: Product) -> ProductRecord:
    threshold = product.threshold
    return ProductRecord(
        name=product.name,
        quantity=max(0, coerce_int(product.quantity)),
        threshold=None if threshold is None else coerce_int(threshold),
        expiry_date=as_utc(product.expiry_date),
        category=product.category,
        unit_price=coerce_decimal(product.unit_price),
    )


def invoice_record(invoice: Invoice, with_items: bool = True) -> InvoiceRecord:
    return InvoiceRecord(
        total=coerce_decimal(invoice.total),
        status=invoice.status,
        created_at=as_utc(invoice.created_at),
        viewed_at=as_utc(invoice.viewed_at),
        items=tuple(
            LineItemRecord(
                name=item.name,
                quantity=coerce_int(item.quantity),
                line_total=coerce_decimal(item.line_total),
            )
            for item in (invoice.items if with_items else ())
        ),
    )


# ─── Loaders ────────────────────────────────────────────────────────────────


def load_product_records(db: Session) -> list[ProductRecord]:
    try:
        rows = db.query(Product).order_by(Product.created_at, Product.id).all()
    except SQLAlchemyError as exc:
        logger.exception("Failed to read products for analytics")
        raise AnalyticsSourceError("products") from exc
    return [product_record(p) for p in rows]


def load_invoice_records(
    db: Session,
    *,
    status: InvoiceStatus | None = None,
    created_from: datetime | None = None,
    created_before: datetime | None = None,
    with_items: bool = True,
) -> list[InvoiceRecord]:
    """Invoices oldest first, then by insertion, so ranking ties keep insertion order.

    With ``with_items=False`` line items are neither loaded nor returned.
    """
    try:
        query = db.query(Invoice)
        if with_items:
            query = query.options(selectinload(Invoice.items))
        if status is not None:
            query = query.filter(Invoice.status == status)
        if created_from is not None:
            query = query.filter(Invoice.created_at >= created_from)
        if created_before is not None:
            query = query.filter(Invoice.created_at < created_before)
        rows = query.order_by(Invoice.created_at, Invoice.seq).all()
    except SQLAlchemyError as exc:
        logger.exception("Failed to read invoices for analytics")
        raise AnalyticsSourceError("invoices") from exc
    return [invoice_record(inv, with_items=with_items) for inv in rows]
