"""Dashboard metrics over product and invoice collections.

The pure ``*_metrics`` / ``compute_*`` functions take record sequences
and a "now"; the ``get_*`` wrappers load those records through
``services.records``. Nothing here mutates source data or caches a
result between calls.
"""
from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import Decimal

from sqlalchemy.orm import Session

from backend.app.core.config import settings
from backend.app.core.timeutils import as_utc
from backend.app.models.inventory import ProductStatus
from backend.app.models.invoice import InvoiceStatus
from backend.app.services.records import (
    InvoiceRecord,
    ProductRecord,
    load_invoice_records,
    load_product_records,
)
from backend.app.services.stock_status import classify_stock_status, is_available
from backend.app.services.time_buckets import build_buckets

ZERO = Decimal("0")


@dataclass(frozen=True)
class InventoryMetrics:
    total: int
    in_stock: int
    low_stock: int
    out_of_stock: int
    expired: int
    categories: int


@dataclass(frozen=True)
class InvoiceMetrics:
    total: int
    recent: int
    processed: int
    paid_amount: Decimal
    unpaid_amount: Decimal
    pending: int


@dataclass(frozen=True)
class Kpis:
    revenue: Decimal
    sold: int
    in_stock: int


@dataclass(frozen=True)
class TopProduct:
    name: str
    sales: int


# ── Inventory ────────────────────────────────────────────────────────────────


def inventory_metrics(
    products: Sequence[ProductRecord], now: datetime,
) -> InventoryMetrics:
    """Status counts, classified per record rather than from the cached column."""
    counts = {s: 0 for s in ProductStatus}
    categories: set[str] = set()
    for p in products:
        counts[classify_stock_status(p.quantity, p.threshold, p.expiry_date, now)] += 1
        if p.category is not None:
            categories.add(p.category)

    return InventoryMetrics(
        total=len(products),
        in_stock=counts[ProductStatus.IN_STOCK],
        low_stock=counts[ProductStatus.LOW_STOCK],
        out_of_stock=counts[ProductStatus.OUT_OF_STOCK],
        expired=counts[ProductStatus.EXPIRED],
        categories=len(categories),
    )


# ── Invoices ─────────────────────────────────────────────────────────────────


def invoice_metrics(
    invoices: Sequence[InvoiceRecord],
    now: datetime,
    recent_days: int = 7,
) -> InvoiceMetrics:
    since = as_utc(now) - timedelta(days=recent_days)
    recent = 0
    processed = 0
    pending = 0
    paid_amount = ZERO
    unpaid_amount = ZERO

    for inv in invoices:
        is_recent = inv.created_at >= since
        if is_recent:
            recent += 1
        # Literal definition: viewed at least once
        if inv.viewed_at is not None:
            processed += 1
        if inv.status == InvoiceStatus.PAID and is_recent:
            paid_amount += inv.total
        elif inv.status == InvoiceStatus.UNPAID:
            unpaid_amount += inv.total
            pending += 1

    return InvoiceMetrics(
        total=len(invoices),
        recent=recent,
        processed=processed,
        paid_amount=paid_amount,
        unpaid_amount=unpaid_amount,
        pending=pending,
    )


# ── KPIs ─────────────────────────────────────────────────────────────────────


def compute_kpis(
    products: Iterable[ProductRecord],
    invoices: Iterable[InvoiceRecord],
    now: datetime,
    period: str | None = None,
) -> Kpis:
    """Revenue and units sold over paid invoices, all-time unless *period* given."""
    window = build_buckets(period, now) if period else None
    revenue = ZERO
    sold = 0
    for inv in invoices:
        if not inv.is_paid:
            continue
        if window is not None and not window.contains(inv.created_at):
            continue
        revenue += inv.total
        sold += sum(item.quantity for item in inv.items)

    in_stock = sum(
        1
        for p in products
        if is_available(classify_stock_status(p.quantity, p.threshold, p.expiry_date, now))
    )
    return Kpis(revenue=revenue, sold=sold, in_stock=in_stock)


# ── Top products ─────────────────────────────────────────────────────────────


def top_products(
    invoices: Iterable[InvoiceRecord], limit: int = 10,
) -> list[TopProduct]:
    """Line-item quantities summed per name, highest first.

    Ties keep first-encountered order (dicts preserve insertion order and
    ``sorted`` is stable).
    """
    totals: dict[str, int] = {}
    for inv in invoices:
        for item in inv.items:
            totals[item.name] = totals.get(item.name, 0) + item.quantity

    ranked = sorted(totals.items(), key=lambda kv: kv[1], reverse=True)
    return [TopProduct(name=name, sales=qty) for name, qty in ranked[:limit]]


# ── Storage-backed entry points ──────────────────────────────────────────────


def get_inventory_metrics(db: Session, now: datetime) -> InventoryMetrics:
    return inventory_metrics(load_product_records(db), now)


def get_invoice_metrics(db: Session, now: datetime) -> InvoiceMetrics:
    return invoice_metrics(
        load_invoice_records(db, with_items=False),
        now,
        recent_days=settings.RECENT_WINDOW_DAYS,
    )


def get_kpis(db: Session, now: datetime, period: str | None = None) -> Kpis:
    products = load_product_records(db)
    invoices = load_invoice_records(db, status=InvoiceStatus.PAID)
    return compute_kpis(products, invoices, now, period)


def get_top_products(db: Session) -> list[TopProduct]:
    return top_products(load_invoice_records(db), limit=settings.TOP_PRODUCTS_LIMIT)
