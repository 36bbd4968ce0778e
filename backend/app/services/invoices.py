"""Invoice persistence: creation, payment, first-view tracking, dev seeding."""
from __future__ import annotations

import logging
import math
import secrets
from datetime import datetime, timedelta, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Any
from uuid import UUID

from sqlalchemy.orm import Session, selectinload

from backend.app.core.timeutils import (
    AMOUNT_MAX,
    INT_MAX,
    ZERO,
    coerce_datetime,
    coerce_decimal,
    coerce_int,
)
from backend.app.models.invoice import Invoice, InvoiceItem, InvoiceStatus
from backend.app.services.sales_graph import SAMPLE_SALES
from backend.app.services.time_buckets import WEEKLY, YEARLY, build_buckets

logger = logging.getLogger(__name__)

SEED_ITEM_NAME = "Seed Item"
# Seeded KPI quantities: one unit per 500 currency units, at least one
SEED_UNIT_VALUE = Decimal("500")


def generate_invoice_code(sequence: int, year: int) -> str:
    """Return a formatted invoice code like INV-2026-0001."""
    return f"INV-{year}-{sequence:04d}"


def generate_reference_number() -> str:
    """Payment reference like REF-483920."""
    return f"REF-{100000 + secrets.randbelow(900000)}"


def _next_invoice_code(db: Session, year: int) -> str:
    prefix = f"INV-{year}-"
    sequence = (
        db.query(Invoice).filter(Invoice.invoice_code.like(f"{prefix}%")).count() + 1
    )
    code = generate_invoice_code(sequence, year)
    while db.query(Invoice.id).filter(Invoice.invoice_code == code).first():
        sequence += 1
        code = generate_invoice_code(sequence, year)
    return code


def _build_items(raw_items: list[dict[str, Any]]) -> list[InvoiceItem]:
    items: list[InvoiceItem] = []
    for position, raw in enumerate(raw_items):
        quantity = max(0, coerce_int(raw.get("quantity")))
        unit_price = max(coerce_decimal(raw.get("unit_price")), ZERO)
        line_total = raw.get("line_total")
        items.append(InvoiceItem(
            position=position,
            name=(raw.get("name") or "").strip() or "Item",
            quantity=quantity,
            unit_price=unit_price,
            line_total=(
                unit_price * quantity
                if line_total is None
                else max(coerce_decimal(line_total), ZERO)
            ),
        ))
    return items


def list_invoices(db: Session, page: int = 1, limit: int = 10) -> dict[str, Any]:
    total = db.query(Invoice).count()
    items = (
        db.query(Invoice)
        .options(selectinload(Invoice.items))
        .order_by(Invoice.created_at.desc(), Invoice.seq.desc())
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


def create_invoice(db: Session, data: dict[str, Any], now: datetime) -> Invoice:
    """Create an invoice, filling in totals the caller left out.

    subtotal defaults to the sum of line totals, tax to 0 and total to
    subtotal + tax. A supplied total that disagrees is rejected.
    """
    items = _build_items(data.get("items") or [])

    subtotal = (
        sum((i.line_total for i in items), ZERO)
        if data.get("subtotal") is None
        else max(coerce_decimal(data["subtotal"]), ZERO)
    )
    tax = max(coerce_decimal(data.get("tax")), ZERO)
    total = subtotal + tax
    if total > AMOUNT_MAX or any(i.line_total > AMOUNT_MAX for i in items):
        raise ValueError(f"Invoice amounts must not exceed {AMOUNT_MAX}")
    if data.get("total") is not None:
        given = coerce_decimal(data["total"])
        if given != total:
            raise ValueError(
                f"Invoice total {given} must equal subtotal {subtotal} plus tax {tax}"
            )

    status = InvoiceStatus(data.get("status") or InvoiceStatus.UNPAID)
    created_at = coerce_datetime(data.get("created_at")) or now
    code = data.get("invoice_code") or _next_invoice_code(db, created_at.year)
    if db.query(Invoice.id).filter(Invoice.invoice_code == code).first():
        raise ValueError(f"Invoice code {code} already exists")

    invoice = Invoice(
        invoice_code=code,
        items=items,
        subtotal=subtotal,
        tax=tax,
        total=total,
        status=status,
        reference_number=(
            generate_reference_number() if status == InvoiceStatus.PAID else None
        ),
        due_date=coerce_datetime(data.get("due_date")),
        created_at=created_at,
    )
    db.add(invoice)
    db.commit()
    db.refresh(invoice)
    logger.info("Created invoice %s (%s, total=%s)", invoice.invoice_code, status.value, total)
    return invoice


def get_invoice(db: Session, invoice_id: UUID, now: datetime) -> Invoice | None:
    """Fetch an invoice, stamping ``viewed_at`` on the first view only."""
    invoice = (
        db.query(Invoice)
        .options(selectinload(Invoice.items))
        .filter(Invoice.id == invoice_id)
        .first()
    )
    if invoice is None:
        return None
    if invoice.viewed_at is None:
        invoice.viewed_at = now
        db.commit()
        db.refresh(invoice)
    return invoice


def mark_invoice_paid(db: Session, invoice_id: UUID) -> Invoice | None:
    invoice = db.query(Invoice).filter(Invoice.id == invoice_id).first()
    if invoice is None:
        return None
    invoice.status = InvoiceStatus.PAID
    if not invoice.reference_number:
        invoice.reference_number = generate_reference_number()
    db.commit()
    db.refresh(invoice)
    logger.info("Invoice %s marked paid (%s)", invoice.invoice_code, invoice.reference_number)
    return invoice


def delete_invoice(db: Session, invoice_id: UUID) -> bool:
    invoice = db.query(Invoice).filter(Invoice.id == invoice_id).first()
    if invoice is None:
        return False
    db.delete(invoice)
    db.commit()
    logger.info("Deleted invoice %s", invoice.invoice_code)
    return True


# ─── Dev-only graph seeding ─────────────────────────────────────────────────


def _seed_slots(period: str, now: datetime) -> tuple[str, list[tuple[str, datetime]]]:
    """Seed code prefix and (code stem, created_at) per bucket, oldest first."""
    scaffold = build_buckets(period, now)
    if scaffold.period == WEEKLY:
        return "SEED-W-", [
            (f"SEED-W-{i + 1}", scaffold.start + timedelta(days=i, hours=10))
            for i in range(len(scaffold.keys))
        ]
    if scaffold.period == YEARLY:
        return "SEED-Y-", [
            (f"SEED-Y-{year}", datetime(int(year), 7, 1, 10, tzinfo=timezone.utc))
            for year in scaffold.keys
        ]
    year = scaffold.start.year
    return "SEED-M-", [
        (f"SEED-M-{month}", datetime(year, int(month), 15, 10, tzinfo=timezone.utc))
        for month in scaffold.keys
    ]


def seed_graph_invoices(
    db: Session,
    period: str,
    now: datetime,
    sales: list[Any] | None = None,
) -> int:
    """Insert backdated paid invoices so the chart has data to show.

    Previous seed rows in the same window are removed first. Defaults to
    the sample series shown by the sparse-data fallback.
    """
    scaffold = build_buckets(period, now)
    prefix, slots = _seed_slots(scaffold.period, now)
    series = sales if sales is not None else list(SAMPLE_SALES[scaffold.period])

    stale = (
        db.query(Invoice)
        .filter(
            Invoice.status == InvoiceStatus.PAID,
            Invoice.created_at >= scaffold.start,
            Invoice.created_at < scaffold.end,
            Invoice.invoice_code.like(f"{prefix}%"),
        )
        .all()
    )
    for invoice in stale:
        db.delete(invoice)
    db.flush()

    inserted = 0
    for (stem, created_at), value in zip(slots, series):
        total = max(coerce_decimal(value), ZERO)
        units = int((total / SEED_UNIT_VALUE).to_integral_value(rounding=ROUND_HALF_UP))
        qty = min(INT_MAX, max(1, units))
        db.add(Invoice(
            invoice_code=f"{stem}-{secrets.randbelow(10000)}",
            items=[InvoiceItem(
                position=0,
                name=SEED_ITEM_NAME,
                quantity=qty,
                unit_price=total,
                line_total=total,
            )],
            subtotal=total,
            tax=ZERO,
            total=total,
            status=InvoiceStatus.PAID,
            reference_number=generate_reference_number(),
            created_at=created_at,
        ))
        inserted += 1

    db.commit()
    logger.info("Seeded %d %s graph invoices", inserted, scaffold.period)
    return inserted
