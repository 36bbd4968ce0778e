"""Tests for dashboard metric aggregation."""
from __future__ import annotations

from datetime import datetime, timedelta, timezone
from decimal import Decimal

from sqlalchemy.orm import Session

from backend.app.models.inventory import Product, ProductStatus
from backend.app.models.invoice import Invoice, InvoiceStatus
from backend.app.services.metrics import (
    compute_kpis,
    get_inventory_metrics,
    get_invoice_metrics,
    get_kpis,
    get_top_products,
    invoice_metrics,
    top_products,
)
from backend.app.services.records import (
    InvoiceRecord,
    LineItemRecord,
    load_invoice_records,
)
from backend.tests.conftest import NOW, add_invoice


def record(*items: tuple[str, int], status: InvoiceStatus = InvoiceStatus.PAID) -> InvoiceRecord:
    return InvoiceRecord(
        total=Decimal("10"),
        status=status,
        created_at=NOW,
        items=tuple(LineItemRecord(name=n, quantity=q) for n, q in items),
    )


# ── Inventory metrics ────────────────────────────────────────────────────────


class TestInventoryMetrics:

    def test_counts_ignore_stale_cached_status(
        self, db: Session, stocked_products: list[Product],
    ) -> None:
        m = get_inventory_metrics(db, NOW)
        assert m.total == 5
        assert m.in_stock == 2
        assert m.low_stock == 1
        assert m.out_of_stock == 1
        assert m.expired == 1
        assert m.in_stock + m.low_stock + m.out_of_stock + m.expired == m.total

    def test_distinct_categories_skip_missing(
        self, db: Session, stocked_products: list[Product],
    ) -> None:
        assert get_inventory_metrics(db, NOW).categories == 3

    def test_empty_catalogue(self, db: Session) -> None:
        m = get_inventory_metrics(db, NOW)
        assert (m.total, m.in_stock, m.categories) == (0, 0, 0)

    def test_expiry_moves_with_now(
        self, db: Session, stocked_products: list[Product],
    ) -> None:
        earlier = NOW - timedelta(days=2)
        m = get_inventory_metrics(db, earlier)
        assert m.expired == 0
        assert m.in_stock == 3


# ── Invoice metrics ──────────────────────────────────────────────────────────


class TestInvoiceMetrics:

    def test_against_invoice_book(self, db: Session, invoice_book: list[Invoice]) -> None:
        m = get_invoice_metrics(db, NOW)
        assert m.total == 5
        assert m.recent == 3
        assert m.processed == 2
        assert m.paid_amount == Decimal("350")
        assert m.unpaid_amount == Decimal("135")
        assert m.pending == 2

    def test_recent_window_boundary_inclusive(self) -> None:
        boundary = InvoiceRecord(
            total=Decimal("5"), status=InvoiceStatus.PAID,
            created_at=NOW - timedelta(days=7),
        )
        m = invoice_metrics([boundary], NOW)
        assert m.recent == 1
        assert m.paid_amount == Decimal("5")

    def test_old_unpaid_still_pending(self) -> None:
        old = InvoiceRecord(
            total=Decimal("12.50"), status=InvoiceStatus.UNPAID,
            created_at=datetime(2020, 1, 1, tzinfo=timezone.utc),
        )
        m = invoice_metrics([old], NOW)
        assert m.recent == 0
        assert m.pending == 1
        assert m.unpaid_amount == Decimal("12.50")

    def test_empty(self) -> None:
        m = invoice_metrics([], NOW)
        assert m.total == 0
        assert m.paid_amount == Decimal("0")


# ── KPIs ─────────────────────────────────────────────────────────────────────


class TestKpis:

    def test_all_time(
        self, db: Session, stocked_products: list[Product], invoice_book: list[Invoice],
    ) -> None:
        k = get_kpis(db, NOW)
        assert k.revenue == Decimal("750")
        assert k.sold == 10
        assert k.in_stock == 3

    def test_weekly_window(
        self, db: Session, stocked_products: list[Product], invoice_book: list[Invoice],
    ) -> None:
        k = get_kpis(db, NOW, period="weekly")
        assert k.revenue == Decimal("350")
        assert k.sold == 8

    def test_unpaid_never_counted(self) -> None:
        k = compute_kpis([], [record(("A", 9), status=InvoiceStatus.UNPAID)], NOW)
        assert k.revenue == Decimal("0")
        assert k.sold == 0


# ── Top products ─────────────────────────────────────────────────────────────


class TestTopProducts:

    def test_tie_keeps_first_encountered_name(self) -> None:
        ranked = top_products([record(("A", 3)), record(("B", 5)), record(("A", 2))])
        assert [(t.name, t.sales) for t in ranked] == [("A", 5), ("B", 5)]

    def test_limit(self) -> None:
        invoices = [record((f"P{i}", i + 1)) for i in range(15)]
        ranked = top_products(invoices)
        assert len(ranked) == 10
        assert ranked[0].name == "P14"
        assert ranked[-1].name == "P5"

    def test_from_storage_oldest_first(self, db: Session, invoice_book: list[Invoice]) -> None:
        ranked = get_top_products(db)
        assert [(t.name, t.sales) for t in ranked] == [
            ("Bru", 5), ("Maggi", 4), ("Harpic", 2), ("Red Bull", 2),
        ]

    def test_repeated_calls_are_identical(self, db: Session) -> None:
        add_invoice(db, "10", InvoiceStatus.PAID, NOW, items=[("X", 1), ("Y", 1)])
        assert get_top_products(db) == get_top_products(db)


def test_same_timestamp_ties_follow_insertion_order(db: Session) -> None:
    for name, qty in [("A", 3), ("B", 5), ("A", 2)]:
        add_invoice(db, "10", InvoiceStatus.PAID, NOW, items=[(name, qty)])
    ranked = get_top_products(db)
    assert [(t.name, t.sales) for t in ranked] == [("A", 5), ("B", 5)]


def test_invoice_records_without_items(db: Session, invoice_book: list[Invoice]) -> None:
    records = load_invoice_records(db, with_items=False)
    assert len(records) == 5
    assert all(r.items == () for r in records)
    assert invoice_metrics(records, NOW) == invoice_metrics(load_invoice_records(db), NOW)


class TestRepeatedReads:

    def test_inventory_metrics(self, db: Session, stocked_products: list[Product]) -> None:
        assert get_inventory_metrics(db, NOW) == get_inventory_metrics(db, NOW)

    def test_invoice_metrics(self, db: Session, invoice_book: list[Invoice]) -> None:
        assert get_invoice_metrics(db, NOW) == get_invoice_metrics(db, NOW)

    def test_kpis(
        self, db: Session, stocked_products: list[Product], invoice_book: list[Invoice],
    ) -> None:
        assert get_kpis(db, NOW) == get_kpis(db, NOW)
        assert get_kpis(db, NOW, "monthly") == get_kpis(db, NOW, "monthly")

    def test_reads_leave_cached_status_alone(
        self, db: Session, stocked_products: list[Product],
    ) -> None:
        get_inventory_metrics(db, NOW)
        get_kpis(db, NOW)
        assert {p.status for p in stocked_products} == {ProductStatus.IN_STOCK}
