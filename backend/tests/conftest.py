"""Shared test fixtures.

Each test gets a fresh schema on an in-memory SQLite database that is
dropped afterwards, so tests never pollute each other. Point
``TEST_DATABASE_URL`` elsewhere to run against another engine.
"""

from __future__ import annotations

import os
import uuid

os.environ["DATABASE_URL"] = os.environ.get("TEST_DATABASE_URL", "sqlite://")

from datetime import datetime, timedelta, timezone  # noqa: E402
from decimal import Decimal  # noqa: E402
from typing import Generator  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.orm import Session  # noqa: E402

from backend.app.api.deps import get_now  # noqa: E402
from backend.app.core.database import Base, SessionLocal, engine, get_db  # noqa: E402
from backend.app.main import app  # noqa: E402
from backend.app.models.inventory import Product, ProductStatus  # noqa: E402
from backend.app.models.invoice import Invoice, InvoiceItem, InvoiceStatus  # noqa: E402

# Monday 2026-10-19, midday UTC
NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


# ─── DB session on a throwaway schema ────────────────────────────────────────


@pytest.fixture()
def db() -> Generator[Session, None, None]:
    """Yield a DB session on a freshly created schema; dropped after the test."""
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()

    yield session

    session.close()
    Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def now() -> datetime:
    return NOW


@pytest.fixture()
def client(db: Session, now: datetime) -> Generator[TestClient, None, None]:
    """FastAPI TestClient wired to the test session and a pinned clock."""

    def _override_get_db() -> Generator[Session, None, None]:
        yield db

    app.dependency_overrides[get_db] = _override_get_db
    app.dependency_overrides[get_now] = lambda: now
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


# ─── Inventory fixtures ───────────────────────────────────────────────────────


@pytest.fixture()
def stocked_products(db: Session) -> list[Product]:
    """One product per status bucket, with cached statuses deliberately stale."""
    products = [
        Product(
            name="Maggi", category="Noodles", unit_price=Decimal("430"),
            quantity=43, threshold=12, status=ProductStatus.IN_STOCK,
        ),
        Product(
            name="Horlicks", category="Beverages", unit_price=Decimal("530"),
            quantity=5, threshold=5, status=ProductStatus.IN_STOCK,
        ),
        Product(
            name="Harpic", category="Cleaning", unit_price=Decimal("605"),
            quantity=0, threshold=5, status=ProductStatus.IN_STOCK,
        ),
        Product(
            name="Milk", category="Beverages", unit_price=Decimal("60"),
            quantity=8, threshold=3, expiry_date=NOW - timedelta(days=1),
            status=ProductStatus.IN_STOCK,
        ),
        Product(
            name="Loose Screws", category=None, unit_price=Decimal("1"),
            quantity=3, threshold=None, status=ProductStatus.IN_STOCK,
        ),
    ]
    db.add_all(products)
    db.flush()
    return products


# ─── Invoice fixtures ────────────────────────────────────────────────────────


def add_invoice(
    db: Session,
    total: str,
    status: InvoiceStatus,
    created_at: datetime,
    items: list[tuple[str, int]] | None = None,
    viewed_at: datetime | None = None,
    code: str | None = None,
) -> Invoice:
    """Persist an invoice directly, bypassing the service layer."""
    invoice = Invoice(
        invoice_code=code or f"T-{uuid.uuid4().hex[:12]}",
        subtotal=Decimal(total),
        tax=Decimal("0"),
        total=Decimal(total),
        status=status,
        reference_number="REF-000001" if status == InvoiceStatus.PAID else None,
        created_at=created_at,
        viewed_at=viewed_at,
        items=[
            InvoiceItem(position=i, name=name, quantity=qty)
            for i, (name, qty) in enumerate(items or [])
        ],
    )
    db.add(invoice)
    db.flush()
    return invoice


@pytest.fixture()
def invoice_book(db: Session) -> list[Invoice]:
    """Mixed paid/unpaid invoices spread over the last few weeks."""
    return [
        add_invoice(
            db, "100", InvoiceStatus.PAID, NOW - timedelta(days=1),
            items=[("Maggi", 3), ("Bru", 1)], viewed_at=NOW - timedelta(hours=20),
        ),
        add_invoice(
            db, "250", InvoiceStatus.PAID, NOW - timedelta(days=3),
            items=[("Bru", 4)],
        ),
        add_invoice(
            db, "400", InvoiceStatus.PAID, NOW - timedelta(days=20),
            items=[("Red Bull", 2)], viewed_at=NOW - timedelta(days=19),
        ),
        add_invoice(
            db, "75", InvoiceStatus.UNPAID, NOW - timedelta(days=2),
            items=[("Maggi", 1)],
        ),
        add_invoice(
            db, "60", InvoiceStatus.UNPAID, NOW - timedelta(days=30),
            items=[("Harpic", 2)],
        ),
    ]
