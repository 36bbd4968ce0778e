"""Seed the database with demo products and invoices.

Usage:
    python -m backend.scripts.seed
"""

from __future__ import annotations

import logging
from datetime import timedelta

from backend.app.core.database import Base, SessionLocal, engine
from backend.app.core.timeutils import utcnow
from backend.app.models.inventory import Product
from backend.app.models.invoice import Invoice
from backend.app.services.invoices import create_invoice, seed_graph_invoices
from backend.app.services.products import create_product
from backend.app.services.time_buckets import PERIODS

logger = logging.getLogger(__name__)

PRODUCTS: list[dict[str, object]] = [
    {"name": "Maggi", "category": "Noodles", "unit_price": "430", "quantity": 43, "threshold": 12, "unit": "Packets"},
    {"name": "Bru", "category": "Coffee", "unit_price": "257", "quantity": 22, "threshold": 12, "unit": "Packets"},
    {"name": "Red Bull", "category": "Beverages", "unit_price": "405", "quantity": 36, "threshold": 9, "unit": "Packets"},
    {"name": "Bourn Vita", "category": "Beverages", "unit_price": "502", "quantity": 14, "threshold": 6, "unit": "Packets"},
    {"name": "Horlicks", "category": "Beverages", "unit_price": "530", "quantity": 5, "threshold": 5, "unit": "Packets"},
    {"name": "Harpic", "category": "Cleaning", "unit_price": "605", "quantity": 0, "threshold": 5, "unit": "Bottles"},
    {"name": "Ariel", "category": "Cleaning", "unit_price": "408", "quantity": 10, "threshold": 5, "unit": "Packets"},
]


def seed() -> None:
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    now = utcnow()
    try:
        if db.query(Product).count() == 0:
            for payload in PRODUCTS:
                create_product(db, dict(payload), now)
            # One already-expired product so every status bucket is populated
            create_product(
                db,
                {"name": "Milk", "category": "Dairy", "unit_price": "60", "quantity": 8,
                 "threshold": 3, "expiry_date": now - timedelta(days=2)},
                now,
            )
            logger.info("Seeded %d products", len(PRODUCTS) + 1)

        if db.query(Invoice).count() == 0:
            create_invoice(
                db,
                {"items": [{"name": "Maggi", "quantity": 4, "unit_price": "430"},
                           {"name": "Bru", "quantity": 2, "unit_price": "257"}],
                 "tax": "100", "status": "paid"},
                now,
            )
            create_invoice(
                db,
                {"items": [{"name": "Red Bull", "quantity": 6, "unit_price": "405"}],
                 "due_date": now + timedelta(days=14)},
                now,
            )
            for period in PERIODS:
                seed_graph_invoices(db, period, now)
    finally:
        db.close()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    seed()
    print("Seed complete.")
