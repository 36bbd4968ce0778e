from __future__ import annotations

import enum
import uuid
from datetime import datetime
from decimal import Decimal

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    Enum,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column

from backend.app.core.database import Base
from backend.app.core.timeutils import utcnow


class ProductStatus(str, enum.Enum):
    IN_STOCK = "in_stock"
    LOW_STOCK = "low_stock"
    OUT_OF_STOCK = "out_of_stock"
    EXPIRED = "expired"


class Product(Base):
    """Inventory product.

    NOTE: `status` is a cache of ``classify_stock_status`` over
    quantity/threshold/expiry_date. Every write path in
    ``services.products`` recomputes it before commit; readers that need
    a guaranteed-fresh value (dashboard metrics) classify again instead
    of trusting the column.
    """

    __tablename__ = "products"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    sku: Mapped[str | None] = mapped_column(String(50), nullable=True)
    category: Mapped[str | None] = mapped_column(String(255), nullable=True)
    unit_price: Mapped[Decimal] = mapped_column(
        Numeric(precision=20, scale=4), nullable=False, default=Decimal("0")
    )
    quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    unit: Mapped[str | None] = mapped_column(String(50), nullable=True)
    # NULL means "no threshold configured" and never yields low_stock
    threshold: Mapped[int | None] = mapped_column(Integer, nullable=True, default=0)
    expiry_date: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    status: Mapped[ProductStatus] = mapped_column(
        Enum(ProductStatus), nullable=False, default=ProductStatus.IN_STOCK
    )
    image_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )

    __table_args__ = (
        CheckConstraint("unit_price >= 0", name="ck_product_unit_price_non_negative"),
        CheckConstraint("quantity >= 0", name="ck_product_quantity_non_negative"),
        Index("ix_products_name", "name"),
        Index("ix_products_status", "status"),
        Index("ix_products_expiry_date", "expiry_date"),
        Index("ix_products_created_at", "created_at"),
    )
