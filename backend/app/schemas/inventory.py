from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import AliasChoices, BaseModel, Field

from backend.app.models.inventory import ProductStatus

# Loosely typed on purpose: malformed numbers are coerced to 0 by the
# service layer instead of failing validation.
LooseNumber = int | float | Decimal | str | None


class ProductCreate(BaseModel):
    name: str
    sku: str | None = None
    category: str | None = None
    unit_price: LooseNumber = Field(
        0, validation_alias=AliasChoices("unit_price", "price")
    )
    quantity: LooseNumber = 0
    unit: str | None = None
    threshold: LooseNumber = None
    expiry_date: datetime | str | None = Field(
        None, validation_alias=AliasChoices("expiry_date", "expiryDate")
    )
    image_url: str | None = Field(
        None, validation_alias=AliasChoices("image_url", "imageUrl")
    )


class ProductUpdate(BaseModel):
    name: str | None = None
    sku: str | None = None
    category: str | None = None
    unit_price: LooseNumber = Field(
        None, validation_alias=AliasChoices("unit_price", "price")
    )
    quantity: LooseNumber = None
    unit: str | None = None
    threshold: LooseNumber = None
    expiry_date: datetime | str | None = Field(
        None, validation_alias=AliasChoices("expiry_date", "expiryDate")
    )
    image_url: str | None = Field(
        None, validation_alias=AliasChoices("image_url", "imageUrl")
    )


class ProductOrder(BaseModel):
    delta: LooseNumber = 0


class ProductOut(BaseModel):
    id: UUID
    name: str
    sku: str | None
    category: str | None
    unit_price: Decimal
    quantity: int
    unit: str | None
    threshold: int | None
    expiry_date: datetime | None
    status: ProductStatus
    image_url: str | None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class ProductPage(BaseModel):
    items: list[ProductOut]
    total: int
    page: int
    limit: int
    total_pages: int


class ProductImportOut(BaseModel):
    inserted: int
    items: list[ProductOut]


class MarkExpiredOut(BaseModel):
    updated: int


# ─── Dashboard ───────────────────────────────────────────────────────────────


class InventoryMetricsOut(BaseModel):
    total: int
    in_stock: int = Field(serialization_alias="inStock")
    low_stock: int = Field(serialization_alias="lowStock")
    out_of_stock: int = Field(serialization_alias="outOfStock")
    expired: int
    categories: int

    class Config:
        from_attributes = True
