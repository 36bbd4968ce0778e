from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import AliasChoices, BaseModel, Field, field_validator

from backend.app.models.invoice import InvoiceStatus
from backend.app.schemas.inventory import LooseNumber


class InvoiceItemIn(BaseModel):
    name: str
    quantity: LooseNumber = Field(0, validation_alias=AliasChoices("quantity", "qty"))
    unit_price: LooseNumber = Field(
        0, validation_alias=AliasChoices("unit_price", "price")
    )
    line_total: LooseNumber = None


class InvoiceCreate(BaseModel):
    invoice_code: str | None = Field(
        None, validation_alias=AliasChoices("invoice_code", "invoiceId")
    )
    items: list[InvoiceItemIn] = []
    subtotal: LooseNumber = None
    tax: LooseNumber = None
    total: LooseNumber = None
    status: str = "unpaid"
    due_date: datetime | str | None = Field(
        None, validation_alias=AliasChoices("due_date", "dueDate")
    )

    @field_validator("status")
    @classmethod
    def valid_status(cls, v: str) -> str:
        allowed = {"unpaid", "paid"}
        if v not in allowed:
            raise ValueError(f"status must be one of {allowed}")
        return v


class InvoiceItemOut(BaseModel):
    name: str
    quantity: int
    unit_price: Decimal
    line_total: Decimal

    class Config:
        from_attributes = True


class InvoiceOut(BaseModel):
    id: UUID
    invoice_code: str
    items: list[InvoiceItemOut]
    subtotal: Decimal
    tax: Decimal
    total: Decimal
    status: InvoiceStatus
    reference_number: str | None
    due_date: datetime | None
    viewed_at: datetime | None
    created_at: datetime

    class Config:
        from_attributes = True


class InvoicePage(BaseModel):
    items: list[InvoiceOut]
    total: int
    page: int
    limit: int
    total_pages: int


# ─── Dashboard ───────────────────────────────────────────────────────────────


class InvoiceMetricsOut(BaseModel):
    total: int
    recent: int
    processed: int
    paid_amount: float = Field(serialization_alias="paidAmount")
    unpaid_amount: float = Field(serialization_alias="unpaidAmount")
    pending: int

    class Config:
        from_attributes = True
