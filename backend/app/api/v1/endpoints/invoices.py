from __future__ import annotations

from datetime import datetime
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from backend.app.api.deps import get_now, not_found, pagination
from backend.app.core.database import get_db
from backend.app.models.invoice import Invoice
from backend.app.schemas.invoice import (
    InvoiceCreate,
    InvoiceMetricsOut,
    InvoiceOut,
    InvoicePage,
)
from backend.app.services.invoices import (
    create_invoice,
    delete_invoice,
    get_invoice,
    list_invoices,
    mark_invoice_paid,
)
from backend.app.services.metrics import get_invoice_metrics

router = APIRouter()


@router.get("/metrics", response_model=InvoiceMetricsOut)
def invoice_metrics(
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
) -> InvoiceMetricsOut:
    m = get_invoice_metrics(db, now)
    return InvoiceMetricsOut(
        total=m.total,
        recent=m.recent,
        processed=m.processed,
        paid_amount=float(m.paid_amount),
        unpaid_amount=float(m.unpaid_amount),
        pending=m.pending,
    )


@router.get("", response_model=InvoicePage)
def invoices_page(
    paging: tuple[int, int] = Depends(pagination),
    db: Session = Depends(get_db),
) -> dict[str, object]:
    page, limit = paging
    return list_invoices(db, page=page, limit=limit)


@router.post("", response_model=InvoiceOut, status_code=status.HTTP_201_CREATED)
def add_invoice(
    body: InvoiceCreate,
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
) -> Invoice:
    try:
        return create_invoice(db, body.model_dump(), now)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.get("/{invoice_id}", response_model=InvoiceOut)
def invoice_detail(
    invoice_id: UUID,
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
) -> Invoice:
    invoice = get_invoice(db, invoice_id, now)
    if invoice is None:
        raise not_found("Invoice")
    return invoice


@router.patch("/{invoice_id}/mark-paid", response_model=InvoiceOut)
def pay_invoice(
    invoice_id: UUID,
    db: Session = Depends(get_db),
) -> Invoice:
    invoice = mark_invoice_paid(db, invoice_id)
    if invoice is None:
        raise not_found("Invoice")
    return invoice


@router.delete("/{invoice_id}")
def remove_invoice(
    invoice_id: UUID,
    db: Session = Depends(get_db),
) -> dict[str, bool]:
    if not delete_invoice(db, invoice_id):
        raise not_found("Invoice")
    return {"deleted": True}
