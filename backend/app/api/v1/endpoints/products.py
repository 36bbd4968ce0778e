from __future__ import annotations

from datetime import datetime
from uuid import UUID

from fastapi import APIRouter, Body, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from backend.app.api.deps import get_now, not_found, pagination
from backend.app.core.database import get_db
from backend.app.models.inventory import Product
from backend.app.schemas.inventory import (
    InventoryMetricsOut,
    MarkExpiredOut,
    ProductCreate,
    ProductImportOut,
    ProductOrder,
    ProductOut,
    ProductPage,
    ProductUpdate,
)
from backend.app.services.metrics import get_inventory_metrics
from backend.app.services.products import (
    create_product,
    delete_product,
    import_products_csv,
    list_products,
    mark_expired_products,
    order_product_quantity,
    update_product,
)

router = APIRouter()


@router.get("/metrics", response_model=InventoryMetricsOut)
def inventory_metrics(
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
) -> InventoryMetricsOut:
    return InventoryMetricsOut.model_validate(get_inventory_metrics(db, now))


@router.get("", response_model=ProductPage)
def products_page(
    search: str = Query(""),
    paging: tuple[int, int] = Depends(pagination),
    db: Session = Depends(get_db),
) -> dict[str, object]:
    page, limit = paging
    return list_products(db, page=page, limit=limit, search=search)


@router.post("", response_model=ProductOut, status_code=status.HTTP_201_CREATED)
def add_product(
    payload: ProductCreate,
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
) -> Product:
    try:
        return create_product(db, payload.model_dump(), now)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.post(
    "/csv", response_model=ProductImportOut, status_code=status.HTTP_201_CREATED
)
def import_csv(
    body: bytes = Body(..., media_type="text/csv"),
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
) -> dict[str, object]:
    try:
        created = import_products_csv(db, body.decode("utf-8"), now)
    except (UnicodeDecodeError, ValueError) as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return {"inserted": len(created), "items": created}


@router.post("/mark-expired", response_model=MarkExpiredOut)
def sweep_expired(
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
) -> dict[str, int]:
    return {"updated": mark_expired_products(db, now)}


@router.patch("/{product_id}", response_model=ProductOut)
def edit_product(
    product_id: UUID,
    payload: ProductUpdate,
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
) -> Product:
    product = update_product(db, product_id, payload.model_dump(exclude_unset=True), now)
    if product is None:
        raise not_found("Product")
    return product


@router.patch("/{product_id}/order", response_model=ProductOut)
def order_product(
    product_id: UUID,
    payload: ProductOrder,
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
) -> Product:
    product = order_product_quantity(db, product_id, payload.delta, now)
    if product is None:
        raise not_found("Product")
    return product


@router.delete("/{product_id}")
def remove_product(
    product_id: UUID,
    db: Session = Depends(get_db),
) -> dict[str, bool]:
    if not delete_product(db, product_id):
        raise not_found("Product")
    return {"deleted": True}
