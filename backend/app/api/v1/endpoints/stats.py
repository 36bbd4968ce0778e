from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from backend.app.api.deps import get_now
from backend.app.core.config import settings
from backend.app.core.database import get_db
from backend.app.schemas.stats import (
    GraphOut,
    KpisOut,
    SeedGraphOut,
    SeedGraphRequest,
    TopProductOut,
)
from backend.app.services.invoices import seed_graph_invoices
from backend.app.services.metrics import get_kpis, get_top_products
from backend.app.services.sales_graph import get_sales_graph
from backend.app.services.time_buckets import normalize_period

router = APIRouter()


@router.get("/kpis", response_model=KpisOut)
def kpis(
    period: str | None = Query(None),
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
) -> KpisOut:
    k = get_kpis(db, now, period)
    return KpisOut(revenue=float(k.revenue), sold=k.sold, in_stock=k.in_stock)


@router.get("/top-products", response_model=list[TopProductOut])
def top_products(db: Session = Depends(get_db)) -> list[TopProductOut]:
    return [TopProductOut(name=t.name, sales=t.sales) for t in get_top_products(db)]


@router.get("/graph", response_model=GraphOut)
def graph(
    period: str | None = Query(None),
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
) -> GraphOut:
    g = get_sales_graph(db, period, now)
    return GraphOut(
        period=g.period,
        labels=list(g.labels),
        sales=[float(v) for v in g.sales],
        purchase=[float(v) for v in g.purchase],
        is_sample=g.is_sample,
    )


@router.post("/seed-graph", response_model=SeedGraphOut)
def seed_graph(
    period: str | None = Query(None),
    body: SeedGraphRequest | None = None,
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
) -> SeedGraphOut:
    """Dev-only: insert backdated paid invoices for the chosen period."""
    if not settings.dev_seed_allowed:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Seeding disabled in production",
        )
    chosen = normalize_period(period or (body.period if body else None))
    seeded = seed_graph_invoices(db, chosen, now, sales=body.sales if body else None)
    return SeedGraphOut(seeded=seeded, period=chosen)
