"""Sales & purchase series for the dashboard chart."""
from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from sqlalchemy.orm import Session

from backend.app.core.config import settings
from backend.app.models.invoice import InvoiceStatus
from backend.app.services.records import InvoiceRecord, load_invoice_records
from backend.app.services.time_buckets import (
    MONTHLY,
    WEEKLY,
    YEARLY,
    BucketScaffold,
    bucket_key,
    build_buckets,
)

logger = logging.getLogger(__name__)

ZERO = Decimal("0")

# Illustrative series shown instead of a near-empty chart; oldest first.
# Also used by the dev seeding helper so seeded data matches the sample.
SAMPLE_SALES: dict[str, tuple[Decimal, ...]] = {
    WEEKLY: tuple(Decimal(v) for v in (8200, 10200, 7600, 9400, 10800, 5600, 6100)),
    MONTHLY: tuple(
        Decimal(v)
        for v in (
            48000, 50500, 38000, 31000, 37000, 30000,
            28000, 24000, 39000, 26000, 21000, 23000,
        )
    ),
    YEARLY: tuple(Decimal(v) for v in (420000, 455000, 390000, 365000, 410000)),
}


@dataclass(frozen=True)
class SalesSeries:
    sales: tuple[Decimal, ...]
    purchase: tuple[Decimal, ...]


@dataclass(frozen=True)
class SalesGraph:
    period: str
    labels: tuple[str, ...]
    sales: tuple[Decimal, ...]
    purchase: tuple[Decimal, ...]
    is_sample: bool = False


def materialize_series(
    scaffold: BucketScaffold, invoices: Iterable[InvoiceRecord],
) -> SalesSeries:
    """Sum paid invoice totals per bucket, aligned 1:1 with ``scaffold.keys``.

    Purchase has no backing data and stays zero-filled.
    """
    sums: dict[str, Decimal] = {}
    for inv in invoices:
        if not inv.is_paid or not scaffold.contains(inv.created_at):
            continue
        key = bucket_key(scaffold.period, inv.created_at)
        sums[key] = sums.get(key, ZERO) + inv.total

    sales = tuple(sums.get(k, ZERO) for k in scaffold.keys)
    purchase = tuple(ZERO for _ in scaffold.keys)
    return SalesSeries(sales=sales, purchase=purchase)


def count_positive(values: Sequence[Decimal]) -> int:
    return sum(1 for v in values if v > 0)


def is_sparse(values: Sequence[Decimal]) -> bool:
    """At most one strictly-positive point renders as a degenerate chart."""
    return count_positive(values) <= 1


def sample_series(scaffold: BucketScaffold) -> SalesSeries:
    sales = SAMPLE_SALES[scaffold.period]
    return SalesSeries(sales=sales, purchase=tuple(ZERO for _ in sales))


def build_sales_graph(
    scaffold: BucketScaffold,
    invoices: Iterable[InvoiceRecord],
    *,
    fallback: bool = True,
) -> SalesGraph:
    """Materialize the chart series, substituting the sample when sparse.

    This is the only place the sample series may replace real data; it is
    never written back to storage.
    """
    series = materialize_series(scaffold, invoices)
    is_sample = False
    if fallback and is_sparse(series.sales):
        logger.warning(
            "Sparse %s sales series (%d non-zero points); using sample data",
            scaffold.period,
            count_positive(series.sales),
        )
        series = sample_series(scaffold)
        is_sample = True

    return SalesGraph(
        period=scaffold.period,
        labels=scaffold.labels,
        sales=series.sales,
        purchase=series.purchase,
        is_sample=is_sample,
    )


def get_sales_graph(db: Session, period: str | None, now: datetime) -> SalesGraph:
    scaffold = build_buckets(period, now)
    invoices = load_invoice_records(
        db,
        status=InvoiceStatus.PAID,
        created_from=scaffold.start,
        created_before=scaffold.end,
        with_items=False,
    )
    return build_sales_graph(
        scaffold, invoices, fallback=settings.SPARSE_FALLBACK_ENABLED,
    )
