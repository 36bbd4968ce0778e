"""Reporting-period scaffolds for the sales & purchase chart.

A scaffold is the fixed set of bucket keys, labels and the half-open
``[start, end)`` window for a period, built from "now" alone. The series
materializer fills it in using :func:`bucket_key`, the same key function
the scaffold was built with.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from backend.app.core.timeutils import as_utc

WEEKLY = "weekly"
MONTHLY = "monthly"
YEARLY = "yearly"

PERIODS = (WEEKLY, MONTHLY, YEARLY)
DEFAULT_PERIOD = MONTHLY

WEEK_DAYS = 7
YEARS_SHOWN = 5

MONTH_LABELS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)
# Indexed by date.weekday() (Monday == 0)
DAY_LABELS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")


@dataclass(frozen=True)
class BucketScaffold:
    period: str
    keys: tuple[str, ...]
    labels: tuple[str, ...]
    start: datetime
    end: datetime

    def contains(self, moment: datetime) -> bool:
        return self.start <= as_utc(moment) < self.end


def normalize_period(period: str | None) -> str:
    """Unknown or missing selectors fall back to monthly; matching is exact."""
    return period if period in PERIODS else DEFAULT_PERIOD


def _utc_midnight(moment: datetime) -> datetime:
    m = as_utc(moment)
    return datetime(m.year, m.month, m.day, tzinfo=timezone.utc)


def bucket_key(period: str, moment: datetime) -> str:
    """Key of the bucket *moment* falls into for *period*."""
    m = as_utc(moment)
    period = normalize_period(period)
    if period == WEEKLY:
        return m.date().isoformat()
    if period == YEARLY:
        return str(m.year)
    return str(m.month)


def _weekly(now: datetime) -> BucketScaffold:
    today = _utc_midnight(now)
    days = [today - timedelta(days=i) for i in range(WEEK_DAYS - 1, -1, -1)]
    return BucketScaffold(
        period=WEEKLY,
        keys=tuple(d.date().isoformat() for d in days),
        labels=tuple(DAY_LABELS[d.weekday()] for d in days),
        start=days[0],
        end=today + timedelta(days=1),
    )


def _monthly(now: datetime) -> BucketScaffold:
    year = as_utc(now).year
    return BucketScaffold(
        period=MONTHLY,
        keys=tuple(str(m) for m in range(1, 13)),
        labels=MONTH_LABELS,
        start=datetime(year, 1, 1, tzinfo=timezone.utc),
        end=datetime(year + 1, 1, 1, tzinfo=timezone.utc),
    )


def _yearly(now: datetime) -> BucketScaffold:
    current = as_utc(now).year
    years = [current - YEARS_SHOWN + 1 + i for i in range(YEARS_SHOWN)]
    return BucketScaffold(
        period=YEARLY,
        keys=tuple(str(y) for y in years),
        labels=tuple(str(y) for y in years),
        start=datetime(years[0], 1, 1, tzinfo=timezone.utc),
        end=datetime(current + 1, 1, 1, tzinfo=timezone.utc),
    )


_BUILDERS = {WEEKLY: _weekly, MONTHLY: _monthly, YEARLY: _yearly}


def build_buckets(period: str | None, now: datetime) -> BucketScaffold:
    """Scaffold for *period* anchored at *now* (UTC), oldest bucket first."""
    return _BUILDERS[normalize_period(period)](now)
