"""UTC helpers and input coercion used at the storage/API boundary."""

from __future__ import annotations

import logging
from datetime import date, datetime, timezone
from decimal import Decimal, InvalidOperation

logger = logging.getLogger(__name__)

ZERO = Decimal("0")

# Largest values the INTEGER and Numeric(20, 4) columns hold
INT_MAX = 2**31 - 1
AMOUNT_MAX = Decimal("1e16") - 1


def utcnow() -> datetime:
    """Server-side 'now', timezone-aware UTC."""
    return datetime.now(timezone.utc)


def as_utc(value: datetime | None) -> datetime | None:
    """Normalize a datetime to aware UTC.

    Naive values are interpreted as UTC (SQLite hands back naive
    datetimes even for ``DateTime(timezone=True)`` columns).
    """
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def coerce_datetime(value: object) -> datetime | None:
    """Parse an ISO-8601 string/date/datetime into aware UTC, else None.

    - None / "" -> None
    - "YYYY-MM-DD" -> midnight UTC
    - "...Z" or "...+HH:MM" -> converted to UTC
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return as_utc(value)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
    s = str(value).strip()
    if not s:
        return None
    if s.endswith("Z"):
        s = s[:-1] + "+00:00"
    try:
        return as_utc(datetime.fromisoformat(s))
    except ValueError:
        logger.warning("Discarding unparseable timestamp %r", value)
        return None


def coerce_int(value: object, default: int = 0) -> int:
    """Coerce to int; malformed input becomes *default*, never an error."""
    if value is None or value == "":
        return default
    try:
        parsed = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        parsed = None
    if parsed is None or not parsed.is_finite() or abs(parsed) > INT_MAX:
        logger.warning("Coercing malformed integer %r to %s", value, default)
        return default
    return int(parsed)


def coerce_optional_int(value: object) -> int | None:
    """Like :func:`coerce_int` but keeps "not configured" as None."""
    if value is None or value == "":
        return None
    return coerce_int(value)


def coerce_decimal(value: object, default: Decimal = ZERO) -> Decimal:
    if value is None or value == "":
        return default
    try:
        result = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        logger.warning("Coercing malformed amount %r to %s", value, default)
        return default
    if not result.is_finite() or abs(result) > AMOUNT_MAX:
        logger.warning("Coercing out-of-range amount %r to %s", value, default)
        return default
    return result
