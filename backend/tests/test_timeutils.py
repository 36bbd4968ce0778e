"""Tests for boundary coercion helpers."""
from __future__ import annotations

from decimal import Decimal

import pytest

from backend.app.core.timeutils import (
    AMOUNT_MAX,
    INT_MAX,
    coerce_decimal,
    coerce_int,
    coerce_optional_int,
)


class TestCoerceInt:

    @pytest.mark.parametrize("value", ["Infinity", "inf", "-inf", "NaN", "sNaN", float("inf")])
    def test_non_finite_becomes_default(self, value: object) -> None:
        assert coerce_int(value) == 0
        assert coerce_int(value, default=7) == 7

    @pytest.mark.parametrize("value", ["1e30", str(INT_MAX + 1), -(INT_MAX + 1)])
    def test_out_of_column_range_becomes_default(self, value: object) -> None:
        assert coerce_int(value) == 0

    @pytest.mark.parametrize("value,expected", [
        ("12", 12), (" 3 ", 3), ("4.9", 4), (-2, -2), (INT_MAX, INT_MAX), ("abc", 0),
    ])
    def test_plain_values(self, value: object, expected: int) -> None:
        assert coerce_int(value) == expected

    def test_optional_keeps_missing(self) -> None:
        assert coerce_optional_int(None) is None
        assert coerce_optional_int("inf") == 0


class TestCoerceDecimal:

    @pytest.mark.parametrize("value", ["inf", "-Infinity", "NaN", "1e30"])
    def test_non_finite_or_huge_becomes_default(self, value: str) -> None:
        assert coerce_decimal(value) == Decimal("0")

    def test_limit_is_inclusive(self) -> None:
        assert coerce_decimal(AMOUNT_MAX) == AMOUNT_MAX
        assert coerce_decimal("12.50") == Decimal("12.50")
