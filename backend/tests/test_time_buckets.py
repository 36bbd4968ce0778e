"""Tests for reporting-period bucket scaffolds."""
from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from backend.app.services.time_buckets import (
    MONTH_LABELS,
    bucket_key,
    build_buckets,
    normalize_period,
)

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)  # Monday


class TestWeekly:

    def test_seven_days_ending_today(self) -> None:
        s = build_buckets("weekly", NOW)
        assert s.keys == (
            "2026-10-13", "2026-10-14", "2026-10-15", "2026-10-16",
            "2026-10-17", "2026-10-18", "2026-10-19",
        )
        assert s.labels == ("Tue", "Wed", "Thu", "Fri", "Sat", "Sun", "Mon")

    def test_window_covers_whole_days(self) -> None:
        s = build_buckets("weekly", NOW)
        assert s.start == datetime(2026, 10, 13, tzinfo=timezone.utc)
        assert s.end == datetime(2026, 10, 20, tzinfo=timezone.utc)
        assert s.contains(datetime(2026, 10, 19, 23, 59, 59, tzinfo=timezone.utc))
        assert not s.contains(s.end)

    def test_crosses_year_boundary(self) -> None:
        s = build_buckets("weekly", datetime(2027, 1, 2, 3, 0, tzinfo=timezone.utc))
        assert s.keys[0] == "2026-12-27"
        assert s.keys[-1] == "2027-01-02"

    def test_uses_utc_day_for_offset_now(self) -> None:
        # 2026-10-20 01:00 at +05:00 is still 2026-10-19 in UTC
        local = datetime(2026, 10, 20, 1, 0, tzinfo=timezone(timedelta(hours=5)))
        assert build_buckets("weekly", local).keys[-1] == "2026-10-19"


class TestMonthly:

    @pytest.mark.parametrize("month", [1, 6, 12])
    def test_twelve_months_regardless_of_current_month(self, month: int) -> None:
        s = build_buckets("monthly", datetime(2026, month, 3, tzinfo=timezone.utc))
        assert s.keys == tuple(str(m) for m in range(1, 13))
        assert s.labels == MONTH_LABELS
        assert s.start == datetime(2026, 1, 1, tzinfo=timezone.utc)
        assert s.end == datetime(2027, 1, 1, tzinfo=timezone.utc)


class TestYearly:

    def test_five_years_ending_current(self) -> None:
        s = build_buckets("yearly", NOW)
        assert s.keys == ("2022", "2023", "2024", "2025", "2026")
        assert s.labels == s.keys
        assert s.start == datetime(2022, 1, 1, tzinfo=timezone.utc)
        assert s.end == datetime(2027, 1, 1, tzinfo=timezone.utc)


@pytest.mark.parametrize("period", [None, "", "daily", "WEEKLYISH", "quarterly"])
def test_unknown_period_defaults_to_monthly(period: str | None) -> None:
    assert normalize_period(period) == "monthly"
    assert build_buckets(period, NOW).period == "monthly"


@pytest.mark.parametrize("period", ["WEEKLY", " weekly", "Yearly"])
def test_period_selector_matches_exactly(period: str) -> None:
    assert normalize_period(period) == "monthly"
    assert normalize_period(period.strip().lower()) == period.strip().lower()


@pytest.mark.parametrize("period", ["weekly", "monthly", "yearly"])
def test_keys_and_labels_align(period: str) -> None:
    s = build_buckets(period, NOW)
    assert len(s.keys) == len(s.labels) == {"weekly": 7, "monthly": 12, "yearly": 5}[period]
    assert s.start < s.end


def test_bucket_key_matches_scaffold_keys() -> None:
    moment = datetime(2026, 3, 9, 18, 30, tzinfo=timezone.utc)
    assert bucket_key("weekly", moment) == "2026-03-09"
    assert bucket_key("monthly", moment) == "3"
    assert bucket_key("yearly", moment) == "2026"
