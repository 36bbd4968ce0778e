"""Error types raised by the dashboard analytics engine."""

from __future__ import annotations


class AnalyticsSourceError(Exception):
    """A product or invoice collection could not be read.

    Distinct from an empty collection: callers get zeroed metrics for
    "no data" but this error for "storage unreachable", and decide
    themselves whether to degrade.
    """

    def __init__(self, source: str, message: str | None = None) -> None:
        self.source = source
        super().__init__(message or f"{source} data source unavailable")
