from __future__ import annotations

from datetime import datetime

from fastapi import HTTPException, Query, status

from backend.app.core.config import settings
from backend.app.core.timeutils import utcnow


def get_now() -> datetime:
    """Request clock; overridden in tests to pin "now"."""
    return utcnow()


def pagination(
    page: str | None = Query(None),
    limit: str | None = Query(None),
) -> tuple[int, int]:
    """Lenient page/limit parsing: junk falls back to defaults, limit is clamped."""
    try:
        page_no = max(1, int(page)) if page else 1
    except ValueError:
        page_no = 1
    try:
        size = int(limit) if limit else settings.DEFAULT_PAGE_SIZE
    except ValueError:
        size = settings.DEFAULT_PAGE_SIZE
    return page_no, min(settings.MAX_PAGE_SIZE, max(1, size))


def not_found(resource: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND, detail=f"{resource} not found"
    )
