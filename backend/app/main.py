import logging

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from backend.app.api.v1.api import api_router
from backend.app.core.config import settings
from backend.app.core.errors import AnalyticsSourceError

logging.basicConfig(level=settings.LOG_LEVEL)

app = FastAPI(title="Inventory & Invoicing Admin")

# ─── CORS: restrict to configured origins ────────────────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE"],
    allow_headers=["Authorization", "Content-Type", "Accept"],
)


# ─── Storage failures: broken dashboard, not an empty one ────────────────────
@app.exception_handler(AnalyticsSourceError)
def analytics_source_unavailable(
    _request: Request, exc: AnalyticsSourceError,
) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": str(exc), "source": exc.source},
    )


app.include_router(api_router)
