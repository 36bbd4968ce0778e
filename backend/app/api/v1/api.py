from fastapi import APIRouter

from backend.app.api.v1.endpoints import health, invoices, products, stats

api_router = APIRouter(prefix="/api/v1")

api_router.include_router(health.router, tags=["health"])
api_router.include_router(products.router, prefix="/products", tags=["products"])
api_router.include_router(invoices.router, prefix="/invoices", tags=["invoices"])
api_router.include_router(stats.router, prefix="/stats", tags=["stats"])
