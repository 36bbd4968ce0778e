"""Pydantic response schemas for the dashboard statistics endpoints."""
from __future__ import annotations

from pydantic import BaseModel, Field

from backend.app.schemas.inventory import LooseNumber


class KpisOut(BaseModel):
    revenue: float
    sold: int
    in_stock: int = Field(serialization_alias="inStock")

    class Config:
        from_attributes = True


class TopProductOut(BaseModel):
    name: str
    sales: int

    class Config:
        from_attributes = True


class GraphOut(BaseModel):
    period: str
    labels: list[str]
    sales: list[float]
    purchase: list[float]
    is_sample: bool = Field(serialization_alias="isSample")

    class Config:
        from_attributes = True


class SeedGraphRequest(BaseModel):
    period: str | None = None
    sales: list[LooseNumber] | None = None


class SeedGraphOut(BaseModel):
    seeded: int
    period: str
