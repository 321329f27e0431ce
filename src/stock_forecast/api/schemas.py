"""API-specific request/response schemas (Pydantic v2)."""

from __future__ import annotations

from pydantic import BaseModel

from stock_forecast.core.models import StockInfo


# -- Error --


class ErrorResponse(BaseModel):
    """Standard error envelope."""

    error: str
    details: str | None = None


# -- Stocks --


class StockListResponse(BaseModel):
    """Response for GET /api/stocks."""

    stocks: list[StockInfo]


# -- Health --


class HealthResponse(BaseModel):
    """Response for GET /api/health."""

    status: str = "ok"
    version: str
    storage_backend: str
    container: str
