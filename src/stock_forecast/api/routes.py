"""FastAPI route definitions for the stock-forecast API."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

import stock_forecast
from stock_forecast.api.deps import get_config, get_pipeline
from stock_forecast.api.schemas import ErrorResponse, HealthResponse, StockListResponse
from stock_forecast.core.config import ForecastConfig
from stock_forecast.core.models import StockData
from stock_forecast.pipeline import ForecastPipeline

router = APIRouter()

SYMBOL_PATTERN = r"^[A-Za-z0-9._-]{1,20}$"


# -- Health --


@router.get("/health", response_model=HealthResponse)
async def health_check(config: ForecastConfig = Depends(get_config)):
    """Service health and storage settings."""
    return HealthResponse(
        status="ok",
        version=stock_forecast.__version__,
        storage_backend=str(config.storage.backend.value),
        container=config.storage.container,
    )


# -- Stock data --


@router.get(
    "/stock-data",
    response_model=StockData,
    responses={500: {"model": ErrorResponse}},
)
async def get_stock_data(
    symbol: str | None = Query(None, pattern=SYMBOL_PATTERN, description="Ticker symbol"),
    pipeline: ForecastPipeline = Depends(get_pipeline),
    config: ForecastConfig = Depends(get_config),
):
    """Historical series, forecast series and metrics for one symbol."""
    return await pipeline.fetch_and_build(symbol or config.api.default_symbol)


# -- Stocks --


@router.get(
    "/stocks",
    response_model=StockListResponse,
    responses={500: {"model": ErrorResponse}},
)
async def list_stocks(pipeline: ForecastPipeline = Depends(get_pipeline)):
    """Symbols available in blob storage."""
    stocks = await pipeline.list_stocks()
    return StockListResponse(stocks=stocks)
