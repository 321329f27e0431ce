"""FastAPI application factory."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from stock_forecast.api.deps import (
    CORS_ALLOW_HEADERS,
    CORS_ALLOW_METHODS,
    AppState,
    preflight_middleware,
)
from stock_forecast.api.routes import router
from stock_forecast.api.schemas import ErrorResponse
from stock_forecast.core.config import ForecastConfig, load_config
from stock_forecast.core.exceptions import StockForecastError
from stock_forecast.pipeline import ForecastPipeline
from stock_forecast.storage import create_blob_store

logger = logging.getLogger(__name__)

_ERROR_DETAILS = {
    "stock_data": "Failed to fetch stock data from storage",
    "list_stocks": "Failed to list stocks from storage",
}
_ROUTE_OPERATIONS = {
    "/api/stock-data": "stock_data",
    "/api/stocks": "list_stocks",
}


def _error_response(request: Request, exc: Exception, operation: str | None) -> JSONResponse:
    operation = operation or _ROUTE_OPERATIONS.get(request.url.path)
    body = ErrorResponse(
        error=str(exc) or type(exc).__name__,
        details=_ERROR_DETAILS.get(operation, "Request failed"),
    )
    return JSONResponse(status_code=500, content=body.model_dump())


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup/shutdown lifecycle."""
    config = app.state._pending_config or load_config()
    store = create_blob_store(config.storage)
    pipeline = ForecastPipeline(store, config)

    app.state.app_state = AppState(config=config, store=store, pipeline=pipeline)

    yield

    await store.close()


def create_app(config: ForecastConfig | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    import stock_forecast

    app = FastAPI(
        title="Stock Forecast API",
        description="Price history and forecasts from blob storage",
        version=stock_forecast.__version__,
        lifespan=lifespan,
    )

    # Stash config so lifespan can retrieve it
    app.state._pending_config = config

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(config.api.cors_origins) if config else ["*"],
        allow_methods=CORS_ALLOW_METHODS,
        allow_headers=CORS_ALLOW_HEADERS,
    )

    # Outermost, so OPTIONS never reaches routing or CORSMiddleware
    app.middleware("http")(preflight_middleware)

    app.include_router(router, prefix="/api")

    # Exception handlers
    @app.exception_handler(StockForecastError)
    async def forecast_exception_handler(request: Request, exc: StockForecastError):
        logger.error("Request %s failed: %s", request.url.path, exc)
        return _error_response(request, exc, exc.context.get("operation"))

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error serving %s", request.url.path)
        return _error_response(request, exc, None)

    return app
