"""Dependency injection and middleware for FastAPI routes."""

from __future__ import annotations

from dataclasses import dataclass

from fastapi import Request, Response

from stock_forecast.core.config import ForecastConfig
from stock_forecast.pipeline import ForecastPipeline
from stock_forecast.storage.base import BlobStore

CORS_ALLOW_METHODS = ["GET", "OPTIONS"]
CORS_ALLOW_HEADERS = ["authorization", "x-client-info", "apikey", "content-type"]


@dataclass
class AppState:
    """Shared application state, attached to app.state during lifespan."""

    config: ForecastConfig
    store: BlobStore
    pipeline: ForecastPipeline


def get_config(request: Request) -> ForecastConfig:
    """Dependency: retrieve config."""
    return request.app.state.app_state.config


def get_pipeline(request: Request) -> ForecastPipeline:
    """Dependency: retrieve the forecast pipeline."""
    return request.app.state.app_state.pipeline


async def preflight_middleware(request: Request, call_next):  # type: ignore[no-untyped-def]
    """Middleware: answer every OPTIONS request with an empty 200 and CORS headers."""
    if request.method != "OPTIONS":
        return await call_next(request)

    origins = request.app.state.app_state.config.api.cors_origins
    headers = {
        "Access-Control-Allow-Methods": ", ".join(CORS_ALLOW_METHODS),
        "Access-Control-Allow-Headers": ", ".join(CORS_ALLOW_HEADERS),
    }
    origin = request.headers.get("Origin")
    if "*" in origins:
        headers["Access-Control-Allow-Origin"] = "*"
    elif origin in origins:
        headers["Access-Control-Allow-Origin"] = origin
        headers["Vary"] = "Origin"
    return Response(status_code=200, headers=headers)
