"""Pydantic data models: the system's type contracts."""

from __future__ import annotations

import math
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

# --- Type Aliases ---

Ticker = str

# --- Enumerations ---


class SeriesMode(StrEnum):
    """Which price column a CSV blob carries."""

    HISTORICAL = "historical"
    FORECAST = "forecast"


class StorageBackend(StrEnum):
    """Supported blob storage backends."""

    AZURE = "azure"
    LOCAL = "local"


class ConfidenceLevel(StrEnum):
    """Display bucket for the confidence score."""

    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


# --- Price Models ---


class PricePoint(BaseModel):
    """A single dated price, observed or predicted."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    date: str
    price: float
    is_forecast: bool = Field(default=False, alias="forecast")

    @field_validator("date")
    @classmethod
    def date_not_empty(cls, v: str) -> str:
        if not v:
            raise ValueError("date must not be empty")
        return v

    @field_validator("price")
    @classmethod
    def price_finite(cls, v: float) -> float:
        if not math.isfinite(v):
            raise ValueError(f"price must be finite, got {v}")
        return v


PriceSeries = list[PricePoint]


class Metrics(BaseModel):
    """Summary metrics derived from a historical and a forecast series.

    ``volume``, ``market_cap`` and ``pe_ratio`` are configured placeholders,
    not values computed from the series.
    """

    model_config = ConfigDict(
        frozen=True, alias_generator=to_camel, populate_by_name=True
    )

    current_price: float
    forecast_price: float
    confidence: int = Field(ge=0, le=100)
    volume: str
    market_cap: str
    pe_ratio: float
    day_change: float
    forecast_change: float = 0.0
    forecast_change_percent: float = 0.0
    confidence_level: ConfidenceLevel = ConfidenceLevel.LOW


class StockData(BaseModel):
    """Everything the dashboard needs for one symbol."""

    model_config = ConfigDict(frozen=True)

    historical: list[PricePoint]
    forecast: list[PricePoint]
    metrics: Metrics


class StockInfo(BaseModel):
    """A symbol available in storage, with its display name."""

    model_config = ConfigDict(frozen=True)

    symbol: Ticker
    name: str

    @field_validator("symbol")
    @classmethod
    def symbol_uppercase(cls, v: str) -> str:
        if v != v.upper():
            raise ValueError(f"symbol must be uppercase, got {v!r}")
        return v
