"""stock_forecast.core — Foundation types, config, and exceptions."""

from stock_forecast.core.config import (
    APIConfig,
    BlobCredentials,
    ForecastConfig,
    MetricsConfig,
    StorageConfig,
    load_config,
)
from stock_forecast.core.exceptions import (
    BlobNotFoundError,
    ConfigError,
    FetchError,
    StockForecastError,
    StorageError,
)
from stock_forecast.core.models import (
    ConfidenceLevel,
    Metrics,
    PricePoint,
    PriceSeries,
    SeriesMode,
    StockData,
    StockInfo,
    StorageBackend,
    Ticker,
)

__all__ = [
    # Type aliases
    "Ticker",
    "PriceSeries",
    # Enums
    "SeriesMode",
    "StorageBackend",
    "ConfidenceLevel",
    # Models
    "PricePoint",
    "Metrics",
    "StockData",
    "StockInfo",
    # Config
    "ForecastConfig",
    "StorageConfig",
    "BlobCredentials",
    "MetricsConfig",
    "APIConfig",
    "load_config",
    # Exceptions
    "StockForecastError",
    "ConfigError",
    "StorageError",
    "BlobNotFoundError",
    "FetchError",
]
