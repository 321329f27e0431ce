"""stock-forecast: price history and forecast service backed by blob storage."""

__version__ = "0.1.0"
