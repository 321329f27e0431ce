"""CSV ingestion and metrics derivation.

Architecture
------------
    BlobStore → raw CSV text → CsvParser → list[PricePoint] → MetricsCalculator

Key abstractions:

- ``CsvParser``: Turns a historical or forecast CSV blob into a sorted series.
- ``MetricsCalculator``: Derives the dashboard's summary metrics.
- ``StockCatalog``: Derives available symbols from blob paths.
"""

from stock_forecast.prices.catalog import KNOWN_NAMES, StockCatalog, display_name, list_symbols
from stock_forecast.prices.csv_parser import CsvParser, parse_csv, parse_timestamp
from stock_forecast.prices.metrics import MetricsCalculator, confidence_level, round_half_up

__all__ = [
    # Parsing
    "CsvParser",
    "parse_csv",
    "parse_timestamp",
    # Metrics
    "MetricsCalculator",
    "confidence_level",
    "round_half_up",
    # Catalog
    "StockCatalog",
    "KNOWN_NAMES",
    "display_name",
    "list_symbols",
]
