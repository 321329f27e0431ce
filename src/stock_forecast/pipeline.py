"""Fetch → parse → metrics pipeline for one symbol.

    BlobStore ──┬── historical CSV ── CsvParser(HISTORICAL) ──┐
                └── forecast CSV ──── CsvParser(FORECAST) ────┴── MetricsCalculator

Both blobs are fetched concurrently and joined all-or-nothing: if either
fetch fails the request fails with a FetchError and no partial data.
"""

from __future__ import annotations

import asyncio
import logging

from stock_forecast.core.config import ForecastConfig
from stock_forecast.core.exceptions import ConfigError, FetchError, StorageError
from stock_forecast.core.models import SeriesMode, StockData, StockInfo
from stock_forecast.prices.catalog import StockCatalog
from stock_forecast.prices.csv_parser import CsvParser
from stock_forecast.prices.metrics import MetricsCalculator
from stock_forecast.storage.base import BlobStore

logger = logging.getLogger(__name__)

HISTORICAL_PATH = "{symbol}/hour/1/data/{symbol}_historical.csv"
FORECAST_PATH = "{symbol}/hour/1/forecast/{symbol}_forecast.csv"


def blob_paths(symbol: str) -> tuple[str, str]:
    """Return the (historical, forecast) blob paths for a symbol."""
    key = symbol.strip().lower()
    return HISTORICAL_PATH.format(symbol=key), FORECAST_PATH.format(symbol=key)


class ForecastPipeline:
    """Builds StockData and the stock list from a blob store.

    Holds no per-request state; one instance serves every request.
    """

    def __init__(
        self,
        store: BlobStore,
        config: ForecastConfig | None = None,
        parser: CsvParser | None = None,
        calculator: MetricsCalculator | None = None,
        catalog: StockCatalog | None = None,
    ) -> None:
        self._store = store
        self._config = config or ForecastConfig()
        self._parser = parser or CsvParser()
        self._calculator = calculator or MetricsCalculator(self._config.metrics)
        self._catalog = catalog or StockCatalog()

    @property
    def container(self) -> str:
        return self._config.storage.container

    async def fetch_and_build(self, symbol: str) -> StockData:
        """Fetch, parse and summarise both series for ``symbol``.

        Raises:
            FetchError: If either blob cannot be fetched.
        """
        display = symbol.strip().upper()
        historical_path, forecast_path = blob_paths(symbol)
        logger.info("Fetching data for symbol: %s", display)
        logger.debug("Historical blob: %s, forecast blob: %s", historical_path, forecast_path)

        try:
            historical_csv, forecast_csv = await asyncio.gather(
                self._store.fetch(self.container, historical_path),
                self._store.fetch(self.container, forecast_path),
            )
        except (ConfigError, StorageError) as e:
            raise FetchError(
                str(e),
                context={**e.context, "operation": "stock_data", "symbol": display},
            ) from e

        historical = self._parser.parse(historical_csv, SeriesMode.HISTORICAL)
        forecast = self._parser.parse(forecast_csv, SeriesMode.FORECAST)
        logger.info(
            "Parsed %d historical points and %d forecast points for %s",
            len(historical),
            len(forecast),
            display,
        )

        return StockData(
            historical=historical,
            forecast=forecast,
            metrics=self._calculator.compute(historical, forecast),
        )

    async def list_stocks(self) -> list[StockInfo]:
        """List symbols available in the configured container.

        Raises:
            FetchError: If the container cannot be listed.
        """
        try:
            paths = await self._store.list_paths(self.container)
        except (ConfigError, StorageError) as e:
            raise FetchError(
                str(e),
                context={**e.context, "operation": "list_stocks", "symbol": None},
            ) from e

        stocks = self._catalog.list_symbols(paths)
        logger.info("Found %d available stocks", len(stocks))
        return stocks
