"""Mock data provider for demos and tests.

Generates a random-walk price history and an upward-biased "forecast".
The numbers are fabricated and carry no predictive meaning; nothing in the
HTTP API serves them.
"""

from __future__ import annotations

import logging
import random
from datetime import date, timedelta

from stock_forecast.core.config import MetricsConfig
from stock_forecast.core.models import PricePoint, StockData
from stock_forecast.prices.metrics import MetricsCalculator

logger = logging.getLogger(__name__)

HISTORY_DAYS = 30
FORECAST_DAYS = 30
MIN_PRICE = 1.0


class MockDataProvider:
    """Builds StockData from a seeded random walk.

    Parameters
    ----------
    rng : random.Random | None
        Source of randomness. Pass a seeded instance for repeatable output.
    today : date | None
        Anchor date; history ends here and the forecast starts the day after.
    """

    def __init__(
        self,
        rng: random.Random | None = None,
        today: date | None = None,
        metrics_config: MetricsConfig | None = None,
    ) -> None:
        self._rng = rng or random.Random()
        self._today = today
        self._calculator = MetricsCalculator(metrics_config)

    def generate(self, symbol: str) -> StockData:
        today = self._today or date.today()
        logger.debug("Generating mock data for %s", symbol)
        base_price = 150 + self._rng.random() * 200
        volatility = 0.02 + self._rng.random() * 0.03

        historical = []
        for days_back in range(HISTORY_DAYS - 1, -1, -1):
            walk = (self._rng.random() - 0.5) * volatility * base_price
            historical.append(
                PricePoint(
                    date=(today - timedelta(days=days_back)).isoformat(),
                    price=round(max(base_price + walk, MIN_PRICE), 2),
                    is_forecast=False,
                )
            )

        forecast = []
        price = historical[-1].price
        for days_ahead in range(1, FORECAST_DAYS + 1):
            # slight upward bias
            trend = (self._rng.random() - 0.4) * volatility * price
            price = max(price + trend, MIN_PRICE)
            forecast.append(
                PricePoint(
                    date=(today + timedelta(days=days_ahead)).isoformat(),
                    price=round(price, 2),
                    is_forecast=True,
                )
            )

        return StockData(
            historical=historical,
            forecast=forecast,
            metrics=self._calculator.compute(historical, forecast),
        )
