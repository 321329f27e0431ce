"""Summary metrics derived from a historical and a forecast series.

Formulas
--------
- currentPrice  = last historical price (0 if none)
- forecastPrice = last forecast price (0 if none)
- previousPrice = historical price ``previous_offset`` rows before the last,
  or currentPrice when history is too short
- dayChange     = (current - previous) / previous * 100, 0 if previous is 0
  or the ratio overflows
- confidence    = clamp(85 - range / current * 100, 60, 95), 60 if current is 0
"""

from __future__ import annotations

import math
from collections.abc import Sequence

from stock_forecast.core.config import MetricsConfig
from stock_forecast.core.models import ConfidenceLevel, Metrics, PricePoint

CONFIDENCE_BASE = 85.0
CONFIDENCE_MIN = 60
CONFIDENCE_MAX = 95

_HIGH_CONFIDENCE = 80
_MEDIUM_CONFIDENCE = 60


def round_half_up(value: float, digits: int = 0) -> float:
    """Round to ``digits`` places with halves rounded upward.

    Values too large to scale are returned unchanged.
    """
    factor = 10**digits
    scaled = value * factor
    if not math.isfinite(scaled):
        return value
    return math.floor(scaled + 0.5) / factor


def percent_change(new: float, old: float) -> float:
    """Percent change from ``old`` to ``new``; 0 when old is 0 or the ratio overflows."""
    if old == 0:
        return 0.0
    change = (new - old) / old * 100
    return change if math.isfinite(change) else 0.0


def confidence_level(confidence: int) -> ConfidenceLevel:
    if confidence >= _HIGH_CONFIDENCE:
        return ConfidenceLevel.HIGH
    if confidence >= _MEDIUM_CONFIDENCE:
        return ConfidenceLevel.MEDIUM
    return ConfidenceLevel.LOW


class MetricsCalculator:
    """Computes Metrics from two price series.

    Pure and stateless apart from its configuration; safe to share across
    threads and requests.
    """

    def __init__(self, config: MetricsConfig | None = None) -> None:
        self._config = config or MetricsConfig()

    def compute(
        self,
        historical: Sequence[PricePoint],
        forecast: Sequence[PricePoint],
    ) -> Metrics:
        current_price = historical[-1].price if historical else 0.0
        forecast_price = forecast[-1].price if forecast else 0.0

        previous_idx = len(historical) - 1 - self._config.previous_offset
        previous_price = historical[previous_idx].price if previous_idx >= 0 else current_price

        day_change = round_half_up(percent_change(current_price, previous_price), 2)

        confidence = self._confidence(historical, current_price)
        forecast_change = forecast_price - current_price
        forecast_change_percent = (
            percent_change(forecast_price, current_price) if current_price > 0 else 0.0
        )

        return Metrics(
            current_price=current_price,
            forecast_price=forecast_price,
            confidence=confidence,
            volume=self._config.volume,
            market_cap=self._config.market_cap,
            pe_ratio=self._config.pe_ratio,
            day_change=day_change,
            forecast_change=round_half_up(forecast_change, 2),
            forecast_change_percent=round_half_up(forecast_change_percent, 2),
            confidence_level=confidence_level(confidence),
        )

    @staticmethod
    def _confidence(historical: Sequence[PricePoint], current_price: float) -> int:
        if current_price == 0 or not historical:
            return CONFIDENCE_MIN
        prices = [p.price for p in historical]
        price_range = max(prices) - min(prices)
        raw = CONFIDENCE_BASE - (price_range / current_price) * 100
        clamped = min(CONFIDENCE_MAX, max(CONFIDENCE_MIN, raw))
        return int(round_half_up(clamped))
