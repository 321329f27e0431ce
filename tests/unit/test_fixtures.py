"""Tests for stock_forecast.fixtures (MockDataProvider)."""

import random
from datetime import date

from stock_forecast.fixtures import FORECAST_DAYS, HISTORY_DAYS, MockDataProvider


def _provider(seed: int = 1) -> MockDataProvider:
    return MockDataProvider(rng=random.Random(seed), today=date(2024, 3, 15))


class TestMockDataProvider:
    def test_series_lengths_and_flags(self):
        data = _provider().generate("AAPL")
        assert len(data.historical) == HISTORY_DAYS
        assert len(data.forecast) == FORECAST_DAYS
        assert not any(p.is_forecast for p in data.historical)
        assert all(p.is_forecast for p in data.forecast)

    def test_dates_anchor_on_today(self):
        data = _provider().generate("AAPL")
        assert data.historical[0].date == "2024-02-15"
        assert data.historical[-1].date == "2024-03-15"
        assert data.forecast[0].date == "2024-03-16"
        assert data.forecast[-1].date == "2024-04-14"

    def test_prices_positive_and_rounded(self):
        data = _provider(seed=99).generate("AAPL")
        for p in data.historical + data.forecast:
            assert p.price >= 1.0
            assert round(p.price, 2) == p.price

    def test_seeded_output_is_repeatable(self):
        assert _provider(seed=5).generate("X") == _provider(seed=5).generate("X")

    def test_metrics_derived_from_series(self):
        data = _provider().generate("AAPL")
        assert data.metrics.current_price == data.historical[-1].price
        assert data.metrics.forecast_price == data.forecast[-1].price
        assert 60 <= data.metrics.confidence <= 95
