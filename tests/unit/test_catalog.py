"""Tests for stock_forecast.prices.catalog."""

from stock_forecast.core.models import StockInfo
from stock_forecast.prices.catalog import StockCatalog, display_name, list_symbols


class TestListSymbols:
    def test_deduplicates_case_insensitively(self):
        result = list_symbols(["AAPL/x", "aapl/y", "MSFT/z"])
        assert [s.symbol for s in result] == ["AAPL", "MSFT"]
        assert result[0] == StockInfo(symbol="AAPL", name="Apple Inc")

    def test_sorted_lexicographically(self):
        result = list_symbols(["tsla/a", "btcusd/b", "spy/c", "aapl/d"])
        assert [s.symbol for s in result] == ["AAPL", "BTCUSD", "SPY", "TSLA"]

    def test_full_blob_paths(self):
        result = list_symbols(
            [
                "btcusd/hour/1/data/btcusd_historical.csv",
                "btcusd/hour/1/forecast/btcusd_forecast.csv",
            ]
        )
        assert result == [StockInfo(symbol="BTCUSD", name="Bitcoin USD cryptocurrency")]

    def test_path_without_separator(self):
        assert [s.symbol for s in list_symbols(["readme"])] == ["README"]

    def test_empty_first_segment_ignored(self):
        assert list_symbols(["/orphan.csv", "", "spy/x"]) == [
            StockInfo(symbol="SPY", name="SPDR S&P 500 ETF Trust")
        ]

    def test_empty_input(self):
        assert list_symbols([]) == []

    def test_accepts_generator(self):
        result = list_symbols(p for p in ["nvda/a", "meta/b"])
        assert [s.symbol for s in result] == ["META", "NVDA"]


class TestDisplayName:
    def test_known(self):
        assert display_name("GME") == "GameStop Corp"

    def test_fallback(self):
        assert display_name("XYZ") == "XYZ Stock"

    def test_custom_table(self):
        catalog = StockCatalog(names={"XYZ": "Xyz Holdings"})
        result = catalog.list_symbols(["xyz/a", "aapl/b"])
        assert result == [
            StockInfo(symbol="AAPL", name="AAPL Stock"),
            StockInfo(symbol="XYZ", name="Xyz Holdings"),
        ]
