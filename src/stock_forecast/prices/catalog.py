"""Stock catalog: which symbols are available in blob storage.

Every symbol lives under its own top-level folder in the container
(``btcusd/hour/1/data/...``), so the set of first path segments is the
set of available symbols.
"""

from __future__ import annotations

from collections.abc import Iterable

from stock_forecast.core.models import StockInfo

KNOWN_NAMES: dict[str, str] = {
    "BTCUSD": "Bitcoin USD cryptocurrency",
    "SPY": "SPDR S&P 500 ETF Trust",
    "QQQ": "Invesco QQQ Trust, Series 1",
    "GME": "GameStop Corp",
    "CHWY": "Chewy Inc",
    "SMCI": "Super Micro Computer Inc",
    "AAPL": "Apple Inc",
    "GOOGL": "Alphabet Inc",
    "MSFT": "Microsoft Corporation",
    "TSLA": "Tesla Inc",
    "AMZN": "Amazon.com Inc",
    "NVDA": "NVIDIA Corporation",
    "META": "Meta Platforms Inc",
}


def display_name(symbol: str, names: dict[str, str] | None = None) -> str:
    """Look up a symbol's display name, falling back to ``"<SYMBOL> Stock"``."""
    table = KNOWN_NAMES if names is None else names
    return table.get(symbol, f"{symbol} Stock")


class StockCatalog:
    """Derives the sorted, deduplicated symbol list from blob paths."""

    def __init__(self, names: dict[str, str] | None = None) -> None:
        self._names = dict(KNOWN_NAMES if names is None else names)

    def list_symbols(self, blob_paths: Iterable[str]) -> list[StockInfo]:
        symbols: set[str] = set()
        for path in blob_paths:
            segment = path.split("/", 1)[0].strip()
            if segment:
                symbols.add(segment.upper())

        return [
            StockInfo(symbol=symbol, name=display_name(symbol, self._names))
            for symbol in sorted(symbols)
        ]


def list_symbols(blob_paths: Iterable[str]) -> list[StockInfo]:
    """Convenience function: catalog with the built-in name table."""
    return StockCatalog().list_symbols(blob_paths)
