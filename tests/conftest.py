"""Shared pytest fixtures for stock-forecast."""

import os
from pathlib import Path

import pytest

from stock_forecast.core.config import ForecastConfig, StorageConfig
from stock_forecast.core.models import StorageBackend

HISTORICAL_CSV = "ds,o,h,l,c,v\n2024-01-01,99,101,98,100,1000\n2024-01-02,100,103,99,102,1200\n"
FORECAST_CSV = "ds,pred_price\n2024-01-03,105\n"


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch):
    """Keep deployment variables from leaking into config tests."""
    for key in list(os.environ):
        if key.startswith("STOCK_FORECAST_") or key.startswith("AZURE_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture
def historical_csv() -> str:
    return HISTORICAL_CSV


@pytest.fixture
def forecast_csv() -> str:
    return FORECAST_CSV


def _write_blob(root: Path, container: str, path: str, content: str) -> Path:
    target = root / container / path
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(content, encoding="utf-8")
    return target


@pytest.fixture
def write_blob():
    """Write a blob into a local blob tree: write_blob(root, container, path, text)."""
    return _write_blob


@pytest.fixture
def blob_root(tmp_path: Path, historical_csv: str, forecast_csv: str) -> Path:
    """A local blob tree with AAPL data and a second, forecast-only symbol."""
    root = tmp_path / "blobs"
    _write_blob(root, "symbols", "aapl/hour/1/data/aapl_historical.csv", historical_csv)
    _write_blob(root, "symbols", "aapl/hour/1/forecast/aapl_forecast.csv", forecast_csv)
    _write_blob(root, "symbols", "msft/hour/1/forecast/msft_forecast.csv", forecast_csv)
    return root


@pytest.fixture
def local_config(blob_root: Path) -> ForecastConfig:
    return ForecastConfig(
        storage=StorageConfig(
            backend=StorageBackend.LOCAL,
            local_root=str(blob_root),
            container="symbols",
        )
    )
