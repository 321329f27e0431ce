"""Integration test fixtures: real files on disk, no network."""

from __future__ import annotations

from pathlib import Path

import pytest

from stock_forecast.core.config import ForecastConfig, StorageConfig
from stock_forecast.core.models import StorageBackend
from stock_forecast.storage.local import LocalBlobStore

HOURLY_HISTORY = "\n".join(
    ["ds,o,h,l,c,v"]
    + [
        f"2024-03-01 {hour:02d}:00:00,{100 + hour},{101 + hour},{99 + hour},{100 + hour}.5,{1000 + hour}"
        for hour in range(24)
    ]
)
HOURLY_FORECAST = "\n".join(
    ["ds,pred_price,lower,upper"]
    + [f"2024-03-02 {hour:02d}:00:00,{130 + hour},{120 + hour},{140 + hour}" for hour in range(6)]
)


@pytest.fixture
def hourly_root(tmp_path: Path, write_blob) -> Path:
    """A container with one complete symbol (BTCUSD) and one broken forecast (GME)."""
    root = tmp_path / "blobs"
    write_blob(root, "symbols", "btcusd/hour/1/data/btcusd_historical.csv", HOURLY_HISTORY)
    write_blob(root, "symbols", "btcusd/hour/1/forecast/btcusd_forecast.csv", HOURLY_FORECAST)
    write_blob(root, "symbols", "gme/hour/1/data/gme_historical.csv", "ds,c\n2024-03-01,20\n")
    write_blob(root, "symbols", "gme/hour/1/forecast/gme_forecast.csv", "ds,yhat\n2024-03-02,25\n")
    return root


@pytest.fixture
def hourly_config(hourly_root: Path) -> ForecastConfig:
    return ForecastConfig(
        storage=StorageConfig(backend=StorageBackend.LOCAL, local_root=str(hourly_root))
    )


@pytest.fixture
def hourly_store(hourly_root: Path) -> LocalBlobStore:
    return LocalBlobStore(hourly_root)
