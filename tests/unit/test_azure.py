"""Tests for stock_forecast.storage.azure (AzureBlobStore)."""

from __future__ import annotations

import base64
import hashlib
import hmac

import httpx
import pytest
import respx

from stock_forecast.core.config import StorageConfig
from stock_forecast.core.exceptions import BlobNotFoundError, ConfigError, StorageError
from stock_forecast.storage.azure import (
    API_VERSION,
    AzureBlobStore,
    parse_blob_list,
    sign,
    string_to_sign,
)

ACCOUNT_KEY = base64.b64encode(b"test-account-key").decode()
BASE_URL = "https://acct.blob.core.windows.net"
BLOB_PATH = "btcusd/hour/1/data/btcusd_historical.csv"

PAGE_1 = """<?xml version="1.0" encoding="utf-8"?>
<EnumerationResults ServiceEndpoint="https://acct.blob.core.windows.net/" ContainerName="symbols">
  <Blobs>
    <Blob><Name>aapl/hour/1/data/aapl_historical.csv</Name><Properties /></Blob>
    <Blob><Name>aapl/hour/1/forecast/aapl_forecast.csv</Name><Properties /></Blob>
  </Blobs>
  <NextMarker>page2</NextMarker>
</EnumerationResults>"""

PAGE_2 = """<?xml version="1.0" encoding="utf-8"?>
<EnumerationResults ServiceEndpoint="https://acct.blob.core.windows.net/" ContainerName="symbols">
  <Blobs>
    <Blob><Name>spy/hour/1/data/spy_historical.csv</Name><Properties /></Blob>
  </Blobs>
  <NextMarker />
</EnumerationResults>"""


# --- Fixtures ---


@pytest.fixture
def storage_config() -> StorageConfig:
    return StorageConfig(account_name="acct", account_key=ACCOUNT_KEY, request_timeout=5)


@pytest.fixture
async def store(storage_config: StorageConfig) -> AzureBlobStore:
    async with AzureBlobStore(storage_config) as s:
        yield s


# --- Signing ---


class TestStringToSign:
    def test_blob_get(self):
        headers = {"x-ms-date": "Mon, 01 Jan 2024 00:00:00 GMT", "x-ms-version": API_VERSION}
        result = string_to_sign("GET", "acct", f"{BASE_URL}/symbols/a/b.csv", headers)
        assert result == (
            "GET" + "\n" * 12
            + "x-ms-date:Mon, 01 Jan 2024 00:00:00 GMT\n"
            + "x-ms-version:2019-12-12\n"
            + "/acct/symbols/a/b.csv"
        )

    def test_query_params_sorted_into_resource(self):
        headers = {"x-ms-version": API_VERSION}
        result = string_to_sign(
            "get",
            "acct",
            f"{BASE_URL}/symbols",
            headers,
            {"restype": "container", "comp": "list", "marker": "m1"},
        )
        assert result.startswith("GET\n")
        assert result.endswith("/acct/symbols\ncomp:list\nmarker:m1\nrestype:container")

    def test_path_style_endpoint_includes_account_path(self):
        result = string_to_sign(
            "GET", "devstoreaccount1", "http://127.0.0.1:10000/devstoreaccount1/symbols/x", {}
        )
        assert result.endswith("/devstoreaccount1/devstoreaccount1/symbols/x")


class TestSign:
    def test_hmac_sha256(self):
        expected = base64.b64encode(
            hmac.new(b"test-account-key", b"payload", hashlib.sha256).digest()
        ).decode()
        assert sign(ACCOUNT_KEY, "payload") == expected

    def test_invalid_key_is_config_error(self):
        with pytest.raises(ConfigError, match="not valid base64"):
            sign("not base64!!", "payload")


class TestParseBlobList:
    def test_names_and_marker(self):
        names, marker = parse_blob_list(PAGE_1)
        assert names == [
            "aapl/hour/1/data/aapl_historical.csv",
            "aapl/hour/1/forecast/aapl_forecast.csv",
        ]
        assert marker == "page2"

    def test_last_page(self):
        names, marker = parse_blob_list(PAGE_2)
        assert names == ["spy/hour/1/data/spy_historical.csv"]
        assert marker is None

    def test_malformed(self):
        with pytest.raises(StorageError, match="Malformed blob listing"):
            parse_blob_list("<not-closed>")


# --- fetch ---


class TestFetch:
    @respx.mock
    async def test_returns_text(self, store: AzureBlobStore):
        route = respx.get(f"{BASE_URL}/symbols/{BLOB_PATH}").mock(
            return_value=httpx.Response(200, text="ds,c\n2024-01-01,1\n")
        )

        text = await store.fetch("symbols", BLOB_PATH)
        assert text == "ds,c\n2024-01-01,1\n"

        request = route.calls.last.request
        assert request.headers["Authorization"].startswith("SharedKey acct:")
        assert request.headers["x-ms-version"] == API_VERSION
        assert "x-ms-date" in request.headers

    @respx.mock
    async def test_not_found(self, store: AzureBlobStore):
        respx.get(f"{BASE_URL}/symbols/{BLOB_PATH}").mock(
            return_value=httpx.Response(404, text="BlobNotFound")
        )

        with pytest.raises(BlobNotFoundError) as exc_info:
            await store.fetch("symbols", BLOB_PATH)
        assert exc_info.value.context["status_code"] == 404
        assert exc_info.value.context["path"] == BLOB_PATH

    @respx.mock
    async def test_forbidden_is_storage_error(self, store: AzureBlobStore):
        respx.get(f"{BASE_URL}/symbols/{BLOB_PATH}").mock(
            return_value=httpx.Response(403, text="AuthenticationFailed")
        )

        with pytest.raises(StorageError, match="403") as exc_info:
            await store.fetch("symbols", BLOB_PATH)
        assert not isinstance(exc_info.value, BlobNotFoundError)

    @respx.mock
    async def test_connection_error(self, store: AzureBlobStore):
        respx.get(f"{BASE_URL}/symbols/{BLOB_PATH}").mock(
            side_effect=httpx.ConnectError("connection refused")
        )

        with pytest.raises(StorageError, match="Azure request failed"):
            await store.fetch("symbols", BLOB_PATH)

    @respx.mock
    async def test_missing_credentials(self):
        route = respx.get(url__startswith="https://")
        async with AzureBlobStore(StorageConfig()) as store:
            with pytest.raises(ConfigError, match="not configured"):
                await store.fetch("symbols", BLOB_PATH)
        assert not route.called

    @respx.mock
    async def test_connection_string_endpoint(self):
        config = StorageConfig(
            connection_string=(
                "DefaultEndpointsProtocol=https;AccountName=other;"
                f"AccountKey={ACCOUNT_KEY};EndpointSuffix=core.windows.net"
            )
        )
        route = respx.get(f"https://other.blob.core.windows.net/symbols/{BLOB_PATH}").mock(
            return_value=httpx.Response(200, text="ok")
        )
        async with AzureBlobStore(config) as store:
            assert await store.fetch("symbols", BLOB_PATH) == "ok"
        assert route.called


# --- list_paths ---


class TestListPaths:
    @respx.mock
    async def test_follows_next_marker(self, store: AzureBlobStore):
        def _pages(request: httpx.Request) -> httpx.Response:
            if request.url.params.get("marker") == "page2":
                return httpx.Response(200, text=PAGE_2)
            return httpx.Response(200, text=PAGE_1)

        route = respx.route(
            method="GET", host="acct.blob.core.windows.net", path="/symbols"
        ).mock(side_effect=_pages)

        names = await store.list_paths("symbols")
        assert names == [
            "aapl/hour/1/data/aapl_historical.csv",
            "aapl/hour/1/forecast/aapl_forecast.csv",
            "spy/hour/1/data/spy_historical.csv",
        ]
        assert route.call_count == 2
        first = route.calls[0].request
        assert first.url.params["restype"] == "container"
        assert first.url.params["comp"] == "list"
        assert "marker" not in first.url.params

    @respx.mock
    async def test_missing_container(self, store: AzureBlobStore):
        respx.route(method="GET", host="acct.blob.core.windows.net", path="/symbols").mock(
            return_value=httpx.Response(404, text="ContainerNotFound")
        )

        with pytest.raises(BlobNotFoundError):
            await store.list_paths("symbols")
