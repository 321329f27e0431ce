"""Azure Blob Storage client: direct REST implementation over httpx.

Authenticates with Shared Key: each request carries an HMAC-SHA256
signature of its canonical form, keyed with the base64 account key.
No SDK dependency beyond httpx.
"""

from __future__ import annotations

import base64
import binascii
import hashlib
import hmac
import logging
import xml.etree.ElementTree as ET
from email.utils import formatdate
from urllib.parse import quote, urlparse

import httpx

from stock_forecast.core.config import BlobCredentials, StorageConfig
from stock_forecast.core.exceptions import BlobNotFoundError, ConfigError, StorageError

logger = logging.getLogger(__name__)

API_VERSION = "2019-12-12"

# Standard headers in string-to-sign order (after the verb)
_SIGNED_HEADERS = (
    "Content-Encoding",
    "Content-Language",
    "Content-Length",
    "Content-MD5",
    "Content-Type",
    "Date",
    "If-Modified-Since",
    "If-Match",
    "If-None-Match",
    "If-Unmodified-Since",
    "Range",
)


def string_to_sign(
    method: str,
    account_name: str,
    url: str,
    headers: dict[str, str],
    params: dict[str, str] | None = None,
) -> str:
    """Build the Shared Key canonical string for a request."""
    lines = [method.upper()]
    lines.extend(headers.get(name, "") for name in _SIGNED_HEADERS)

    ms_headers = sorted(
        (k.lower(), v.strip()) for k, v in headers.items() if k.lower().startswith("x-ms-")
    )
    canonical_headers = "".join(f"{k}:{v}\n" for k, v in ms_headers)

    resource = f"/{account_name}{urlparse(url).path}"
    for key in sorted(params or {}, key=str.lower):
        resource += f"\n{key.lower()}:{params[key]}"

    return "\n".join(lines) + "\n" + canonical_headers + resource


def sign(account_key: str, payload: str) -> str:
    """HMAC-SHA256 ``payload`` with the base64-encoded account key."""
    try:
        key = base64.b64decode(account_key, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ConfigError(
            "Azure storage key is not valid base64",
            context={"field": "storage.account_key", "value": "<redacted>"},
        ) from e
    digest = hmac.new(key, payload.encode("utf-8"), hashlib.sha256).digest()
    return base64.b64encode(digest).decode("ascii")


def parse_blob_list(xml_text: str) -> tuple[list[str], str | None]:
    """Extract blob names and the continuation marker from a List Blobs page."""
    try:
        root = ET.fromstring(xml_text)
    except ET.ParseError as e:
        raise StorageError(
            f"Malformed blob listing: {e}",
            context={"operation": "list"},
        ) from e

    names = [el.text for el in root.iterfind("Blobs/Blob/Name") if el.text]
    marker = root.findtext("NextMarker")
    return names, marker or None


class AzureBlobStore:
    """Async Shared Key client for one storage account.

    Credentials are resolved on first use, so a missing key surfaces as a
    ConfigError from the request that needed it.

    Use via ``async with AzureBlobStore(config) as store:``.
    """

    def __init__(self, config: StorageConfig, client: httpx.AsyncClient | None = None) -> None:
        self._config = config
        self._credentials: BlobCredentials | None = None
        self._client = client or httpx.AsyncClient(
            timeout=httpx.Timeout(config.request_timeout),
            follow_redirects=True,
        )

    async def __aenter__(self) -> AzureBlobStore:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    def _resolve(self) -> BlobCredentials:
        if self._credentials is None:
            self._credentials = self._config.resolve_credentials()
        return self._credentials

    async def _signed_get(
        self,
        container: str,
        path: str | None = None,
        params: dict[str, str] | None = None,
    ) -> httpx.Response:
        creds = self._resolve()
        url = f"{creds.endpoint}/{quote(container)}"
        if path is not None:
            url += "/" + quote(path, safe="/")

        headers = {
            "x-ms-date": formatdate(usegmt=True),
            "x-ms-version": API_VERSION,
        }
        signature = sign(
            creds.account_key,
            string_to_sign("GET", creds.account_name, url, headers, params),
        )
        headers["Authorization"] = f"SharedKey {creds.account_name}:{signature}"

        context = {
            "operation": "fetch" if path is not None else "list",
            "container": container,
            "path": path,
        }
        try:
            response = await self._client.get(url, params=params, headers=headers)
        except httpx.RequestError as e:
            raise StorageError(f"Azure request failed: {e}", context=context) from e

        if response.status_code == 404:
            raise BlobNotFoundError(
                f"Failed to fetch from Azure: 404 {response.reason_phrase}",
                context={**context, "status_code": 404},
            )
        if not response.is_success:
            logger.error(
                "Azure storage error for %s/%s: %s %s",
                container,
                path or "",
                response.status_code,
                response.text[:200],
            )
            raise StorageError(
                f"Failed to fetch from Azure: {response.status_code} {response.reason_phrase}",
                context={**context, "status_code": response.status_code},
            )
        return response

    async def fetch(self, container: str, path: str) -> str:
        response = await self._signed_get(container, path)
        return response.text

    async def list_paths(self, container: str) -> list[str]:
        """List every blob name in the container, following NextMarker."""
        names: list[str] = []
        marker: str | None = None
        pages = 0
        while True:
            params = {"restype": "container", "comp": "list"}
            if marker:
                params["marker"] = marker
            response = await self._signed_get(container, params=params)
            page, marker = parse_blob_list(response.text)
            names.extend(page)
            pages += 1
            if not marker:
                break

        logger.debug("Listed %d blobs in %s across %d pages", len(names), container, pages)
        return names
