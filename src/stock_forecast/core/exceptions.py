"""Custom exception hierarchy for stock-forecast."""

from typing import Any


class StockForecastError(Exception):
    """Base exception for all stock-forecast errors.

    All exceptions carry an optional `context` dict for structured error
    metadata that can be logged or serialized without parsing the message.
    """

    def __init__(self, message: str, context: dict[str, Any] | None = None):
        super().__init__(message)
        self.context = context or {}


class ConfigError(StockForecastError):
    """Invalid or missing configuration.

    Raised by load_config() during startup, and by the Azure blob store when
    credentials cannot be resolved at fetch time.

    Context keys:
        field: str — the config field that failed validation
        value: Any — the invalid value (redacted for secrets)
    """


class StorageError(StockForecastError):
    """Blob storage operation failed.

    Policy: raise immediately. The enclosing request is aborted.

    Context keys:
        operation: str — "fetch", "list", etc.
        container: str — the container involved
        path: str | None — the blob path involved
        status_code: int | None — HTTP status code if applicable
    """


class BlobNotFoundError(StorageError):
    """The requested blob does not exist (HTTP 404 or missing file)."""


class FetchError(StockForecastError):
    """A pipeline request could not be completed.

    Wraps the ConfigError or StorageError that aborted it. There is no
    partial result: either every field is present or this is raised.

    Context keys:
        operation: str — "stock_data" or "list_stocks"
        symbol: str | None — the requested symbol
    """
