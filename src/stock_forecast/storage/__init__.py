"""Blob storage backends."""

from stock_forecast.core.config import StorageConfig
from stock_forecast.core.exceptions import StorageError
from stock_forecast.core.models import StorageBackend
from stock_forecast.storage.azure import AzureBlobStore
from stock_forecast.storage.base import BlobStore
from stock_forecast.storage.local import LocalBlobStore


def create_blob_store(config: StorageConfig) -> BlobStore:
    """Create a blob store based on configuration."""
    if config.backend == StorageBackend.AZURE:
        return AzureBlobStore(config)
    if config.backend == StorageBackend.LOCAL:
        return LocalBlobStore(config.local_root)
    raise StorageError(
        f"Unsupported storage backend: {config.backend}",
        context={"operation": "create_blob_store", "backend": str(config.backend)},
    )


__all__ = [
    "BlobStore",
    "AzureBlobStore",
    "LocalBlobStore",
    "create_blob_store",
]
