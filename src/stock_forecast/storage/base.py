"""Blob store protocol: the I/O boundary of the pipeline.

Any code that reads blobs depends only on this interface. Authentication
and transport are the concrete store's concern.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class BlobStore(Protocol):
    """Read-only access to text blobs addressed by container + path."""

    async def fetch(self, container: str, path: str) -> str:
        """Return the blob's contents as text.

        Raises
        ------
        BlobNotFoundError
            The blob does not exist.
        StorageError
            Any other storage or transport failure.
        ConfigError
            Credentials are missing.
        """
        ...

    async def list_paths(self, container: str) -> list[str]:
        """Return every blob path in the container.

        Pagination, if any, is walked to the end before returning.
        """
        ...

    async def close(self) -> None: ...
