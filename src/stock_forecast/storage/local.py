"""Filesystem-backed blob store for development and tests.

Layout mirrors the cloud container: ``<root>/<container>/<blob path>``.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from stock_forecast.core.exceptions import BlobNotFoundError, StorageError

logger = logging.getLogger(__name__)


class LocalBlobStore:
    """Reads blobs from a directory tree.

    Parameters
    ----------
    root : str | Path
        Directory holding one sub-directory per container.
    """

    def __init__(self, root: str | Path) -> None:
        self._root = Path(root)

    def _container_dir(self, container: str) -> Path:
        return (self._root / container).resolve()

    def _blob_path(self, container: str, path: str) -> Path:
        base = self._container_dir(container)
        target = (base / path).resolve()
        if not target.is_relative_to(base):
            raise StorageError(
                f"Blob path escapes container: {path}",
                context={"operation": "fetch", "container": container, "path": path},
            )
        return target

    async def fetch(self, container: str, path: str) -> str:
        target = self._blob_path(container, path)
        if not target.is_file():
            raise BlobNotFoundError(
                f"Blob not found: {container}/{path}",
                context={"operation": "fetch", "container": container, "path": path},
            )
        try:
            return await asyncio.to_thread(target.read_text, encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise StorageError(
                f"Failed to read blob {container}/{path}: {e}",
                context={"operation": "fetch", "container": container, "path": path},
            ) from e

    async def list_paths(self, container: str) -> list[str]:
        base = self._container_dir(container)
        if not base.is_dir():
            raise StorageError(
                f"Container not found: {container}",
                context={"operation": "list", "container": container, "path": None},
            )
        paths = await asyncio.to_thread(
            lambda: sorted(p.relative_to(base).as_posix() for p in base.rglob("*") if p.is_file())
        )
        logger.debug("Listed %d blobs in local container %s", len(paths), container)
        return paths

    async def close(self) -> None:
        return None
