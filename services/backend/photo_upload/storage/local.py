"""Local filesystem implementation of StorageClient."""
import logging
from pathlib import Path
from typing import Optional
from urllib.parse import quote

from starlette.concurrency import run_in_threadpool

from config import get_settings

from .base import StorageClient, StorageError, StorageFailure, StorageResult, StorageSuccess

logger = logging.getLogger(__name__)


class LocalStorageClient(StorageClient):
    """Local filesystem storage implementation.

    Stores objects as files in a directory on the local filesystem. The
    directory plays the role of the bucket; public URLs are formed from the
    configured ``public_base_url``.
    """

    def __init__(
        self,
        storage_root: Optional[str | Path] = None,
        public_base_url: Optional[str] = None,
    ):
        """Initialize local storage client.

        Args:
            storage_root: Root directory for storing objects.
                         If not provided, uses the configured storage root from settings.
            public_base_url: URL prefix the root is served under.
                         If not provided, uses the configured value from settings.
        """
        settings = get_settings()

        # Use provided values or fall back to settings
        if storage_root is not None:
            self.storage_root = Path(storage_root)
        else:
            self.storage_root = settings.storage_root
        self.public_base_url = (public_base_url or settings.public_base_url).rstrip("/")

        self._ensure_storage_dir()
        logger.info(f"Initialized LocalStorageClient with root: {self.storage_root}")

    def _ensure_storage_dir(self) -> None:
        """Ensure the storage directory exists."""
        try:
            self.storage_root.mkdir(parents=True, exist_ok=True)
            logger.debug(f"Ensured storage directory exists: {self.storage_root}")
        except OSError as e:
            logger.error(f"Failed to create storage directory: {e}")
            raise StorageError(f"Failed to create storage directory: {e}")

    def _path_for(self, key: str) -> Path:
        if not key or Path(key).name != key or key in (".", ".."):
            raise ValueError(f"Invalid object key: {key!r}")
        return self.storage_root / key

    def _write_new(self, key: str, content: bytes) -> None:
        # Exclusive mode refuses to overwrite an existing object
        with open(self._path_for(key), "xb") as fh:
            fh.write(content)

    def _remove(self, key: str) -> None:
        self._path_for(key).unlink(missing_ok=True)

    async def put_object(self, key: str, content: bytes, content_type: str) -> StorageResult:
        """Write ``content`` to ``<storage_root>/<key>``.

        Args:
            key: Object key, a bare filename.
            content: Raw bytes to store.
            content_type: MIME type (not recorded by the filesystem).

        Returns:
            StorageResult: ``StorageFailure`` if the key exists, is not a
            bare filename, or the write fails.
        """
        try:
            await run_in_threadpool(self._write_new, key, content)
        except FileExistsError:
            logger.warning(f"Refusing to overwrite existing object: {key}")
            return StorageFailure("The resource already exists")
        except (OSError, ValueError) as e:
            logger.error(f"Failed to save object {key}: {e}")
            return StorageFailure(str(e))

        logger.debug(f"Saved {len(content)} bytes ({content_type}) to: {self.storage_root / key}")
        return StorageSuccess(key)

    def public_url(self, key: str) -> str:
        return f"{self.public_base_url}/{quote(key)}"

    async def delete_object(self, key: str) -> StorageResult:
        """Remove ``<storage_root>/<key>`` if present."""
        try:
            await run_in_threadpool(self._remove, key)
        except (OSError, ValueError) as e:
            logger.error(f"Failed to delete object {key}: {e}")
            return StorageFailure(str(e))

        logger.debug(f"Deleted object: {key}")
        return StorageSuccess(key)

    async def aclose(self) -> None:
        pass
