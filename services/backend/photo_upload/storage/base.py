"""Storage client interface for photo persistence."""

from dataclasses import dataclass
from typing import Protocol, Union, runtime_checkable


@dataclass(frozen=True)
class StorageSuccess:
    """A storage call completed for ``key``."""

    key: str


@dataclass(frozen=True)
class StorageFailure:
    """A storage call was rejected or could not reach the service.

    ``message`` carries the upstream error text unchanged.
    """

    message: str


StorageResult = Union[StorageSuccess, StorageFailure]


@runtime_checkable
class StorageClient(Protocol):
    """Abstract interface for object storage operations.

    Implementations target a single bucket chosen at construction time.
    Upstream problems are reported as ``StorageFailure`` values rather than
    raised, so callers decide the response from the result alone.
    """

    async def put_object(self, key: str, content: bytes, content_type: str) -> StorageResult:
        """Store ``content`` under ``key`` without overwriting.

        Args:
            key: Object key inside the bucket.
            content: Raw bytes to store.
            content_type: MIME type recorded with the object.

        Returns:
            StorageResult: ``StorageFailure`` if the key already exists or
            the service rejects the write.
        """
        ...

    def public_url(self, key: str) -> str:
        """Build the public URL of ``key``. No network round-trip."""
        ...

    async def delete_object(self, key: str) -> StorageResult:
        """Delete ``key``. Deleting a missing key is not an error."""
        ...

    async def aclose(self) -> None:
        """Release resources held by the client."""
        ...


class StorageError(Exception):
    """Base exception for storage-related errors."""
    pass
