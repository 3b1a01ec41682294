"""Storage module for photo persistence."""

import logging

from config import Settings

from .base import StorageClient, StorageError, StorageFailure, StorageResult, StorageSuccess
from .local import LocalStorageClient
from .supabase import SupabaseStorageClient

logger = logging.getLogger(__name__)


def create_storage_client(settings: Settings) -> StorageClient:
    """Factory function to create the storage client selected by settings.

    Args:
        settings: Application settings

    Returns:
        StorageClient instance (either SupabaseStorageClient or LocalStorageClient)

    Raises:
        ConfigurationError: If the selected backend is missing required settings.
    """
    settings.validate_storage()

    if settings.storage_type == "local":
        logger.info("Creating LocalStorageClient")
        return LocalStorageClient(
            storage_root=settings.storage_root,
            public_base_url=settings.public_base_url,
        )

    logger.info("Creating SupabaseStorageClient")
    return SupabaseStorageClient(settings)


__all__ = [
    "StorageClient",
    "StorageError",
    "StorageFailure",
    "StorageResult",
    "StorageSuccess",
    "LocalStorageClient",
    "SupabaseStorageClient",
    "create_storage_client",
]
