"""FastAPI dependency injection configuration."""

import logging

from fastapi import Request

from photo_upload.storage import StorageClient, StorageError

logger = logging.getLogger(__name__)


def get_storage_client(request: Request) -> StorageClient:
    """Get the storage client built during application startup.

    The client is created once in the application lifespan and kept on
    ``app.state``, so every request shares the same instance and its
    connection pool.

    Args:
        request: Incoming request, used to reach the application state.

    Returns:
        StorageClient: The configured storage client instance

    Raises:
        StorageError: If the application started without a storage client.
    """
    storage_client = getattr(request.app.state, "storage_client", None)
    if storage_client is None:
        logger.error("Storage client requested before application startup completed")
        raise StorageError("Storage client is not initialized")
    return storage_client
