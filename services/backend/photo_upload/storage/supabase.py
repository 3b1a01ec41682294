"""Supabase Storage implementation of StorageClient."""
import logging
import time
from typing import Optional
from urllib.parse import quote

import httpx

from config import Settings

from .base import StorageClient, StorageFailure, StorageResult, StorageSuccess

logger = logging.getLogger(__name__)


def _error_message(response: httpx.Response) -> str:
    """Pull the human-readable error out of a Storage API error response."""
    try:
        body = response.json()
    except ValueError:
        body = None

    if isinstance(body, dict):
        for field in ("message", "error"):
            if body.get(field):
                return str(body[field])

    return response.text or response.reason_phrase or f"HTTP {response.status_code}"


class SupabaseStorageClient(StorageClient):
    """Storage client that talks to the Supabase Storage REST API.

    A single ``httpx.AsyncClient`` is kept for the lifetime of the client
    and shared by all requests.
    """

    def __init__(self, settings: Settings, http_client: Optional[httpx.AsyncClient] = None):
        """Initialize the Supabase storage client.

        Args:
            settings: Application settings containing the Supabase configuration
            http_client: Preconfigured HTTP client. A new one is created if omitted.
        """
        if not settings.supabase_url or not settings.supabase_anon_key:
            raise ValueError("SUPABASE_URL and SUPABASE_ANON_KEY must be set for supabase storage")
        if not settings.bucket_name:
            raise ValueError("BUCKET_NAME must be set for supabase storage")

        self.base_url = settings.supabase_url.rstrip("/")
        self.bucket = settings.bucket_name
        self.cache_control = settings.cache_control
        self._auth_headers = {
            "Authorization": f"Bearer {settings.supabase_anon_key}",
            "apikey": settings.supabase_anon_key,
        }
        self._http = http_client or httpx.AsyncClient(timeout=settings.storage_timeout)
        logger.info(f"Initialized SupabaseStorageClient for bucket: {self.bucket}")

    @property
    def _bucket_url(self) -> str:
        return f"{self.base_url}/storage/v1/object/{quote(self.bucket)}"

    async def put_object(self, key: str, content: bytes, content_type: str) -> StorageResult:
        """Upload ``content`` to ``<bucket>/<key>`` with upsert disabled.

        Args:
            key: Object key inside the bucket.
            content: Raw bytes to upload.
            content_type: MIME type stored with the object.

        Returns:
            StorageResult: Success, or the upstream error message.
        """
        url = f"{self._bucket_url}/{quote(key)}"
        headers = {
            **self._auth_headers,
            "Content-Type": content_type,
            "cache-control": f"max-age={self.cache_control}",
            "x-upsert": "false",
        }

        logger.debug(f"Uploading {len(content)} bytes to {url}")
        start_time = time.time()

        try:
            response = await self._http.post(url, content=content, headers=headers)
        except httpx.HTTPError as e:
            logger.error(f"HTTP error during upload of {key}: {e}")
            return StorageFailure(str(e) or type(e).__name__)

        if response.is_error:
            message = _error_message(response)
            logger.error(f"Storage service rejected upload of {key}: {response.status_code} - {message}")
            return StorageFailure(message)

        elapsed_time = time.time() - start_time
        logger.info(f"Uploaded {key} to bucket {self.bucket} in {elapsed_time:.2f}s")
        return StorageSuccess(key)

    def public_url(self, key: str) -> str:
        return f"{self.base_url}/storage/v1/object/public/{quote(self.bucket)}/{quote(key)}"

    async def delete_object(self, key: str) -> StorageResult:
        """Remove ``<bucket>/<key>``.

        The Storage API answers with the list of removed objects, which is
        empty for a missing key; both cases are reported as success.
        """
        try:
            response = await self._http.request(
                "DELETE", self._bucket_url, json={"prefixes": [key]}, headers=self._auth_headers
            )
        except httpx.HTTPError as e:
            logger.error(f"HTTP error during delete of {key}: {e}")
            return StorageFailure(str(e) or type(e).__name__)

        if response.is_error:
            message = _error_message(response)
            logger.error(f"Storage service rejected delete of {key}: {response.status_code} - {message}")
            return StorageFailure(message)

        logger.info(f"Deleted {key} from bucket {self.bucket}")
        return StorageSuccess(key)

    async def aclose(self) -> None:
        await self._http.aclose()
