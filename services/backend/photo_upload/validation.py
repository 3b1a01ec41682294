"""Upload acceptance checks run before any storage I/O."""

from typing import Optional

IMAGE_MIME_PREFIX = "image/"
DEFAULT_MAX_UPLOAD_SIZE = 5 * 1024 * 1024

NO_PHOTO_MESSAGE = "No photo file provided"
NOT_AN_IMAGE_MESSAGE = "Only image files allowed"


def is_image_mime_type(mime_type: Optional[str]) -> bool:
    return bool(mime_type) and mime_type.startswith(IMAGE_MIME_PREFIX)


def file_too_large_message(max_size: int) -> str:
    return f"File too large (max {max_size // (1024 * 1024)}MB)"


def image_rejection_reason(
    mime_type: Optional[str], size: int, max_size: int = DEFAULT_MAX_UPLOAD_SIZE
) -> Optional[str]:
    """Explain why an upload cannot be accepted.

    The MIME type is checked before the size.

    Args:
        mime_type: Content type declared by the client.
        size: Number of bytes received.
        max_size: Largest accepted size in bytes.

    Returns:
        Optional[str]: Client-facing error message, or None if acceptable.
    """
    if not is_image_mime_type(mime_type):
        return NOT_AN_IMAGE_MESSAGE
    if size > max_size:
        return file_too_large_message(max_size)
    return None


def is_acceptable_image(
    mime_type: Optional[str], size: int, max_size: int = DEFAULT_MAX_UPLOAD_SIZE
) -> bool:
    """Check that an upload is an image no larger than ``max_size`` bytes."""
    return image_rejection_reason(mime_type, size, max_size) is None
