"""Unique object keys for uploaded photos."""

import hashlib
import re
import secrets
import time
from typing import Optional

DEFAULT_EXTENSION = "jpg"


def client_basename(original_name: str) -> str:
    """Strip any directory part a client sent along with its filename.

    Both POSIX and Windows separators are honoured, so the result never
    contains a path separator.
    """
    return re.split(r"[\\/]", original_name)[-1]


def extract_extension(original_name: str) -> str:
    """Return the text after the last dot of a filename.

    Falls back to ``jpg`` when the name has no dot or ends with one. Only
    the last path component is considered.
    """
    _, dot, ext = client_basename(original_name).rpartition(".")
    if not dot or not ext:
        return DEFAULT_EXTENSION
    return ext


def generate_unique_filename(original_name: str, timestamp_ms: Optional[int] = None) -> str:
    """Generate a collision-resistant storage key for an upload.

    The key has the form ``<hash>_<random>_<timestamp>.<ext>`` where
    ``hash`` is the first 8 hex characters of the MD5 of the original name
    concatenated with the timestamp, ``random`` is 8 random bytes in hex and
    ``timestamp`` is milliseconds since the epoch.

    Args:
        original_name: Filename supplied by the client. May be empty. Any
            directory part is dropped before hashing.
        timestamp_ms: Milliseconds since epoch. Defaults to the current time.

    Returns:
        str: The generated filename.
    """
    original_name = client_basename(original_name)
    timestamp = timestamp_ms if timestamp_ms is not None else time.time_ns() // 1_000_000
    random_part = secrets.token_hex(8)
    digest = hashlib.md5(
        f"{original_name}{timestamp}".encode("utf-8"), usedforsecurity=False
    ).hexdigest()
    hash_part = digest[:8]
    ext = extract_extension(original_name)

    return f"{hash_part}_{random_part}_{timestamp}.{ext}"
