"""Pydantic schemas for request/response validation."""

from .responses import (
    DeleteData,
    DeleteResponse,
    ErrorResponse,
    HealthResponse,
    UploadData,
    UploadResponse,
)

__all__ = [
    "UploadData",
    "UploadResponse",
    "DeleteData",
    "DeleteResponse",
    "ErrorResponse",
    "HealthResponse",
]
