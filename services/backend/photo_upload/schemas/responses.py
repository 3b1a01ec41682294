"""Pydantic schemas for API responses."""

from pydantic import BaseModel, ConfigDict, Field


class UploadData(BaseModel):
    """Details of a stored photo."""

    filename: str = Field(
        ...,
        description="Generated storage key: <hash>_<random>_<timestamp>.<ext>",
        pattern=r"^[0-9a-f]{8}_[0-9a-f]{16}_[0-9]+\.[^.]+$",
        examples=["3f2a9c1b_8e4d0a7f6b2c5d19_1718000000000.jpg"],
    )
    url: str = Field(..., description="Public URL of the stored photo")
    size: int = Field(..., ge=0, description="Size of the photo in bytes")
    type: str = Field(..., description="MIME type sent by the client")


class UploadResponse(BaseModel):
    """Response model for a successful photo upload."""

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "success": True,
                    "message": "Photo uploaded successfully",
                    "data": {
                        "filename": "3f2a9c1b_8e4d0a7f6b2c5d19_1718000000000.jpg",
                        "url": "https://project.supabase.co/storage/v1/object/public/photos/"
                               "3f2a9c1b_8e4d0a7f6b2c5d19_1718000000000.jpg",
                        "size": 48213,
                        "type": "image/jpeg",
                    },
                }
            ]
        }
    )

    success: bool = True
    message: str = "Photo uploaded successfully"
    data: UploadData


class DeleteData(BaseModel):
    filename: str


class DeleteResponse(BaseModel):
    """Response model for a successful photo deletion."""

    success: bool = True
    message: str = "Photo deleted successfully"
    data: DeleteData


class ErrorResponse(BaseModel):
    """Uniform error body returned by every endpoint."""

    model_config = ConfigDict(
        json_schema_extra={"examples": [{"success": False, "error": "No photo file provided"}]}
    )

    success: bool = False
    error: str = Field(..., description="Human-readable error message")


class HealthResponse(BaseModel):
    status: str = "OK"
    timestamp: str = Field(..., description="Current server time (UTC, ISO 8601)")
    service: str
