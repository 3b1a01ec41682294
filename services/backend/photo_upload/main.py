import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, Optional

from fastapi import Depends, FastAPI, File, Request, UploadFile
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from config import get_settings
from photo_upload.dependencies import get_storage_client
from photo_upload.filenames import generate_unique_filename
from photo_upload.schemas import (
    DeleteData,
    DeleteResponse,
    ErrorResponse,
    HealthResponse,
    UploadData,
    UploadResponse,
)
from photo_upload.storage import StorageClient, StorageFailure, create_storage_client
from photo_upload.validation import (
    NO_PHOTO_MESSAGE,
    NOT_AN_IMAGE_MESSAGE,
    image_rejection_reason,
    is_acceptable_image,
    is_image_mime_type,
)

# Get settings and configure logging before anything else
settings = get_settings()
settings.configure_logging()

# Create logger for this module
logger = logging.getLogger(__name__)

FILENAME_REQUIRED_MESSAGE = "Filename is required"
INTERNAL_ERROR_MESSAGE = "Internal server error"

# Mount point of the local storage root when STORAGE_TYPE=local
LOCAL_FILES_PATH = "/files"

ENDPOINTS = [
    ("GET", "/health", "Health check"),
    ("POST", "/upload", "Upload photo"),
    ("DELETE", "/delete/:filename", "Delete photo"),
]

ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    400: {"model": ErrorResponse, "description": "Invalid request"},
    500: {"model": ErrorResponse, "description": "Storage or internal failure"},
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handle application startup and shutdown."""
    # Startup
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    logger.info(f"Environment: {settings.environment}")
    logger.info(f"Debug mode: {settings.debug}")
    logger.info(f"Storage type: {settings.storage_type}")

    # Fails before the listener accepts requests if storage settings are missing
    storage_client = create_storage_client(settings)
    app.state.storage_client = storage_client

    logger.info(f"{settings.app_name} running on port {settings.port}")
    logger.info("Endpoints:")
    for method, path, description in ENDPOINTS:
        logger.info(f"   {method:<6} {path} - {description}")

    yield

    # Shutdown
    logger.info("Shutting down application")
    await storage_client.aclose()


# Create FastAPI app with settings
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    debug=settings.debug,
    lifespan=lifespan,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

if settings.storage_type == "local":
    app.mount(
        LOCAL_FILES_PATH,
        StaticFiles(directory=settings.storage_root, check_dir=False),
        name="files",
    )


def error_response(
    status_code: int, message: str, headers: Optional[dict[str, str]] = None
) -> JSONResponse:
    """Build the uniform ``{"success": false, "error": ...}`` response."""
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=message).model_dump(),
        headers=headers,
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return error_response(exc.status_code, str(exc.detail), headers=exc.headers)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report malformed requests as client errors.

    The only body field is ``photo``; a value that is not a file counts as
    a missing photo.
    """
    errors = exc.errors()
    logger.warning(f"Request validation failed for {request.url.path}: {errors}")
    if any("photo" in error.get("loc", ()) for error in errors):
        return error_response(400, NO_PHOTO_MESSAGE)
    return error_response(400, "Invalid request")


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    return error_response(500, INTERNAL_ERROR_MESSAGE)


def _utc_timestamp() -> str:
    """Current UTC time as ISO 8601 with millisecond precision."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


@app.get("/health", response_model=HealthResponse)
def health_check() -> HealthResponse:
    """Simple health-check endpoint."""
    return HealthResponse(
        status="OK",
        timestamp=_utc_timestamp(),
        service=settings.app_name,
    )


@app.get("/config")
def get_config() -> dict[str, Any]:
    """Get current configuration (non-sensitive values only)."""
    return {
        "app_name": settings.app_name,
        "app_version": settings.app_version,
        "environment": settings.environment,
        "debug": settings.debug,
        "storage_type": settings.storage_type,
        "bucket_name": settings.bucket_name,
        "log_level": settings.log_level,
        "log_json": settings.log_json,
        "max_upload_size": settings.max_upload_size,
    }


@app.post("/upload", response_model=UploadResponse, responses=ERROR_RESPONSES)
async def upload_photo(
    photo: Optional[UploadFile] = File(None),
    storage_client: StorageClient = Depends(get_storage_client),
):
    """Upload a photo to object storage.

    The photo is stored under a freshly generated unique filename and the
    response carries its public URL.

    Args:
        photo: Multipart file field holding the image.
        storage_client: Client for the object storage bucket.

    Returns:
        UploadResponse on success, otherwise an ``ErrorResponse`` with
        status 400 (bad input) or 500 (storage or internal failure).
    """
    if photo is None or (not photo.filename and not photo.size):
        return error_response(400, NO_PHOTO_MESSAGE)

    try:
        # Check the declared type before reading anything
        if not is_image_mime_type(photo.content_type):
            logger.warning(f"Rejected upload {photo.filename!r} with type {photo.content_type}")
            return error_response(400, NOT_AN_IMAGE_MESSAGE)

        # One byte past the limit is enough to tell that the file is too large
        content = await photo.read(settings.max_upload_size + 1)
        if not is_acceptable_image(photo.content_type, len(content), settings.max_upload_size):
            rejection = image_rejection_reason(photo.content_type, len(content), settings.max_upload_size)
            logger.warning(f"Rejected upload {photo.filename!r}: {rejection}")
            return error_response(400, rejection)

        filename = generate_unique_filename(photo.filename or "")
        logger.info(f"Processing photo: {photo.filename}, content length: {len(content)}, key: {filename}")

        result = await storage_client.put_object(filename, content, photo.content_type)
        if isinstance(result, StorageFailure):
            return error_response(500, f"Upload failed: {result.message}")

        url = storage_client.public_url(filename)
        logger.info(f"Successfully uploaded photo: {filename} -> {url}")

        return UploadResponse(
            data=UploadData(
                filename=filename,
                url=url,
                size=len(content),
                type=photo.content_type,
            )
        )

    except Exception as e:
        logger.exception(f"Upload error: {e}")
        return error_response(500, INTERNAL_ERROR_MESSAGE)


@app.delete("/delete", include_in_schema=False)
@app.delete("/delete/", include_in_schema=False)
async def delete_photo_without_name() -> JSONResponse:
    """Reject delete requests whose filename segment is empty."""
    return error_response(400, FILENAME_REQUIRED_MESSAGE)


@app.delete("/delete/{filename}", response_model=DeleteResponse, responses=ERROR_RESPONSES)
async def delete_photo(
    filename: str,
    storage_client: StorageClient = Depends(get_storage_client),
):
    """Delete a photo by its stored filename.

    Deletion is unconditional: a filename that does not exist in the bucket
    is reported as deleted too.

    Args:
        filename: Key returned by a previous upload.
        storage_client: Client for the object storage bucket.

    Returns:
        DeleteResponse on success, otherwise an ``ErrorResponse``.
    """
    if not filename.strip():
        return error_response(400, FILENAME_REQUIRED_MESSAGE)

    try:
        result = await storage_client.delete_object(filename)
        if isinstance(result, StorageFailure):
            return error_response(500, f"Delete failed: {result.message}")

        logger.info(f"Deleted photo: {filename}")
        return DeleteResponse(data=DeleteData(filename=filename))

    except Exception as e:
        logger.exception(f"Delete error: {e}")
        return error_response(500, INTERNAL_ERROR_MESSAGE)


def run() -> None:
    """Serve the application with uvicorn on the configured host and port."""
    import uvicorn

    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)
