"""Application settings and configuration."""

import logging
from functools import lru_cache
from pathlib import Path
from typing import Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ConfigurationError(ValueError):
    """Raised when required settings are missing or inconsistent."""
    pass


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application metadata
    app_name: str = Field(
        default="Photo Upload API",
        description="Application name"
    )
    app_version: str = Field(
        default="1.0.0",
        description="Application version"
    )
    environment: Literal["local", "dev", "stage", "prod"] = Field(
        default="local",
        description="Deployment environment"
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode"
    )

    # Server Configuration
    host: str = Field(
        default="0.0.0.0",
        description="Interface the server binds to"
    )
    port: int = Field(
        default=3000,
        description="Port the server listens on"
    )
    cors_origins: list[str] = Field(
        default=["*"],
        description="Allowed CORS origins"
    )

    # Storage Configuration
    storage_type: Literal["supabase", "local"] = Field(
        default="supabase",
        description="Object storage backend for uploaded photos"
    )
    supabase_url: Optional[str] = Field(
        default=None,
        description="Supabase project URL"
    )
    supabase_anon_key: Optional[str] = Field(
        default=None,
        description="Supabase API key used for storage requests"
    )
    bucket_name: Optional[str] = Field(
        default=None,
        description="Storage bucket receiving the photos"
    )
    storage_timeout: int = Field(
        default=30,
        description="Timeout for storage service requests (seconds)"
    )
    cache_control: int = Field(
        default=3600,
        description="Cache max-age (seconds) attached to uploaded objects"
    )
    storage_root: Path = Field(
        default=Path("data/uploads"),
        description="Root directory for local storage"
    )
    public_base_url: str = Field(
        default="http://localhost:3000/files",
        description="URL prefix under which local storage objects are served"
    )

    @field_validator("storage_root", mode="before")
    @classmethod
    def resolve_storage_path(cls, v: str | Path) -> Path:
        """Ensure storage root is a Path object."""
        if isinstance(v, str):
            return Path(v)
        return v

    @field_validator("supabase_url", "public_base_url", mode="after")
    @classmethod
    def strip_trailing_slash(cls, v: Optional[str]) -> Optional[str]:
        """Drop trailing slashes so URLs can be joined with '/'."""
        if v is None:
            return v
        return v.rstrip("/")

    # Logging Configuration
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level"
    )
    log_format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log message format"
    )
    log_json: bool = Field(
        default=False,
        description="Output logs in JSON format"
    )
    log_file: Optional[Path] = Field(
        default=None,
        description="Path to log file (if None, logs to stdout only)"
    )

    # Upload Configuration
    max_upload_size: int = Field(
        default=5 * 1024 * 1024,  # 5MB
        description="Maximum file upload size in bytes"
    )

    @property
    def log_level_numeric(self) -> int:
        """Get numeric log level."""
        return getattr(logging, self.log_level)

    def missing_storage_settings(self) -> list[str]:
        """List the environment variables the selected backend still needs."""
        if self.storage_type != "supabase":
            return []

        required = {
            "SUPABASE_URL": self.supabase_url,
            "SUPABASE_ANON_KEY": self.supabase_anon_key,
            "BUCKET_NAME": self.bucket_name,
        }
        return [name for name, value in required.items() if not value]

    def validate_storage(self) -> None:
        """Fail fast when the storage backend cannot be reached.

        Raises:
            ConfigurationError: If required storage settings are missing.
        """
        missing = self.missing_storage_settings()
        if missing:
            raise ConfigurationError(
                f"Missing required storage configuration: {', '.join(missing)}"
            )

    def configure_logging(self) -> None:
        """Configure logging based on settings."""
        import sys

        # Base logging configuration
        handlers: list[logging.Handler] = []

        # Console handler
        console_handler = logging.StreamHandler(sys.stdout)
        handlers.append(console_handler)

        # File handler if specified
        if self.log_file:
            self.log_file.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(self.log_file)
            handlers.append(file_handler)

        # Configure formatter
        if self.log_json:
            # JSON formatter for structured logging
            import json

            class JSONFormatter(logging.Formatter):
                def format(self, record: logging.LogRecord) -> str:
                    log_obj = {
                        "timestamp": self.formatTime(record),
                        "level": record.levelname,
                        "logger": record.name,
                        "message": record.getMessage(),
                        "module": record.module,
                        "function": record.funcName,
                        "line": record.lineno,
                    }
                    if record.exc_info:
                        log_obj["exception"] = self.formatException(record.exc_info)
                    return json.dumps(log_obj)

            formatter = JSONFormatter()
        else:
            formatter = logging.Formatter(self.log_format)

        # Apply formatter to all handlers
        for handler in handlers:
            handler.setFormatter(formatter)

        # Configure root logger
        logging.basicConfig(
            level=self.log_level_numeric,
            handlers=handlers,
            force=True,
        )

        # Set specific logger levels
        if self.debug:
            logging.getLogger("photo_upload").setLevel(logging.DEBUG)
        else:
            # Reduce noise from third-party libraries
            logging.getLogger("httpx").setLevel(logging.WARNING)
            logging.getLogger("httpcore").setLevel(logging.WARNING)


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()
