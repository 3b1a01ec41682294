"""Tests for configuration settings."""
import logging
from pathlib import Path

import pytest

from config import ConfigurationError, Settings, get_settings

STORAGE_ENV_VARS = ("SUPABASE_URL", "SUPABASE_ANON_KEY", "BUCKET_NAME", "STORAGE_TYPE", "PORT")


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """Run without storage variables or a stray .env file."""
    for name in STORAGE_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


class TestSettings:
    """Test Settings configuration."""

    def test_default_settings(self, clean_env):
        """Test default settings values."""
        settings = Settings()

        # Application metadata
        assert settings.app_name == "Photo Upload API"
        assert settings.app_version == "1.0.0"
        assert settings.environment == "local"
        assert settings.debug is False

        # Server Configuration
        assert settings.host == "0.0.0.0"
        assert settings.port == 3000
        assert settings.cors_origins == ["*"]

        # Storage Configuration
        assert settings.storage_type == "supabase"
        assert settings.supabase_url is None
        assert settings.supabase_anon_key is None
        assert settings.bucket_name is None
        assert settings.storage_timeout == 30
        assert settings.cache_control == 3600
        assert settings.storage_root == Path("data/uploads")

        # Logging Configuration
        assert settings.log_level == "INFO"
        assert settings.log_json is False
        assert settings.log_file is None

        # Upload Configuration
        assert settings.max_upload_size == 5 * 1024 * 1024

    def test_env_override(self, clean_env, monkeypatch):
        """Test environment variable overrides, using the service's variable names."""
        monkeypatch.setenv("PORT", "8080")
        monkeypatch.setenv("SUPABASE_URL", "https://project.supabase.co/")
        monkeypatch.setenv("SUPABASE_ANON_KEY", "anon-key")
        monkeypatch.setenv("BUCKET_NAME", "photos")
        monkeypatch.setenv("ENVIRONMENT", "dev")
        monkeypatch.setenv("DEBUG", "true")
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")
        monkeypatch.setenv("MAX_UPLOAD_SIZE", "1048576")

        settings = Settings()

        assert settings.port == 8080
        assert settings.supabase_url == "https://project.supabase.co"
        assert settings.supabase_anon_key == "anon-key"
        assert settings.bucket_name == "photos"
        assert settings.environment == "dev"
        assert settings.debug is True
        assert settings.log_level == "DEBUG"
        assert settings.max_upload_size == 1048576

    def test_storage_root_validator(self):
        """Test storage root path validator."""
        settings = Settings(storage_root="custom/path")
        assert isinstance(settings.storage_root, Path)
        assert settings.storage_root == Path("custom/path")

        settings = Settings(storage_root=Path("/absolute/path"))
        assert settings.storage_root == Path("/absolute/path")

    def test_public_base_url_trailing_slash(self):
        settings = Settings(public_base_url="http://localhost:3000/files/")
        assert settings.public_base_url == "http://localhost:3000/files"

    def test_log_level_numeric(self):
        """Test numeric log level property."""
        assert Settings(log_level="DEBUG").log_level_numeric == logging.DEBUG
        assert Settings(log_level="INFO").log_level_numeric == logging.INFO
        assert Settings(log_level="ERROR").log_level_numeric == logging.ERROR

    def test_get_settings_cached(self):
        """Test that get_settings returns cached instance."""
        get_settings.cache_clear()

        settings1 = get_settings()
        settings2 = get_settings()

        assert settings1 is settings2

    @pytest.mark.parametrize("env", ["local", "dev", "stage", "prod"])
    def test_valid_environments(self, env):
        settings = Settings(environment=env)
        assert settings.environment == env

    def test_invalid_environment(self):
        """Test invalid environment value raises error."""
        with pytest.raises(ValueError):
            Settings(environment="invalid")

    def test_invalid_storage_type(self):
        with pytest.raises(ValueError):
            Settings(storage_type="s3")

    def test_env_file_loading(self, clean_env, tmp_path):
        """Test loading settings from .env file."""
        env_file = tmp_path / ".env"
        env_file.write_text("""
SUPABASE_URL=https://env-file.supabase.co
SUPABASE_ANON_KEY=env-file-key
BUCKET_NAME=env-photos
LOG_LEVEL=WARNING
""")

        settings = Settings()

        assert settings.supabase_url == "https://env-file.supabase.co"
        assert settings.supabase_anon_key == "env-file-key"
        assert settings.bucket_name == "env-photos"
        assert settings.log_level == "WARNING"


class TestStorageValidation:
    """Test the startup check of storage settings."""

    def test_complete_supabase_settings(self):
        settings = Settings(
            storage_type="supabase",
            supabase_url="https://project.supabase.co",
            supabase_anon_key="anon-key",
            bucket_name="photos",
        )

        assert settings.missing_storage_settings() == []
        settings.validate_storage()

    def test_missing_supabase_settings(self):
        """Test every missing variable is named in the error."""
        settings = Settings(
            storage_type="supabase",
            supabase_url=None,
            supabase_anon_key=None,
            bucket_name=None,
        )

        assert settings.missing_storage_settings() == [
            "SUPABASE_URL",
            "SUPABASE_ANON_KEY",
            "BUCKET_NAME",
        ]
        with pytest.raises(ConfigurationError, match="SUPABASE_URL, SUPABASE_ANON_KEY, BUCKET_NAME"):
            settings.validate_storage()

    def test_empty_value_counts_as_missing(self):
        settings = Settings(
            storage_type="supabase",
            supabase_url="https://project.supabase.co",
            supabase_anon_key="",
            bucket_name="photos",
        )

        assert settings.missing_storage_settings() == ["SUPABASE_ANON_KEY"]

    def test_local_storage_needs_nothing(self):
        settings = Settings(storage_type="local", supabase_url=None, bucket_name=None)
        settings.validate_storage()


class TestConfigureLogging:
    """Test logging setup."""

    def test_configure_logging_console(self):
        """Test logging configuration with console output."""
        settings = Settings(log_level="INFO", log_json=False)
        settings.configure_logging()

        root_logger = logging.getLogger()
        assert root_logger.level == logging.INFO

        stream_handlers = [h for h in root_logger.handlers if isinstance(h, logging.StreamHandler)]
        assert len(stream_handlers) > 0
        assert stream_handlers[0].formatter._fmt == settings.log_format

    def test_configure_logging_json(self, capsys):
        """Test logging configuration with JSON output."""
        settings = Settings(log_level="INFO", log_json=True)
        settings.configure_logging()

        logger = logging.getLogger("test_logger")
        logger.info("Test JSON message")

        captured = capsys.readouterr()

        assert '"message": "Test JSON message"' in captured.out
        assert '"level": "INFO"' in captured.out
        assert '"logger": "test_logger"' in captured.out

    def test_configure_logging_file(self, tmp_path):
        """Test logging configuration with file output."""
        log_file = tmp_path / "logs" / "test.log"
        settings = Settings(log_level="INFO", log_file=log_file)
        settings.configure_logging()

        logging.getLogger("test_logger").info("Test file message")

        assert log_file.exists()
        assert "Test file message" in log_file.read_text()

    def test_configure_logging_debug_mode(self):
        """Test logging configuration in debug mode."""
        settings = Settings(debug=True)
        settings.configure_logging()

        assert logging.getLogger("photo_upload").level == logging.DEBUG

    def test_configure_logging_quiets_http_client(self):
        settings = Settings(debug=False)
        settings.configure_logging()

        assert logging.getLogger("httpx").level == logging.WARNING
