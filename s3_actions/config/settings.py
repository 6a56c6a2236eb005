"""
Service configuration via pydantic-settings.

Values come from the environment or a .env file. These settings cover
the HTTP service only (auth, CORS, logging, upload limits).

Storage credentials are not settings: every action call brings its own.
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be overridden via environment variables.
    For lists (like api_keys), use comma-separated values in env.
    """

    # API Configuration
    api_title: str = "S3 Actions API"
    api_version: str = "v1"
    api_keys: str = Field(
        default="dev-key-1,dev-key-2",
        description="Comma-separated API keys accepted in the X-API-Key header."
    )

    # Uploads
    max_upload_size_mb: int = Field(
        default=100,
        description="Maximum size of a single multipart upload to put_object, in MB."
    )
    upload_temp_dir: Optional[str] = Field(
        default=None,
        description="Directory for spooled uploads. Defaults to the system temp dir."
    )
    allow_local_file_uploads: bool = Field(
        default=False,
        description="Allow put_object with useFilePath over HTTP, reading files from the server working directory."
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )

    # CORS
    cors_origins: str = Field(
        default="http://localhost:3000",
        description="Comma-separated list of allowed CORS origins. Use * for development only."
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    @property
    def api_keys_list(self) -> list[str]:
        """Parse comma-separated API keys into a list."""
        return [key.strip() for key in self.api_keys.split(",") if key.strip()]

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse comma-separated CORS origins into a list."""
        if self.cors_origins == "*":
            return ["*"]
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def max_upload_size_bytes(self) -> int:
        return self.max_upload_size_mb * 1024 * 1024

    def validate_required_fields(self) -> list[str]:
        """
        Return the names of settings that must be set but are not.

        Kept separate from Pydantic validation so the app can start and
        report problems through the health endpoint.
        """
        missing = []
        if not self.api_keys_list:
            missing.append("API_KEYS")
        return missing


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Settings are loaded once per process. For tests, call
    get_settings.cache_clear() to reset.
    """
    return Settings()
