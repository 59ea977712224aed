"""Application configuration management."""

from functools import lru_cache
from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings with environment variable support.

    All settings can be overridden via environment variables.
    Example: DATABASE_URL, JWT_SECRET_KEY, MEDIA_ROOT
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    database_url: str = Field(
        default="sqlite+aiosqlite:///./mediahub.db",
        description="Database connection URL"
    )

    storage_timeout_seconds: int = Field(
        default=10,
        description="Connect and lock wait timeout for the database driver"
    )

    app_version: str = Field(
        default="1.0.0",
        description="Version reported by the API"
    )

    api_v1_prefix: str = Field(
        default="/api/v1",
        description="API v1 URL prefix"
    )

    debug: bool = Field(
        default=False,
        description="Enable debug mode"
    )

    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8000)

    allowed_origins: List[str] = Field(
        default=["http://localhost:8000", "http://localhost:3000"],
        description="CORS allowed origins"
    )

    log_level: str = Field(
        default="INFO",
        description="Logging level"
    )

    log_format: str = Field(
        default="json",
        description="Log format (json or text)"
    )

    log_dir: str = Field(
        default="logs",
        description="Directory for rotating log files"
    )

    jwt_secret_key: str = Field(
        default="your-super-secret-jwt-key-change-in-production",
        description="Secret key for access token signing"
    )

    jwt_refresh_secret_key: str = Field(
        default="your-super-secret-refresh-key-change-in-production",
        description="Secret key for refresh token signing"
    )

    jwt_algorithm: str = Field(
        default="HS256",
        description="JWT algorithm for token signing"
    )

    access_token_expire_minutes: int = Field(
        default=30,
        description="Access token expiration time in minutes"
    )

    refresh_token_expire_days: int = Field(
        default=10,
        description="Refresh token expiration time in days"
    )

    cookie_secure: bool = Field(
        default=True,
        description="Mark session cookies as Secure"
    )

    media_root: str = Field(
        default="./media",
        description="Directory where uploaded media files are stored"
    )

    media_base_url: str = Field(
        default="/media",
        description="Public URL prefix for uploaded media"
    )

    media_upload_timeout_seconds: float = Field(
        default=60.0,
        description="Upper bound for a single media upload"
    )

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return not self.debug

    @property
    def database_is_sqlite(self) -> bool:
        """Check if using SQLite database."""
        return self.database_url.startswith("sqlite")

    @property
    def database_is_postgres(self) -> bool:
        """Check if using PostgreSQL database."""
        return self.database_url.startswith("postgresql")


@lru_cache
def get_settings() -> Settings:
    """
    Get cached application settings instance.

    Returns:
        Singleton settings instance
    """
    return Settings()
