# =============================================================================
# app/config.py - Application Settings
# =============================================================================
# This module loads configuration from environment variables using pydantic-settings.
# It provides a single Settings class with all configuration values.
#
# Usage:
#   from app.config import settings
#   print(settings.SUPABASE_URL)
#
# Environment variables are loaded from:
# 1. System environment variables
# 2. .env file in project root (if exists)
# =============================================================================

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings are accessed via the global `settings` instance.
    """

    # -------------------------------------------------------------------------
    # Supabase Configuration
    # -------------------------------------------------------------------------

    SUPABASE_URL: str = Field(
        ...,
        description="Supabase project URL (e.g., https://xxx.supabase.co)"
    )

    SUPABASE_SERVICE_KEY: str = Field(
        ...,
        description="Supabase service_role key (bypasses RLS)"
    )

    STORAGE_BUCKET: str = Field(
        default="items",
        description="Storage bucket that receives admin uploads"
    )

    # -------------------------------------------------------------------------
    # Redis Configuration (for Celery)
    # -------------------------------------------------------------------------

    REDIS_URL: str = Field(
        default="redis://localhost:6379/0",
        description="Redis connection URL for Celery broker"
    )

    # -------------------------------------------------------------------------
    # Admin Authentication
    # -------------------------------------------------------------------------

    ADMIN_PASSWORD: str = Field(
        ...,
        min_length=1,
        description="Password used to bootstrap the root 'admin' account"
    )

    SECRET_KEY: str = Field(
        default="dev-secret-key-change-in-production",
        min_length=16,
        description="Secret key for signing admin session tokens"
    )

    SESSION_TTL_HOURS: int = Field(
        default=24,
        ge=1,
        le=24 * 30,
        description="Lifetime of an admin session cookie"
    )

    SESSION_COOKIE_NAME: str = Field(
        default="session_id",
        description="Cookie carrying the admin session token"
    )

    LOGIN_RATE_LIMIT: str = Field(
        default="20/15minutes",
        description="Login attempts allowed per client address"
    )

    # -------------------------------------------------------------------------
    # Rate Limiting
    # -------------------------------------------------------------------------

    API_RATE_LIMIT: str = Field(
        default="3000/15minutes",
        description="Requests allowed per client address on every other route"
    )

    RATE_LIMIT_STORAGE_URL: str = Field(
        default="memory://",
        description="slowapi counter storage (memory:// or a redis:// URL shared by all API processes)"
    )

    # -------------------------------------------------------------------------
    # Web Push
    # -------------------------------------------------------------------------

    VAPID_PUBLIC_KEY: str = Field(
        default="",
        description="VAPID public key handed to browsers for push subscriptions"
    )

    VAPID_PRIVATE_KEY: str = Field(
        default="",
        description="VAPID private key used to sign push messages"
    )

    VAPID_CLAIMS_EMAIL: str = Field(
        default="mailto:admin@coreconnect.com",
        description="Contact claim sent with push messages"
    )

    # -------------------------------------------------------------------------
    # Scheduling
    # -------------------------------------------------------------------------

    ENFORCE_LECTURE_DATE_RANGE: bool = Field(
        default=True,
        description="Hide lecture rules outside their startDate/endDate in today's view"
    )

    # -------------------------------------------------------------------------
    # Application Settings
    # -------------------------------------------------------------------------

    ENVIRONMENT: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Current environment"
    )

    DEBUG: bool = Field(
        default=False,
        description="Enable debug mode (verbose logging, auto-reload)"
    )

    API_HOST: str = Field(
        default="0.0.0.0",
        description="Host to bind the API server to"
    )

    API_PORT: int = Field(
        default=3000,
        ge=1,
        le=65535,
        description="Port for the API server"
    )

    # CORS origins (comma-separated string that gets parsed)
    CORS_ORIGINS: str = Field(
        default="http://localhost:5173,http://localhost:3000",
        description="Allowed CORS origins (comma-separated)"
    )

    # -------------------------------------------------------------------------
    # File Upload Settings
    # -------------------------------------------------------------------------

    MAX_UPLOAD_SIZE_MB: int = Field(
        default=10,
        ge=1,
        le=500,
        description="Maximum file upload size in MB"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        case_sensitive=True,
        extra="ignore",
    )

    # -------------------------------------------------------------------------
    # Computed Properties
    # -------------------------------------------------------------------------

    @property
    def cors_origins_list(self) -> list[str]:
        """
        Parse CORS_ORIGINS string into a list.

        Example: "http://localhost:3000, https://myapp.com" -> ["http://localhost:3000", "https://myapp.com"]
        """
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

    @property
    def max_upload_size_bytes(self) -> int:
        """Convert MB to bytes for file size validation."""
        return self.MAX_UPLOAD_SIZE_MB * 1024 * 1024

    @property
    def session_ttl_seconds(self) -> int:
        return self.SESSION_TTL_HOURS * 60 * 60

    @property
    def push_enabled(self) -> bool:
        """Push delivery needs both halves of the VAPID key pair."""
        return bool(self.VAPID_PUBLIC_KEY and self.VAPID_PRIVATE_KEY)

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.ENVIRONMENT == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.ENVIRONMENT == "production"


@lru_cache
def get_settings() -> Settings:
    """
    Get cached Settings instance.

    Using lru_cache ensures we only parse .env and validate once,
    not on every access.
    """
    return Settings()


# Global settings instance for easy importing
# Usage: from app.config import settings
settings = get_settings()
