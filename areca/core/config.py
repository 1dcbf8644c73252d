"""Application configuration using Pydantic Settings.

Configuration is environment-aware:
- APP_ENV determines which .env file to load
- Supports: development, testing, staging, production
- Each environment has its own .env.{environment} file
"""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


# Determine which environment to load (default: development)
APP_ENV = os.getenv("APP_ENV", "development")

# Project root (so .env resolution doesn't depend on current working directory)
PROJECT_ROOT = Path(__file__).resolve().parents[2]

# Map environments to their respective .env files (relative to PROJECT_ROOT)
ENV_FILE_MAP = {
    "development": ".env.development",
    "testing": ".env.testing",
    "staging": ".env.staging",
    "production": ".env.production",
}

# Select the .env file for the current environment
_env_filename = ENV_FILE_MAP.get(APP_ENV, ".env.development")
_env_path = PROJECT_ROOT / _env_filename

# Only load from file if it exists (production might inject via env vars only)
_env_file = str(_env_path) if _env_path.is_file() else None


# Load .env file early to populate os.environ before creating nested settings
# This is necessary because Pydantic nested BaseSettings don't inherit env_file
if _env_file:
    from dotenv import load_dotenv
    load_dotenv(_env_file, override=True)


class AppSettings(BaseSettings):
    """Application-wide configuration."""

    debug: bool = Field(
        False,
        description="Enable debug mode with verbose logging",
    )
    max_upload_size_mb: int = Field(
        5,
        description="Maximum avatar upload size in megabytes",
        ge=1,
    )
    upload_dir: str = Field(
        "uploads",
        description="Directory where uploaded avatars are stored",
    )
    default_payment_rate_per_kg: float = Field(
        50.0,
        description="Payment rate used when an owner has not configured payment_rate_per_kg",
        ge=0,
    )
    cors_origins: str | None = Field(
        None,
        description="Comma-separated list of allowed CORS origins (empty disables CORS)",
    )

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        case_sensitive=False,
    )


class DatabaseSettings(BaseSettings):
    """Database connection configuration."""

    url: str = Field(
        "sqlite:///./areca.db",
        description="SQLAlchemy database URL",
    )
    echo: bool = Field(
        False,
        description="Log every SQL statement emitted by the engine",
    )
    auto_create: bool = Field(
        True,
        description="Create missing tables on application startup",
    )

    model_config = SettingsConfigDict(
        env_prefix="DATABASE_",
        case_sensitive=False,
    )


class AuthSettings(BaseSettings):
    """Session and password hashing configuration."""

    session_ttl_hours: int = Field(
        24 * 7,
        description="Lifetime of a login session in hours",
        ge=1,
    )
    password_hash_iterations: int = Field(
        100_000,
        description="PBKDF2 iterations used when hashing passwords",
        ge=1,
    )

    model_config = SettingsConfigDict(
        env_prefix="AUTH_",
        case_sensitive=False,
    )


class RateLimitSettings(BaseSettings):
    """Quota classes for the fixed-window rate limiters.

    Each class is an independent limiter; every route picks exactly one.
    """

    enabled: bool = Field(
        True,
        description="Enable rate limiting on all guarded routes",
    )
    include_headers: bool = Field(
        True,
        description="Include X-RateLimit-* headers when throttling",
    )
    sweep_interval_seconds: int = Field(
        60,
        description="Minimum interval between sweeps of expired buckets",
        ge=0,
    )

    auth_window_seconds: int = Field(15 * 60, ge=1)
    auth_max: int = Field(20, ge=1)
    auth_message: str = "Too many authentication attempts, please try again later"

    api_window_seconds: int = Field(15 * 60, ge=1)
    api_max: int = Field(200, ge=1)
    api_message: str = "Too many API requests, please try again later"

    work_record_window_seconds: int = Field(5 * 60, ge=1)
    work_record_max: int = Field(50, ge=1)
    work_record_message: str = "Too many work record operations, please try again later"

    employee_window_seconds: int = Field(5 * 60, ge=1)
    employee_max: int = Field(30, ge=1)
    employee_message: str = "Too many employee operations, please try again later"

    upload_window_seconds: int = Field(60 * 60, ge=1)
    upload_max: int = Field(20, ge=1)
    upload_message: str = "Upload limit exceeded, please try again later"

    model_config = SettingsConfigDict(
        env_prefix="RATE_LIMIT_",
        case_sensitive=False,
    )


class LogSettings(BaseSettings):
    """Logging output configuration."""

    level: str = Field("INFO", description="Root log level")
    format: str = Field("json", description="'json' or 'plain'")
    output: str = Field("stdout", description="'stdout' or 'file'")
    file_path: str | None = Field(None, description="Log file path when output=file")
    max_bytes: int = Field(10 * 1024 * 1024, description="Rotate after this many bytes (0 disables)")
    backup_count: int = Field(5, description="Rotated files to keep")
    request_id_header: str = Field("X-Request-ID", description="Correlation id header name")

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        case_sensitive=False,
    )


class Settings(BaseSettings):
    """Main application settings container.

    Automatically loads from the appropriate .env.{APP_ENV} file.
    Raises validation errors on startup if settings are malformed.
    """

    app_env: str = APP_ENV
    app: AppSettings = Field(default_factory=AppSettings)
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    auth: AuthSettings = Field(default_factory=AuthSettings)
    rate_limit: RateLimitSettings = Field(default_factory=RateLimitSettings)
    log: LogSettings = Field(default_factory=LogSettings)

    model_config = SettingsConfigDict(
        case_sensitive=False,
    )


# Global settings instance - composed from domain-specific settings
# Nested settings are created via default_factory so env loading works.
settings = Settings()
