"""
Configuration Settings

This module defines application configuration using Pydantic Settings.
All configuration is loaded from environment variables or .env file.

Design Decisions:
- Uses pydantic-settings for type-safe configuration
- Supports multiple environments (production, staging, dev)
- Defaults to SQLite (file-based) for easy local development
- Secrets are checked on startup when running in production
"""

from __future__ import annotations

import logging
from enum import Enum

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

__all__ = ["Settings", "settings"]

logger = logging.getLogger(__name__)

DEFAULT_JWT_SECRET = "change-me-in-production"

# Placeholder values that must never reach a production deployment
KNOWN_DEFAULT_SECRETS = {
    DEFAULT_JWT_SECRET,
    "your-secret-key-change-in-production",
    "your-super-secret-jwt-key-change-this-in-production",
}

MIN_SECRET_LENGTH = 32


class EnvSettingsOptions(Enum):
    """Environment options for deployment."""
    production = "production"
    staging = "staging"
    development = "dev"


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be overridden via environment variables or .env file.
    """
    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore"
    )

    # Project Configuration
    ENV_SETTING: EnvSettingsOptions = Field(
        default=EnvSettingsOptions.development,
        description="Environment setting (production, staging, dev)"
    )
    LOG_LEVEL: str = Field(
        default="INFO",
        description="Root log level (DEBUG, INFO, WARNING, ERROR)"
    )

    # Database Configuration
    # For SQLite: sqlite+aiosqlite:///./shortify.db (default)
    DATABASE_URL: str = Field(
        default="sqlite+aiosqlite:///./shortify.db",
        description="Async database connection string"
    )
    AUTO_CREATE_TABLES: bool = Field(
        default=True,
        description="Create missing tables on startup (disable when running Alembic migrations)"
    )

    # Application Configuration
    BASE_URL: str = Field(
        default="http://localhost:8000",
        description="Base URL for generating short URLs"
    )
    CORS_ORIGINS: list[str] = Field(
        default=["http://localhost:3000"],
        description="Origins allowed to call the API with credentials"
    )

    # Slug Configuration
    SLUG_LENGTH: int = Field(
        default=7,
        description="Length of generated slugs (base62 characters)"
    )
    SLUG_GENERATION_ATTEMPTS: int = Field(
        default=10,
        description="How many random slugs to try before giving up on a collision streak"
    )

    # Analytics Configuration
    REFERRER_LIMIT: int = Field(
        default=10,
        description="Number of entries returned by the top-referrers view"
    )

    # Identity Configuration
    JWT_SECRET: str = Field(
        default=DEFAULT_JWT_SECRET,
        description="Secret used to verify caller access tokens"
    )
    JWT_ALGORITHM: str = Field(
        default="HS256",
        description="Signing algorithm of caller access tokens"
    )
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(
        default=15,
        description="Lifetime of access tokens minted by create_access_token"
    )

    # Rate Limiting
    RATE_LIMIT_ENABLED: bool = Field(
        default=True,
        description="Toggle slowapi rate limiting (disabled in tests)"
    )

    @property
    def is_production(self) -> bool:
        return self.ENV_SETTING == EnvSettingsOptions.production

    def production_secret_warnings(self) -> list[str]:
        """
        Collect warnings about weak secrets.

        Returns:
            Human readable warnings, empty when the secrets look sane
        """
        warnings = []
        if self.JWT_SECRET.lower() in KNOWN_DEFAULT_SECRETS:
            warnings.append("JWT_SECRET is using a default value")
        if len(self.JWT_SECRET) < MIN_SECRET_LENGTH:
            warnings.append(
                f"JWT_SECRET is too short (minimum {MIN_SECRET_LENGTH} characters recommended)"
            )
        return warnings

    def log_startup_checks(self) -> None:
        """Log a configuration summary and, in production, secret warnings."""
        logger.info(
            "Configuration: env=%s database=%s base_url=%s",
            self.ENV_SETTING.value,
            self.DATABASE_URL.split("://", 1)[0],
            self.BASE_URL,
        )
        if not self.is_production:
            return
        for warning in self.production_secret_warnings():
            logger.warning("Production security warning: %s", warning)


settings = Settings()
