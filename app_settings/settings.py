"""
Pydantic Settings for the SIP navigation service.

This module provides type-safe, validated configuration using Pydantic BaseSettings.
Environment variables are automatically loaded and validated at startup.

Usage:
    from app_settings import settings

    # Access settings
    print(settings.navigation_store)
    print(settings.is_production)
"""

from functools import lru_cache
from typing import Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings are validated at startup. Invalid values raise a
    validation error.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # =========================================================================
    # ENVIRONMENT
    # =========================================================================

    environment: Literal["local", "development", "production", "test"] = Field(
        default="local",
        description="Application environment",
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode",
    )

    # =========================================================================
    # NAVIGATION STORE
    # =========================================================================

    navigation_store: Literal["memory", "redis"] = Field(
        default="memory",
        description="Navigation configuration store: memory (single instance) or redis (shared)",
    )

    # =========================================================================
    # REDIS
    # =========================================================================

    redis_url: Optional[str] = Field(
        default=None,
        description="Redis connection URL (e.g., redis://localhost:6379)",
    )
    redis_key_prefix: str = Field(
        default="nav:",
        description="Prefix for every navigation key in Redis",
    )

    # =========================================================================
    # API SETTINGS
    # =========================================================================

    api_host: str = Field(
        default="0.0.0.0",
        description="API server host",
    )
    api_port: int = Field(
        default=8000,
        description="API server port",
    )
    cors_origins: str = Field(
        default="http://localhost:5173,http://localhost:3000",
        description="Comma-separated list of allowed CORS origins",
    )

    # =========================================================================
    # LOGGING
    # =========================================================================

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Application log level",
    )
    log_json: Optional[bool] = Field(
        default=None,
        description="Emit JSON logs (defaults to on in production)",
    )

    # =========================================================================
    # COMPUTED PROPERTIES
    # =========================================================================

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"

    @property
    def is_local(self) -> bool:
        return self.environment in ("local", "test")

    @property
    def use_json_logs(self) -> bool:
        if self.log_json is not None:
            return self.log_json
        return self.is_production

    @property
    def cors_origins_list(self) -> list[str]:
        """Get CORS origins as a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    # =========================================================================
    # VALIDATION
    # =========================================================================

    @field_validator("log_level", mode="before")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Accept log levels in any case."""
        return v.upper() if isinstance(v, str) else v

    @field_validator("redis_key_prefix")
    @classmethod
    def validate_key_prefix(cls, v: str) -> str:
        """Keep keys readable: the prefix always ends with a colon."""
        return v if not v or v.endswith(":") else f"{v}:"

    def validate_production_settings(self) -> list[str]:
        """
        Validate that required settings are present in production.

        Returns list of missing setting names, or empty list if all present.
        """
        if not self.is_production:
            return []

        missing = []
        if self.navigation_store == "redis" and not self.redis_url:
            missing.append("REDIS_URL")
        return missing


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()


# Global settings instance
settings = get_settings()
