"""
Configuration management for rrules.

Uses Pydantic Settings for type-safe environment variable loading.
Every setting can be overridden with an ``RRULES_``-prefixed environment
variable or a .env file in the working directory.
"""

from datetime import timedelta
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Library settings loaded from environment variables.

    Durations accept ISO 8601 values, e.g. ``RRULES_DEFAULT_DURATION=PT30M``.
    """

    default_duration: timedelta = Field(
        default=timedelta(hours=1),
        ge=timedelta(0),
        description="Event length used when a rule has no DURATION",
    )
    max_instances: int = Field(
        default=100,
        gt=0,
        description="Maximum instances returned by a single window expansion",
    )
    max_count: int = Field(
        default=1000,
        gt=0,
        description="Stop counting instances in a window after this many",
    )

    model_config = SettingsConfigDict(
        env_prefix="RRULES_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Settings are loaded once per process; call ``get_settings.cache_clear()``
    to pick up environment changes.

    Returns:
        Settings instance loaded from environment

    Example:
        >>> from rrules.config import get_settings
        >>> get_settings().default_duration
        datetime.timedelta(seconds=3600)
    """
    return Settings()
