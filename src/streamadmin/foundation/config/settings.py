"""Environment-based configuration using pydantic-settings.

Provides type-safe, validated configuration from environment variables
with defaults matching the control-plane limits.

Example:
    >>> from streamadmin.foundation.config import get_settings
    >>> settings = get_settings()
    >>> settings.throttle.stream_interval
    0.2
    >>> settings.retry.max_attempts
    6

    # Or with environment variables:
    # STREAMADMIN_RETRY_MAX_ATTEMPTS=3
    # STREAMADMIN_THROTTLE_STREAM_INTERVAL=0.5
"""

from __future__ import annotations

from functools import lru_cache
from typing import Annotated, Literal

from pydantic import Field, NonNegativeFloat, PositiveFloat, PositiveInt
from pydantic_settings import BaseSettings, SettingsConfigDict


class RetrySettings(BaseSettings):
    """Backoff applied when a request is rate limited."""

    model_config = SettingsConfigDict(
        env_prefix="STREAMADMIN_RETRY_",
        extra="ignore",
    )

    max_attempts: Annotated[int, Field(ge=1, le=20)] = 6
    base_delay: PositiveFloat = Field(default=0.2, description="Delay before the first retry in seconds")
    multiplier: PositiveFloat = Field(default=2.0, description="Exponential growth factor")
    max_delay: PositiveFloat = Field(default=30.0, description="Maximum delay in seconds")
    jitter: bool = False


class ThrottleSettings(BaseSettings):
    """Minimum spacing between page requests, per listing operation."""

    model_config = SettingsConfigDict(
        env_prefix="STREAMADMIN_THROTTLE_",
        extra="ignore",
    )

    stream_interval: NonNegativeFloat = 0.2
    tag_interval: NonNegativeFloat = 0.2
    consumer_interval: NonNegativeFloat = 0.0


class PaginationSettings(BaseSettings):
    """Page sizes requested from the server."""

    model_config = SettingsConfigDict(
        env_prefix="STREAMADMIN_PAGINATION_",
        extra="ignore",
    )

    stream_chunk_size: PositiveInt = 10
    tag_chunk_size: PositiveInt = 50
    consumer_chunk_size: PositiveInt = 10


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(
        env_prefix="STREAMADMIN_LOG_",
        extra="ignore",
    )

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    format: Literal["console", "json", "none"] = "console"


class StreamAdminSettings(BaseSettings):
    """Root settings for streamadmin.

    Loads configuration from environment variables with STREAMADMIN_ prefix.
    Supports nested configuration and .env files.

    Example environment variables:
        STREAMADMIN_RETRY_MAX_ATTEMPTS=3
        STREAMADMIN_THROTTLE_TAG_INTERVAL=1.0
        STREAMADMIN_PAGINATION_STREAM_CHUNK_SIZE=100
        STREAMADMIN_LOG_FORMAT=json
    """

    model_config = SettingsConfigDict(
        env_prefix="STREAMADMIN_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
        validate_default=True,
    )

    retry: RetrySettings = Field(default_factory=RetrySettings)
    throttle: ThrottleSettings = Field(default_factory=ThrottleSettings)
    pagination: PaginationSettings = Field(default_factory=PaginationSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


@lru_cache(maxsize=1)
def get_settings() -> StreamAdminSettings:
    """Get the global settings instance (cached)."""
    return StreamAdminSettings()


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for testing).

    After calling this, the next get_settings() call will
    reload configuration from environment.
    """
    get_settings.cache_clear()
