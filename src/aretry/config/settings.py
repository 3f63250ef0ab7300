"""Environment-based defaults using pydantic-settings.

Values are only used when a caller leaves the matching argument out.

Example:
    >>> from aretry.config import get_settings
    >>> get_settings().retry.max_attempts
    3

    # Or with environment variables:
    # ARETRY_RETRY_MAX_ATTEMPTS=5
    # ARETRY_RETRY_BACKOFF=exponential
    # ARETRY_LOG_LEVEL=DEBUG
"""

from __future__ import annotations

from functools import lru_cache
from typing import TYPE_CHECKING, Literal

from pydantic import Field, NonNegativeFloat, PositiveInt, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from aretry.clock import Duration

if TYPE_CHECKING:
    from aretry.retry.backoff import Backoff


class RetrySettings(BaseSettings):
    """Default retry configuration."""

    model_config = SettingsConfigDict(
        env_prefix="ARETRY_RETRY_",
        extra="ignore",
    )

    max_attempts: PositiveInt = Field(default=3, description="Total attempts including the first")
    tolerance: NonNegativeFloat | None = Field(default=None, description="Sleep tolerance in seconds")
    backoff: Literal["none", "constant", "linear", "exponential"] = "none"
    base_delay: NonNegativeFloat = Field(default=1.0, description="Base delay in seconds")
    growth: NonNegativeFloat = Field(
        default=2.0,
        description="Seconds added per attempt (linear) or multiplier (exponential)",
    )
    max_delay: NonNegativeFloat | None = Field(default=None, description="Upper bound in seconds")
    min_delay: NonNegativeFloat | None = Field(default=None, description="Lower bound in seconds")
    jitter: bool = False

    @model_validator(mode="after")
    def _check_bounds(self) -> RetrySettings:
        if self.max_delay is not None and self.min_delay is not None and self.min_delay > self.max_delay:
            raise ValueError(f"min_delay ({self.min_delay}) exceeds max_delay ({self.max_delay})")
        return self

    @property
    def tolerance_duration(self) -> Duration | None:
        return None if self.tolerance is None else Duration.seconds(self.tolerance)

    def build_backoff(self) -> Backoff:
        """Build the configured policy: kind, then min, then max, then jitter."""
        from aretry.retry.backoff import Backoff

        match self.backoff:
            case "none":
                policy = Backoff.none()
            case "constant":
                policy = Backoff.constant(self.base_delay)
            case "linear":
                policy = Backoff.linear(self.growth, self.base_delay)
            case "exponential":
                policy = Backoff.exponential(self.base_delay, self.growth)
        if self.min_delay is not None:
            policy = policy.min(self.min_delay)
        if self.max_delay is not None:
            policy = policy.max(self.max_delay)
        return policy.jitter() if self.jitter else policy


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(
        env_prefix="ARETRY_LOG_",
        extra="ignore",
    )

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "WARNING"


class AretrySettings(BaseSettings):
    """Root settings, loaded from ``ARETRY_*`` variables and an optional ``.env`` file."""

    model_config = SettingsConfigDict(
        env_prefix="ARETRY_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
        validate_default=True,
    )

    retry: RetrySettings = Field(default_factory=RetrySettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


@lru_cache(maxsize=1)
def get_settings() -> AretrySettings:
    """Get the global settings instance (cached)."""
    return AretrySettings()


def clear_settings_cache() -> None:
    """Clear the settings cache so the next get_settings() re-reads the environment."""
    get_settings.cache_clear()
