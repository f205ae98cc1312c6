"""Configuration loading for the rack health monitor.

This module provides centralized configuration management:
- Load settings from environment variables and .env files
- Validate configuration using pydantic
- Provide typed access to all settings
"""

from typing import Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from rackmonitor.core.classifier import validate_thresholds


class Settings(BaseSettings):
    """Application configuration loaded from environment.

    Uses pydantic-settings for environment variable handling with
    .env file support via python-dotenv.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Health thresholds
    unhealthy_threshold: float = Field(
        default=0.8,
        description="Scores below this are unhealthy and trigger a replacement",
    )
    shaky_threshold: float = Field(
        default=0.9,
        description="Scores below this (and not unhealthy) are flagged for inspection",
    )

    # Inventory
    inventory_path: str = Field(
        default="./racks.json",
        description="JSON file describing racks, unit slots and warranties",
    )
    health_path: str = Field(
        default="./health.json",
        description="JSON health snapshot read on every sweep",
    )

    # Sweep scheduling
    poll_interval_seconds: int = Field(
        default=60,
        description="Interval between monitoring sweeps in seconds",
    )
    run_mode: Literal["daemon", "once"] = Field(
        default="daemon",
        description="Run mode",
    )

    # Logging configuration
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Log level",
    )
    log_format: Literal["json", "text"] = Field(
        default="text",
        description="Log format",
    )

    verbose: bool = Field(
        default=False,
        description="Include warranty details in replacement requests",
    )

    @field_validator("poll_interval_seconds")
    @classmethod
    def validate_poll_interval(cls, v: int) -> int:
        """Ensure poll interval is positive."""
        if v <= 0:
            raise ValueError("poll_interval_seconds must be positive")
        return v

    @model_validator(mode="after")
    def validate_threshold_order(self) -> "Settings":
        """Ensure 0.0 <= unhealthy_threshold < shaky_threshold <= 1.0."""
        validate_thresholds(self.unhealthy_threshold, self.shaky_threshold)
        return self


def load_settings(env_file: str | None = None) -> Settings:
    """Load application settings from environment.

    Args:
        env_file: Optional path to .env file. If not provided,
                 uses the default .env in the current directory.

    Returns:
        Validated Settings instance.

    Raises:
        ValidationError: If settings validation fails.
    """
    if env_file:
        return Settings(_env_file=env_file)  # type: ignore[call-arg]
    return Settings()


__all__ = ["Settings", "load_settings"]
