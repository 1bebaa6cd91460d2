"""
Application settings and configuration management.

Uses Pydantic Settings for validation and environment variable support.
"""

from pathlib import Path
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StudioSettings(BaseSettings):
    """Connection and timing configuration for the Studio plugin bridge."""

    host: str = Field(default="127.0.0.1", description="Studio plugin host (loopback)")
    port: int = Field(default=44755, ge=1, le=65535, description="Studio plugin HTTP port")

    long_poll_timeout: float = Field(
        default=15.0,
        gt=0,
        description="How long the plugin holds a GET /request open before answering 204/423",
    )
    probe_timeout: float = Field(
        default=2.0,
        gt=0,
        description="Local deadline for the connectivity probe. Must stay below long_poll_timeout, "
                    "otherwise a live plugin answering 204 looks the same as a hung one.",
    )
    probe_margin: float = Field(
        default=0.5,
        ge=0,
        description="Extra time granted on top of probe_timeout before the probe is abandoned",
    )
    attempt_timeout: float = Field(
        default=3.0, gt=0, description="Per-attempt transport timeout in seconds"
    )
    request_deadline: float = Field(
        default=20.0, gt=0, description="Overall deadline for one command, across all retries"
    )
    poll_deadline: float = Field(
        default=30.0, gt=0, description="Overall deadline when long-polling GET /request"
    )
    retry_backoff: float = Field(
        default=0.5, ge=0, description="Fixed delay between attempts in seconds"
    )
    debug: bool = Field(default=False, description="Log every attempt at INFO level")

    model_config = SettingsConfigDict(env_prefix="STUDIO_")

    @model_validator(mode="after")
    def _check_timings(self) -> "StudioSettings":
        if self.probe_timeout >= self.long_poll_timeout:
            raise ValueError(
                f"probe_timeout ({self.probe_timeout}s) must be shorter than "
                f"long_poll_timeout ({self.long_poll_timeout}s)"
            )
        if self.attempt_timeout > self.request_deadline:
            raise ValueError(
                f"attempt_timeout ({self.attempt_timeout}s) cannot exceed "
                f"request_deadline ({self.request_deadline}s)"
            )
        return self

    @property
    def base_url(self) -> str:
        return f"http://{self.host}:{self.port}"


class Settings(BaseSettings):
    """Main application settings."""

    # Environment
    environment: Literal["development", "production"] = Field(
        default="development", description="Deployment environment"
    )

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Logging level"
    )
    log_file: Path | None = Field(default=None, description="Log file path")

    # Sub-configurations
    studio: StudioSettings = Field(default_factory=StudioSettings)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )


# Global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get or create the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def load_settings(env_file: str | Path | None = None) -> Settings:
    """
    Load settings from file and environment.

    Args:
        env_file: Path to .env file (optional)

    Returns:
        Loaded settings instance
    """
    global _settings
    if env_file:
        _settings = Settings(_env_file=env_file)
    else:
        _settings = Settings()
    return _settings
