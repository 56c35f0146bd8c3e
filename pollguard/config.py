"""Configuration loading for pollguard.

This module provides centralized configuration management:
- Load settings from environment variables and .env files
- Validate configuration using pydantic
- Provide typed access to all settings
"""

from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


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

    # Scheduler configuration
    poll_interval_seconds: float = Field(
        default=5.0,
        description="Interval between scheduled ticks in seconds",
    )
    operation_timeout_seconds: float | None = Field(
        default=None,
        description="Optional per-invocation timeout in seconds (unset = no timeout)",
    )
    task_name: str = Field(
        default="demo",
        description="Label used in log lines for the polling task",
    )

    # Demo HTTP operation configuration
    demo_base_url: str = Field(
        default="https://httpbin.org",
        description="Base URL of the JSON endpoint polled by the demo",
    )
    demo_path: str = Field(
        default="json",
        description="Path appended to demo_base_url",
    )
    demo_query: dict[str, str] = Field(
        default_factory=dict,
        description="Query parameters for the demo request (JSON object in env)",
    )
    demo_run_seconds: float = Field(
        default=30.0,
        description="How long the demo polls before stopping",
    )
    http_timeout_seconds: float = Field(
        default=10.0,
        description="HTTP client timeout in seconds",
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

    @field_validator("poll_interval_seconds")
    @classmethod
    def validate_poll_interval(cls, v: float) -> float:
        """Ensure poll interval is positive."""
        if v <= 0:
            raise ValueError("poll_interval_seconds must be positive")
        return v

    @field_validator("operation_timeout_seconds")
    @classmethod
    def validate_operation_timeout(cls, v: float | None) -> float | None:
        """Ensure operation timeout is positive when set."""
        if v is not None and v <= 0:
            raise ValueError("operation_timeout_seconds must be positive")
        return v

    @field_validator("demo_run_seconds")
    @classmethod
    def validate_run_seconds(cls, v: float) -> float:
        """Ensure demo run time is positive."""
        if v <= 0:
            raise ValueError("demo_run_seconds must be positive")
        return v

    @field_validator("http_timeout_seconds")
    @classmethod
    def validate_http_timeout(cls, v: float) -> float:
        """Ensure HTTP timeout is positive."""
        if v <= 0:
            raise ValueError("http_timeout_seconds must be positive")
        return v

    @field_validator("demo_base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Ensure the demo base URL is an http(s) URL."""
        if not v.startswith(("http://", "https://")):
            raise ValueError("demo_base_url must start with http:// or https://")
        return v


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
