"""Configuration loading for the tickbank engine.

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

    # Suite discovery
    suite_modules: str = Field(
        default="",
        description="Comma-separated dotted paths of suite modules to load",
    )

    # Run configuration
    run_channel: int = Field(
        default=-1,
        description="Channel to run (-1 runs every channel)",
    )
    case_delay_seconds: float = Field(
        default=0.0,
        description="Delay inserted between completed test cases",
    )
    tick_interval_seconds: float = Field(
        default=0.0,
        description="Host tick length used by the asyncio driver",
    )

    # Output configuration
    sink_backend: Literal["logging", "stdout"] = Field(
        default="logging",
        description="Log sink receiving engine output",
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

    # Run mode
    run_mode: Literal["once", "interactive"] = Field(
        default="once",
        description="Run mode",
    )

    # Development
    debug: bool = Field(
        default=False,
        description="Enable debug mode with verbose output",
    )

    @property
    def suite_module_list(self) -> list[str]:
        """Suite module names with blanks removed."""
        return [m.strip() for m in self.suite_modules.split(",") if m.strip()]

    @field_validator("run_channel")
    @classmethod
    def validate_run_channel(cls, v: int) -> int:
        """Ensure the channel is -1 or a non-negative partition id."""
        if v < -1:
            raise ValueError("run_channel must be -1 (all channels) or >= 0")
        return v

    @field_validator("case_delay_seconds")
    @classmethod
    def validate_case_delay(cls, v: float) -> float:
        """Ensure case delay is non-negative."""
        if v < 0:
            raise ValueError("case_delay_seconds must be non-negative")
        return v

    @field_validator("tick_interval_seconds")
    @classmethod
    def validate_tick_interval(cls, v: float) -> float:
        """Ensure tick interval is non-negative."""
        if v < 0:
            raise ValueError("tick_interval_seconds must be non-negative")
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
