"""Configuration loading for the entail test harness.

This module provides centralized configuration management:
- Load settings from ENTAIL_* environment variables and .env files
- Validate configuration using pydantic
- Provide typed access to all settings
"""

from typing import Any, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Harness configuration loaded from environment.

    Uses pydantic-settings for environment variable handling with
    .env file support. List fields are read from the environment as JSON,
    e.g. ``ENTAIL_PATTERNS='["spec/**/*.py"]'``.
    """

    model_config = SettingsConfigDict(
        env_prefix="ENTAIL_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Run behaviour
    bail: bool = Field(
        default=False,
        description="Stop at the first failing test",
    )
    channel_size: int = Field(
        default=64,
        description="Capacity of the event channel between runner and reporter",
    )

    # Discovery
    cwd: str = Field(
        default=".",
        description="Directory test patterns are resolved from",
    )
    patterns: list[str] = Field(
        default_factory=lambda: ["test/**/*.py", "tests/**/*.py"],
        description="Globs selecting test files, relative to cwd",
    )
    ignore: list[str] = Field(
        default_factory=list,
        description="Extra globs for files and directories to skip",
    )

    # Output
    color: bool = Field(
        default=True,
        description="Print colorized output",
    )

    # Logging configuration
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="WARNING",
        description="Log level",
    )
    log_format: Literal["json", "text"] = Field(
        default="text",
        description="Log format",
    )

    @field_validator("channel_size")
    @classmethod
    def validate_channel_size(cls, v: int) -> int:
        """Ensure channel size is positive."""
        if v <= 0:
            raise ValueError("channel_size must be positive")
        return v

    @field_validator("patterns")
    @classmethod
    def validate_patterns(cls, v: list[str]) -> list[str]:
        """Ensure at least one non-empty pattern is configured."""
        patterns = [pattern for pattern in v if pattern.strip()]
        if not patterns:
            raise ValueError("patterns must contain at least one glob")
        return patterns

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: Any) -> Any:
        """Accept log levels in any case."""
        return v.upper() if isinstance(v, str) else v


def load_settings(env_file: str | None = None, **overrides: Any) -> Settings:
    """Load harness settings from environment.

    Args:
        env_file: Optional path to .env file. If not provided,
                 uses the default .env in the current directory.
        **overrides: Values taking precedence over the environment,
                 typically parsed command-line flags.

    Returns:
        Validated Settings instance.

    Raises:
        ValidationError: If settings validation fails.
    """
    overrides = {key: value for key, value in overrides.items() if value is not None}
    if env_file:
        return Settings(_env_file=env_file, **overrides)  # type: ignore[call-arg]
    return Settings(**overrides)


__all__ = ["Settings", "load_settings"]
