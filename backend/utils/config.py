"""
hashwatch Configuration Module.

Centralizes all configuration settings using Pydantic Settings.
Requires Python 3.11+.
"""

import shlex
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

# Load .env file into os.environ at module import time
# This ensures nested BaseSettings classes can read the values
_env_file = Path(__file__).parent.parent / ".env"
if _env_file.exists():
    load_dotenv(_env_file)
else:
    # Try current working directory
    load_dotenv()


class WatcherSettings(BaseSettings):
    """File watcher configuration settings."""

    model_config = SettingsConfigDict(env_prefix="WATCHER_")

    extension: str = Field(default=".go", min_length=1, description="Source file extension")
    hidden_prefix: str = Field(
        default=".",
        min_length=1,
        description="Base names starting with this marker are ignored",
    )
    seed_on_start: bool = Field(
        default=False,
        description="Hash all source files at startup so first edits are compared",
    )

    @field_validator("extension")
    @classmethod
    def normalize_extension(cls, v: str) -> str:
        """Ensure the extension carries its leading dot."""
        v = v.strip()
        return v if v.startswith(".") else f".{v}"


class BuildSettings(BaseSettings):
    """Rebuild command settings."""

    model_config = SettingsConfigDict(env_prefix="BUILD_")

    command: str = Field(default="gopherjs build", min_length=1, description="Build command line")

    @property
    def argv(self) -> list[str]:
        """The build command split into arguments."""
        return shlex.split(self.command)


class LoggingSettings(BaseSettings):
    """Logging configuration settings."""

    model_config = SettingsConfigDict(env_prefix="LOG_")

    level: str = Field(default="WARNING")
    format: str = Field(default="console")  # "json" or "console"
    file_path: Path | None = Field(default=None)

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Accept only standard logging level names."""
        v = v.strip().upper()
        if v not in LOG_LEVELS:
            raise ValueError(f"unknown log level {v!r}, expected one of {', '.join(LOG_LEVELS)}")
        return v

    @field_validator("format")
    @classmethod
    def validate_format(cls, v: str) -> str:
        v = v.strip().lower()
        if v not in ("json", "console"):
            raise ValueError(f"unknown log format {v!r}, expected json or console")
        return v


class Settings(BaseSettings):
    """Main application settings aggregating all sub-settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application metadata
    app_name: str = Field(default="hashwatch")
    app_version: str = Field(default="0.1.0")

    # Sub-settings
    watcher: WatcherSettings = Field(default_factory=WatcherSettings)
    build: BuildSettings = Field(default_factory=BuildSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Get cached application settings.

    Returns singleton instance of Settings for performance.
    """
    return Settings()
