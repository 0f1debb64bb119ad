"""urlspine configuration.

Application settings loaded from environment variables with URLSPINE_ prefix.

Example:
    >>> from urlspine.core.config import get_settings
    >>> settings = get_settings(log_level="DEBUG")
    >>> settings.log_level
    'DEBUG'
    >>> settings.command_name
    'urls'
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings.

    Loads from environment variables with URLSPINE_ prefix.

    Example:
        >>> from urlspine.core.config import Settings
        >>> s = Settings(database_path="seen.db")
        >>> str(s.database_path)
        'seen.db'
        >>> s.history_limit
        5
    """

    model_config = SettingsConfigDict(
        env_prefix="URLSPINE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Storage
    storage_backend: Literal["sqlite", "memory"] = Field(
        default="sqlite", description="History store backend"
    )
    database_path: Path = Field(default=Path("./history.db"), description="SQLite history file")
    database_timeout: float = Field(default=30.0, ge=0.0, description="SQLite busy timeout")

    # Command surface
    command_name: str = Field(default="urls", min_length=1)
    command_prefix: str = Field(default="!", description="Prefix shown in usage text")
    history_limit: int = Field(default=5, ge=1, le=100)

    # Extraction
    assume_scheme: str | None = Field(
        default=None,
        description="Scheme applied to candidates without one (e.g. www.example.com)",
    )

    # Display
    display_timezone: str = Field(default="UTC", description="IANA zone for query timestamps")

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: Literal["rich", "plain"] = Field(default="rich", description="Log format")

    @field_validator("display_timezone")
    @classmethod
    def _known_timezone(cls, value: str) -> str:
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"unknown timezone: {value}") from e
        return value

    @property
    def tzinfo(self) -> ZoneInfo:
        """Timezone used when rendering query timestamps."""
        return ZoneInfo(self.display_timezone)


def get_settings(**overrides: Any) -> Settings:
    """Get settings with optional overrides.

    Example:
        >>> from urlspine.core.config import get_settings
        >>> s = get_settings(history_limit=10)
        >>> s.history_limit
        10
    """
    return Settings(**overrides)
