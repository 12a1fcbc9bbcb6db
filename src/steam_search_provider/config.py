"""
Application configuration using Pydantic Settings.

Loads configuration from environment variables with validation,
type coercion, and sensible defaults.
"""

import re
from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_OBJECT_PATH_PATTERN = re.compile(r"^/$|^(/[A-Za-z0-9_]+)+$")


class SteamConfig(BaseSettings):
    """Steam client specific configuration."""

    model_config = SettingsConfigDict(env_prefix="STEAM_")

    root_path: Path | None = Field(
        default=None,
        description="Steam installation root (auto-detected when unset)",
    )
    launch_uri_template: str = Field(
        default="steam://rungameid/{identifier}",
        description="URI opened to launch a game, {identifier} is the app id",
    )
    icon_prefix: str = Field(
        default="steam_icon_",
        description="Icon theme name prefix Steam installs for each title",
    )

    @field_validator("launch_uri_template")
    @classmethod
    def validate_uri_template(cls, v: str) -> str:
        """Require the identifier placeholder and no other fields in the launch URI."""
        if "{identifier}" not in v:
            raise ValueError(f"Launch URI template must contain '{{identifier}}': {v}")
        try:
            v.format(identifier="0")
        except (KeyError, IndexError, ValueError) as e:
            raise ValueError(f"Launch URI template has unknown fields: {v}") from e
        return v


class ProviderConfig(BaseSettings):
    """D-Bus search provider configuration."""

    model_config = SettingsConfigDict(env_prefix="SEARCH_PROVIDER_")

    bus_name: str = Field(
        default="dev.trytonvanmeer.Steam.SearchProvider",
        description="Well-known name requested on the session bus",
    )
    object_path: str = Field(
        default="/dev/trytonvanmeer/Steam/SearchProvider",
        description="Object path the search interface is exported on",
    )
    opener_command: list[str] = Field(
        default_factory=lambda: ["xdg-open"],
        min_length=1,
        description="Command used to open launch URIs with the default handler",
    )

    @field_validator("object_path")
    @classmethod
    def validate_object_path(cls, v: str) -> str:
        """Validate that the path is a legal D-Bus object path."""
        if not _OBJECT_PATH_PATTERN.match(v):
            raise ValueError(f"Invalid D-Bus object path: {v}")
        return v


class LoggingConfig(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(env_prefix="LOG_")

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )
    format: Literal["auto", "json", "console"] = Field(
        default="auto",
        description="Log output format ('auto' picks console on a terminal)",
    )
    include_timestamp: bool = Field(
        default=True,
        description="Include timestamp in log entries",
    )


class Settings(BaseSettings):
    """
    Main application settings.

    Aggregates all configuration sections and provides
    a single entry point for configuration access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Sub-configurations
    steam: SteamConfig = Field(default_factory=SteamConfig)
    provider: ProviderConfig = Field(default_factory=ProviderConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


@lru_cache
def get_settings() -> Settings:
    """
    Get cached application settings.

    Returns:
        Settings: Application configuration instance
    """
    return Settings()
