"""Application Settings and Configuration

Pydantic-based settings management using environment variables.
Settings are loaded from environment variables with support for .env files,
type validation, and sensible defaults. All settings are frozen and immutable
after initialization.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any, Literal

from pydantic import AliasChoices, BaseModel, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..domain.shared.messages import ErrorMessages
from ..domain.shared.types import (
    ConcurrencyLimit,
    ProgressIntervalSeconds,
    SpotifyPageSize,
)
from ..domain.shared.validators import parse_snowflake_list


class DiscordSettings(BaseModel):
    """Discord bot configuration."""

    model_config = SettingsConfigDict(frozen=True, populate_by_name=True)

    token: SecretStr = Field(
        default=SecretStr(""), validation_alias=AliasChoices("token", "bot_token", "discord_token")
    )
    guild_ids: tuple[int, ...] = Field(
        default_factory=tuple, validation_alias=AliasChoices("guild_ids", "guilds")
    )
    sync_on_startup: bool = False
    activity_name: str = Field(default="/play", min_length=1, max_length=128)
    shutdown_timeout_s: float = Field(default=30.0, gt=0.0, le=300.0)

    @field_validator("guild_ids", mode="before")
    @classmethod
    def validate_snowflake_ids(cls, v: Any) -> tuple[int, ...]:
        """Validate Discord snowflake IDs; accepts a list, tuple or comma-separated string."""
        return parse_snowflake_list(v)


class ResolutionSettings(BaseModel):
    """Track lookup and search configuration."""

    model_config = SettingsConfigDict(frozen=True, populate_by_name=True)

    ytdlp_format: str = "bestaudio/best"
    pot_server_url: str | None = Field(
        default=None,
        validation_alias=AliasChoices("pot_server_url", "bgutil_pot_server_url"),
    )
    max_concurrency: ConcurrencyLimit = 5
    metadata_cache_ttl_seconds: int = Field(
        default=3600, ge=0, validation_alias=AliasChoices("metadata_cache_ttl_seconds", "cache_ttl")
    )
    metadata_cache_max_size: int = Field(default=500, ge=1, le=100_000)
    socket_timeout_s: int = Field(
        default=10,
        ge=1,
        le=120,
        validation_alias=AliasChoices("socket_timeout_s", "socket_timeout"),
    )


class ProgressSettings(BaseModel):
    """Progress notification configuration for background batches."""

    model_config = SettingsConfigDict(frozen=True)

    interval_seconds: ProgressIntervalSeconds = 5.0


class SpotifySettings(BaseModel):
    """Spotify Web API configuration (client-credentials flow)."""

    model_config = SettingsConfigDict(frozen=True, populate_by_name=True)

    client_id: str = Field(
        default="", validation_alias=AliasChoices("client_id", "spotify_client_id")
    )
    client_secret: SecretStr = Field(
        default=SecretStr(""),
        validation_alias=AliasChoices("client_secret", "spotify_client_secret"),
    )
    market: str | None = Field(default=None, min_length=2, max_length=2)
    page_size: SpotifyPageSize = 50
    request_timeout_s: float = Field(default=10.0, gt=0.0, le=120.0)

    @property
    def is_configured(self) -> bool:
        return bool(self.client_id and self.client_secret.get_secret_value())


class Settings(BaseSettings):
    """Application settings container.

    Automatically loads configuration from environment variables.

    Environment variable naming:
    - ENVIRONMENT, DEBUG, LOG_LEVEL, LOG_CONFIG_PATH, LOG_COLOR (top-level)
    - DISCORD__TOKEN, DISCORD__GUILD_IDS, etc. (nested with ``__``)
    - RESOLUTION__MAX_CONCURRENCY, PROGRESS__INTERVAL_SECONDS
    - SPOTIFY__CLIENT_ID, SPOTIFY__CLIENT_SECRET, SPOTIFY__MARKET
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    environment: Literal["development", "production", "test"] = "development"
    debug: bool = False
    log_level: str = "INFO"
    log_config_path: Path = Path("logging_config.json")
    log_color: bool | None = None

    discord: DiscordSettings = Field(default_factory=DiscordSettings)
    resolution: ResolutionSettings = Field(default_factory=ResolutionSettings)
    progress: ProgressSettings = Field(default_factory=ProgressSettings)
    spotify: SpotifySettings = Field(default_factory=SpotifySettings)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(
                ErrorMessages.INVALID_LOG_LEVEL.format(level=v, valid_levels=sorted(valid_levels))
            )
        return v_upper

    @property
    def effective_log_level(self) -> str:
        """``DEBUG`` while debug mode is on, otherwise the configured level."""
        return "DEBUG" if self.debug else self.log_level


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached application settings.

    Settings are automatically loaded from:
    1. .env file (if present)
    2. Environment variables
    3. Default values
    """
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for testing)."""
    get_settings.cache_clear()
