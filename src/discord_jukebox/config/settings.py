"""Application Settings and Configuration

Pydantic-based settings management using environment variables.
Settings are loaded from environment variables with support for .env files,
type validation, and sensible defaults. All settings are frozen and immutable
after initialization.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Annotated, Literal

from pydantic import AliasChoices, BaseModel, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from ..domain.shared.constants import AudioConstants, LimitConstants, TimeConstants
from ..domain.shared.messages import ErrorMessages
from ..domain.shared.types import (
    MAX_VOLUME,
    MIN_VOLUME,
    PageSize,
    PlaylistLimit,
    SearchLimit,
    TimeoutSeconds,
)
from ..domain.shared.validators import parse_snowflake_list, validate_optional_snowflake

SnowflakeTuple = Annotated[tuple[int, ...], NoDecode]


class DiscordSettings(BaseModel):
    """Discord bot configuration."""

    model_config = SettingsConfigDict(frozen=True, populate_by_name=True)

    token: SecretStr = Field(
        default=SecretStr(""), validation_alias=AliasChoices("token", "bot_token", "discord_token")
    )
    owner_ids: SnowflakeTuple = Field(
        default_factory=tuple, validation_alias=AliasChoices("owner_ids", "owners", "owner_id")
    )
    dj_role_id: int | None = Field(
        default=None, validation_alias=AliasChoices("dj_role_id", "dj_role")
    )
    test_guild_ids: SnowflakeTuple = Field(
        default_factory=tuple, validation_alias=AliasChoices("test_guild_ids", "test_guilds")
    )
    sync_on_startup: bool = True

    @field_validator("owner_ids", "test_guild_ids", mode="before")
    @classmethod
    def validate_snowflake_ids(cls, v: object) -> tuple[int, ...]:
        """Validate Discord snowflake IDs given as a list or comma-separated string."""
        return parse_snowflake_list(v)

    @field_validator("dj_role_id", mode="before")
    @classmethod
    def validate_dj_role_id(cls, v: object) -> int | None:
        if v is None or v == "":
            return None
        if isinstance(v, str):
            v = int(v.strip())
        return validate_optional_snowflake(v)  # type: ignore[arg-type]

    def is_owner(self, user_id: int) -> bool:
        return user_id in self.owner_ids


class AudioSettings(BaseModel):
    """Audio playback and resolution configuration."""

    model_config = SettingsConfigDict(frozen=True, populate_by_name=True)

    default_volume: float = Field(
        default=AudioConstants.DEFAULT_VOLUME, ge=MIN_VOLUME, le=MAX_VOLUME
    )
    ffmpeg_options: dict[str, str] = Field(
        default_factory=lambda: {
            "before_options": AudioConstants.FFMPEG_BEFORE_OPTIONS_DEFAULT,
            "options": AudioConstants.FFMPEG_OPTIONS_DEFAULT,
        }
    )
    ytdlp_format: str = AudioConstants.YTDLP_FORMAT_DEFAULT
    playlist_limit: PlaylistLimit = LimitConstants.PLAYLIST_LIMIT
    search_limit: SearchLimit = LimitConstants.SEARCH_RESULTS


class SessionSettings(BaseModel):
    """Guild session lifecycle configuration."""

    model_config = SettingsConfigDict(frozen=True, populate_by_name=True)

    idle_timeout_seconds: TimeoutSeconds = Field(
        default=TimeConstants.IDLE_DISCONNECT_SECONDS,
        validation_alias=AliasChoices("idle_timeout_seconds", "idle_timeout"),
    )


class InteractionSettings(BaseModel):
    """Timeouts and page sizes for interactive messages."""

    model_config = SettingsConfigDict(frozen=True)

    search_timeout_seconds: TimeoutSeconds = TimeConstants.SEARCH_SELECT_TIMEOUT
    queue_timeout_seconds: TimeoutSeconds = TimeConstants.QUEUE_PAGINATION_TIMEOUT
    queue_page_size: PageSize = LimitConstants.QUEUE_PAGE_SIZE


class SpotifySettings(BaseModel):
    """Spotify Web API client-credentials configuration."""

    model_config = SettingsConfigDict(frozen=True, populate_by_name=True)

    client_id: str = Field(
        default="", validation_alias=AliasChoices("client_id", "spotify_client_id")
    )
    client_secret: SecretStr = Field(
        default=SecretStr(""),
        validation_alias=AliasChoices("client_secret", "spotify_client_secret"),
    )

    @property
    def enabled(self) -> bool:
        return bool(self.client_id and self.client_secret.get_secret_value())


class Settings(BaseSettings):
    """Application settings container.

    Automatically loads configuration from environment variables.

    Environment variable naming:
    - ENVIRONMENT, DEBUG, LOG_LEVEL (top-level)
    - DISCORD__TOKEN, DISCORD__OWNER_IDS, DISCORD__DJ_ROLE_ID, ...
    - AUDIO__DEFAULT_VOLUME, AUDIO__PLAYLIST_LIMIT, ...
    - SESSION__IDLE_TIMEOUT_SECONDS
    - INTERACTION__SEARCH_TIMEOUT_SECONDS, INTERACTION__QUEUE_PAGE_SIZE, ...
    - SPOTIFY__CLIENT_ID, SPOTIFY__CLIENT_SECRET

    ID lists accept comma-separated integers.
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

    discord: DiscordSettings = Field(default_factory=DiscordSettings)
    audio: AudioSettings = Field(default_factory=AudioSettings)
    session: SessionSettings = Field(default_factory=SessionSettings)
    interaction: InteractionSettings = Field(default_factory=InteractionSettings)
    spotify: SpotifySettings = Field(default_factory=SpotifySettings)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(ErrorMessages.INVALID_LOG_LEVEL.format(level=v, valid_levels=valid_levels))
        return v_upper

    def require_token(self) -> str:
        """Return the bot token, raising if it is not configured."""
        token = self.discord.token.get_secret_value()
        if not token:
            raise ValueError(ErrorMessages.DISCORD_TOKEN_REQUIRED)
        return token


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
