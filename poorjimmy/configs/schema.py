"""Typed configuration models used throughout the project."""

from typing import Optional

from pydantic import BaseModel, field_validator


class LavalinkConfig(BaseModel):
    """Connection settings for the Lavalink node."""

    host: str = "127.0.0.1"
    port: int = 2333
    password: str = "youshallnotpass"
    https: bool = False
    name: str = "main"
    region: str = "us"

    @field_validator("host", "password", "name", "region", mode="before")
    @classmethod
    def _strip_strings(cls, value: str):
        """Ensure configuration strings do not accidentally contain whitespace."""
        if isinstance(value, str):
            return value.strip()
        return value


class BotConfig(BaseModel):
    """Runtime behaviour toggles for the bot."""

    sync_commands_on_start: bool = True
    shard_count: Optional[int] = None
    presence_text: str = "/play"


class ThemeConfig(BaseModel):
    """Colours applied to embeds."""

    color_success: int = 0x1F8B4C
    color_error: int = 0x992D22
    color_info: int = 0x3498DB
    footer_text: Optional[str] = None
    footer_icon_url: Optional[str] = None


class PlaybackConfig(BaseModel):
    """Queue lifecycle and announcement behaviour."""

    auto_disconnect_minutes: float = 5.0
    announce_now_playing: bool = True
    progress_bar_length: int = 20

    @field_validator("auto_disconnect_minutes")
    @classmethod
    def _non_negative_delay(cls, value: float) -> float:
        if value < 0:
            raise ValueError("auto_disconnect_minutes must be >= 0")
        return value

    @field_validator("progress_bar_length")
    @classmethod
    def _non_negative_length(cls, value: int) -> int:
        if value < 0:
            raise ValueError("progress_bar_length must be >= 0")
        return value

    @property
    def auto_disconnect_seconds(self) -> float:
        return self.auto_disconnect_minutes * 60


class SearchConfig(BaseModel):
    """Settings for yt-dlp searches."""

    max_results: int = 5
    timeout_seconds: float = 30.0

    @field_validator("max_results")
    @classmethod
    def _clamp_results(cls, value: int) -> int:
        # A single action row holds at most five buttons.
        return max(1, min(5, value))


class LoggingConfig(BaseModel):
    """Root logger settings."""

    level: str = "INFO"

    @field_validator("level", mode="before")
    @classmethod
    def _upper(cls, value: str):
        if isinstance(value, str):
            return value.strip().upper()
        return value


class AppConfig(BaseModel):
    """Root configuration object loaded from YAML."""

    bot: BotConfig = BotConfig()
    lavalink: LavalinkConfig = LavalinkConfig()
    theme: ThemeConfig = ThemeConfig()
    playback: PlaybackConfig = PlaybackConfig()
    search: SearchConfig = SearchConfig()
    logging: LoggingConfig = LoggingConfig()
