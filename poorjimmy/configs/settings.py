"""Configuration loader for Poor Jimmy.

This module centralises configuration concerns: it loads ``config.yml``,
overrides with environment variables (``.env``) and exposes globally accessible
objects the rest of the code base can rely on.
"""

import os
from pathlib import Path
from typing import Dict, Mapping, Optional

import yaml
from dotenv import find_dotenv, load_dotenv

from .schema import (
    AppConfig,
    LavalinkConfig,
    LoggingConfig,
    PlaybackConfig,
    SearchConfig,
)

# Resolve env file precedence: .env.local (dev), .env.production (prod), then .env
_base_dir = Path(__file__).resolve().parents[2]
_env_files = [".env.local", ".env.production", ".env"]
_loaded = False
for _candidate in _env_files:
    _path = _base_dir / _candidate
    if _path.exists():
        load_dotenv(_path)
        _loaded = True
        break
if not _loaded:
    dotenv_path = find_dotenv(usecwd=True)
    if dotenv_path:
        load_dotenv(dotenv_path)


def _load_yaml(path: str) -> Dict:
    """Load a YAML config file, returning an empty dict if it is blank or absent."""
    if not os.path.exists(path):
        return {}
    with open(path, "r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle)
        return data or {}


def _as_bool(raw: str) -> bool:
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _as_number(name: str, raw: str, kind=float):
    try:
        return kind(raw.strip())
    except ValueError as exc:
        raise ValueError(f"{name} must be a number, got {raw!r}") from exc


def apply_env_overrides(config: AppConfig, env: Mapping[str, str]) -> AppConfig:
    """Return ``config`` with values taken from environment variables."""
    host = env.get("LAVALINK_HOST")
    port = env.get("LAVALINK_PORT")
    pwd = env.get("LAVALINK_PASSWORD")
    https = env.get("LAVALINK_HTTPS")
    name = env.get("LAVALINK_NAME")
    region = env.get("LAVALINK_REGION")
    if host or port or pwd or https or name or region:
        config.lavalink = LavalinkConfig(
            host=host or config.lavalink.host,
            port=_as_number("LAVALINK_PORT", port, int) if port else config.lavalink.port,
            password=pwd or config.lavalink.password,
            https=_as_bool(https) if isinstance(https, str) else config.lavalink.https,
            name=name or config.lavalink.name,
            region=region or config.lavalink.region,
        )

    disconnect_minutes = env.get("AUTO_DISCONNECT_MINUTES")
    announce = env.get("ANNOUNCE_NOW_PLAYING")
    if disconnect_minutes or announce:
        config.playback = PlaybackConfig(
            auto_disconnect_minutes=(
                _as_number("AUTO_DISCONNECT_MINUTES", disconnect_minutes)
                if disconnect_minutes
                else config.playback.auto_disconnect_minutes
            ),
            announce_now_playing=(
                _as_bool(announce) if isinstance(announce, str) else config.playback.announce_now_playing
            ),
            progress_bar_length=config.playback.progress_bar_length,
        )

    search_timeout = env.get("SEARCH_TIMEOUT_SECONDS")
    if search_timeout:
        config.search = SearchConfig(
            max_results=config.search.max_results,
            timeout_seconds=_as_number("SEARCH_TIMEOUT_SECONDS", search_timeout),
        )

    log_level = env.get("LOG_LEVEL")
    if log_level:
        config.logging = LoggingConfig(level=log_level)

    return config


_raw = _load_yaml(os.getenv("CONFIG_PATH", "config.yml"))
CONFIG = apply_env_overrides(AppConfig(**_raw), os.environ)

# Absence is fatal only when the bot is started, see ``poorjimmy.main``.
DISCORD_TOKEN: Optional[str] = os.getenv("DISCORD_TOKEN") or None
