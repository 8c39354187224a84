"""
Tests for configuration schema validation (poorjimmy/configs/schema.py).
Ensures default values, field validators and AppConfig parsing are correct.
"""

import pytest
from pydantic import ValidationError

from poorjimmy.configs.schema import (
    AppConfig,
    LavalinkConfig,
    LoggingConfig,
    PlaybackConfig,
    SearchConfig,
    ThemeConfig,
)


# ─── LavalinkConfig ────────────────────────────────────────────────────────────

class TestLavalinkConfig:
    def test_defaults(self):
        cfg = LavalinkConfig()
        assert cfg.port == 2333
        assert cfg.https is False
        assert cfg.name == "main"

    def test_strings_are_stripped(self):
        cfg = LavalinkConfig(host="  lavalink.local \n", password=" secret ")
        assert cfg.host == "lavalink.local"
        assert cfg.password == "secret"


# ─── PlaybackConfig ────────────────────────────────────────────────────────────

class TestPlaybackConfig:
    def test_default_disconnect_is_five_minutes(self):
        cfg = PlaybackConfig()
        assert cfg.auto_disconnect_minutes == 5.0
        assert cfg.auto_disconnect_seconds == 300

    def test_fractional_minutes(self):
        assert PlaybackConfig(auto_disconnect_minutes=0.5).auto_disconnect_seconds == 30

    def test_negative_delay_rejected(self):
        with pytest.raises(ValidationError):
            PlaybackConfig(auto_disconnect_minutes=-1)

    def test_negative_bar_length_rejected(self):
        with pytest.raises(ValidationError):
            PlaybackConfig(progress_bar_length=-5)


# ─── SearchConfig ──────────────────────────────────────────────────────────────

class TestSearchConfig:
    def test_defaults(self):
        cfg = SearchConfig()
        assert cfg.timeout_seconds == 30.0
        assert cfg.max_results == 5

    @pytest.mark.parametrize("raw,expected", [(0, 1), (3, 3), (12, 5)])
    def test_max_results_clamped(self, raw, expected):
        assert SearchConfig(max_results=raw).max_results == expected


# ─── Theme / logging ──────────────────────────────────────────────────────────

def test_theme_colours():
    theme = ThemeConfig()
    assert theme.color_success == 0x1F8B4C
    assert theme.color_error == 0x992D22
    assert theme.color_info == 0x3498DB


def test_log_level_uppercased():
    assert LoggingConfig(level=" debug ").level == "DEBUG"


# ─── AppConfig ─────────────────────────────────────────────────────────────────

class TestAppConfig:
    def test_empty_mapping_uses_defaults(self):
        cfg = AppConfig(**{})
        assert cfg.bot.presence_text == "/play"
        assert cfg.playback.announce_now_playing is True

    def test_nested_sections(self):
        cfg = AppConfig(
            playback={"auto_disconnect_minutes": 2},
            lavalink={"host": "node", "port": 443, "https": True},
        )
        assert cfg.playback.auto_disconnect_seconds == 120
        assert cfg.lavalink.https is True
        assert cfg.lavalink.port == 443
