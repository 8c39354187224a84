"""Utility for configuring project wide logging behaviour."""

import logging
import sys

from poorjimmy.configs.settings import CONFIG


def setup_logging():
    """Initialise logging handlers and adjust default noisy loggers."""
    fmt = "[%(asctime)s] %(levelname)s:%(name)s: %(message)s"
    level = logging.getLevelName(CONFIG.logging.level)
    if not isinstance(level, int):
        level = logging.INFO
    logging.basicConfig(
        level=level,
        format=fmt,
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    logging.getLogger("discord").setLevel(logging.INFO)
    # The Lavalink client is chatty about websocket frames at debug level.
    logging.getLogger("lavalink").setLevel(logging.WARNING)
