"""Optional user configuration from ~/.config/postfeed/config.toml."""

import logging
import tomllib
from pathlib import Path

logger = logging.getLogger(__name__)

CONFIG_PATH = Path.home() / ".config" / "postfeed" / "config.toml"

DEFAULTS = {
    "site_url": "",
    "username": "",
    "app_password": "",
    "cache_dir": str(Path.home() / ".cache" / "postfeed"),
    "max_posts": 250,
    "language": "",
    "expiry_field": "_expiration-date",
    "timeout": 10,
    "lock_timeout": 10,
    "watch_interval": 300,
}


def load() -> dict:
    """Load user config, falling back to defaults for missing keys."""
    config = dict(DEFAULTS)
    if CONFIG_PATH.exists():
        try:
            user_config = tomllib.loads(CONFIG_PATH.read_text())
            config.update(user_config)
        except (tomllib.TOMLDecodeError, OSError) as exc:
            logger.warning("Ignoring unreadable config %s: %s", CONFIG_PATH, exc)
    return config
