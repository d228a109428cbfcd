"""Configuration file support."""

import json
import logging
from pathlib import Path

logger = logging.getLogger(__name__)

CONFIG_DIR = Path.home() / ".config" / "ride-analyzer"
CONFIG_PATH = CONFIG_DIR / "ride-analyzer.json"
LOCAL_CONFIG_PATH = Path("ride-analyzer.json")

# Default values for settings not present in any config file
DEFAULTS = {
    "rider_weight": 75.0,  # kg
    "max_heart_rate": 190,  # bpm
}


def load_config(paths: list[Path] | None = None) -> dict:
    """Load configuration from config files.

    Merges config from global and local files:
    1. ~/.config/ride-analyzer/ride-analyzer.json (global, loaded first)
    2. ./ride-analyzer.json (local, overrides global)

    Files that are missing are ignored; unreadable or malformed ones are
    skipped with a warning.

    Returns:
        Dict with merged config values, empty dict if no files exist.
    """
    if paths is None:
        paths = [CONFIG_PATH, LOCAL_CONFIG_PATH]

    config = {}
    for config_path in paths:
        if not config_path.exists():
            continue
        try:
            with config_path.open() as f:
                config.update(json.load(f))
        except (json.JSONDecodeError, OSError) as e:
            logger.warning("Ignoring config file %s: %s", config_path, e)
    return config


def get_setting(config: dict, key: str):
    """Return a config value, falling back to DEFAULTS."""
    return config.get(key, DEFAULTS[key])
