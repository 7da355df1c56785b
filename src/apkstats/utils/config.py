"""Helpers for loading the user configuration file (~/.apkstats/config.json)."""

from __future__ import annotations

import json
import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Any

CONFIG_DIR = Path.home() / ".apkstats"
CONFIG_FILE = CONFIG_DIR / "config.json"
CONFIG_ENV_VAR = "APKSTATS_CONFIG"

DEFAULT_WORKERS = 4


def get_config_path() -> Path:
    """Return the configuration file location, honouring APKSTATS_CONFIG."""

    if value := os.environ.get(CONFIG_ENV_VAR):
        return Path(value).expanduser()
    return CONFIG_FILE


@lru_cache(maxsize=1)
def load_config() -> dict[str, Any]:
    """Load configuration data from disk (cached)."""

    config_file = get_config_path()
    if not config_file.exists():
        return {}

    try:
        raw = config_file.read_text()
    except OSError:
        return {}

    try:
        data = json.loads(raw)
    except ValueError:
        return {}

    if isinstance(data, dict):
        return data

    return {}


def get_config_value(key: str, default: Any | None = None) -> Any | None:
    """Fetch a configuration value by key."""

    return load_config().get(key, default)


def get_workers() -> int:
    """Number of parallel extractions for batch runs."""

    value = get_config_value("workers", DEFAULT_WORKERS)
    if isinstance(value, int) and not isinstance(value, bool) and value > 0:
        return value
    return DEFAULT_WORKERS


def get_timeout() -> float | None:
    """Per-package extraction deadline in seconds, or None for no limit."""

    value = get_config_value("timeout")
    if isinstance(value, (int, float)) and not isinstance(value, bool) and value > 0:
        return float(value)
    return None


def get_log_level() -> str:
    """Configured log level name (defaults to WARNING)."""

    value = get_config_value("log_level")
    if isinstance(value, str) and value.upper() in logging.getLevelNamesMapping():
        return value.upper()
    return "WARNING"


def reload_config() -> None:
    """Force the cached configuration to be reloaded on next access."""

    load_config.cache_clear()
