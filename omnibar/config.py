"""
Settings loading for the Omnibar core.

Settings live in a TOML file deep-merged over built-in defaults:

    [aggregator]
    provider_timeout_ms = 300
    max_workers = 8

    [aggregator.timeouts]
    files = 800          # per-provider override, milliseconds

    [ranking]
    max_results = 50

    [ranking.weights]
    application = 1.0
    file = 0.6
    "custom:web" = 0.5

    [dispatcher]
    confirmation_ttl_s = 10

    [history]
    enabled = true
    db_path = "~/.local/share/omnibar/app_usage.db"

    [applications]
    dirs = []            # empty: the XDG application directories

    [commands]
    path = "~/.config/omnibar/commands.toml"

Lookup order: explicit path, $OMNIBAR_SETTINGS, ~/.config/omnibar/settings.toml.
"""

import os
from pathlib import Path
from typing import Any, Dict, Optional

import toml
from loguru import logger

from omnibar.errors import ConfigError
from omnibar.search.ranker import DEFAULT_PRIORITIES, RankingConfig

DEFAULT_SETTINGS_PATH = Path.home() / ".config" / "omnibar" / "settings.toml"

DEFAULTS = {
    "aggregator": {
        "provider_timeout_ms": 300,
        "max_workers": 8,
        "timeouts": {},
    },
    "ranking": {
        "max_results": 50,
        "default_weight": 1.0,
        "weights": {},
        "priorities": {},
    },
    "dispatcher": {
        "confirmation_ttl_s": 10,
    },
    "search": {
        "max_results": 30,
        "fuzzy_threshold": 50,
    },
    "files": {
        "roots": ["~", "~/Documents", "~/Desktop", "~/Downloads"],
        "max_depth": 3,
        "max_results": 20,
    },
    "web_search": {
        "min_query_length": 3,
    },
    "history": {
        "enabled": True,
        "db_path": "~/.local/share/omnibar/app_usage.db",
    },
    "applications": {
        "dirs": [],
    },
    "commands": {
        "path": "~/.config/omnibar/commands.toml",
    },
}


def settings_path() -> Path:
    env = os.environ.get("OMNIBAR_SETTINGS")
    return Path(env).expanduser() if env else DEFAULT_SETTINGS_PATH


def load_settings(path: Optional[Path | str] = None) -> Dict[str, Any]:
    """
    Load settings from TOML, falling back to defaults.

    A missing file is normal; an unreadable one is logged and ignored.

    Returns:
        Dictionary containing settings with defaults applied
    """
    path = Path(path) if path is not None else settings_path()

    if not path.exists():
        logger.debug(f"Settings file not found at {path}, using defaults")
        return _deep_merge(DEFAULTS, {})

    try:
        loaded = toml.load(path)
    except (OSError, toml.TomlDecodeError) as e:
        logger.warning(f"Could not load settings from {path}: {e}. Using defaults")
        return _deep_merge(DEFAULTS, {})

    return _deep_merge(DEFAULTS, loaded)


def _deep_merge(base: Dict, override: Dict) -> Dict:
    """
    Deep merge two dictionaries.

    Args:
        base: Base dictionary with defaults
        override: Dictionary with overrides

    Returns:
        Merged dictionary (override takes precedence); neither input is mutated
    """
    result = {}
    for key, value in base.items():
        result[key] = _deep_merge(value, {}) if isinstance(value, dict) else value

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value

    return result


def ranking_config(settings: Dict[str, Any]) -> RankingConfig:
    """Build a validated RankingConfig from the [ranking] section."""
    section = settings["ranking"]
    try:
        weights = {str(k): float(v) for k, v in section.get("weights", {}).items()}
        priorities = dict(DEFAULT_PRIORITIES)
        priorities.update({str(k): int(v) for k, v in section.get("priorities", {}).items()})
        max_results = section.get("max_results")
        return RankingConfig(
            weights=weights,
            priorities=priorities,
            default_weight=float(section.get("default_weight", 1.0)),
            max_results=int(max_results) if max_results else None,
        )
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid [ranking] settings: {e}") from e


def provider_timeouts(settings: Dict[str, Any]) -> tuple[float, dict[str, float]]:
    """Return (default timeout, per-provider overrides) in seconds."""
    section = settings["aggregator"]
    default = _positive_ms(section["provider_timeout_ms"], "provider_timeout_ms")
    overrides = {
        name: _positive_ms(ms, f"timeouts.{name}")
        for name, ms in section.get("timeouts", {}).items()
    }
    return default, overrides


def confirmation_ttl(settings: Dict[str, Any]) -> float:
    ttl = settings["dispatcher"]["confirmation_ttl_s"]
    if not isinstance(ttl, (int, float)) or ttl <= 0:
        raise ConfigError(f"confirmation_ttl_s must be positive, got {ttl!r}")
    return float(ttl)


def _positive_ms(value, name: str) -> float:
    if not isinstance(value, (int, float)) or value <= 0:
        raise ConfigError(f"{name} must be a positive number of milliseconds, got {value!r}")
    return value / 1000
