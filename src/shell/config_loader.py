"""Configuration Loader - Imperative Shell.

This module handles loading configuration from YAML files and
environment variables. All I/O is contained here.

The Config model is defined in src/core/config.py to avoid information
leakage between layers.
"""

import logging
import os
from pathlib import Path
from typing import Any

import yaml

from src.core.config import Config, validate_config


logger = logging.getLogger(__name__)


_TRUE_VALUES = {"1", "true", "yes", "on"}


def _resolve_value(value: Any) -> Any:
    """Resolve a ${VAR} environment placeholder.

    Non-string values and plain strings are returned unchanged. An unset
    variable leaves the placeholder in place.
    """
    if not isinstance(value, str):
        return value

    if value.startswith("${") and value.endswith("}"):
        var_name = value[2:-1]
        env_value = os.environ.get(var_name)
        if env_value:
            return env_value
        logger.warning("Environment variable %s not set", var_name)

    return value


def _parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in _TRUE_VALUES


def _parse_magnitude(value: Any) -> str:
    """Normalize a magnitude level; YAML turns 2.5 into a float."""
    if isinstance(value, float):
        return f"{value:.1f}"
    return str(value).strip()


def load_config_from_dict(data: dict[str, Any]) -> Config:
    """Load configuration from a dictionary.

    This is a pure-ish function (only env var expansion has side effects).

    Args:
        data: Configuration dictionary

    Returns:
        Parsed Config object
    """
    defaults = Config()
    data = {key: _resolve_value(value) for key, value in data.items()}

    config = Config(
        feed_base_url=str(data.get("feed_base_url", defaults.feed_base_url)),
        time_window=str(data.get("time_window", defaults.time_window)).strip().lower(),
        min_magnitude=_parse_magnitude(data.get("min_magnitude", defaults.min_magnitude)),
        refresh_interval_seconds=float(
            data.get("refresh_interval_seconds", defaults.refresh_interval_seconds)
        ),
        auto_refresh=_parse_bool(data.get("auto_refresh", defaults.auto_refresh)),
        request_timeout_seconds=float(
            data.get("request_timeout_seconds", defaults.request_timeout_seconds)
        ),
        chart_limit=int(data.get("chart_limit", defaults.chart_limit)),
        table_limit=int(data.get("table_limit", defaults.table_limit)),
        map_width=int(data.get("map_width", defaults.map_width)),
        map_height=int(data.get("map_height", defaults.map_height)),
        tile_url=str(data.get("tile_url", defaults.tile_url)),
        status_pulse_seconds=float(
            data.get("status_pulse_seconds", defaults.status_pulse_seconds)
        ),
        output_dir=str(data.get("output_dir", defaults.output_dir)),
    )

    result = validate_config(config)
    for error in result.errors:
        log = logger.error if error.severity == "error" else logger.warning
        log("Config %s: %s", error.field, error.message)

    return config


def load_config(config_path: str | Path | None = None) -> Config:
    """Load configuration from a YAML file.

    This method performs file I/O.

    Args:
        config_path: Path to YAML config file.
                    If None, uses CONFIG_PATH env var or default.

    Returns:
        Parsed Config object

    Raises:
        yaml.YAMLError: If config file is invalid YAML
    """
    if config_path is None:
        config_path = os.environ.get("CONFIG_PATH", "config/config.yaml")

    path = Path(config_path)

    logger.info("Loading configuration from %s", path)

    if not path.exists():
        logger.warning("Config file not found: %s, using defaults", path)
        return Config()

    with open(path, "r") as f:
        data = yaml.safe_load(f)

    if data is None:
        logger.warning("Config file is empty, using defaults")
        return Config()

    config = load_config_from_dict(data)

    logger.info(
        "Loaded config: %s_%s feed, refresh every %.1fs, auto-refresh %s",
        config.min_magnitude,
        config.time_window,
        config.refresh_interval_seconds,
        "on" if config.auto_refresh else "off",
    )

    return config


def load_config_from_env() -> Config:
    """Load configuration from environment variables.

    Useful for simple deployments without a YAML file.

    Environment variables:
        FEED_BASE_URL: Summary feed base URL
        TIME_WINDOW: hour, day, week or month
        MIN_MAGNITUDE: Feed magnitude level (all, 1.0, 2.5, 4.5, significant)
        REFRESH_INTERVAL_SECONDS: Auto-refresh period
        AUTO_REFRESH: Start with auto-refresh enabled
        OUTPUT_DIR: Directory for exported views

    Returns:
        Config object from environment
    """
    env_keys = {
        "FEED_BASE_URL": "feed_base_url",
        "TIME_WINDOW": "time_window",
        "MIN_MAGNITUDE": "min_magnitude",
        "REFRESH_INTERVAL_SECONDS": "refresh_interval_seconds",
        "AUTO_REFRESH": "auto_refresh",
        "OUTPUT_DIR": "output_dir",
    }

    data = {
        key: os.environ[env_name]
        for env_name, key in env_keys.items()
        if os.environ.get(env_name)
    }

    return load_config_from_dict(data)
