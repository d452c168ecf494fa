"""Configuration Loader - Imperative Shell.

This module handles loading configuration from YAML files and
environment variables. All I/O is contained here.

The Config model is defined in quakereport/core/config.py.
"""

import logging
import os
from pathlib import Path
from typing import Any

import yaml

from quakereport.core.config import Config, USGS_REQUEST_URL, validate_config
from quakereport.core.formatter import DEFAULT_TIER_COLORS, MagnitudeTier


logger = logging.getLogger(__name__)


# YAML keys for tier colors, e.g. tier_colors: {"1": "#4A7BA7", "10+": "#C03823"}
TIER_COLOR_KEYS = {
    **{str(tier.value): tier for tier in MagnitudeTier if tier != MagnitudeTier.TIER_10_PLUS},
    "10+": MagnitudeTier.TIER_10_PLUS,
}


def _parse_tier_colors(data: Any) -> dict[MagnitudeTier, str]:
    """Parse tier colors from config data, keeping defaults for the rest."""
    colors = dict(DEFAULT_TIER_COLORS)

    if not isinstance(data, dict):
        logger.warning("tier_colors must be a mapping, using default colors")
        return colors

    for key, value in data.items():
        tier = TIER_COLOR_KEYS.get(str(key))
        if tier is None:
            logger.warning("Ignoring unknown tier color key: %s", key)
            continue
        colors[tier] = str(value)

    return colors


def _log_validation(config: Config) -> None:
    result = validate_config(config)
    for error in result.errors:
        if error.severity == "error":
            logger.error("Config error in %s: %s", error.field, error.message)
        else:
            logger.warning("Config warning in %s: %s", error.field, error.message)


def load_config_from_dict(data: dict[str, Any]) -> Config:
    """Load configuration from a dictionary.

    Args:
        data: Configuration dictionary

    Returns:
        Parsed Config object
    """
    defaults = Config()

    config = Config(
        base_url=str(data.get("base_url", defaults.base_url)),
        min_magnitude=str(data.get("min_magnitude", defaults.min_magnitude)),
        order_by=str(data.get("order_by", defaults.order_by)),
        limit=int(data.get("limit", defaults.limit)),
        request_timeout=int(data.get("request_timeout", defaults.request_timeout)),
        timezone=str(data.get("timezone", defaults.timezone)),
        connectivity_host=str(data.get("connectivity_host", defaults.connectivity_host)),
        connectivity_port=int(data.get("connectivity_port", defaults.connectivity_port)),
        tier_colors=_parse_tier_colors(data.get("tier_colors", {})),
    )

    _log_validation(config)

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
        "Loaded config: minmag=%s, orderby=%s, limit=%d",
        config.min_magnitude,
        config.order_by,
        config.limit,
    )

    return config


def load_config_from_env() -> Config:
    """Load configuration from environment variables.

    Useful for simple deployments without a YAML file.

    Environment variables:
        USGS_BASE_URL: USGS query endpoint
        MIN_MAGNITUDE: Minimum magnitude to fetch
        ORDER_BY: Sort order ("time" or "magnitude")
        QUERY_LIMIT: Maximum number of events
        REQUEST_TIMEOUT: HTTP timeout in seconds
        DISPLAY_TIMEZONE: "UTC", "local" or an IANA timezone

    Returns:
        Config object from environment
    """
    defaults = Config()

    config = Config(
        base_url=os.environ.get("USGS_BASE_URL", USGS_REQUEST_URL),
        min_magnitude=os.environ.get("MIN_MAGNITUDE", defaults.min_magnitude),
        order_by=os.environ.get("ORDER_BY", defaults.order_by),
        limit=int(os.environ.get("QUERY_LIMIT", str(defaults.limit))),
        request_timeout=int(
            os.environ.get("REQUEST_TIMEOUT", str(defaults.request_timeout))
        ),
        timezone=os.environ.get("DISPLAY_TIMEZONE", defaults.timezone),
    )

    _log_validation(config)

    return config
