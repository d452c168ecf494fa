"""Functional Core - Pure functions with no side effects.

This module contains all business logic as pure functions:
- Earthquake feed parsing
- Display formatting (magnitude, tier, location, date, time)
- Query result models
- Configuration models and validation

All functions here are deterministic and have no I/O.
"""

from quakereport.core.earthquake import Earthquake, parse_earthquakes, parse_feed
from quakereport.core.formatter import (
    MagnitudeTier,
    format_date,
    format_list_item,
    format_magnitude,
    format_time,
    get_magnitude_tier,
    split_location,
)
from quakereport.core.status import QueryResult, QueryState, QueryStatus
from quakereport.core.config import Config, validate_config

__all__ = [
    # Earthquake
    "Earthquake",
    "parse_earthquakes",
    "parse_feed",
    # Formatter
    "MagnitudeTier",
    "format_date",
    "format_list_item",
    "format_magnitude",
    "format_time",
    "get_magnitude_tier",
    "split_location",
    # Status
    "QueryResult",
    "QueryState",
    "QueryStatus",
    # Config
    "Config",
    "validate_config",
]
