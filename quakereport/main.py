"""Entry Point.

Loads configuration, runs one earthquake query in the background and
prints the resulting list through the display formatter. A thin
stand-in for the display layer, useful for manual runs:

    python -m quakereport.main
"""

import logging
import os
import sys

from quakereport.core.config import Config
from quakereport.core.formatter import (
    format_list_item,
    get_status_message,
    resolve_timezone,
)
from quakereport.core.status import QueryResult
from quakereport.orchestrator import EarthquakeQuery
from quakereport.shell.config_loader import load_config, load_config_from_env


# Configure logging
log_level = os.environ.get("LOG_LEVEL", "INFO").upper()
logging.basicConfig(
    level=getattr(logging, log_level, logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def _get_config() -> Config:
    """Load configuration from file or environment."""
    config_path = os.environ.get("CONFIG_PATH")

    if config_path:
        return load_config(config_path)
    elif os.environ.get("MIN_MAGNITUDE") or os.environ.get("ORDER_BY"):
        # Simple env-based config
        return load_config_from_env()
    else:
        # Try default config path
        return load_config()


def render_result(result: QueryResult, config: Config) -> list[str]:
    """Render a query result as display lines.

    Args:
        result: Result delivered by the orchestrator
        config: Configuration (timezone and tier colors)

    Returns:
        One line per earthquake, or the empty-state message
    """
    if not result.earthquakes:
        return [get_status_message(result.status)]

    tz = resolve_timezone(config.timezone)
    lines = []
    for earthquake in result.earthquakes:
        item = format_list_item(earthquake, tz, config.tier_colors)
        lines.append(
            f"{item.magnitude:>5}  {item.location_offset} {item.primary_location}  "
            f"{item.date} {item.time}  [{item.color}]"
        )
    return lines


def main() -> int:
    """Run one query and print the list.

    Returns:
        Process exit code (0 unless the fetch failed)
    """
    logger.info("Starting earthquake report")

    config = _get_config()
    query = EarthquakeQuery(config)

    query.start()
    result = query.get_result(timeout=config.request_timeout + 5)

    if result is None:
        logger.error("Earthquake query did not finish in time")
        return 1

    for line in render_result(result, config):
        print(line)

    return 0 if result.success else 1


if __name__ == "__main__":
    sys.exit(main())
