"""Earthquake data model and feed parsing - Pure functions.

This module turns the USGS GeoJSON feed into typed Earthquake objects.
A malformed feature is skipped on its own; a malformed document yields
an empty list. Nothing here raises to the caller.
"""

import json
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any


logger = logging.getLogger(__name__)


EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


@dataclass(frozen=True)
class Earthquake:
    """Immutable earthquake data model.

    Attributes:
        magnitude: Earthquake magnitude (may be negative or fractional)
        location: Raw location text, e.g. "5km N of Cairo, Egypt"
        time_ms: Event time in milliseconds since the epoch (UTC)
        url: USGS event detail URL
    """
    magnitude: float
    location: str
    time_ms: int
    url: str

    @property
    def time(self) -> datetime | None:
        """Event time as an aware UTC datetime, None if out of range."""
        try:
            return EPOCH + timedelta(milliseconds=self.time_ms)
        except OverflowError:
            return None


def _is_number(value: Any) -> bool:
    # bool is an int subclass but never a valid magnitude or time
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def parse_earthquake(feature: Any) -> Earthquake | None:
    """Parse a single GeoJSON feature into an Earthquake.

    Pure function: all four of mag, place, time and url must be present
    under ``properties`` with the right JSON type.

    Args:
        feature: GeoJSON feature dict from the USGS feed

    Returns:
        Earthquake object or None if the feature is incomplete
    """
    try:
        props = feature["properties"]
        magnitude = props["mag"]
        place = props["place"]
        time_ms = props["time"]
        url = props["url"]
    except (KeyError, TypeError, IndexError):
        return None

    if not _is_number(magnitude) or not _is_number(time_ms):
        return None

    if not isinstance(place, str) or not place:
        return None

    if not isinstance(url, str):
        return None

    # JSON numbers like 1.7e12 decode as float
    if isinstance(time_ms, float):
        if not time_ms.is_integer():
            return None
        time_ms = int(time_ms)

    return Earthquake(
        magnitude=float(magnitude),
        location=place,
        time_ms=time_ms,
        url=url,
    )


def parse_earthquakes(geojson: Any) -> list[Earthquake]:
    """Parse a decoded USGS GeoJSON document into a list of Earthquakes.

    Pure function: invalid features are skipped, the rest keep feed order.

    Args:
        geojson: Decoded GeoJSON FeatureCollection

    Returns:
        List of valid Earthquake objects in feed order
    """
    if not isinstance(geojson, dict):
        logger.warning("Feed document is not a JSON object")
        return []

    features = geojson.get("features", [])
    if not isinstance(features, list):
        logger.warning("Feed 'features' is not an array")
        return []

    earthquakes = []

    for index, feature in enumerate(features):
        earthquake = parse_earthquake(feature)
        if earthquake is None:
            logger.warning("Skipping malformed feature at index %d", index)
            continue
        earthquakes.append(earthquake)

    return earthquakes


def parse_feed(raw: bytes | str) -> list[Earthquake]:
    """Parse raw feed bytes into a list of Earthquakes.

    A document that is not valid JSON (including empty input) produces an
    empty list, the same as a feed with no events.

    Args:
        raw: Response body from the USGS API

    Returns:
        List of valid Earthquake objects in feed order
    """
    try:
        geojson = json.loads(raw)
    except (ValueError, TypeError, RecursionError) as e:
        logger.warning("Could not decode earthquake feed: %s", e)
        return []

    earthquakes = parse_earthquakes(geojson)

    logger.info("Parsed %d earthquakes from feed", len(earthquakes))

    return earthquakes
