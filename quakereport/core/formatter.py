"""Display formatting - Pure functions.

This module derives the strings and severity tier shown for each
earthquake in a list. Every function is total over its input: nothing
here raises for an odd magnitude, location or timestamp.
"""

import logging
import math
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone, tzinfo
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from enum import Enum
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from quakereport.core.earthquake import EPOCH, Earthquake
from quakereport.core.status import QueryStatus


logger = logging.getLogger(__name__)


# Separator between the offset and primary location ("5km N of Cairo, Egypt")
LOCATION_SEPARATOR = " of "

# Offset shown when the location has no separator
DEFAULT_LOCATION_OFFSET = "Near the"

# Fixed English abbreviations so output does not depend on process locale
MONTH_ABBREVIATIONS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)


class MagnitudeTier(Enum):
    """Severity bucket used to pick a display color."""
    TIER_1 = 1
    TIER_2 = 2
    TIER_3 = 3
    TIER_4 = 4
    TIER_5 = 5
    TIER_6 = 6
    TIER_7 = 7
    TIER_8 = 8
    TIER_9 = 9
    TIER_10_PLUS = 10


DEFAULT_TIER_COLORS: dict[MagnitudeTier, str] = {
    MagnitudeTier.TIER_1: "#4A7BA7",
    MagnitudeTier.TIER_2: "#04B4B3",
    MagnitudeTier.TIER_3: "#10CAC9",
    MagnitudeTier.TIER_4: "#F5A623",
    MagnitudeTier.TIER_5: "#FF7D50",
    MagnitudeTier.TIER_6: "#FC6644",
    MagnitudeTier.TIER_7: "#E75F40",
    MagnitudeTier.TIER_8: "#E13A20",
    MagnitudeTier.TIER_9: "#D93218",
    MagnitudeTier.TIER_10_PLUS: "#C03823",
}


def format_magnitude(magnitude: float) -> str:
    """Format a magnitude with exactly one decimal place.

    Rounds half away from zero on the shortest decimal form of the float,
    so 10.95 renders as "11.0" and -0.05 as "-0.1".

    Pure function.
    """
    if not math.isfinite(magnitude):
        return str(magnitude)

    try:
        rounded = Decimal(repr(float(magnitude))).quantize(
            Decimal("0.1"),
            rounding=ROUND_HALF_UP,
        )
    except InvalidOperation:
        # More digits than the decimal context holds
        return f"{magnitude:.1f}"
    if rounded.is_zero():
        return "0.0"
    return f"{rounded:.1f}"


def get_magnitude_tier(magnitude: float) -> MagnitudeTier:
    """Bucket a magnitude into a display tier by its integer floor.

    Floors 0 and 1 share TIER_1, 2 through 9 map one-to-one, anything
    else (10 and above, negative, non-finite) is TIER_10_PLUS.

    Pure function.
    """
    if not math.isfinite(magnitude):
        return MagnitudeTier.TIER_10_PLUS

    floor = math.floor(magnitude)

    if floor in (0, 1):
        return MagnitudeTier.TIER_1
    if 2 <= floor <= 9:
        return MagnitudeTier(floor)
    return MagnitudeTier.TIER_10_PLUS


def get_magnitude_color(
    magnitude: float,
    colors: dict[MagnitudeTier, str] | None = None,
) -> str:
    """Resolve the display color for a magnitude.

    Pure function.

    Args:
        magnitude: Earthquake magnitude
        colors: Caller-supplied color per tier (defaults to DEFAULT_TIER_COLORS)

    Returns:
        Color value for the magnitude's tier
    """
    palette = DEFAULT_TIER_COLORS if colors is None else colors
    tier = get_magnitude_tier(magnitude)
    return palette.get(tier, DEFAULT_TIER_COLORS[tier])


def split_location(location: str) -> tuple[str, str]:
    """Split a USGS location into (offset, primary location).

    "5km N of Cairo, Egypt" -> ("5km N of", "Cairo, Egypt")
    "Pacific-Antarctic Ridge" -> ("Near the", "Pacific-Antarctic Ridge")

    Only the first separator is used, the rest stays in the primary part.

    Pure function.
    """
    if LOCATION_SEPARATOR not in location:
        return DEFAULT_LOCATION_OFFSET, location

    offset, primary = location.split(LOCATION_SEPARATOR, 1)
    return (offset + LOCATION_SEPARATOR).rstrip(), primary


def resolve_timezone(name: str | None) -> tzinfo:
    """Map a configured timezone name to a tzinfo.

    Accepts "UTC", "local" (the host's timezone) or an IANA name such as
    "America/Los_Angeles". Unknown names fall back to UTC.
    """
    if not name or name.upper() == "UTC":
        return timezone.utc

    if name.lower() == "local":
        local = datetime.now().astimezone().tzinfo
        return local if local is not None else timezone.utc

    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning("Unknown timezone %s, using UTC", name)
        return timezone.utc


def _to_datetime(time_ms: int, tz: tzinfo) -> datetime | None:
    try:
        return (EPOCH + timedelta(milliseconds=time_ms)).astimezone(tz)
    except (OverflowError, ValueError, OSError):
        return None


def format_date(time_ms: int, tz: tzinfo = timezone.utc) -> str:
    """Format an event time as a date, e.g. "Mar 3, 1984".

    Pure function. Returns an empty string for out-of-range times.
    """
    moment = _to_datetime(time_ms, tz)
    if moment is None:
        return ""
    month = MONTH_ABBREVIATIONS[moment.month - 1]
    return f"{month} {moment.day}, {moment.year}"


def format_time(time_ms: int, tz: tzinfo = timezone.utc) -> str:
    """Format an event time on a 12-hour clock, e.g. "4:30 PM".

    Pure function. Returns an empty string for out-of-range times.
    """
    moment = _to_datetime(time_ms, tz)
    if moment is None:
        return ""
    hour = moment.hour % 12 or 12
    marker = "AM" if moment.hour < 12 else "PM"
    return f"{hour}:{moment.minute:02d} {marker}"


@dataclass(frozen=True)
class ListItem:
    """Every display field for one earthquake row.

    Attributes:
        magnitude: Formatted magnitude ("3.2")
        tier: Severity tier
        color: Color for the tier
        location_offset: Offset text ("5km N of" or "Near the")
        primary_location: Primary location text
        date: Formatted date ("Mar 3, 1984")
        time: Formatted time ("4:30 PM")
        url: Event detail URL, opened when the row is selected
    """
    magnitude: str
    tier: MagnitudeTier
    color: str
    location_offset: str
    primary_location: str
    date: str
    time: str
    url: str


def format_list_item(
    earthquake: Earthquake,
    tz: tzinfo = timezone.utc,
    colors: dict[MagnitudeTier, str] | None = None,
) -> ListItem:
    """Derive all display fields for one earthquake.

    Pure function.
    """
    offset, primary = split_location(earthquake.location)
    return ListItem(
        magnitude=format_magnitude(earthquake.magnitude),
        tier=get_magnitude_tier(earthquake.magnitude),
        color=get_magnitude_color(earthquake.magnitude, colors),
        location_offset=offset,
        primary_location=primary,
        date=format_date(earthquake.time_ms, tz),
        time=format_time(earthquake.time_ms, tz),
        url=earthquake.url,
    )


STATUS_MESSAGES: dict[QueryStatus, str] = {
    QueryStatus.NO_CONNECTIVITY: "No internet connection.",
    QueryStatus.LOADED_EMPTY: "No earthquakes found.",
    QueryStatus.FETCH_ERROR: "Could not load earthquakes.",
    QueryStatus.LOADED_NONEMPTY: "",
}


def get_status_message(status: QueryStatus) -> str:
    """Get the empty-state text the display layer shows for a status.

    Pure function. A non-empty list needs no message.
    """
    return STATUS_MESSAGES.get(status, "")
