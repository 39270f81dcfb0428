"""Refresh query and feed URL construction - Pure functions.

The USGS summary feeds are static GeoJSON files keyed by magnitude level
and time window, e.g. ``2.5_day.geojson`` or ``all_hour.geojson``.
"""

from dataclasses import dataclass
from enum import Enum


# USGS GeoJSON summary feed base URL
USGS_FEED_BASE = "https://earthquake.usgs.gov/earthquakes/feed/v1.0/summary"

DEFAULT_MIN_MAGNITUDE = "2.5"

# The hour window is always served from the unfiltered feed
HOUR_FEED_LEVEL = "all"


class TimeWindow(str, Enum):
    """Time windows published by the summary feed."""
    HOUR = "hour"
    DAY = "day"
    WEEK = "week"
    MONTH = "month"

    @classmethod
    def parse(cls, value: "str | TimeWindow") -> "TimeWindow":
        """Parse a selector value, falling back to DAY when unrecognized."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.DAY


@dataclass(frozen=True)
class RefreshQuery:
    """Immutable snapshot of the user-controlled feed parameters.

    Attributes:
        time_window: Time window selector value
        min_magnitude: Magnitude level of the feed ("all", "1.0", "2.5",
            "4.5" or "significant")
    """
    time_window: TimeWindow = TimeWindow.DAY
    min_magnitude: str = DEFAULT_MIN_MAGNITUDE


def make_query(time_window: str, min_magnitude: str | float) -> RefreshQuery:
    """Build a RefreshQuery from raw selector values.

    Pure function. No validation beyond the time window fallback.
    """
    return RefreshQuery(
        time_window=TimeWindow.parse(time_window),
        min_magnitude=str(min_magnitude).strip(),
    )


def build_feed_url(query: RefreshQuery, base_url: str = USGS_FEED_BASE) -> str:
    """Build the summary feed URL for a query.

    Pure function.

    Args:
        query: Refresh query
        base_url: Feed base URL (no trailing slash required)

    The hour window ignores the magnitude level and always requests
    ``all_hour.geojson``.

    Returns:
        Full URL of the GeoJSON feed
    """
    window = TimeWindow.parse(query.time_window)
    level = HOUR_FEED_LEVEL if window is TimeWindow.HOUR else query.min_magnitude
    return f"{base_url.rstrip('/')}/{level}_{window.value}.geojson"
