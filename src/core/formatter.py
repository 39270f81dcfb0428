"""Text formatting - Pure functions.

This module formats earthquake fields and status messages for display.
All functions are pure with no side effects.
"""

from datetime import datetime, tzinfo

from src.core.earthquake import Earthquake
from src.core.severity import is_known_magnitude


TIME_OF_DAY_FORMAT = "%H:%M:%S"
DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"

UNKNOWN_MAGNITUDE = "N/A"

STATUS_REFRESHING = "Refreshing data..."
STATUS_ERROR = "Error fetching data. Try again."
STATUS_AUTO_DISABLED = "Auto-refresh disabled"


def to_display_time(time: datetime, tz: tzinfo | None = None) -> datetime:
    """Convert a timestamp to the display timezone.

    Pure function. ``tz=None`` means the system local timezone.
    """
    return time.astimezone(tz)


def format_time_of_day(time: datetime, tz: tzinfo | None = None) -> str:
    """Format a timestamp as a chart category label."""
    return to_display_time(time, tz).strftime(TIME_OF_DAY_FORMAT)


def format_datetime(time: datetime, tz: tzinfo | None = None) -> str:
    """Format a timestamp as an absolute date and time."""
    return to_display_time(time, tz).strftime(DATETIME_FORMAT)


def format_magnitude(magnitude: float | None) -> str:
    """Format a magnitude, falling back to N/A when unknown.

    Pure function.
    """
    if not is_known_magnitude(magnitude):
        return UNKNOWN_MAGNITUDE
    return f"{magnitude:g}"


def format_depth(depth_km: float) -> str:
    """Format a depth with its unit suffix."""
    return f"{depth_km:g} km"


def format_popup(earthquake: Earthquake, tz: tzinfo | None = None) -> str:
    """Format the info popup text of a map marker.

    Pure function.

    Args:
        earthquake: Earthquake to describe
        tz: Display timezone (None for local)

    Returns:
        Multi-line popup text
    """
    return "\n".join([
        f"Location: {earthquake.place}",
        f"Magnitude: {format_magnitude(earthquake.magnitude)}",
        f"Depth: {format_depth(earthquake.depth_km)}",
        f"Time: {format_datetime(earthquake.time, tz)}",
    ])


def format_last_updated(now: datetime) -> str:
    """Status message after a successful refresh."""
    return f"Last updated: {now.strftime(TIME_OF_DAY_FORMAT)}"


def format_auto_refresh_enabled(interval_seconds: float) -> str:
    """Status message when auto-refresh is switched on."""
    return f"Auto-refresh enabled (every {interval_seconds:g} seconds)"
