"""Severity classification - Pure functions.

Every view colors and sizes events the same way. The thresholds and the
tier styles live here so the chart, map and table cannot drift apart.
"""

import math
from dataclasses import dataclass
from enum import Enum


HIGH_THRESHOLD = 6.0
MEDIUM_THRESHOLD = 4.5

# Marker radius in pixels per magnitude unit
MARKER_SCALE = 3.0
MIN_MARKER_RADIUS = 2.0


class SeverityTier(str, Enum):
    """Magnitude-based severity tier."""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


@dataclass(frozen=True)
class CellStyle:
    """Style hint for a table cell.

    Attributes:
        color: CSS color name, None for the default color
        bold: Whether the text is bold
    """
    color: str | None = None
    bold: bool = False


@dataclass(frozen=True)
class TierStyle:
    """Visual style shared by all views for one tier.

    Attributes:
        chart_color: RGBA fill for the magnitude bar
        marker_color: Hex fill for the map marker
        cell_style: Style of the magnitude cell in the table
    """
    chart_color: str
    marker_color: str
    cell_style: CellStyle


TIER_STYLES: dict[SeverityTier, TierStyle] = {
    SeverityTier.HIGH: TierStyle(
        chart_color="rgba(255, 0, 0, 0.7)",
        marker_color="#ff0000",
        cell_style=CellStyle(color="red", bold=True),
    ),
    SeverityTier.MEDIUM: TierStyle(
        chart_color="rgba(255, 165, 0, 0.7)",
        marker_color="#ffa500",
        cell_style=CellStyle(color="orange"),
    ),
    SeverityTier.LOW: TierStyle(
        chart_color="rgba(0, 123, 255, 0.7)",
        marker_color="#007bff",
        cell_style=CellStyle(),
    ),
}


def is_known_magnitude(magnitude: float | None) -> bool:
    """Return True if the magnitude is a finite number."""
    if magnitude is None or isinstance(magnitude, bool):
        return False
    try:
        return math.isfinite(magnitude)
    except TypeError:
        return False


def classify(magnitude: float | None) -> SeverityTier:
    """Classify a magnitude into a severity tier.

    Pure function. Unknown magnitudes are LOW.
    """
    if not is_known_magnitude(magnitude):
        return SeverityTier.LOW
    if magnitude >= HIGH_THRESHOLD:
        return SeverityTier.HIGH
    if magnitude >= MEDIUM_THRESHOLD:
        return SeverityTier.MEDIUM
    return SeverityTier.LOW


def get_tier_style(tier: SeverityTier) -> TierStyle:
    """Get the shared style for a tier."""
    return TIER_STYLES[tier]


def get_marker_radius(magnitude: float | None) -> float:
    """Determine marker radius based on magnitude.

    Pure function. Unknown, zero and negative magnitudes get the minimum
    visible radius.

    Args:
        magnitude: Earthquake magnitude

    Returns:
        Marker radius in pixels
    """
    if not is_known_magnitude(magnitude):
        return MIN_MARKER_RADIUS
    return max(magnitude * MARKER_SCALE, MIN_MARKER_RADIUS)
