"""Earthquake data models and parsing - Pure functions.

This module handles parsing USGS GeoJSON data into typed Earthquake objects.
All functions are pure with no side effects.
"""

import math
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from src.core.errors import ParseFailure


@dataclass(frozen=True)
class Earthquake:
    """Immutable earthquake data model.

    Attributes:
        id: Unique USGS event ID
        place: Human-readable location description
        magnitude: Earthquake magnitude, None when the feed reports null
        depth_km: Depth in kilometers
        time: Event timestamp (UTC)
        latitude: Epicenter latitude
        longitude: Epicenter longitude
        url: USGS event detail URL
        felt: Number of "felt" reports (optional)
        alert: PAGER alert level (green/yellow/orange/red) (optional)
        tsunami: Whether tsunami warning was issued
        mag_type: Magnitude type (e.g., 'ml', 'md', 'mb')
    """
    id: str
    place: str
    magnitude: float | None
    depth_km: float
    time: datetime
    latitude: float
    longitude: float
    url: str = ""
    felt: int | None = None
    alert: str | None = None
    tsunami: bool = False
    mag_type: str = "ml"

    @property
    def coordinates(self) -> tuple[float, float]:
        """Return (latitude, longitude) tuple."""
        return (self.latitude, self.longitude)


def parse_earthquake(feature: dict[str, Any]) -> Earthquake | None:
    """Parse a single GeoJSON feature into an Earthquake.

    Pure function: takes raw dict, returns typed Earthquake or None if invalid.
    A null magnitude is kept; events without a time or a full, finite
    (longitude, latitude, depth) triple are dropped.

    Args:
        feature: GeoJSON feature dict from the USGS feed

    Returns:
        Earthquake object or None if parsing fails
    """
    try:
        props = feature.get("properties") or {}
        geometry = feature.get("geometry") or {}
        coords = geometry.get("coordinates") or []

        if len(coords) < 3:
            return None

        # USGS uses milliseconds since epoch
        time_ms = props.get("time")
        if time_ms is None:
            return None

        event_time = datetime.fromtimestamp(time_ms / 1000, tz=timezone.utc)

        longitude, latitude, depth_km = (float(c) for c in coords[:3])
        # NaN and Infinity decode from JSON but cannot be placed on a map
        if not all(math.isfinite(v) for v in (longitude, latitude, depth_km)):
            return None

        magnitude = props.get("mag")

        return Earthquake(
            id=str(feature.get("id", "")),
            place=props.get("place") or "Unknown location",
            magnitude=float(magnitude) if magnitude is not None else None,
            depth_km=depth_km,
            time=event_time,
            longitude=longitude,
            latitude=latitude,
            url=props.get("url") or "",
            felt=props.get("felt"),
            alert=props.get("alert"),
            tsunami=bool(props.get("tsunami", 0)),
            mag_type=props.get("magType") or "ml",
        )
    except (AttributeError, KeyError, TypeError, ValueError, OverflowError, OSError):
        return None


def parse_earthquakes(geojson: Any) -> list[Earthquake]:
    """Parse a USGS GeoJSON FeatureCollection into a list of Earthquakes.

    Pure function: filters out invalid features and keeps feed order.
    Ordering for display is the transformer's job.

    Args:
        geojson: Decoded JSON body of the feed response

    Returns:
        List of valid Earthquake objects

    Raises:
        ParseFailure: If the payload is not a FeatureCollection-like mapping
    """
    if not isinstance(geojson, dict):
        raise ParseFailure(f"Expected a JSON object, got {type(geojson).__name__}")

    features = geojson.get("features")
    if not isinstance(features, list):
        raise ParseFailure("Payload has no 'features' list")

    earthquakes = []

    for feature in features:
        if not isinstance(feature, dict):
            continue
        earthquake = parse_earthquake(feature)
        if earthquake is not None:
            earthquakes.append(earthquake)

    return earthquakes
