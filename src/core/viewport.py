"""Map viewport calculations - Pure functions.

This module computes the center and zoom of a Web Mercator map that
shows a set of points. The actual image rendering (I/O) is handled by
the shell layer.
"""

import math
from dataclasses import dataclass


TILE_SIZE = 256
MAX_LATITUDE = 85.0511
MIN_ZOOM = 1
MAX_ZOOM = 10


@dataclass(frozen=True)
class Viewport:
    """Immutable map viewport.

    Attributes:
        latitude: Center latitude
        longitude: Center longitude
        zoom: Zoom level
    """
    latitude: float
    longitude: float
    zoom: int


# World view shown before the first successful refresh
DEFAULT_VIEWPORT = Viewport(latitude=20.0, longitude=0.0, zoom=2)


def _clamp_latitude(latitude: float) -> float:
    return max(-MAX_LATITUDE, min(MAX_LATITUDE, latitude))


def lon_to_x(longitude: float, zoom: int) -> float:
    """Project a longitude to a Web Mercator pixel x at a zoom level."""
    return (longitude + 180.0) / 360.0 * TILE_SIZE * 2 ** zoom


def lat_to_y(latitude: float, zoom: int) -> float:
    """Project a latitude to a Web Mercator pixel y at a zoom level."""
    lat_rad = math.radians(_clamp_latitude(latitude))
    merc = math.log(math.tan(lat_rad) + 1 / math.cos(lat_rad))
    return (1 - merc / math.pi) / 2 * TILE_SIZE * 2 ** zoom


def y_to_lat(y: float, zoom: int) -> float:
    """Inverse of lat_to_y."""
    n = math.pi - 2 * math.pi * y / (TILE_SIZE * 2 ** zoom)
    return math.degrees(math.atan(math.sinh(n)))


def fit_viewport(
    points: list[tuple[float, float]],
    width: int,
    height: int,
    padding: int = 20,
    min_zoom: int = MIN_ZOOM,
    max_zoom: int = MAX_ZOOM,
) -> Viewport:
    """Compute the tightest viewport containing every point.

    Pure function.

    Args:
        points: (latitude, longitude) pairs, at least one
        width: Image width in pixels
        height: Image height in pixels
        padding: Margin kept free around the points, in pixels
        min_zoom: Lowest zoom level to return
        max_zoom: Highest zoom level to return

    Returns:
        Viewport centered on the points' bounding box

    Raises:
        ValueError: If points is empty
    """
    if not points:
        raise ValueError("Cannot fit a viewport to zero points")

    lats = [_clamp_latitude(lat) for lat, _ in points]
    lons = [lon for _, lon in points]
    south, north = min(lats), max(lats)
    west, east = min(lons), max(lons)

    usable_width = max(width - 2 * padding, 1)
    usable_height = max(height - 2 * padding, 1)

    zoom = min_zoom
    for candidate in range(max_zoom, min_zoom - 1, -1):
        dx = lon_to_x(east, candidate) - lon_to_x(west, candidate)
        dy = lat_to_y(south, candidate) - lat_to_y(north, candidate)
        if dx <= usable_width and dy <= usable_height:
            zoom = candidate
            break

    center_y = (lat_to_y(south, zoom) + lat_to_y(north, zoom)) / 2

    return Viewport(
        latitude=y_to_lat(center_y, zoom),
        longitude=(west + east) / 2,
        zoom=zoom,
    )
