"""Static Map Widget - Imperative Shell.

This module keeps the marker layer of the dashboard map and renders it
to a PNG using OpenStreetMap tiles. Viewport math is in the core module.
"""

import io
import logging
from dataclasses import dataclass

from staticmap import StaticMap, CircleMarker

from src.core.config import OSM_TILE_URL
from src.core.transform import MarkerDescriptor
from src.core.viewport import DEFAULT_VIEWPORT, Viewport, fit_viewport


logger = logging.getLogger(__name__)


# Outline drawn behind each marker so it stays visible on any tile
OUTLINE_COLOR = "#000000"
OUTLINE_WIDTH = 1


@dataclass(eq=False)
class MarkerHandle:
    """Disposable handle of a placed marker.

    Attributes:
        descriptor: The marker's geometry, style and popup
        layers: staticmap markers drawn for it (outline, fill)
    """
    descriptor: MarkerDescriptor
    layers: tuple[CircleMarker, ...]


@dataclass(frozen=True)
class MapSnapshot:
    """Frozen copy of the map contents, safe to render off the event loop.

    Attributes:
        layers: staticmap markers in drawing order
        viewport: Viewport at the time of the snapshot
    """
    layers: tuple[CircleMarker, ...]
    viewport: Viewport


@dataclass
class MapImageResult:
    """Result of map image generation.

    Attributes:
        success: Whether the image was generated successfully
        image_bytes: PNG image data if successful
        error: Error message if failed
    """
    success: bool
    image_bytes: bytes | None = None
    error: str | None = None


class StaticMapWidget:
    """Map widget backed by staticmap.

    This is part of the imperative shell - rendering fetches map tiles.
    Placing and removing markers only touches in-memory layers.
    """

    def __init__(
        self,
        width: int = 800,
        height: int = 400,
        tile_url: str | None = None,
    ) -> None:
        """Initialize the map widget.

        Args:
            width: Image width in pixels
            height: Image height in pixels
            tile_url: Custom tile URL template. Defaults to OpenStreetMap.
        """
        self.width = width
        self.height = height
        self.tile_url = tile_url or OSM_TILE_URL
        self.viewport: Viewport = DEFAULT_VIEWPORT
        self._handles: list[MarkerHandle] = []

    @property
    def marker_count(self) -> int:
        """Number of markers currently on the map."""
        return len(self._handles)

    @property
    def markers(self) -> list[MarkerDescriptor]:
        """Descriptors of the markers currently on the map."""
        return [h.descriptor for h in self._handles]

    def place_marker(self, marker: MarkerDescriptor) -> MarkerHandle:
        """Add a circle marker and return its handle."""
        radius = max(int(round(marker.radius)), 1)
        coords = (marker.longitude, marker.latitude)  # (lon, lat) order for staticmap

        outline = CircleMarker(coords, OUTLINE_COLOR, radius + OUTLINE_WIDTH)
        fill = CircleMarker(coords, marker.fill_color, radius)

        handle = MarkerHandle(descriptor=marker, layers=(outline, fill))
        self._handles.append(handle)
        return handle

    def remove_marker(self, handle: MarkerHandle) -> None:
        """Remove a previously placed marker. Unknown handles are ignored."""
        if handle in self._handles:
            self._handles.remove(handle)

    def fit_bounds(self, handles: list[MarkerHandle]) -> None:
        """Move the viewport so every given marker is visible."""
        if not handles:
            return
        self.viewport = fit_viewport(
            [(h.descriptor.latitude, h.descriptor.longitude) for h in handles],
            self.width,
            self.height,
        )
        logger.debug(
            "Map viewport fitted to %d markers: (%.4f, %.4f) zoom %d",
            len(handles),
            self.viewport.latitude,
            self.viewport.longitude,
            self.viewport.zoom,
        )

    def snapshot(self) -> MapSnapshot:
        """Copy the current layers and viewport."""
        layers = tuple(layer for h in self._handles for layer in h.layers)
        return MapSnapshot(layers=layers, viewport=self.viewport)

    def render_png(self, snapshot: MapSnapshot | None = None) -> MapImageResult:
        """Render the map to PNG.

        This method performs I/O (fetches map tiles from tile server).

        Args:
            snapshot: Map contents to draw. Defaults to the current contents.

        Returns:
            MapImageResult with image bytes or error
        """
        if snapshot is None:
            snapshot = self.snapshot()
        viewport = snapshot.viewport

        logger.info(
            "Rendering map with %d layers at (%.4f, %.4f) zoom %d",
            len(snapshot.layers),
            viewport.latitude,
            viewport.longitude,
            viewport.zoom,
        )

        try:
            static_map = StaticMap(
                self.width,
                self.height,
                url_template=self.tile_url,
            )
            for layer in snapshot.layers:
                static_map.add_marker(layer)

            image = static_map.render(
                zoom=viewport.zoom,
                center=(viewport.longitude, viewport.latitude),
            )

            buffer = io.BytesIO()
            image.save(buffer, format="PNG")
            image_bytes = buffer.getvalue()

            logger.info("Rendered map image: %d bytes", len(image_bytes))

            return MapImageResult(
                success=True,
                image_bytes=image_bytes,
            )

        except Exception as e:
            logger.error("Failed to render map: %s", str(e))
            return MapImageResult(
                success=False,
                error=str(e),
            )
