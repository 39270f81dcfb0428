"""View Sinks - full replace-and-redraw of each dashboard view.

Each sink owns the artifacts it rendered last (marker handles, the live
chart, the table body) and is the only component that mutates them.
Widgets are reached through narrow capability protocols, so any map,
chart or table implementation exposing the same methods can be used.

A structurally invalid projection renders an empty view. Sinks log the
problem and never raise it to the pipeline.
"""

import logging
import math
from typing import Any, Protocol

from src.core.errors import RenderFailure
from src.core.transform import ChartSeries, MarkerDescriptor, TableRow


logger = logging.getLogger(__name__)


class MapWidget(Protocol):
    def place_marker(self, marker: MarkerDescriptor) -> Any: ...

    def remove_marker(self, handle: Any) -> None: ...

    def fit_bounds(self, handles: list[Any]) -> None: ...


class ChartWidget(Protocol):
    def create_chart(self, series: ChartSeries) -> Any: ...

    def destroy_chart(self, chart: Any) -> None: ...


class TableWidget(Protocol):
    def clear_rows(self) -> None: ...

    def append_row(self, row: TableRow) -> None: ...


def _is_number(value: Any) -> bool:
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and math.isfinite(value)
    )


def validate_markers(projection: Any) -> tuple[MarkerDescriptor, ...]:
    """Extract the marker list of a projection.

    Raises:
        RenderFailure: If the projection or any marker is malformed
    """
    markers = getattr(projection, "markers", None)
    if not isinstance(markers, (tuple, list)):
        raise RenderFailure("Projection has no marker list")

    for marker in markers:
        if not isinstance(marker, MarkerDescriptor):
            raise RenderFailure(f"Not a marker descriptor: {marker!r}")
        if not (
            _is_number(marker.latitude)
            and _is_number(marker.longitude)
            and _is_number(marker.radius)
            and marker.radius > 0
        ):
            raise RenderFailure(f"Marker {marker.event_id} has invalid geometry")

    return tuple(markers)


def validate_series(projection: Any) -> ChartSeries:
    """Extract the chart series of a projection.

    Raises:
        RenderFailure: If the series is missing or its arrays differ in length
    """
    series = getattr(projection, "chart", None)
    if not isinstance(series, ChartSeries):
        raise RenderFailure("Projection has no chart series")

    lengths = {
        len(series.labels),
        len(series.magnitudes),
        len(series.depths),
        len(series.colors),
    }
    if len(lengths) != 1:
        raise RenderFailure("Chart series arrays differ in length")

    return series


def validate_rows(projection: Any) -> tuple[TableRow, ...]:
    """Extract the table rows of a projection.

    Raises:
        RenderFailure: If the rows are missing or malformed
    """
    rows = getattr(projection, "rows", None)
    if not isinstance(rows, (tuple, list)):
        raise RenderFailure("Projection has no row list")

    for row in rows:
        if not isinstance(row, TableRow):
            raise RenderFailure(f"Not a table row: {row!r}")

    return tuple(rows)


class MapSink:
    """Owns the set of marker handles currently on the map."""

    def __init__(self, widget: MapWidget) -> None:
        self.widget = widget
        self._handles: list[Any] = []

    @property
    def marker_count(self) -> int:
        return len(self._handles)

    def clear(self) -> None:
        """Release every marker this sink placed."""
        handles, self._handles = self._handles, []
        for handle in handles:
            try:
                self.widget.remove_marker(handle)
            except Exception as e:
                logger.warning("Failed to remove map marker: %s", e)

    def render(self, projection: Any) -> None:
        """Replace all markers with the projection's markers.

        The viewport is fitted to the new markers; with zero markers it
        is left where it was. A widget error leaves the map empty.
        """
        self.clear()

        try:
            markers = validate_markers(projection)
        except RenderFailure as e:
            logger.warning("Map rendered empty: %s", e)
            return

        try:
            for marker in markers:
                self._handles.append(self.widget.place_marker(marker))

            if self._handles:
                self.widget.fit_bounds(list(self._handles))
        except Exception as e:
            logger.warning("Map rendered empty, widget failed: %s", e)
            self.clear()
            return

        logger.debug("Map rendered %d markers", len(self._handles))


class ChartSink:
    """Owns at most one live chart instance."""

    def __init__(self, widget: ChartWidget) -> None:
        self.widget = widget
        self._chart: Any = None

    @property
    def chart(self) -> Any:
        return self._chart

    def clear(self) -> None:
        """Dispose the live chart, if any."""
        chart, self._chart = self._chart, None
        if chart is not None:
            try:
                self.widget.destroy_chart(chart)
            except Exception as e:
                logger.warning("Failed to dispose chart: %s", e)

    def render(self, projection: Any) -> None:
        """Dispose the previous chart and build a new one.

        A widget error leaves no chart.
        """
        self.clear()

        try:
            series = validate_series(projection)
        except RenderFailure as e:
            logger.warning("Chart rendered empty: %s", e)
            series = ChartSeries()

        try:
            self._chart = self.widget.create_chart(series)
        except Exception as e:
            logger.warning("Chart not rendered, widget failed: %s", e)
            self._chart = None


class TableSink:
    """Owns the table body content."""

    def __init__(self, widget: TableWidget) -> None:
        self.widget = widget
        self._row_count = 0

    @property
    def row_count(self) -> int:
        return self._row_count

    def clear(self) -> None:
        self._row_count = 0
        try:
            self.widget.clear_rows()
        except Exception as e:
            logger.warning("Failed to clear table rows: %s", e)

    def render(self, projection: Any) -> None:
        """Replace every row with the projection's rows, in order.

        A widget error leaves the table empty.
        """
        self.clear()

        try:
            rows = validate_rows(projection)
        except RenderFailure as e:
            logger.warning("Table rendered empty: %s", e)
            return

        try:
            for row in rows:
                self.widget.append_row(row)
        except Exception as e:
            logger.warning("Table rendered empty, widget failed: %s", e)
            self.clear()
            return
        self._row_count = len(rows)
