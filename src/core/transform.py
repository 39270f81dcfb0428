"""Event transformation - Pure functions.

Turns a raw event list into the three per-view projections consumed by
the sinks. Every function here is deterministic and holds no state
between calls; the outputs are frozen dataclasses and tuples.
"""

from dataclasses import dataclass, field
from datetime import tzinfo
from typing import Iterable

from src.core.earthquake import Earthquake
from src.core.formatter import (
    format_datetime,
    format_depth,
    format_magnitude,
    format_popup,
    format_time_of_day,
)
from src.core.severity import (
    CellStyle,
    SeverityTier,
    classify,
    get_marker_radius,
    get_tier_style,
    is_known_magnitude,
)


CHART_LIMIT = 20
TABLE_LIMIT = 50


@dataclass(frozen=True)
class ChartSeries:
    """Parallel arrays for the dual-axis chart, oldest to newest.

    Attributes:
        labels: Category labels (formatted event times)
        magnitudes: Bar values; None where the magnitude is unknown
        depths: Line values in kilometers
        colors: Bar fill colors per severity tier
    """
    labels: tuple[str, ...] = ()
    magnitudes: tuple[float | None, ...] = ()
    depths: tuple[float, ...] = ()
    colors: tuple[str, ...] = ()

    def __len__(self) -> int:
        return len(self.labels)


@dataclass(frozen=True)
class MarkerDescriptor:
    """Everything needed to place one map marker.

    Attributes:
        event_id: USGS event ID
        latitude: Marker latitude
        longitude: Marker longitude
        radius: Circle radius in pixels
        fill_color: Hex fill color
        popup_text: Info popup contents
        tier: Severity tier
    """
    event_id: str
    latitude: float
    longitude: float
    radius: float
    fill_color: str
    popup_text: str
    tier: SeverityTier


@dataclass(frozen=True)
class TableRow:
    """One row of the event table.

    Attributes:
        place: Location label
        magnitude: Formatted magnitude
        depth: Formatted depth with unit
        time: Formatted absolute time
        tier: Severity tier
        magnitude_style: Style hint for the magnitude cell
    """
    place: str
    magnitude: str
    depth: str
    time: str
    tier: SeverityTier
    magnitude_style: CellStyle = field(default_factory=CellStyle)


@dataclass(frozen=True)
class ProjectionSet:
    """The three view projections of one refresh cycle.

    Attributes:
        chart: Chart series (at most CHART_LIMIT entries)
        markers: One marker per event
        rows: Table rows, newest first (at most TABLE_LIMIT entries)
        event_count: Number of events the projections were built from
    """
    chart: ChartSeries = field(default_factory=ChartSeries)
    markers: tuple[MarkerDescriptor, ...] = ()
    rows: tuple[TableRow, ...] = ()
    event_count: int = 0


EMPTY_PROJECTION = ProjectionSet()


def sort_newest_first(earthquakes: Iterable[Earthquake]) -> list[Earthquake]:
    """Sort earthquakes by time, newest first.

    Pure function. The sort is stable: events sharing a timestamp keep
    their input order.
    """
    return sorted(earthquakes, key=lambda e: e.time, reverse=True)


def project_chart(
    earthquakes: list[Earthquake],
    tz: tzinfo | None = None,
    limit: int = CHART_LIMIT,
) -> ChartSeries:
    """Build the chart series from newest-first earthquakes.

    Takes the ``limit`` most recent events and reverses them so the
    series reads left to right in chronological order.

    Args:
        earthquakes: Earthquakes sorted newest first
        tz: Display timezone (None for local)
        limit: Maximum number of entries

    Returns:
        ChartSeries ordered oldest to newest
    """
    recent = list(reversed(earthquakes[:max(limit, 0)]))

    return ChartSeries(
        labels=tuple(format_time_of_day(e.time, tz) for e in recent),
        magnitudes=tuple(
            e.magnitude if is_known_magnitude(e.magnitude) else None
            for e in recent
        ),
        depths=tuple(e.depth_km for e in recent),
        colors=tuple(get_tier_style(classify(e.magnitude)).chart_color for e in recent),
    )


def project_marker(earthquake: Earthquake, tz: tzinfo | None = None) -> MarkerDescriptor:
    """Build the map marker of a single earthquake."""
    tier = classify(earthquake.magnitude)
    return MarkerDescriptor(
        event_id=earthquake.id,
        latitude=earthquake.latitude,
        longitude=earthquake.longitude,
        radius=get_marker_radius(earthquake.magnitude),
        fill_color=get_tier_style(tier).marker_color,
        popup_text=format_popup(earthquake, tz),
        tier=tier,
    )


def project_markers(
    earthquakes: list[Earthquake],
    tz: tzinfo | None = None,
) -> tuple[MarkerDescriptor, ...]:
    """Build one map marker per earthquake."""
    return tuple(project_marker(e, tz) for e in earthquakes)


def project_row(earthquake: Earthquake, tz: tzinfo | None = None) -> TableRow:
    """Build the table row of a single earthquake."""
    tier = classify(earthquake.magnitude)
    return TableRow(
        place=earthquake.place,
        magnitude=format_magnitude(earthquake.magnitude),
        depth=format_depth(earthquake.depth_km),
        time=format_datetime(earthquake.time, tz),
        tier=tier,
        magnitude_style=get_tier_style(tier).cell_style,
    )


def project_table(
    earthquakes: list[Earthquake],
    tz: tzinfo | None = None,
    limit: int = TABLE_LIMIT,
) -> tuple[TableRow, ...]:
    """Build the table rows from newest-first earthquakes, no reversal."""
    return tuple(project_row(e, tz) for e in earthquakes[:max(limit, 0)])


def build_projections(
    earthquakes: Iterable[Earthquake],
    tz: tzinfo | None = None,
    chart_limit: int = CHART_LIMIT,
    table_limit: int = TABLE_LIMIT,
) -> ProjectionSet:
    """Transform a raw event list into the projection set of one cycle.

    Pure function.

    Args:
        earthquakes: Parsed earthquakes in any order
        tz: Display timezone (None for local)
        chart_limit: Maximum chart entries
        table_limit: Maximum table rows

    Returns:
        ProjectionSet for the map, chart and table sinks
    """
    ordered = sort_newest_first(earthquakes)

    return ProjectionSet(
        chart=project_chart(ordered, tz, chart_limit),
        markers=project_markers(ordered, tz),
        rows=project_table(ordered, tz, table_limit),
        event_count=len(ordered),
    )
