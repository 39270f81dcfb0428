"""Configuration models - Pure data structures.

These are domain models for configuration. The actual loading
(I/O) is handled by the shell layer.
"""

from dataclasses import dataclass, field

from src.core.query import USGS_FEED_BASE, TimeWindow
from src.core.transform import CHART_LIMIT, TABLE_LIMIT


# Magnitude levels published by the summary feed
FEED_MAGNITUDE_LEVELS = ("all", "1.0", "2.5", "4.5", "significant")

OSM_TILE_URL = "https://tile.openstreetmap.org/{z}/{x}/{y}.png"


@dataclass
class Config:
    """Application configuration.

    This is a pure data structure - no I/O or side effects.

    Attributes:
        feed_base_url: Base URL of the GeoJSON summary feeds
        time_window: Initial time window selector value
        min_magnitude: Initial magnitude level selector value
        refresh_interval_seconds: Auto-refresh period
        auto_refresh: Start with auto-refresh enabled
        request_timeout_seconds: Feed request timeout
        chart_limit: Maximum events in the chart
        table_limit: Maximum rows in the table
        map_width: Map image width in pixels
        map_height: Map image height in pixels
        tile_url: Map tile URL template
        status_pulse_seconds: Duration of the status pulse
        output_dir: Directory for exported views
    """
    feed_base_url: str = USGS_FEED_BASE
    time_window: str = TimeWindow.DAY.value
    min_magnitude: str = "2.5"
    refresh_interval_seconds: float = 10.0
    auto_refresh: bool = False
    request_timeout_seconds: float = 30.0
    chart_limit: int = CHART_LIMIT
    table_limit: int = TABLE_LIMIT
    map_width: int = 800
    map_height: int = 400
    tile_url: str = OSM_TILE_URL
    status_pulse_seconds: float = 1.0
    output_dir: str = "output"


@dataclass
class ValidationError:
    """A configuration validation error.

    Attributes:
        field: The field that has an error
        message: Human-readable error description
        severity: 'error' or 'warning'
    """
    field: str
    message: str
    severity: str = "error"


@dataclass
class ValidationResult:
    """Result of validating configuration.

    Attributes:
        valid: True if no errors (warnings are OK)
        errors: List of validation errors/warnings
    """
    valid: bool
    errors: list[ValidationError] = field(default_factory=list)

    @property
    def warnings(self) -> list[ValidationError]:
        """Get only warnings."""
        return [e for e in self.errors if e.severity == "warning"]

    @property
    def critical_errors(self) -> list[ValidationError]:
        """Get only critical errors."""
        return [e for e in self.errors if e.severity == "error"]


def _validate_positive(value: float, field_name: str) -> list[ValidationError]:
    if value <= 0:
        return [ValidationError(
            field=field_name,
            message=f"Must be positive, got {value}",
        )]
    return []


def validate_config(config: Config) -> ValidationResult:
    """Validate configuration for errors and warnings.

    Pure function. Selector values outside the known sets are warnings
    only, since the feed client falls back for unknown time windows.

    Args:
        config: Configuration to validate

    Returns:
        ValidationResult with any errors/warnings found
    """
    errors: list[ValidationError] = []

    errors.extend(_validate_positive(
        config.refresh_interval_seconds, "refresh_interval_seconds",
    ))
    errors.extend(_validate_positive(
        config.request_timeout_seconds, "request_timeout_seconds",
    ))
    errors.extend(_validate_positive(config.chart_limit, "chart_limit"))
    errors.extend(_validate_positive(config.table_limit, "table_limit"))
    errors.extend(_validate_positive(config.map_width, "map_width"))
    errors.extend(_validate_positive(config.map_height, "map_height"))

    if config.status_pulse_seconds < 0:
        errors.append(ValidationError(
            field="status_pulse_seconds",
            message=f"Must not be negative, got {config.status_pulse_seconds}",
        ))

    if not config.feed_base_url.startswith(("http://", "https://")):
        errors.append(ValidationError(
            field="feed_base_url",
            message=f"Not an HTTP(S) URL: {config.feed_base_url}",
        ))

    known_windows = {w.value for w in TimeWindow}
    if config.time_window not in known_windows:
        errors.append(ValidationError(
            field="time_window",
            message=f"Unknown time window '{config.time_window}', feed will use 'day'",
            severity="warning",
        ))

    if config.min_magnitude not in FEED_MAGNITUDE_LEVELS:
        errors.append(ValidationError(
            field="min_magnitude",
            message=(
                f"'{config.min_magnitude}' is not a published feed level "
                f"({', '.join(FEED_MAGNITUDE_LEVELS)})"
            ),
            severity="warning",
        ))

    has_critical = any(e.severity == "error" for e in errors)

    return ValidationResult(
        valid=not has_critical,
        errors=errors,
    )
