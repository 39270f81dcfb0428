"""Error taxonomy for the refresh pipeline.

Feed errors are raised by the shell and caught at the pipeline boundary.
Render errors are raised and handled inside the view sinks; they never
propagate past a sink.
"""


class DashboardError(Exception):
    """Base class for all dashboard errors."""


class FeedError(DashboardError):
    """A refresh cycle could not obtain an event list."""


class NetworkFailure(FeedError):
    """Transport error, DNS failure, timeout or non-2xx response."""


class ParseFailure(FeedError):
    """The feed responded but the payload is not a usable GeoJSON document."""


class RenderFailure(DashboardError):
    """A sink received a structurally invalid projection."""
