"""Orchestrator - Wires Functional Core and Imperative Shell.

This module runs one refresh cycle: read the query, fetch the feed,
transform the events and hand the projections to every view sink. It's
the "glue" between the pure core and the I/O-performing shell. When a
cycle runs is decided by the scheduler, not here.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, tzinfo
from typing import Any, Callable, Protocol, Sequence

from src.core.config import Config
from src.core.earthquake import Earthquake
from src.core.errors import FeedError
from src.core.formatter import STATUS_ERROR, STATUS_REFRESHING, format_last_updated
from src.core.query import RefreshQuery
from src.core.transform import ProjectionSet, build_projections
from src.scheduler import StatusReporter
from src.shell.usgs_client import USGSFeedClient


logger = logging.getLogger(__name__)


class FeedClient(Protocol):
    async def fetch(self, query: RefreshQuery) -> list[Earthquake]: ...


class ViewSink(Protocol):
    def render(self, projection: Any) -> None: ...


@dataclass
class CycleResult:
    """Result of one refresh cycle.

    Attributes:
        query: The query the cycle fetched
        success: Whether the views were updated
        events_fetched: Number of parsed events
        error: Error message if the fetch failed
    """
    query: RefreshQuery
    success: bool
    events_fetched: int = 0
    error: str | None = None

    @property
    def summary(self) -> str:
        """Human-readable summary of the cycle."""
        if not self.success:
            return f"Refresh failed: {self.error}"
        return (
            f"Fetched {self.events_fetched} earthquakes "
            f"({self.query.min_magnitude}_{self.query.time_window.value})"
        )


class Orchestrator:
    """Runs fetch, transform and render for one refresh cycle.

    Feed failures are caught here: the views keep their last content,
    an error status is reported and the cycle ends normally.
    """

    def __init__(
        self,
        config: Config,
        query_source: Callable[[], RefreshQuery],
        sinks: Sequence[ViewSink],
        status_reporter: StatusReporter,
        feed_client: FeedClient | None = None,
        tz: tzinfo | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """Initialize orchestrator.

        Args:
            config: Application configuration
            query_source: Returns the current query; called once per cycle
            sinks: View sinks to render into
            status_reporter: Receives status messages
            feed_client: Feed client (created if not provided)
            tz: Display timezone (None for local)
            clock: Returns the local time used in "Last updated"
        """
        self.config = config
        self.query_source = query_source
        self.sinks = list(sinks)
        self.status_reporter = status_reporter
        self.feed_client = feed_client or USGSFeedClient(
            base_url=config.feed_base_url,
            timeout=config.request_timeout_seconds,
        )
        self.tz = tz
        self.clock = clock or datetime.now
        self.last_result: CycleResult | None = None
        self.last_projection: ProjectionSet | None = None

    def _render(self, projection: ProjectionSet) -> None:
        for sink in self.sinks:
            sink.render(projection)
        self.last_projection = projection

    async def refresh(self) -> CycleResult:
        """Run a complete refresh cycle.

        This is the main entry point that:
        1. Reports the refreshing status
        2. Reads the query fresh from the controls
        3. Fetches earthquakes (the only suspension point)
        4. Builds the projections and renders every sink
        5. Reports the outcome

        Returns:
            CycleResult with details of what happened
        """
        self.status_reporter.report(STATUS_REFRESHING)
        query = self.query_source()

        try:
            earthquakes = await self.feed_client.fetch(query)
        except FeedError as e:
            logger.error("Failed to fetch earthquakes: %s", e)
            self.status_reporter.report(STATUS_ERROR)
            result = CycleResult(query=query, success=False, error=str(e))
            self.last_result = result
            return result

        projection = build_projections(
            earthquakes,
            tz=self.tz,
            chart_limit=self.config.chart_limit,
            table_limit=self.config.table_limit,
        )
        self._render(projection)

        self.status_reporter.report(format_last_updated(self.clock()))

        result = CycleResult(
            query=query,
            success=True,
            events_fetched=len(earthquakes),
        )
        self.last_result = result
        logger.info("Completed: %s", result.summary)
        return result
