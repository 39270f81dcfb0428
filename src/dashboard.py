"""Dashboard - owns the pipeline state and wires its parts together.

All mutable state of a running dashboard lives in one PipelineState
object, created explicitly at startup and torn down with close().
"""

import logging
from dataclasses import dataclass, field
from datetime import tzinfo
from pathlib import Path

from src.core.config import Config
from src.core.query import RefreshQuery, TimeWindow, make_query
from src.orchestrator import FeedClient, Orchestrator
from src.scheduler import RefreshScheduler, RefreshSession, Timer
from src.shell.chart_widget import PlotlyChartWidget
from src.shell.static_map_widget import StaticMapWidget
from src.shell.status_board import StatusBoard
from src.shell.table_widget import HtmlTableWidget
from src.sinks import ChartSink, MapSink, TableSink


logger = logging.getLogger(__name__)


@dataclass
class Controls:
    """Current values of the user controls.

    Attributes:
        time_window: Time window selector value
        min_magnitude: Minimum magnitude selector value
    """
    time_window: str = TimeWindow.DAY.value
    min_magnitude: str = "2.5"

    def snapshot(self) -> RefreshQuery:
        """Immutable query built from the current control values."""
        return make_query(self.time_window, self.min_magnitude)


@dataclass
class PipelineState:
    """Everything a running dashboard mutates.

    Attributes:
        session: Scheduler state
        map_sink: Owner of the map markers
        chart_sink: Owner of the live chart
        table_sink: Owner of the table rows
        status: Status board
        controls: Current user control values
    """
    map_sink: MapSink
    chart_sink: ChartSink
    table_sink: TableSink
    status: StatusBoard
    controls: Controls = field(default_factory=Controls)
    session: RefreshSession = field(default_factory=RefreshSession)

    @property
    def sinks(self) -> tuple[MapSink, ChartSink, TableSink]:
        return (self.map_sink, self.chart_sink, self.table_sink)

    def close(self) -> None:
        """Release every rendered artifact."""
        for sink in self.sinks:
            sink.clear()
        self.status.close()


class Dashboard:
    """A configured dashboard: widgets, sinks, orchestrator and scheduler."""

    def __init__(
        self,
        config: Config,
        feed_client: FeedClient | None = None,
        map_widget: StaticMapWidget | None = None,
        chart_widget: PlotlyChartWidget | None = None,
        table_widget: HtmlTableWidget | None = None,
        timer: Timer | None = None,
        tz: tzinfo | None = None,
    ) -> None:
        self.config = config
        self.map_widget = map_widget or StaticMapWidget(
            width=config.map_width,
            height=config.map_height,
            tile_url=config.tile_url,
        )
        self.chart_widget = chart_widget or PlotlyChartWidget(height=config.map_height)
        self.table_widget = table_widget or HtmlTableWidget()

        self.state = PipelineState(
            map_sink=MapSink(self.map_widget),
            chart_sink=ChartSink(self.chart_widget),
            table_sink=TableSink(self.table_widget),
            status=StatusBoard(pulse_seconds=config.status_pulse_seconds),
            controls=Controls(
                time_window=config.time_window,
                min_magnitude=config.min_magnitude,
            ),
        )

        self.orchestrator = Orchestrator(
            config,
            query_source=self.state.controls.snapshot,
            sinks=self.state.sinks,
            status_reporter=self.state.status,
            feed_client=feed_client,
            tz=tz,
        )
        self.scheduler = RefreshScheduler(
            self.orchestrator.refresh,
            timer=timer,
            interval_seconds=config.refresh_interval_seconds,
            session=self.state.session,
            status_reporter=self.state.status,
        )

    @property
    def controls(self) -> Controls:
        return self.state.controls

    def start(self) -> None:
        """Run the first refresh and enable auto-refresh if configured.

        Must be called from a running event loop.
        """
        if self.config.auto_refresh:
            self.scheduler.enable_auto_refresh()
        self.scheduler.trigger()

    def update_controls(
        self,
        time_window: str | None = None,
        min_magnitude: str | None = None,
    ) -> bool:
        """Change selector values and trigger a refresh, like a selector change."""
        if time_window is not None:
            self.controls.time_window = time_window
        if min_magnitude is not None:
            self.controls.min_magnitude = min_magnitude
        return self.scheduler.trigger()

    def export(self, output_dir: str | Path) -> list[Path]:
        """Write the current views to files.

        Writes chart.html and table.html, plus map.png when the map
        renders. This method performs file and tile I/O.

        Returns:
            Paths written
        """
        out = Path(output_dir)
        out.mkdir(parents=True, exist_ok=True)
        written = []

        chart_path = out / "chart.html"
        chart_path.write_text(self.chart_widget.to_html(), encoding="utf-8")
        written.append(chart_path)

        table_path = out / "table.html"
        table_path.write_text(self.table_widget.to_html(), encoding="utf-8")
        written.append(table_path)

        map_result = self.map_widget.render_png()
        if map_result.success and map_result.image_bytes:
            map_path = out / "map.png"
            map_path.write_bytes(map_result.image_bytes)
            written.append(map_path)
        else:
            logger.warning("Map not exported: %s", map_result.error)

        logger.info("Exported %d view files to %s", len(written), out)
        return written

    async def close(self) -> None:
        """Stop the scheduler, let the in-flight cycle finish, release views."""
        await self.scheduler.close()
        self.state.close()
