"""Plotly Chart Widget - Imperative Shell.

Builds the dual-axis magnitude/depth chart as a Plotly figure.
"""

import logging

import plotly.graph_objects as go
from plotly.subplots import make_subplots

from src.core.transform import ChartSeries


logger = logging.getLogger(__name__)

_BAR_BORDER = "rgba(0, 0, 0, 0.1)"
_DEPTH_COLOR = "rgba(100, 100, 100, 1)"
_DEPTH_FILL = "rgba(100, 100, 100, 0.2)"


class PlotlyChartWidget:
    """Chart widget that owns at most one live Plotly figure."""

    def __init__(self, height: int = 400) -> None:
        self.height = height
        self.figure: go.Figure | None = None

    def create_chart(self, series: ChartSeries) -> go.Figure:
        """Create the magnitude bar / depth line chart.

        Categories are positional so two events in the same second keep
        separate bars; the formatted times are used as tick labels.

        Args:
            series: Chart projection, oldest to newest

        Returns:
            The new figure, which becomes the live chart
        """
        positions = list(range(len(series)))

        fig = make_subplots(specs=[[{"secondary_y": True}]])

        fig.add_trace(
            go.Bar(
                x=positions,
                y=list(series.magnitudes),
                name="Magnitude",
                marker=dict(
                    color=list(series.colors),
                    line=dict(color=_BAR_BORDER, width=1),
                ),
                customdata=list(series.depths),
                hovertemplate=(
                    "Magnitude: %{y}<br>Depth: %{customdata} km<extra></extra>"
                ),
            ),
            secondary_y=False,
        )
        fig.add_trace(
            go.Scatter(
                x=positions,
                y=list(series.depths),
                name="Depth (km)",
                mode="lines+markers",
                line=dict(color=_DEPTH_COLOR, width=1),
                fill="tozeroy",
                fillcolor=_DEPTH_FILL,
                hovertemplate="Depth: %{y} km<extra></extra>",
            ),
            secondary_y=True,
        )

        fig.update_xaxes(
            tickmode="array",
            tickvals=positions,
            ticktext=list(series.labels),
        )
        fig.update_yaxes(title_text="Magnitude", secondary_y=False)
        fig.update_yaxes(title_text="Depth (km)", secondary_y=True, showgrid=False)
        fig.update_layout(
            height=self.height,
            margin=dict(l=40, r=40, t=20, b=40),
            legend=dict(orientation="h"),
        )

        self.figure = fig
        logger.debug("Created chart with %d entries", len(series))
        return fig

    def destroy_chart(self, chart: go.Figure) -> None:
        """Dispose a chart. Only the live chart is actually dropped."""
        if chart is self.figure:
            self.figure = None

    def to_html(self) -> str:
        """HTML fragment of the live chart, empty if there is none."""
        if self.figure is None:
            return ""
        return self.figure.to_html(include_plotlyjs="cdn", full_html=False)
