"""Imperative Shell - I/O and side effects.

This module contains all code that interacts with external systems:
- USGS feed client (HTTP)
- Map, chart and table widgets (rendering)
- Status board
- Configuration loading (environment/files)

Keep this layer thin and simple. All business logic should be in core.
"""

from src.shell.usgs_client import USGSFeedClient
from src.shell.static_map_widget import StaticMapWidget
from src.shell.chart_widget import PlotlyChartWidget
from src.shell.table_widget import HtmlTableWidget
from src.shell.status_board import StatusBoard
from src.shell.config_loader import load_config, Config

__all__ = [
    "USGSFeedClient",
    "StaticMapWidget",
    "PlotlyChartWidget",
    "HtmlTableWidget",
    "StatusBoard",
    "load_config",
    "Config",
]
