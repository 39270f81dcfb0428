"""Functional Core - Pure functions with no side effects.

This module contains all business logic as pure functions:
- Earthquake data parsing
- Refresh query and feed URL construction
- Severity classification
- Projection of events into chart, map and table views
- Text formatting

All functions here are deterministic and have no I/O.
"""

from src.core.earthquake import Earthquake, parse_earthquakes
from src.core.errors import NetworkFailure, ParseFailure, RenderFailure
from src.core.query import RefreshQuery, TimeWindow, build_feed_url
from src.core.severity import SeverityTier, classify
from src.core.transform import ProjectionSet, build_projections

__all__ = [
    # Earthquake
    "Earthquake",
    "parse_earthquakes",
    # Errors
    "NetworkFailure",
    "ParseFailure",
    "RenderFailure",
    # Query
    "RefreshQuery",
    "TimeWindow",
    "build_feed_url",
    # Severity
    "SeverityTier",
    "classify",
    # Transform
    "ProjectionSet",
    "build_projections",
]
