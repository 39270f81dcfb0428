"""USGS Feed Client - Imperative Shell.

This module handles HTTP communication with the USGS GeoJSON summary feeds.
All I/O is contained here; parsing and URL building are in the core module.
"""

import asyncio
import logging
from typing import Any

import requests

from src.core.earthquake import Earthquake, parse_earthquakes
from src.core.errors import NetworkFailure, ParseFailure
from src.core.query import USGS_FEED_BASE, RefreshQuery, build_feed_url


logger = logging.getLogger(__name__)


# Default timeout for feed requests (seconds)
DEFAULT_TIMEOUT = 30


class USGSFeedClient:
    """Client for fetching earthquake data from the USGS summary feeds.

    This is part of the imperative shell - it handles HTTP I/O.
    One call to fetch() issues exactly one GET; there is no retry.
    """

    def __init__(
        self,
        base_url: str = USGS_FEED_BASE,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        """Initialize feed client.

        Args:
            base_url: Summary feed base URL
            timeout: Request timeout in seconds
        """
        self.base_url = base_url
        self.timeout = timeout

    def fetch_geojson(self, url: str) -> dict[str, Any]:
        """Fetch and decode one feed document.

        This method performs blocking HTTP I/O.

        Args:
            url: Feed URL

        Returns:
            Decoded JSON body

        Raises:
            NetworkFailure: On transport errors, timeouts and non-2xx statuses
            ParseFailure: If the body is not valid JSON
        """
        try:
            response = requests.get(url, timeout=self.timeout)
            response.raise_for_status()
        except requests.Timeout as e:
            raise NetworkFailure(f"Request timed out: {url}") from e
        except requests.HTTPError as e:
            raise NetworkFailure(
                f"Feed returned HTTP {e.response.status_code if e.response is not None else '?'}"
            ) from e
        except requests.RequestException as e:
            raise NetworkFailure(f"Request failed: {e}") from e

        try:
            return response.json()
        except ValueError as e:
            raise ParseFailure(f"Malformed JSON from {url}: {e}") from e

    async def fetch(self, query: RefreshQuery) -> list[Earthquake]:
        """Fetch the earthquakes matching a refresh query.

        The blocking request runs in a worker thread so the event loop
        stays responsive while the cycle is suspended on the network.

        Args:
            query: Refresh query read at the start of the cycle

        Returns:
            Parsed earthquakes in feed order

        Raises:
            NetworkFailure: If the request fails
            ParseFailure: If the payload cannot be parsed
        """
        url = build_feed_url(query, self.base_url)

        logger.info("Fetching earthquakes from %s", url)

        geojson = await asyncio.to_thread(self.fetch_geojson, url)
        earthquakes = parse_earthquakes(geojson)

        logger.info("Fetched %d earthquakes from USGS", len(earthquakes))

        return earthquakes
