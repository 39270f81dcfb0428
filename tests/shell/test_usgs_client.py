"""Tests for the USGS feed client.

Uses the `responses` library to mock HTTP requests.
"""

import pytest
import requests
import responses

from src.core.errors import NetworkFailure, ParseFailure
from src.core.query import make_query
from src.shell.usgs_client import USGSFeedClient


BASE_URL = "https://feeds.example.com/summary"
DAY_URL = f"{BASE_URL}/2.5_day.geojson"

FEED_BODY = {
    "type": "FeatureCollection",
    "features": [
        {
            "id": "us1",
            "properties": {"mag": 5.1, "place": "Chile", "time": 1700000000000},
            "geometry": {"coordinates": [-71.0, -30.0, 35.0]},
        },
        {
            "id": "us2",
            "properties": {"mag": None, "place": "Alaska", "time": 1700000060000},
            "geometry": {"coordinates": [-150.0, 61.0, 12.0]},
        },
    ],
}


@pytest.fixture
def client():
    return USGSFeedClient(base_url=BASE_URL, timeout=5)


class TestFetchGeojson:
    """Tests for USGSFeedClient.fetch_geojson()."""

    @responses.activate
    def test_returns_decoded_body(self, client):
        responses.add(responses.GET, DAY_URL, json=FEED_BODY, status=200)

        assert client.fetch_geojson(DAY_URL) == FEED_BODY

    @responses.activate
    def test_non_2xx_raises_network_failure(self, client):
        responses.add(responses.GET, DAY_URL, body="oops", status=503)

        with pytest.raises(NetworkFailure, match="503"):
            client.fetch_geojson(DAY_URL)

    @responses.activate
    def test_connection_error_raises_network_failure(self, client):
        responses.add(responses.GET, DAY_URL, body=requests.ConnectionError("DNS failure"))

        with pytest.raises(NetworkFailure):
            client.fetch_geojson(DAY_URL)

    @responses.activate
    def test_timeout_raises_network_failure(self, client):
        responses.add(responses.GET, DAY_URL, body=requests.Timeout("slow"))

        with pytest.raises(NetworkFailure, match="timed out"):
            client.fetch_geojson(DAY_URL)

    @responses.activate
    def test_malformed_json_raises_parse_failure(self, client):
        responses.add(responses.GET, DAY_URL, body="{not json", status=200)

        with pytest.raises(ParseFailure):
            client.fetch_geojson(DAY_URL)


class TestFetch:
    """Tests for the async USGSFeedClient.fetch()."""

    @pytest.mark.asyncio
    async def test_fetches_url_for_query_and_parses(self, client):
        with responses.RequestsMock() as rsps:
            rsps.add(responses.GET, f"{BASE_URL}/4.5_week.geojson", json=FEED_BODY)

            result = await client.fetch(make_query("week", "4.5"))

            assert len(rsps.calls) == 1

        assert [e.id for e in result] == ["us1", "us2"]
        assert result[1].magnitude is None

    @pytest.mark.asyncio
    async def test_unknown_window_requests_day_feed(self, client):
        with responses.RequestsMock() as rsps:
            rsps.add(responses.GET, DAY_URL, json={"features": []})

            result = await client.fetch(make_query("decade", "2.5"))

        assert result == []

    @pytest.mark.asyncio
    async def test_non_collection_payload_raises_parse_failure(self, client):
        with responses.RequestsMock() as rsps:
            rsps.add(responses.GET, DAY_URL, json=[1, 2, 3])

            with pytest.raises(ParseFailure):
                await client.fetch(make_query("day", "2.5"))

    @pytest.mark.asyncio
    async def test_does_not_retry(self, client):
        with responses.RequestsMock() as rsps:
            rsps.add(responses.GET, DAY_URL, status=500)

            with pytest.raises(NetworkFailure):
                await client.fetch(make_query("day", "2.5"))

            assert len(rsps.calls) == 1
