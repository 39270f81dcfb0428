"""Unit tests for refresh queries and feed URL construction."""

import pytest

from src.core.query import (
    USGS_FEED_BASE,
    RefreshQuery,
    TimeWindow,
    build_feed_url,
    make_query,
)


class TestTimeWindowParse:
    """Tests for TimeWindow.parse()."""

    @pytest.mark.parametrize("value,expected", [
        ("hour", TimeWindow.HOUR),
        ("day", TimeWindow.DAY),
        ("week", TimeWindow.WEEK),
        ("month", TimeWindow.MONTH),
        (" Week ", TimeWindow.WEEK),
    ])
    def test_parses_known_values(self, value, expected):
        assert TimeWindow.parse(value) is expected

    @pytest.mark.parametrize("value", ["year", "", "30d", None])
    def test_unknown_value_falls_back_to_day(self, value):
        assert TimeWindow.parse(value) is TimeWindow.DAY

    def test_passes_enum_through(self):
        assert TimeWindow.parse(TimeWindow.MONTH) is TimeWindow.MONTH


class TestBuildFeedUrl:
    """Tests for build_feed_url() pure function."""

    @pytest.mark.parametrize("window", ["day", "week", "month"])
    def test_url_is_keyed_by_window_and_magnitude(self, window):
        query = make_query(window, "4.5")

        assert build_feed_url(query) == f"{USGS_FEED_BASE}/4.5_{window}.geojson"

    @pytest.mark.parametrize("magnitude", ["all", "1.0", "2.5", "4.5", "significant"])
    def test_hour_window_always_uses_all_hour_feed(self, magnitude):
        query = make_query("hour", magnitude)

        assert build_feed_url(query) == f"{USGS_FEED_BASE}/all_hour.geojson"

    def test_unknown_window_uses_day_endpoint(self):
        query = make_query("fortnight", "2.5")

        assert build_feed_url(query) == f"{USGS_FEED_BASE}/2.5_day.geojson"

    def test_all_and_significant_levels(self):
        assert build_feed_url(make_query("hour", "all")).endswith("/all_hour.geojson")
        assert build_feed_url(make_query("month", "significant")).endswith(
            "/significant_month.geojson"
        )

    def test_custom_base_url_trailing_slash(self):
        query = RefreshQuery(TimeWindow.WEEK, "1.0")

        url = build_feed_url(query, "https://feeds.example.com/summary/")

        assert url == "https://feeds.example.com/summary/1.0_week.geojson"

    def test_is_deterministic(self):
        query = make_query("week", "2.5")

        assert build_feed_url(query) == build_feed_url(query)


class TestMakeQuery:
    """Tests for make_query()."""

    def test_stringifies_numeric_magnitude(self):
        query = make_query("day", 4.5)

        assert query.min_magnitude == "4.5"

    def test_query_is_immutable(self):
        query = make_query("day", "2.5")

        with pytest.raises(AttributeError):
            query.min_magnitude = "4.5"

    def test_equal_inputs_give_equal_queries(self):
        assert make_query("day", "2.5") == RefreshQuery(TimeWindow.DAY, "2.5")
