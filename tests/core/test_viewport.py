"""Unit tests for map viewport fitting."""

import pytest

from src.core.viewport import (
    MAX_ZOOM,
    MIN_ZOOM,
    fit_viewport,
    lat_to_y,
    lon_to_x,
    y_to_lat,
)


class TestProjection:
    """Tests for the Web Mercator helpers."""

    def test_origin_is_map_center(self):
        assert lon_to_x(0.0, 0) == pytest.approx(128.0)
        assert lat_to_y(0.0, 0) == pytest.approx(128.0)

    def test_latitude_round_trip(self):
        for lat in (-60.0, -12.5, 0.0, 37.7, 80.0):
            assert y_to_lat(lat_to_y(lat, 5), 5) == pytest.approx(lat)


class TestFitViewport:
    """Tests for fit_viewport() pure function."""

    def test_single_point_uses_max_zoom(self):
        viewport = fit_viewport([(37.7, -122.4)], 800, 400)

        assert viewport.zoom == MAX_ZOOM
        assert viewport.latitude == pytest.approx(37.7)
        assert viewport.longitude == pytest.approx(-122.4)

    def test_worldwide_points_zoom_out(self):
        viewport = fit_viewport([(60.0, -150.0), (-40.0, 170.0)], 800, 400)

        assert viewport.zoom == MIN_ZOOM

    def test_points_fit_inside_image(self):
        points = [(35.0, -120.0), (38.0, -117.0), (36.5, -118.0)]

        viewport = fit_viewport(points, 800, 400)

        span_x = lon_to_x(-117.0, viewport.zoom) - lon_to_x(-120.0, viewport.zoom)
        span_y = lat_to_y(35.0, viewport.zoom) - lat_to_y(38.0, viewport.zoom)
        assert span_x <= 800
        assert span_y <= 400
        assert viewport.longitude == pytest.approx(-118.5)

    def test_zoom_is_tightest_fit(self):
        points = [(35.0, -120.0), (38.0, -117.0)]

        viewport = fit_viewport(points, 800, 400)

        next_zoom = viewport.zoom + 1
        span_x = lon_to_x(-117.0, next_zoom) - lon_to_x(-120.0, next_zoom)
        span_y = lat_to_y(35.0, next_zoom) - lat_to_y(38.0, next_zoom)
        assert span_x > 760 or span_y > 360

    def test_empty_points_raise(self):
        with pytest.raises(ValueError):
            fit_viewport([], 800, 400)
