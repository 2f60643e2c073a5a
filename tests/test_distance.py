"""Tests for surface distance calculations."""
import math
import unittest

from gpxpy.gpx import GPXTrackPoint

from gpx_splitter.errors import GeometryError
from gpx_splitter.geo.distance import (
    distance_between,
    distance_function,
    geodesic_m,
    haversine_m,
    validate_coordinates,
)


class TestFormulas(unittest.TestCase):
    """Haversine and WGS-84 geodesic against known values."""

    def test_haversine_one_degree_on_equator(self):
        expected = 2 * math.pi * 6_371_000.0 / 360
        self.assertAlmostEqual(haversine_m(0.0, 0.0, 0.0, 1.0), expected, places=3)

    def test_haversine_same_point_is_zero(self):
        self.assertEqual(haversine_m(45.0, 7.0, 45.0, 7.0), 0.0)

    def test_haversine_is_symmetric(self):
        a = haversine_m(50.0, 30.0, 50.01, 30.02)
        b = haversine_m(50.01, 30.02, 50.0, 30.0)
        self.assertAlmostEqual(a, b, places=6)

    def test_haversine_nearly_antipodal_points(self):
        # sin/cos rounding puts the haversine term just above 1 here
        d = haversine_m(66.16849958870057, -92.19208432063249, -66.16849958870057, 87.80791567936751)
        self.assertAlmostEqual(d, math.pi * 6_371_000.0, delta=1.0)

    def test_geodesic_flinders_peak_to_buninyong(self):
        d = geodesic_m(-37.95103342, 144.42486789, -37.65282114, 143.92649554)
        self.assertAlmostEqual(d, 54972.271, delta=0.01)

    def test_geodesic_one_degree_on_equator(self):
        self.assertAlmostEqual(geodesic_m(0.0, 0.0, 0.0, 1.0), 111319.491, delta=0.01)

    def test_geodesic_and_haversine_agree_closely(self):
        h = haversine_m(49.0, -114.0, 49.2, -114.3)
        g = geodesic_m(49.0, -114.0, 49.2, -114.3)
        self.assertLess(abs(h - g) / g, 0.005)

    def test_geodesic_coincident_points(self):
        self.assertEqual(geodesic_m(10.0, 10.0, 10.0, 10.0), 0.0)

    def test_geodesic_antipodal_points(self):
        self.assertAlmostEqual(geodesic_m(0.0, 0.0, 0.0, 180.0), 20003931.46, delta=1.0)

    def test_geodesic_bad_latitude_is_geometry_error(self):
        with self.assertRaises(GeometryError):
            geodesic_m(95.0, 0.0, 0.0, 0.0)


class TestValidation(unittest.TestCase):
    """Coordinate validation raises GeometryError."""

    def test_valid_coordinates_pass(self):
        validate_coordinates(90.0, -180.0)
        validate_coordinates(-90.0, 180.0)
        validate_coordinates(0, 0)

    def test_nan_rejected(self):
        with self.assertRaises(GeometryError):
            validate_coordinates(float("nan"), 0.0)

    def test_infinite_rejected(self):
        with self.assertRaises(GeometryError):
            validate_coordinates(0.0, float("inf"))

    def test_latitude_out_of_range(self):
        with self.assertRaises(GeometryError) as ctx:
            validate_coordinates(91.0, 0.0)
        self.assertIn("latitude", str(ctx.exception))

    def test_longitude_out_of_range(self):
        with self.assertRaises(GeometryError) as ctx:
            validate_coordinates(0.0, -180.5)
        self.assertIn("longitude", str(ctx.exception))

    def test_missing_coordinate(self):
        with self.assertRaises(GeometryError):
            validate_coordinates(None, 0.0)


class TestDistanceBetween(unittest.TestCase):
    """Waypoint-level distance."""

    def test_uses_latitude_and_longitude(self):
        a = GPXTrackPoint(0.0, 0.0)
        b = GPXTrackPoint(0.0, 1.0)
        self.assertAlmostEqual(distance_between(a, b), haversine_m(0.0, 0.0, 0.0, 1.0))

    def test_geodesic_method(self):
        a = GPXTrackPoint(0.0, 0.0)
        b = GPXTrackPoint(0.0, 1.0)
        self.assertAlmostEqual(distance_between(a, b, "geodesic"), geodesic_m(0.0, 0.0, 0.0, 1.0))

    def test_invalid_waypoint_raises(self):
        a = GPXTrackPoint(0.0, 0.0)
        b = GPXTrackPoint(120.0, 1.0)
        with self.assertRaises(GeometryError):
            distance_between(a, b)

    def test_unknown_method(self):
        a = GPXTrackPoint(0.0, 0.0)
        with self.assertRaises(ValueError):
            distance_between(a, a, "flat-earth")
        with self.assertRaises(ValueError):
            distance_function("flat-earth")

    def test_distance_function_binds_method(self):
        a = GPXTrackPoint(-37.95103342, 144.42486789)
        b = GPXTrackPoint(-37.65282114, 143.92649554)
        self.assertAlmostEqual(distance_function("geodesic")(a, b), 54972.271, delta=0.01)


if __name__ == "__main__":
    unittest.main()
