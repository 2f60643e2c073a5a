"""Surface distance between waypoints: haversine sphere or WGS-84 geodesic."""
from __future__ import annotations

from math import atan2, cos, isfinite, radians, sin, sqrt
from typing import Any, Callable, Dict, Optional

from geopy.distance import geodesic

from gpx_splitter.errors import GeometryError

EARTH_RADIUS_M = 6_371_000.0


# ---------------------------------------------------------------------------
# Formulas
# ---------------------------------------------------------------------------

def haversine_m(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance in metres between two WGS-84 points."""
    lat1r, lon1r, lat2r, lon2r = map(radians, [lat1, lon1, lat2, lon2])
    dlat = lat2r - lat1r
    dlon = lon2r - lon1r
    a = sin(dlat / 2) ** 2 + cos(lat1r) * cos(lat2r) * sin(dlon / 2) ** 2
    # rounding can push a just past 1 for nearly antipodal points
    a = min(1.0, max(0.0, a))
    return EARTH_RADIUS_M * 2 * atan2(sqrt(a), sqrt(1 - a))


def geodesic_m(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Geodesic distance in metres on the WGS-84 ellipsoid (geopy)."""
    try:
        return geodesic((lat1, lon1), (lat2, lon2), ellipsoid="WGS-84").meters
    except ValueError as exc:
        raise GeometryError(f"geodesic distance failed for ({lat1}, {lon1}) -> ({lat2}, {lon2}): {exc}") from exc


METHODS: Dict[str, Callable[[float, float, float, float], float]] = {
    "haversine": haversine_m,
    "geodesic": geodesic_m,
}


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def validate_coordinates(lat: float, lon: float) -> None:
    """Raise ``GeometryError`` unless (lat, lon) is a finite, in-range position."""
    try:
        lat = float(lat)
        lon = float(lon)
    except (TypeError, ValueError) as exc:
        raise GeometryError(f"non-numeric coordinate ({lat!r}, {lon!r})") from exc
    if not (isfinite(lat) and isfinite(lon)):
        raise GeometryError(f"non-finite coordinate ({lat}, {lon})")
    if not -90.0 <= lat <= 90.0:
        raise GeometryError(f"latitude {lat} out of range [-90, 90]")
    if not -180.0 <= lon <= 180.0:
        raise GeometryError(f"longitude {lon} out of range [-180, 180]")


def distance_between(a: Any, b: Any, method: str = "haversine") -> float:
    """
    Distance in metres between two waypoints.

    Waypoints only need ``latitude`` and ``longitude`` attributes (gpxpy
    points qualify). Invalid coordinates raise ``GeometryError``.
    """
    try:
        formula = METHODS[method]
    except KeyError:
        raise ValueError(f"unknown distance method {method!r}, expected one of {sorted(METHODS)}")

    validate_coordinates(a.latitude, a.longitude)
    validate_coordinates(b.latitude, b.longitude)
    return formula(float(a.latitude), float(a.longitude), float(b.latitude), float(b.longitude))


def distance_function(method: Optional[str] = None) -> Callable[[Any, Any], float]:
    """Bind ``distance_between`` to a method (default: ``settings.distance_method``)."""
    if method is None:
        from gpx_splitter.config import settings

        method = settings.distance_method
    if method not in METHODS:
        raise ValueError(f"unknown distance method {method!r}, expected one of {sorted(METHODS)}")

    def _distance(a: Any, b: Any) -> float:
        return distance_between(a, b, method)

    return _distance
