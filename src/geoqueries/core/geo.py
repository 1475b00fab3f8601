from __future__ import annotations
import math
from dataclasses import dataclass
from math import asin, atan2, cos, pi, sin, sqrt

from geoqueries.core.errors import InvalidCoordinateError, InvalidRadiusError

"""
Geodesic primitives on a spherical Earth.

We keep a tiny geometry layer here so the box and filter modules can do offset and
distance calculations without pulling in heavier GIS dependencies. Every function is
pure and safe to call from any number of threads.
"""

EARTH_RADIUS_M = 6_371_000.0

# Offsets are rounded after the trigonometry so repeated runs are bit-reproducible.
ROUND_DECIMALS = 10


@dataclass(frozen=True)
class GeoPoint:
    """A latitude/longitude pair in decimal degrees."""

    lat: float
    lng: float


def to_radians(degrees: float) -> float:
    return degrees * (pi / 180.0)


def to_degrees(radians: float) -> float:
    return radians * (180.0 / pi)


def round_to(value: float, decimal_places: int = ROUND_DECIMALS) -> float:
    """Round to a fixed number of decimals to drop floating-point noise."""
    return round(value, decimal_places)


def offset(point: GeoPoint, distance_m: float, bearing_deg: float) -> GeoPoint:
    """Return the point reached from `point` after `distance_m` along `bearing_deg`.

    Bearing is measured clockwise from north (0 = north, 90 = east). The output
    longitude is wrapped into [-180, 180); nothing else is normalized.
    """
    lat1 = to_radians(point.lat)
    lng1 = to_radians(point.lng)
    bearing = to_radians(bearing_deg)
    angular = distance_m / EARTH_RADIUS_M

    lat2 = asin(sin(lat1) * cos(angular) + cos(lat1) * sin(angular) * cos(bearing))
    lng2 = lng1 + atan2(
        sin(bearing) * sin(angular) * cos(lat1),
        cos(angular) - sin(lat1) * sin(lat2),
    )

    if lng2 < -pi:
        lng2 += 2.0 * pi
    elif lng2 >= pi:
        lng2 -= 2.0 * pi

    return GeoPoint(lat=round_to(to_degrees(lat2)), lng=round_to(to_degrees(lng2)))


def distance_m(a: GeoPoint, b: GeoPoint) -> float:
    """Compute great-circle (haversine) distance in meters between two points."""
    lat1 = to_radians(a.lat)
    lng1 = to_radians(a.lng)
    lat2 = to_radians(b.lat)
    lng2 = to_radians(b.lng)

    dlat = lat2 - lat1
    dlng = lng2 - lng1

    h = sin(dlat / 2) ** 2 + cos(lat1) * cos(lat2) * sin(dlng / 2) ** 2
    return 2 * EARTH_RADIUS_M * asin(sqrt(min(1.0, h)))


def check_point(point: GeoPoint) -> GeoPoint:
    """Raise InvalidCoordinateError unless `point` is a finite, in-range coordinate."""
    lat = float(point.lat)
    lng = float(point.lng)
    if not (math.isfinite(lat) and math.isfinite(lng)):
        raise InvalidCoordinateError(f"Coordinate must be finite, got ({lat}, {lng})")
    if not -90.0 <= lat <= 90.0:
        raise InvalidCoordinateError(f"Latitude {lat} is outside [-90, 90]")
    if not -180.0 <= lng <= 180.0:
        raise InvalidCoordinateError(f"Longitude {lng} is outside [-180, 180]")
    return point


def check_radius(radius_m: float) -> float:
    """Raise InvalidRadiusError for negative or non-finite radii; return it as float."""
    r = float(radius_m)
    if not math.isfinite(r) or r < 0:
        raise InvalidRadiusError(f"radius_m must be a finite number >= 0, got {radius_m!r}")
    return r
