import math

import pytest

from geoqueries.core.errors import InvalidCoordinateError, InvalidRadiusError
from geoqueries.core.geo import (
    EARTH_RADIUS_M,
    GeoPoint,
    check_point,
    check_radius,
    distance_m,
    offset,
    round_to,
    to_degrees,
    to_radians,
)

MADRID = GeoPoint(lat=40.0, lng=-3.0)


def test_angle_conversions():
    assert to_radians(180.0) == pytest.approx(math.pi)
    assert to_degrees(math.pi / 2) == pytest.approx(90.0)
    assert to_degrees(to_radians(-3.0)) == pytest.approx(-3.0)


def test_round_to_defaults_to_ten_decimals():
    assert round_to(1.23456789012345) == 1.2345678901
    assert round_to(1.23456, 2) == 1.23


def test_offset_zero_distance_returns_input_point():
    assert offset(MADRID, 0.0, 90.0) == MADRID


def test_offset_north_moves_only_latitude():
    p = offset(MADRID, 1000.0, 0.0)
    assert p.lat == pytest.approx(40.0 + math.degrees(1000.0 / EARTH_RADIUS_M), abs=1e-9)
    assert p.lng == pytest.approx(-3.0, abs=1e-9)


def test_offset_is_reproducible():
    assert offset(MADRID, 1234.5, 37.0) == offset(MADRID, 1234.5, 37.0)


def test_offset_wraps_longitude_across_antimeridian():
    step = math.degrees(10_000.0 / EARTH_RADIUS_M)

    east = offset(GeoPoint(lat=0.0, lng=179.99), 10_000.0, 90.0)
    assert -180.0 <= east.lng < 180.0
    assert east.lng == pytest.approx(179.99 + step - 360.0, abs=1e-6)

    west = offset(GeoPoint(lat=0.0, lng=-179.99), 10_000.0, 270.0)
    assert -180.0 <= west.lng < 180.0
    assert west.lng == pytest.approx(-179.99 - step + 360.0, abs=1e-6)


def test_distance_is_symmetric_and_zero_on_self():
    a = GeoPoint(lat=40.4168, lng=-3.7038)
    b = GeoPoint(lat=41.3874, lng=2.1686)
    assert distance_m(a, b) == distance_m(b, a)
    assert distance_m(a, a) == pytest.approx(0.0, abs=1e-6)


def test_distance_along_meridian_matches_arc_length():
    # 0.005 degrees of latitude ~ 556 m, 0.01 degrees ~ 1112 m.
    assert distance_m(MADRID, GeoPoint(lat=40.005, lng=-3.0)) == pytest.approx(555.97, abs=0.1)
    assert distance_m(MADRID, GeoPoint(lat=40.01, lng=-3.0)) == pytest.approx(1111.95, abs=0.1)


def test_check_point_rejects_out_of_range_and_non_finite():
    assert check_point(MADRID) is MADRID
    assert check_point(GeoPoint(lat=-90.0, lng=180.0))
    with pytest.raises(InvalidCoordinateError, match="Latitude"):
        check_point(GeoPoint(lat=91.0, lng=0.0))
    with pytest.raises(InvalidCoordinateError, match="Longitude"):
        check_point(GeoPoint(lat=0.0, lng=-180.5))
    with pytest.raises(InvalidCoordinateError, match="finite"):
        check_point(GeoPoint(lat=float("nan"), lng=0.0))


def test_check_radius():
    assert check_radius(0) == 0.0
    assert check_radius(250) == 250.0
    with pytest.raises(InvalidRadiusError):
        check_radius(-1.0)
    with pytest.raises(InvalidRadiusError):
        check_radius(float("inf"))
