import math

import pytest

from geoqueries.core.bbox import (
    box_covering_radius,
    EAST,
    NORTH,
    SOUTH,
    WEST,
    GeoBox,
    Region,
    box_from_radius,
    box_from_region,
    compute_box,
)
from geoqueries.core.errors import InvalidCoordinateError, InvalidRadiusError
from geoqueries.core.geo import EARTH_RADIUS_M, GeoPoint, offset


def test_box_from_region_uses_half_spans():
    box = box_from_region(GeoPoint(lat=40.0, lng=-3.0), 2.0, 4.0)
    assert box.top_left == GeoPoint(lat=41.0, lng=-5.0)
    assert box.bottom_right == GeoPoint(lat=39.0, lng=-1.0)


def test_box_from_region_rejects_negative_spans():
    with pytest.raises(InvalidCoordinateError):
        box_from_region(GeoPoint(lat=40.0, lng=-3.0), -1.0, 1.0)


@pytest.mark.parametrize(
    "center",
    [GeoPoint(lat=40.0, lng=-3.0), GeoPoint(lat=-33.87, lng=151.21), GeoPoint(lat=64.1, lng=-21.9)],
)
@pytest.mark.parametrize("radius_m", [0.0, 1.0, 1000.0, 50_000.0])
def test_radius_box_contains_cardinal_offsets(center, radius_m):
    box = box_from_radius(center, radius_m)
    for bearing in (NORTH, EAST, SOUTH, WEST):
        assert box.contains(offset(center, radius_m, bearing))
    assert box.contains(center)


def test_radius_box_corners_come_from_offsets():
    center = GeoPoint(lat=40.0, lng=-3.0)
    box = box_from_radius(center, 1000.0)
    assert box.top_left == GeoPoint(lat=offset(center, 1000.0, NORTH).lat, lng=offset(center, 1000.0, WEST).lng)
    assert box.bottom_right == GeoPoint(
        lat=offset(center, 1000.0, SOUTH).lat, lng=offset(center, 1000.0, EAST).lng
    )
    assert box.north >= box.south
    assert box.west <= box.east


def test_zero_radius_box_collapses_to_center():
    center = GeoPoint(lat=40.0, lng=-3.0)
    box = box_from_radius(center, 0.0)
    assert box.top_left == center
    assert box.bottom_right == center


def test_radius_box_rejects_negative_radius():
    with pytest.raises(InvalidRadiusError):
        box_from_radius(GeoPoint(lat=40.0, lng=-3.0), -5.0)


def test_compute_box_dispatches_on_argument_type():
    center = GeoPoint(lat=40.0, lng=-3.0)
    region = Region(center=center, lat_span_deg=0.5, lng_span_deg=0.5)

    assert compute_box(region) == box_from_region(center, 0.5, 0.5)
    assert compute_box(center, 1000.0) == box_from_radius(center, 1000.0)

    with pytest.raises(TypeError):
        compute_box(center)
    with pytest.raises(TypeError):
        compute_box(region, 1000.0)


def test_box_contains_is_inclusive_and_round_trips_to_region():
    box = GeoBox(top_left=GeoPoint(lat=41.0, lng=-5.0), bottom_right=GeoPoint(lat=39.0, lng=-1.0))
    assert box.contains(GeoPoint(lat=41.0, lng=-5.0))
    assert box.contains(GeoPoint(lat=39.0, lng=-1.0))
    assert not box.contains(GeoPoint(lat=41.0001, lng=-3.0))
    assert not box.contains(GeoPoint(lat=40.0, lng=-0.9999))

    region = box.to_region()
    assert region.center == GeoPoint(lat=40.0, lng=-3.0)
    assert region.lat_span_deg == pytest.approx(2.0)
    assert region.lng_span_deg == pytest.approx(4.0)
    assert compute_box(region) == box


def test_box_from_region_rejects_non_finite_spans():
    with pytest.raises(InvalidCoordinateError):
        box_from_region(GeoPoint(lat=40.0, lng=-3.0), float("nan"), 1.0)
    with pytest.raises(InvalidCoordinateError):
        box_from_region(GeoPoint(lat=40.0, lng=-3.0), 1.0, float("inf"))


@pytest.mark.parametrize("center", [GeoPoint(lat=40.0, lng=-3.0), GeoPoint(lat=64.1, lng=-21.9), GeoPoint(lat=-70.0, lng=10.0)])
@pytest.mark.parametrize("radius_m", [1000.0, 50_000.0, 300_000.0])
def test_covering_box_contains_radius_box_and_tangent_points(center, radius_m):
    covering = box_covering_radius(center, radius_m)
    cardinal = box_from_radius(center, radius_m)

    assert covering.north == cardinal.north
    assert covering.south == cardinal.south
    assert covering.west <= cardinal.west
    assert covering.east >= cardinal.east

    d = radius_m / EARTH_RADIUS_M
    lat0 = math.radians(center.lat)
    tangent_lat = math.degrees(math.asin(math.sin(lat0) / math.cos(d)))
    widest = math.degrees(math.asin(math.sin(d) / math.cos(lat0)))
    assert covering.contains(GeoPoint(lat=tangent_lat, lng=center.lng + 0.9999 * widest))
    assert covering.contains(GeoPoint(lat=tangent_lat, lng=center.lng - 0.9999 * widest))


def test_covering_box_spans_all_longitudes_when_circle_reaches_a_pole():
    box = box_covering_radius(GeoPoint(lat=89.9, lng=0.0), 50_000.0)
    assert box.north == 90.0
    assert box.west == -180.0
    assert box.east == 180.0

    south_box = box_covering_radius(GeoPoint(lat=-89.95, lng=30.0), 10_000.0)
    assert south_box.south == -90.0
    assert (south_box.west, south_box.east) == (-180.0, 180.0)
