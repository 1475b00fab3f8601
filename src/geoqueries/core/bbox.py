"""
Axis-aligned latitude/longitude boxes.

A `GeoBox` is the cheap first-pass filter: either a map viewport (`Region`) turned
into corners with flat arithmetic, or the box circumscribing a radius around a
center, built from geodesic offsets in the four cardinal bearings.

Boxes crossing the anti-meridian or reaching a pole are not special-cased; their
corners come out inverted or degenerate.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from geoqueries.core.errors import InvalidCoordinateError
from geoqueries.core.geo import EARTH_RADIUS_M, GeoPoint, check_radius, offset, to_degrees, to_radians

NORTH = 0.0
EAST = 90.0
SOUTH = 180.0
WEST = 270.0


@dataclass(frozen=True)
class Region:
    """A map viewport: center plus full latitude/longitude spans in degrees."""

    center: GeoPoint
    lat_span_deg: float
    lng_span_deg: float


@dataclass(frozen=True)
class GeoBox:
    """Box given by its top-left (max lat, min lng) and bottom-right (min lat, max lng) corners."""

    top_left: GeoPoint
    bottom_right: GeoPoint

    @property
    def north(self) -> float:
        return self.top_left.lat

    @property
    def south(self) -> float:
        return self.bottom_right.lat

    @property
    def west(self) -> float:
        return self.top_left.lng

    @property
    def east(self) -> float:
        return self.bottom_right.lng

    @property
    def lat_span(self) -> float:
        return self.north - self.south

    @property
    def lng_span(self) -> float:
        return self.east - self.west

    @property
    def center(self) -> GeoPoint:
        return GeoPoint(lat=(self.north + self.south) / 2.0, lng=(self.west + self.east) / 2.0)

    def contains_latlng(self, lat: float, lng: float) -> bool:
        # Inclusive on every edge.
        return self.south <= lat <= self.north and self.west <= lng <= self.east

    def contains(self, point: GeoPoint) -> bool:
        return self.contains_latlng(point.lat, point.lng)

    def to_region(self) -> Region:
        return Region(center=self.center, lat_span_deg=self.lat_span, lng_span_deg=self.lng_span)


def box_from_region(center: GeoPoint, lat_span_deg: float, lng_span_deg: float) -> GeoBox:
    """Flat viewport box: half the span on each side of the center, no geodesics."""
    lat_span = float(lat_span_deg)
    lng_span = float(lng_span_deg)
    if not (math.isfinite(lat_span) and math.isfinite(lng_span)) or lat_span < 0 or lng_span < 0:
        raise InvalidCoordinateError(
            f"Region spans must be finite and >= 0, got lat_span={lat_span_deg!r} lng_span={lng_span_deg!r}"
        )
    return GeoBox(
        top_left=GeoPoint(lat=center.lat + lat_span / 2.0, lng=center.lng - lng_span / 2.0),
        bottom_right=GeoPoint(lat=center.lat - lat_span / 2.0, lng=center.lng + lng_span / 2.0),
    )


def box_from_radius(center: GeoPoint, radius_m: float) -> GeoBox:
    """Box through the north, east, south and west offsets of `center` at `radius_m`.

    Away from the equator the circle bulges past the east/west offsets in longitude;
    use `box_covering_radius` when every point of the circle must be inside.
    """
    r = check_radius(radius_m)
    top = offset(center, r, NORTH)
    right = offset(center, r, EAST)
    bottom = offset(center, r, SOUTH)
    left = offset(center, r, WEST)
    return GeoBox(
        top_left=GeoPoint(lat=top.lat, lng=left.lng),
        bottom_right=GeoPoint(lat=bottom.lat, lng=right.lng),
    )


def compute_box(target: GeoPoint | Region, radius_m: float | None = None) -> GeoBox:
    """Build a box from either a `Region` or a center point plus radius."""
    if isinstance(target, Region):
        if radius_m is not None:
            raise TypeError("radius_m is not accepted when computing a box from a Region")
        return box_from_region(target.center, target.lat_span_deg, target.lng_span_deg)
    if radius_m is None:
        raise TypeError("radius_m is required when computing a box from a center point")
    return box_from_radius(target, radius_m)


def box_covering_radius(center: GeoPoint, radius_m: float) -> GeoBox:
    """`box_from_radius` widened so it holds every point within `radius_m` of `center`.

    The widest longitude of the circle is reached at the tangent points,
    asin(sin(d) / cos(lat)) from the center, not at the east/west offsets. A circle that
    reaches a pole spans every longitude and extends to that pole.
    """
    box = box_from_radius(center, radius_m)
    angular = float(radius_m) / EARTH_RADIUS_M
    north, south, west, east = box.north, box.south, box.west, box.east

    if center.lat + to_degrees(angular) >= 90.0:
        north = 90.0
    if center.lat - to_degrees(angular) <= -90.0:
        south = -90.0

    cos_lat = math.cos(to_radians(center.lat))
    sin_d = math.sin(angular)
    if north == 90.0 or south == -90.0 or sin_d >= cos_lat:
        west, east = -180.0, 180.0
    else:
        half_width = to_degrees(math.asin(sin_d / cos_lat))
        west = min(west, center.lng - half_width)
        east = max(east, center.lng + half_width)

    return GeoBox(top_left=GeoPoint(lat=north, lng=west), bottom_right=GeoPoint(lat=south, lng=east))
