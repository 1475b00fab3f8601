"""
Request models (Pydantic).

These types are the validated "contract" for inputs that arrive as JSON or CLI
arguments. They reject bad coordinates early and convert into the plain core types
(`GeoPoint`, `Region`) that the geometry and filter layers work with.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from geoqueries.core.bbox import Region
from geoqueries.core.geo import GeoPoint


class Coordinate(BaseModel):
    """A geographic point in decimal degrees."""

    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)

    def to_point(self) -> GeoPoint:
        return GeoPoint(lat=self.lat, lng=self.lng)


class RegionQuery(BaseModel):
    """A map viewport: center plus full spans in degrees."""

    center: Coordinate
    lat_span_deg: float = Field(..., ge=0, le=180)
    lng_span_deg: float = Field(..., ge=0, le=360)

    def to_region(self) -> Region:
        return Region(
            center=self.center.to_point(),
            lat_span_deg=self.lat_span_deg,
            lng_span_deg=self.lng_span_deg,
        )


class NearbyQuery(BaseModel):
    """Radius search around a center point."""

    center: Coordinate
    radius_m: float = Field(..., ge=0)
    sort: Literal["asc", "desc"] | None = None
    distance_key: str | None = None

    @property
    def sort_ascending(self) -> bool | None:
        if self.sort is None:
            return None
        return self.sort == "asc"
