"""
In-memory geographic filters over record collections.

Two passes, cheapest first:
1) `filter_by_box`: inclusive lat/lng range check against a `GeoBox`.
2) `filter_by_radius`: box pre-filter with a box covering the whole circle, then an
   exact haversine check on the survivors only. Optional distance annotation and a
   stable sort by distance.

Both are linear scans, keep input order unless a sort is requested, and never mutate
records except for the opt-in distance write-back.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Generic, Iterable, Iterator, Literal, TypeVar

from geoqueries.core.bbox import GeoBox, Region, box_covering_radius, compute_box
from geoqueries.core.errors import InvalidCoordinateError, MissingFieldError
from geoqueries.core.geo import GeoPoint, check_point, check_radius, distance_m
from geoqueries.core.records import DEFAULT_ACCESSOR, RecordAccessor

logger = logging.getLogger(__name__)

T = TypeVar("T")

MissingFieldPolicy = Literal["strict", "lenient"]
MISSING_FIELD_POLICIES: tuple[str, ...] = ("strict", "lenient")


@dataclass(frozen=True)
class DistanceMatch(Generic[T]):
    """A record kept by the radius filter, paired with its distance to the center."""

    record: T
    distance_m: float


def _check_policy(on_missing: str) -> None:
    if on_missing not in MISSING_FIELD_POLICIES:
        raise ValueError(f"on_missing must be one of {MISSING_FIELD_POLICIES}, got {on_missing!r}")


def _read_latlng(record: T, *, accessor: RecordAccessor, lat_key: str, lng_key: str) -> tuple[float, float]:
    lat = accessor.get_numeric_field(record, lat_key)
    if lat is None:
        raise MissingFieldError(lat_key, record)
    lng = accessor.get_numeric_field(record, lng_key)
    if lng is None:
        raise MissingFieldError(lng_key, record)
    return lat, lng


def _box_pass(
    records: Iterable[T],
    box: GeoBox,
    *,
    accessor: RecordAccessor,
    lat_key: str,
    lng_key: str,
    on_missing: MissingFieldPolicy,
) -> Iterator[tuple[T, float, float]]:
    """Yield (record, lat, lng) for records inside `box`, in input order."""
    skipped = 0
    for record in records:
        try:
            lat, lng = _read_latlng(record, accessor=accessor, lat_key=lat_key, lng_key=lng_key)
        except (MissingFieldError, InvalidCoordinateError):
            if on_missing == "strict":
                raise
            skipped += 1
            continue
        if box.contains_latlng(lat, lng):
            yield record, lat, lng
    if skipped:
        logger.debug("Skipped %d record(s) without usable '%s'/'%s' fields.", skipped, lat_key, lng_key)


def filter_by_box(
    records: Iterable[T],
    box: GeoBox,
    lat_key: str = "lat",
    lng_key: str = "lng",
    *,
    accessor: RecordAccessor | None = None,
    on_missing: MissingFieldPolicy = "strict",
) -> list[T]:
    """Return the records whose coordinates fall inside `box` (edges included)."""
    _check_policy(on_missing)
    return [
        record
        for record, _, _ in _box_pass(
            records,
            box,
            accessor=accessor or DEFAULT_ACCESSOR,
            lat_key=lat_key,
            lng_key=lng_key,
            on_missing=on_missing,
        )
    ]


def filter_in_region(
    records: Iterable[T],
    region: Region,
    lat_key: str = "lat",
    lng_key: str = "lng",
    *,
    accessor: RecordAccessor | None = None,
    on_missing: MissingFieldPolicy = "strict",
) -> list[T]:
    """Box filter for a map viewport."""
    return filter_by_box(
        records, compute_box(region), lat_key, lng_key, accessor=accessor, on_missing=on_missing
    )


def sort_by_distance(matches: Iterable[DistanceMatch[T]], *, ascending: bool = True) -> list[DistanceMatch[T]]:
    """Stable sort by distance; ties keep their incoming order in both directions."""
    return sorted(matches, key=lambda m: m.distance_m, reverse=not ascending)


def annotate_distances(
    matches: Iterable[DistanceMatch[T]], distance_key: str, *, accessor: RecordAccessor | None = None
) -> int:
    """Write each match's distance into `distance_key` where the record has that field.

    Returns how many records were written.
    """
    acc = accessor or DEFAULT_ACCESSOR
    return sum(1 for m in matches if acc.set_numeric_field(m.record, distance_key, m.distance_m))


def filter_by_radius_with_distance(
    records: Iterable[T],
    center: GeoPoint,
    radius_m: float,
    sort_ascending: bool | None = None,
    lat_key: str = "lat",
    lng_key: str = "lng",
    distance_key: str | None = None,
    *,
    accessor: RecordAccessor | None = None,
    on_missing: MissingFieldPolicy = "strict",
    validate_center: bool = True,
) -> list[DistanceMatch[T]]:
    """Records within `radius_m` meters of `center`, each paired with its distance.

    If `distance_key` is given, the distance is also written into that field of every
    kept record that already has it, once the whole scan has succeeded; a strict-mode
    failure leaves every record untouched. `sort_ascending=None` keeps input order.
    """
    _check_policy(on_missing)
    r = check_radius(radius_m)
    if validate_center:
        check_point(center)
    acc = accessor or DEFAULT_ACCESSOR

    candidates = 0
    matches: list[DistanceMatch[T]] = []
    for record, lat, lng in _box_pass(
        records,
        box_covering_radius(center, r),
        accessor=acc,
        lat_key=lat_key,
        lng_key=lng_key,
        on_missing=on_missing,
    ):
        candidates += 1
        d = distance_m(GeoPoint(lat=lat, lng=lng), center)
        if d > r:
            continue
        matches.append(DistanceMatch(record=record, distance_m=d))

    logger.debug(
        "Radius filter kept %d of %d box candidates (center=%.6f,%.6f radius_m=%.1f).",
        len(matches),
        candidates,
        center.lat,
        center.lng,
        r,
    )

    if distance_key:
        annotate_distances(matches, distance_key, accessor=acc)

    if sort_ascending is None:
        return matches
    return sort_by_distance(matches, ascending=sort_ascending)


def filter_by_radius(
    records: Iterable[T],
    center: GeoPoint,
    radius_m: float,
    sort_ascending: bool | None = None,
    lat_key: str = "lat",
    lng_key: str = "lng",
    distance_key: str | None = None,
    *,
    accessor: RecordAccessor | None = None,
    on_missing: MissingFieldPolicy = "strict",
    validate_center: bool = True,
) -> list[T]:
    """Like `filter_by_radius_with_distance`, returning only the records."""
    matches = filter_by_radius_with_distance(
        records,
        center,
        radius_m,
        sort_ascending,
        lat_key,
        lng_key,
        distance_key,
        accessor=accessor,
        on_missing=on_missing,
        validate_center=validate_center,
    )
    return [m.record for m in matches]
