from __future__ import annotations

# This module is the store-style entry point ("find records in a region / box / near a point").
# It wires together:
# - settings (default field names, missing-field policy, validation, parallelism)
# - the pure core filters (box pass, radius pass, partitioned execution)
#
# The core filters take every knob as an argument; this class only resolves defaults so
# callers do not have to repeat field names on every call.

import logging
from typing import Any, Iterable, Mapping, TypeVar

from geoqueries.config.overrides import apply_settings_overrides
from geoqueries.config.settings import Settings, get_settings
from geoqueries.core.bbox import GeoBox, Region, compute_box
from geoqueries.core.filters import DistanceMatch, MissingFieldPolicy, filter_by_box
from geoqueries.core.geo import GeoPoint, check_point
from geoqueries.core.parallel import filter_by_radius_partitioned
from geoqueries.core.records import DEFAULT_ACCESSOR, RecordAccessor

logger = logging.getLogger(__name__)

T = TypeVar("T")


class GeoQueries:
    """Geographic finders over in-memory record collections, configured from settings."""

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        overrides: Mapping[str, Any] | None = None,
        accessor: RecordAccessor | None = None,
    ):
        # Injected settings (tests) or the cached YAML defaults; overrides never touch the shared copy.
        self.settings = apply_settings_overrides(settings or get_settings(), overrides)
        self.accessor = accessor or DEFAULT_ACCESSOR

    def _policy(self, on_missing: MissingFieldPolicy | None) -> MissingFieldPolicy:
        return on_missing or self.settings.query.missing_field_policy

    def find_in_box(
        self,
        records: Iterable[T],
        box: GeoBox,
        *,
        lat_key: str | None = None,
        lng_key: str | None = None,
        on_missing: MissingFieldPolicy | None = None,
    ) -> list[T]:
        q = self.settings.query
        return filter_by_box(
            records,
            box,
            lat_key or q.lat_key,
            lng_key or q.lng_key,
            accessor=self.accessor,
            on_missing=self._policy(on_missing),
        )

    def find_in_region(
        self,
        records: Iterable[T],
        region: Region,
        *,
        lat_key: str | None = None,
        lng_key: str | None = None,
        on_missing: MissingFieldPolicy | None = None,
    ) -> list[T]:
        if self.settings.query.validate_coordinates:
            check_point(region.center)
        return self.find_in_box(
            records, compute_box(region), lat_key=lat_key, lng_key=lng_key, on_missing=on_missing
        )

    def find_nearby_with_distance(
        self,
        records: Iterable[T],
        center: GeoPoint,
        radius_m: float,
        sort_ascending: bool | None = None,
        *,
        lat_key: str | None = None,
        lng_key: str | None = None,
        distance_key: str | None = None,
        on_missing: MissingFieldPolicy | None = None,
    ) -> list[DistanceMatch[T]]:
        q = self.settings.query
        p = self.settings.parallel
        matches = filter_by_radius_partitioned(
            records,
            center,
            radius_m,
            sort_ascending,
            lat_key or q.lat_key,
            lng_key or q.lng_key,
            distance_key or q.distance_key,
            accessor=self.accessor,
            on_missing=self._policy(on_missing),
            validate_center=q.validate_coordinates,
            partition_size=p.partition_size,
            max_workers=p.max_workers,
        )
        logger.info(
            "Found %d record(s) within %.1f m of (%.6f, %.6f).",
            len(matches),
            float(radius_m),
            center.lat,
            center.lng,
        )
        return matches

    def find_nearby(
        self,
        records: Iterable[T],
        center: GeoPoint,
        radius_m: float,
        sort_ascending: bool | None = None,
        *,
        lat_key: str | None = None,
        lng_key: str | None = None,
        distance_key: str | None = None,
        on_missing: MissingFieldPolicy | None = None,
    ) -> list[T]:
        matches = self.find_nearby_with_distance(
            records,
            center,
            radius_m,
            sort_ascending,
            lat_key=lat_key,
            lng_key=lng_key,
            distance_key=distance_key,
            on_missing=on_missing,
        )
        return [m.record for m in matches]
