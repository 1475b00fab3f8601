"""
Data-parallel radius filtering.

The input is cut into contiguous partitions, each partition is filtered on a worker
thread, and the partial results are merged back so the output is identical to the
sequential `filter_by_radius_with_distance` call:
- unsorted: partitions are concatenated in input order,
- sorted: per-partition sorted runs are k-way merged (ties keep partition order).
"""

from __future__ import annotations

import heapq
import logging
from concurrent.futures import ThreadPoolExecutor
from itertools import chain
from typing import Iterable, TypeVar

from geoqueries.core.filters import (
    DistanceMatch,
    MissingFieldPolicy,
    annotate_distances,
    filter_by_radius_with_distance,
)
from geoqueries.core.geo import GeoPoint, check_point, check_radius
from geoqueries.core.records import RecordAccessor

logger = logging.getLogger(__name__)

T = TypeVar("T")


def partition(records: Iterable[T], size: int) -> list[list[T]]:
    """Split records into contiguous chunks of at most `size` items."""
    if int(size) <= 0:
        raise ValueError("partition size must be > 0")
    items = list(records)
    return [items[i : i + size] for i in range(0, len(items), size)]


def merge_sorted_runs(
    runs: list[list[DistanceMatch[T]]], *, ascending: bool = True
) -> list[DistanceMatch[T]]:
    """K-way merge of runs that are each already sorted in the requested direction."""
    return list(heapq.merge(*runs, key=lambda m: m.distance_m, reverse=not ascending))


def filter_by_radius_partitioned(
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
    partition_size: int = 5000,
    max_workers: int = 4,
) -> list[DistanceMatch[T]]:
    """Run the radius filter per partition on a thread pool and merge the results."""
    # Fail fast before spinning up workers.
    check_radius(radius_m)
    if validate_center:
        check_point(center)

    chunks = partition(records, partition_size)
    kwargs = dict(
        sort_ascending=sort_ascending,
        lat_key=lat_key,
        lng_key=lng_key,
        accessor=accessor,
        on_missing=on_missing,
        validate_center=False,
    )

    if len(chunks) <= 1 or int(max_workers) <= 1:
        runs = [filter_by_radius_with_distance(chunk, center, radius_m, **kwargs) for chunk in chunks]
    else:
        logger.debug("Filtering %d partition(s) with max_workers=%d.", len(chunks), max_workers)
        with ThreadPoolExecutor(max_workers=int(max_workers)) as pool:
            futures = [
                pool.submit(filter_by_radius_with_distance, chunk, center, radius_m, **kwargs)
                for chunk in chunks
            ]
            runs = [f.result() for f in futures]

    # Annotate only after every partition succeeded, so a strict failure writes nothing.
    if sort_ascending is None:
        merged = list(chain.from_iterable(runs))
    else:
        merged = merge_sorted_runs(runs, ascending=sort_ascending)
    if distance_key:
        annotate_distances(merged, distance_key, accessor=accessor)
    return merged
