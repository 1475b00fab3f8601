"""
GeoQueries CLI entrypoint.

This CLI is intended for quick local checks against a JSON record file.
It delegates all filtering to `geoqueries.query.GeoQueries`.
"""

from __future__ import annotations

import argparse
import json
import sys
from dataclasses import asdict
from typing import Any

from geoqueries.catalog.loader import load_records
from geoqueries.config.settings import get_settings
from geoqueries.core.bbox import compute_box
from geoqueries.core.logging import configure_logging
from geoqueries.domain.models import Coordinate, NearbyQuery, RegionQuery
from geoqueries.query import GeoQueries


def _print_json(payload: Any) -> None:
    print(json.dumps(payload, ensure_ascii=False, indent=2))


def _service(args: argparse.Namespace) -> GeoQueries:
    query: dict[str, Any] = {}
    if args.lat_key:
        query["lat_key"] = args.lat_key
    if args.lng_key:
        query["lng_key"] = args.lng_key
    if args.lenient:
        query["missing_field_policy"] = "lenient"
    return GeoQueries(get_settings(), overrides={"query": query} if query else None)


def _cmd_box(args: argparse.Namespace) -> int:
    center = Coordinate(lat=args.lat, lng=args.lng)
    if args.radius_m is not None:
        box = compute_box(center.to_point(), args.radius_m)
    else:
        if args.lat_span is None or args.lng_span is None:
            raise ValueError("box needs either --radius-m or both --lat-span and --lng-span")
        region = RegionQuery(center=center, lat_span_deg=args.lat_span, lng_span_deg=args.lng_span)
        box = compute_box(region.to_region())
    _print_json(asdict(box))
    return 0


def _cmd_within(args: argparse.Namespace) -> int:
    region = RegionQuery(
        center=Coordinate(lat=args.lat, lng=args.lng),
        lat_span_deg=args.lat_span,
        lng_span_deg=args.lng_span,
    )
    records = load_records(args.records)
    _print_json(_service(args).find_in_region(records, region.to_region()))
    return 0


def _cmd_nearby(args: argparse.Namespace) -> int:
    query = NearbyQuery(
        center=Coordinate(lat=args.lat, lng=args.lng),
        radius_m=args.radius_m,
        sort=args.sort,
        distance_key=args.distance_key,
    )
    records = load_records(args.records)
    matches = _service(args).find_nearby_with_distance(
        records,
        query.center.to_point(),
        query.radius_m,
        query.sort_ascending,
        distance_key=query.distance_key,
    )
    _print_json([{"distance_m": m.distance_m, "record": m.record} for m in matches])
    return 0


def _add_record_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--records", required=True, help="JSON file with an array of record objects")
    p.add_argument("--lat-key", type=str, default=None, help="Latitude field name (default from config)")
    p.add_argument("--lng-key", type=str, default=None, help="Longitude field name (default from config)")
    p.add_argument("--lenient", action="store_true", help="Skip records missing lat/lng instead of failing")


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the GeoQueries CLI."""
    parser = argparse.ArgumentParser(prog="geoqueries")
    sub = parser.add_subparsers(dest="command", required=True)

    box = sub.add_parser("box", help="Print the bounding box for a radius or a viewport region.")
    box.add_argument("--lat", required=True, type=float)
    box.add_argument("--lng", required=True, type=float)
    box.add_argument("--radius-m", type=float, default=None)
    box.add_argument("--lat-span", type=float, default=None, help="Full latitude span in degrees")
    box.add_argument("--lng-span", type=float, default=None, help="Full longitude span in degrees")
    box.set_defaults(func=_cmd_box)

    within = sub.add_parser("within", help="Records inside a viewport region.")
    within.add_argument("--lat", required=True, type=float)
    within.add_argument("--lng", required=True, type=float)
    within.add_argument("--lat-span", required=True, type=float)
    within.add_argument("--lng-span", required=True, type=float)
    _add_record_args(within)
    within.set_defaults(func=_cmd_within)

    nearby = sub.add_parser("nearby", help="Records within a radius, with distances in meters.")
    nearby.add_argument("--lat", required=True, type=float)
    nearby.add_argument("--lng", required=True, type=float)
    nearby.add_argument("--radius-m", required=True, type=float)
    nearby.add_argument("--sort", choices=["asc", "desc"], default=None)
    nearby.add_argument("--distance-key", type=str, default=None, help="Existing field that receives the distance")
    _add_record_args(nearby)
    nearby.set_defaults(func=_cmd_nearby)
    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint callable used by `python -m geoqueries.cli`."""
    configure_logging()
    parser = build_parser()
    args = parser.parse_args(argv)
    func: Any = getattr(args, "func")
    try:
        return int(func(args))
    except (ValueError, OSError) as exc:  # GeoQueryError and pydantic ValidationError are ValueErrors
        print(f"error: {exc}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
