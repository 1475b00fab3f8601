"""
Error types raised by the geometry and filtering layers.

All of them derive from `GeoQueryError` (itself a `ValueError`) so callers can catch
the whole family at one boundary, e.g. the CLI.
"""

from __future__ import annotations

from typing import Any


class GeoQueryError(ValueError):
    """Base class for deterministic input errors."""


class MissingFieldError(GeoQueryError):
    """A record does not expose the requested latitude/longitude field."""

    def __init__(self, key: str, record: Any = None):
        self.key = key
        self.record = record
        super().__init__(f"Record is missing numeric field '{key}'")


class InvalidCoordinateError(GeoQueryError):
    """A latitude/longitude value is non-numeric, non-finite or out of range."""


class InvalidRadiusError(GeoQueryError):
    """A search radius is negative or non-finite."""
