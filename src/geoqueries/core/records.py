"""
Record access for the filters.

The filters never look inside records directly. They go through a `RecordAccessor`
that reads a numeric field by name and, for the optional distance annotation, writes
one back only if the field already exists.
"""

from __future__ import annotations

import math
from collections.abc import Mapping, MutableMapping
from typing import Any, Callable, Protocol

from geoqueries.core.errors import InvalidCoordinateError


class RecordAccessor(Protocol):
    def get_numeric_field(self, record: Any, key: str) -> float | None: ...

    def set_numeric_field(self, record: Any, key: str, value: float) -> bool: ...


def _to_float(raw: Any, key: str) -> float:
    if isinstance(raw, bool):
        raise InvalidCoordinateError(f"Field '{key}' holds a boolean, expected a number")
    try:
        value = float(raw)
    except (TypeError, ValueError) as exc:
        raise InvalidCoordinateError(f"Field '{key}' is not numeric: {raw!r}") from exc
    if not math.isfinite(value):
        raise InvalidCoordinateError(f"Field '{key}' is not finite: {raw!r}")
    return value


class FieldAccessor:
    """Default accessor: mapping keys for dict-like records, attributes otherwise.

    A key that is absent, or present with a `None` value, reads as absent. Writes
    only replace an existing key/attribute; nothing is ever created.
    """

    def get_numeric_field(self, record: Any, key: str) -> float | None:
        if isinstance(record, Mapping):
            raw = record.get(key)
        else:
            raw = getattr(record, key, None)
        if raw is None:
            return None
        return _to_float(raw, key)

    def set_numeric_field(self, record: Any, key: str, value: float) -> bool:
        if isinstance(record, MutableMapping):
            if key not in record:
                return False
            record[key] = value
            return True
        if isinstance(record, Mapping) or not hasattr(record, key):
            return False
        setattr(record, key, value)
        return True


class CallableAccessor:
    """Accessor built from caller-supplied functions.

    `get(record, key)` returns a number or None; `set(record, key, value)` returns
    whether the write happened. Without `set`, annotation writes are skipped.
    """

    def __init__(
        self,
        get: Callable[[Any, str], Any],
        set: Callable[[Any, str, float], bool] | None = None,
    ):
        self._get = get
        self._set = set

    def get_numeric_field(self, record: Any, key: str) -> float | None:
        raw = self._get(record, key)
        if raw is None:
            return None
        return _to_float(raw, key)

    def set_numeric_field(self, record: Any, key: str, value: float) -> bool:
        if self._set is None:
            return False
        return bool(self._set(record, key, value))


DEFAULT_ACCESSOR = FieldAccessor()
