"""
Record file loader.

Records are a local JSON file holding an array of objects, each carrying at least
the latitude/longitude fields the filters read (by default `lat` / `lng`). We only
validate the outer shape here; field presence is checked by the filters according
to the missing-field policy.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import TypeAdapter

from geoqueries.core.env import resolve_project_path


_RECORDS_ADAPTER = TypeAdapter(list[dict[str, Any]])


def load_records(path: str | Path) -> list[dict[str, Any]]:
    """Load a JSON array of record objects."""
    resolved = resolve_project_path(path)
    payload = json.loads(resolved.read_text(encoding="utf-8"))
    return _RECORDS_ADAPTER.validate_python(payload)
