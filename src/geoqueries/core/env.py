"""
Environment helpers.

- `load_dotenv_if_present()`: load a local `.env` once (never overrides existing env vars)
- `resolve_project_path()`: resolve relative record/config paths against the project root
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path

from dotenv import find_dotenv, load_dotenv


@lru_cache
def load_dotenv_if_present() -> Path | None:
    """Load `.env` once if present; returns the loaded env path (or None).

    `GEOQUERIES_ENV_FILE` names an explicit file; otherwise the nearest `.env` above the
    working directory is used.
    """
    explicit = os.getenv("GEOQUERIES_ENV_FILE")
    found = explicit or find_dotenv(usecwd=True)
    if not found:
        return None
    env_path = Path(found).expanduser().resolve()
    if not env_path.is_file():
        return None
    load_dotenv(dotenv_path=env_path, override=False)
    return env_path


def resolve_project_path(path: str | Path) -> Path:
    """Resolve a possibly-relative path against `GEOQUERIES_PROJECT_ROOT` (default: CWD)."""
    p = Path(path).expanduser()
    if p.is_absolute():
        return p
    root = os.getenv("GEOQUERIES_PROJECT_ROOT")
    base = Path(root).expanduser() if root else Path.cwd()
    return (base / p).resolve()
