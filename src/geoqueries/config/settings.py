# src/geoqueries/config/settings.py
"""
Library settings (Pydantic).

Settings are loaded from `src/geoqueries/config/defaults.yaml`, then optionally overridden by:
- an external YAML file via `GEOQUERIES_CONFIG_PATH` (replaces the packaged defaults)
- environment variables (e.g., `GEOQUERIES_LOG_LEVEL`, `GEOQUERIES_MISSING_FIELD_POLICY`)

Design rule:
- Query defaults (field names, missing-field policy) live in YAML, not hard-coded in callers.
"""

from __future__ import annotations

import os
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Any, Literal
from geoqueries.core.env import load_dotenv_if_present

import yaml
from pydantic import BaseModel, Field


def _read_package_yaml(filename: str) -> dict[str, Any]:
    """Read a YAML file packaged inside `geoqueries.config`."""
    text = resources.files("geoqueries.config").joinpath(filename).read_text(encoding="utf-8")
    data = yaml.safe_load(text) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Invalid YAML root object for {filename}; expected a mapping.")
    return data


def _read_yaml_file(path: str | Path) -> dict[str, Any]:
    """Read a YAML file from disk and return its mapping root."""
    data = yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Invalid YAML root object for {path}; expected a mapping.")
    return data


class AppSettings(BaseModel):
    name: str = "GeoQueries"
    log_level: str = "INFO"


class QuerySettings(BaseModel):
    lat_key: str = Field("lat", min_length=1)
    lng_key: str = Field("lng", min_length=1)
    distance_key: str | None = None
    missing_field_policy: Literal["strict", "lenient"] = "strict"
    validate_coordinates: bool = True


class ParallelSettings(BaseModel):
    partition_size: int = Field(5000, ge=1)
    max_workers: int = Field(4, ge=1)


class Settings(BaseModel):
    app: AppSettings = Field(default_factory=AppSettings)
    query: QuerySettings = Field(default_factory=QuerySettings)
    parallel: ParallelSettings = Field(default_factory=ParallelSettings)


def _apply_env_overrides(data: dict[str, Any]) -> dict[str, Any]:
    """Overlay selected environment variables onto raw settings payload.

    Note: We intentionally keep this whitelist small.
    """
    load_dotenv_if_present()
    data = dict(data)

    log_level = os.getenv("GEOQUERIES_LOG_LEVEL")
    if log_level:
        data.setdefault("app", {})["log_level"] = log_level

    policy = os.getenv("GEOQUERIES_MISSING_FIELD_POLICY")
    if policy:
        data.setdefault("query", {})["missing_field_policy"] = policy.strip().lower()

    lat_key = os.getenv("GEOQUERIES_LAT_KEY")
    lng_key = os.getenv("GEOQUERIES_LNG_KEY")
    if lat_key:
        data.setdefault("query", {})["lat_key"] = lat_key
    if lng_key:
        data.setdefault("query", {})["lng_key"] = lng_key

    return data


@lru_cache
def get_settings() -> Settings:
    """Load and validate settings (cached)."""
    load_dotenv_if_present()
    config_path = os.getenv("GEOQUERIES_CONFIG_PATH")
    raw = _read_yaml_file(config_path) if config_path else _read_package_yaml("defaults.yaml")
    raw = _apply_env_overrides(raw)
    return Settings.model_validate(raw)


@lru_cache
def get_logging_config() -> dict[str, Any]:
    """Load logging configuration (cached)."""
    return _read_package_yaml("logging.yaml")
