import os
from pathlib import Path

import pytest

from geoqueries.core.env import load_dotenv_if_present, resolve_project_path


@pytest.fixture
def fresh_dotenv():
    load_dotenv_if_present.cache_clear()
    yield load_dotenv_if_present
    load_dotenv_if_present.cache_clear()


def test_resolve_project_path_uses_project_root(tmp_path, monkeypatch):
    monkeypatch.setenv("GEOQUERIES_PROJECT_ROOT", str(tmp_path))
    assert resolve_project_path("data/records.json") == (tmp_path / "data" / "records.json").resolve()

    absolute = tmp_path / "abs.json"
    assert resolve_project_path(absolute) == absolute


def test_resolve_project_path_defaults_to_cwd(tmp_path, monkeypatch):
    monkeypatch.delenv("GEOQUERIES_PROJECT_ROOT", raising=False)
    monkeypatch.chdir(tmp_path)
    assert resolve_project_path("records.json") == (Path.cwd() / "records.json").resolve()


def test_load_dotenv_if_present_reads_explicit_file(fresh_dotenv, tmp_path, monkeypatch):
    env_file = tmp_path / "custom.env"
    env_file.write_text("GEOQUERIES_DOTENV_MARKER=from-file\n", encoding="utf-8")
    monkeypatch.setenv("GEOQUERIES_ENV_FILE", str(env_file))
    try:
        assert fresh_dotenv() == env_file.resolve()
        assert os.environ["GEOQUERIES_DOTENV_MARKER"] == "from-file"
    finally:
        os.environ.pop("GEOQUERIES_DOTENV_MARKER", None)


def test_load_dotenv_if_present_missing_explicit_file(fresh_dotenv, tmp_path, monkeypatch):
    monkeypatch.setenv("GEOQUERIES_ENV_FILE", str(tmp_path / "absent.env"))
    assert fresh_dotenv() is None
