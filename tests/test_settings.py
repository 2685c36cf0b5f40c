from __future__ import annotations

import os
from pathlib import Path

import pytest

from dotkv import InvalidArgument, get_settings
from dotkv.paths import default_db_path

_VARS = ("DOTKV_PATH", "DOTKV_AUTOSAVE", "DOTKV_INDENT", "DOTKV_SWEEP_INTERVAL")


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch):
    for name in _VARS:
        monkeypatch.delenv(name, raising=False)
    yield
    # load_dotenv writes straight into os.environ
    for name in _VARS:
        os.environ.pop(name, None)


def test_defaults(monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
    monkeypatch.chdir(tmp_path)
    s = get_settings()
    assert s.file_path == Path.cwd() / "dotkv" / "dotkv.json"
    assert s.file_path == default_db_path()
    assert s.autosave is True
    assert s.indent == 2
    assert s.sweep_interval == 60.0


def test_env_overrides(monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
    monkeypatch.setenv("DOTKV_PATH", str(tmp_path / "x.json"))
    monkeypatch.setenv("DOTKV_AUTOSAVE", "off")
    monkeypatch.setenv("DOTKV_INDENT", "none")
    monkeypatch.setenv("DOTKV_SWEEP_INTERVAL", "0.5")
    s = get_settings()
    assert s.file_path == tmp_path / "x.json"
    assert s.autosave is False
    assert s.indent is None
    assert s.sweep_interval == 0.5


@pytest.mark.parametrize("name, value", [("DOTKV_INDENT", "wide"), ("DOTKV_INDENT", "-1"), ("DOTKV_SWEEP_INTERVAL", "soon")])
def test_invalid_values(monkeypatch: pytest.MonkeyPatch, name: str, value: str):
    monkeypatch.setenv(name, value)
    with pytest.raises(InvalidArgument):
        get_settings()


def test_env_file_is_loaded_without_overriding(monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
    env_file = tmp_path / "local.env"
    env_file.write_text("DOTKV_INDENT=4\nDOTKV_AUTOSAVE=false\n", encoding="utf-8")
    monkeypatch.setenv("DOTKV_AUTOSAVE", "true")
    s = get_settings(env_file)
    assert s.indent == 4
    assert s.autosave is True
