"""Shared test fixtures."""

from __future__ import annotations

import pytest

import treesweep.storage as storage
from treesweep.settings import Settings


@pytest.fixture
def isolate_storage(tmp_path, monkeypatch):
    """Redirect storage to a temp directory."""
    data_dir = tmp_path / "treesweep_data"
    data_dir.mkdir()
    history_file = data_dir / "history.json"
    monkeypatch.setattr(storage, "HISTORY_FILE", history_file)
    monkeypatch.setattr(storage, "_DATA_DIR", data_dir)
    return history_file


@pytest.fixture
def isolate_settings(tmp_path, monkeypatch):
    """Give each test its own settings file."""
    settings = Settings(tmp_path / "config" / "settings.json")
    monkeypatch.setattr(Settings, "_instance", settings)
    return settings


@pytest.fixture
def tree(tmp_path):
    """Build ``root/{a/{x.txt}, b/{y.txt, c/{z.txt}}}`` and return the root."""
    root = tmp_path / "root"
    (root / "a").mkdir(parents=True)
    (root / "b" / "c").mkdir(parents=True)
    (root / "a" / "x.txt").write_text("xxxxx")
    (root / "b" / "y.txt").write_text("y" * 12)
    (root / "b" / "c" / "z.txt").write_text("z" * 7)
    return root
