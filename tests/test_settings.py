"""Tests for the settings store."""

from __future__ import annotations

import json

import pytest

from treesweep.settings import DEFAULTS, Settings, SettingsError


class TestSettings:
    def test_defaults(self, tmp_path):
        settings = Settings(tmp_path / "settings.json")
        assert settings.get("traversal.dry_run") is False
        assert "__pycache__" in settings.get("hunt.directory_names")
        assert settings.get("missing.key", 42) == 42

    def test_set_persists(self, tmp_path):
        path = tmp_path / "nested" / "settings.json"
        Settings(path).set("purge.patterns", ["*.log"])

        assert json.loads(path.read_text()) == {"purge": {"patterns": ["*.log"]}}
        assert Settings(path).get("purge.patterns") == ["*.log"]

    def test_file_overrides_only_its_keys(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text(json.dumps({"traversal": {"dry_run": True}}))

        settings = Settings(path)
        assert settings.get("traversal.dry_run") is True
        assert settings.get("purge.patterns") == ["*.tmp", "*.bak", "Thumbs.db", ".DS_Store"]

    def test_corrupt_file_falls_back_to_defaults(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text("{")
        assert Settings(path).get("traversal.dry_run") is False

    def test_instance_is_shared(self, isolate_settings):
        assert Settings.instance() is isolate_settings
        assert Settings.instance() is Settings.instance()

    def test_wrong_type_for_known_key(self, tmp_path):
        settings = Settings(tmp_path / "settings.json")
        with pytest.raises(SettingsError):
            settings.set("traversal.dry_run", "yes")
        assert not settings.path.exists()

    def test_unknown_keys_are_free_form(self, tmp_path):
        settings = Settings(tmp_path / "settings.json")
        settings.set("ui.color", "never")
        assert settings.get("ui.color") == "never"

    def test_unset_restores_default(self, tmp_path):
        settings = Settings(tmp_path / "settings.json")
        settings.set("hunt.directory_names", ["build"])

        assert settings.unset("hunt.directory_names") is True
        assert settings.get("hunt.directory_names") == ["__pycache__", "node_modules", ".pytest_cache"]
        assert settings.unset("hunt.directory_names") is False

    def test_as_dict_overlays_file(self, tmp_path):
        settings = Settings(tmp_path / "settings.json")
        settings.set("traversal.dry_run", True)

        merged = settings.as_dict()
        assert merged["traversal"]["dry_run"] is True
        assert merged["purge"]["patterns"] == ["*.tmp", "*.bak", "Thumbs.db", ".DS_Store"]
        assert DEFAULTS["traversal"]["dry_run"] is False
