"""Persistent user settings, stored as JSON under the XDG config dir."""

from __future__ import annotations

import copy
import json
import logging
from pathlib import Path
from typing import Any

from treesweep.utils import xdg_config_home

log = logging.getLogger(__name__)

DEFAULTS: dict[str, Any] = {
    "traversal": {"dry_run": False},
    "hunt": {"directory_names": ["__pycache__", "node_modules", ".pytest_cache"]},
    "purge": {"patterns": ["*.tmp", "*.bak", "Thumbs.db", ".DS_Store"]},
}

# Expected value type of each known key.  Unknown keys are stored as given.
_TYPES: dict[str, type] = {
    "traversal.dry_run": bool,
    "hunt.directory_names": list,
    "purge.patterns": list,
}


class SettingsError(ValueError):
    """Raised when a known key is given a value of the wrong type."""


def _lookup(data: dict[str, Any], parts: list[str]) -> tuple[bool, Any]:
    node: Any = data
    for part in parts:
        if not isinstance(node, dict) or part not in node:
            return False, None
        node = node[part]
    return True, node


def _merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


class Settings:
    """Dot-notation access to a JSON settings file.

        settings.get("hunt.directory_names")   # file value, else DEFAULTS
        settings.set("traversal.dry_run", True)  # validates and saves

    Only keys that were set are written to the file, so changed defaults
    reach users who never touched them.
    """

    _instance: Settings | None = None

    def __init__(self, path: Path | None = None) -> None:
        self._path = path or (xdg_config_home() / "treesweep" / "settings.json")
        self._data: dict[str, Any] = self._read()

    @classmethod
    def instance(cls) -> Settings:
        """Return the process-wide settings object."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @property
    def path(self) -> Path:
        return self._path

    def get(self, key: str, default: Any = None) -> Any:
        parts = key.split(".")
        for source in (self._data, DEFAULTS):
            found, value = _lookup(source, parts)
            if found:
                return value
        return default

    def set(self, key: str, value: Any) -> None:
        """Store *value* under *key* and save.

        Raises:
            SettingsError: If *key* is known and *value* has the wrong type.
        """
        expected = _TYPES.get(key)
        if expected is not None and not isinstance(value, expected):
            raise SettingsError(
                f"{key} expects a {expected.__name__}, got {type(value).__name__}"
            )
        *parents, leaf = key.split(".")
        node = self._data
        for part in parents:
            if not isinstance(node.get(part), dict):
                node[part] = {}
            node = node[part]
        node[leaf] = value
        self._write()

    def unset(self, key: str) -> bool:
        """Drop *key* from the file so its default applies again.

        Returns False if the key was not set.
        """
        *parents, leaf = key.split(".")
        found, node = _lookup(self._data, parents)
        if not found or not isinstance(node, dict) or leaf not in node:
            return False
        del node[leaf]
        self._write()
        return True

    def as_dict(self) -> dict[str, Any]:
        """Every effective setting: the defaults overlaid with the file."""
        return _merge(DEFAULTS, self._data)

    def _read(self) -> dict[str, Any]:
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError) as e:
            log.warning("Could not load settings from %s: %s", self._path, e)
            return {}
        if not isinstance(data, dict):
            log.warning("Ignoring settings file %s: not a JSON object", self._path)
            return {}
        return data

    def _write(self) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(
                json.dumps(self._data, indent=2, ensure_ascii=False) + "\n",
                encoding="utf-8",
            )
        except OSError as e:
            log.warning("Could not save settings to %s: %s", self._path, e)
