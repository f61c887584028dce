"""Run history persisted as JSON in the XDG data directory."""

from __future__ import annotations

import json
import logging
import os
from typing import Any

from treesweep.utils import xdg_data_home

log = logging.getLogger(__name__)

_DATA_DIR = xdg_data_home() / "treesweep"

HISTORY_FILE = _DATA_DIR / "history.json"
HISTORY_VERSION = 1


def _empty_history() -> dict[str, Any]:
    return {"version": HISTORY_VERSION, "sessions": []}


def load_history() -> dict[str, Any]:
    """Load the history file.

    A missing, unreadable or malformed file loads as an empty history.
    """
    if not HISTORY_FILE.exists():
        return _empty_history()
    try:
        data = json.loads(HISTORY_FILE.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, OSError):
        log.exception("Failed to load history file: %s", HISTORY_FILE)
        return _empty_history()
    if not isinstance(data, dict) or not isinstance(data.get("sessions", []), list):
        log.warning("Ignoring malformed history file: %s", HISTORY_FILE)
        return _empty_history()
    data.setdefault("version", HISTORY_VERSION)
    data.setdefault("sessions", [])
    return data


def save_history(data: dict[str, Any]) -> None:
    """Write *data* to the history file, replacing it atomically."""
    _DATA_DIR.mkdir(parents=True, exist_ok=True)
    data.setdefault("version", HISTORY_VERSION)
    tmp = HISTORY_FILE.with_name(HISTORY_FILE.name + ".tmp")
    try:
        tmp.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
        os.replace(tmp, HISTORY_FILE)
    except OSError:
        log.exception("Failed to save history file: %s", HISTORY_FILE)


def clear_history() -> bool:
    """Delete the history file.  Returns False if there was none."""
    try:
        HISTORY_FILE.unlink()
    except FileNotFoundError:
        return False
    log.info("Cleared history: %s", HISTORY_FILE)
    return True
