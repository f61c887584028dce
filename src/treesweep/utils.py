"""Shared utility functions."""

from __future__ import annotations

import os
import re
from functools import lru_cache
from pathlib import Path, PurePath


def xdg_config_home() -> Path:
    """Return XDG_CONFIG_HOME, defaulting to ~/.config."""
    return Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))


def xdg_data_home() -> Path:
    """Return XDG_DATA_HOME, defaulting to ~/.local/share."""
    return Path(os.environ.get("XDG_DATA_HOME", Path.home() / ".local" / "share"))


def normalize_root(path: str | os.PathLike[str]) -> Path:
    """Return *path* as an absolute path without a trailing separator."""
    text = os.fspath(path)
    if len(text) > 1:
        text = text.rstrip(os.sep)
        if os.altsep:
            text = text.rstrip(os.altsep)
    return Path(os.path.abspath(text or os.sep))


def virtual_path(path: str | os.PathLike[str], root: str | os.PathLike[str]) -> str:
    """Render *path* relative to *root* as ``/a/b/c``.

    The root itself renders as ``/``.

    Raises:
        ValueError: If *path* is not *root* or one of its descendants.
    """
    relative = PurePath(os.fspath(path)).relative_to(PurePath(os.fspath(root)))
    if ".." in relative.parts:
        raise ValueError(f"{path} escapes {root}")
    return "/" + "/".join(relative.parts)


@lru_cache(maxsize=128)
def compile_search_pattern(pattern: str) -> re.Pattern[str]:
    """Translate a search pattern into an anchored regex.

    ``*`` matches any run of characters (including none) and ``.`` is a
    literal dot.  Every other character matches itself.
    """
    parts = [".*" if ch == "*" else re.escape(ch) for ch in pattern]
    return re.compile("".join(parts), re.DOTALL)


def matches_search_pattern(name: str, pattern: str) -> bool:
    """Return True if *name* matches *pattern* as a whole."""
    return compile_search_pattern(pattern).fullmatch(name) is not None


def bytes_to_human(size_bytes: int) -> str:
    """Convert byte count to a human-readable string."""
    if size_bytes < 0:
        return f"-{bytes_to_human(-size_bytes)}"
    if size_bytes == 0:
        return "0 B"

    units = ("B", "KB", "MB", "GB", "TB")
    value = float(size_bytes)
    for unit in units[:-1]:
        if abs(value) < 1024:
            return f"{value:.1f} {unit}" if unit != "B" else f"{int(value)} B"
        value /= 1024
    return f"{value:.1f} {units[-1]}"


def format_relative_time(iso_timestamp: str) -> str:
    """Format an ISO timestamp as relative time ('2 hours ago')."""
    from datetime import datetime, timezone

    dt = datetime.fromisoformat(iso_timestamp)
    seconds = int((datetime.now(timezone.utc) - dt).total_seconds())

    if seconds < 60:
        return "just now"
    if seconds < 3600:
        m = seconds // 60
        return f"{m} minute{'s' if m != 1 else ''} ago"
    if seconds < 86400:
        h = seconds // 3600
        return f"{h} hour{'s' if h != 1 else ''} ago"
    d = seconds // 86400
    if d < 30:
        return f"{d} day{'s' if d != 1 else ''} ago"
    mo = d // 30
    if mo < 12:
        return f"{mo} month{'s' if mo != 1 else ''} ago"
    y = d // 365
    return f"{y} year{'s' if y != 1 else ''} ago"


def format_elapsed(seconds: float) -> str:
    """Format an elapsed time as a human-readable string."""
    if seconds < 1:
        return f"{seconds * 1000:.0f} ms"
    if seconds < 60:
        return f"{seconds:.1f}s"
    minutes = int(seconds) // 60
    secs = seconds - minutes * 60
    return f"{minutes}m {secs:.0f}s"
