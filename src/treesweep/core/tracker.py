"""Run history: what live runs deleted, per session and per root.

A session is one CLI invocation.  Each recorded run becomes a *detail*
row of its session::

    {"timestamp": "...", "details": [{"root": "/srv", "bytes_deleted": 10, ...}]}
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Iterable, Iterator

from treesweep.models.run_summary import RunSummary
from treesweep.storage import load_history, save_history

log = logging.getLogger(__name__)

PERIODS = ("today", "week", "month", "all")

# Days before the start of today that each period reaches back.
_PERIOD_DAYS = {"today": 0, "week": 7, "month": 30}

_COUNTERS = ("bytes_deleted", "files_deleted", "directories_deleted")


def _detail(summary: RunSummary) -> dict[str, Any]:
    return {
        "root": summary.root,
        "bytes_deleted": summary.bytes_deleted,
        "files_deleted": summary.files_deleted,
        "directories_deleted": summary.directories_deleted,
        "warnings": len(summary.warnings),
    }


def _details(sessions: Iterable[dict[str, Any]]) -> Iterator[tuple[str, dict[str, Any]]]:
    """(session timestamp, detail) for every detail row of *sessions*."""
    for session in sessions:
        for detail in session.get("details", []):
            yield session["timestamp"], detail


def _totals(details: Iterable[dict[str, Any]]) -> dict[str, int]:
    totals = dict.fromkeys(_COUNTERS, 0)
    for detail in details:
        for key in _COUNTERS:
            totals[key] += detail.get(key, 0)
    return totals


def _cutoff(period: str) -> datetime | None:
    """Earliest session timestamp *period* includes, None for all time."""
    if period not in PERIODS:
        raise ValueError(f"Unknown period {period!r}, expected one of {', '.join(PERIODS)}")
    if period == "all":
        return None
    today = datetime.now(timezone.utc).replace(hour=0, minute=0, second=0, microsecond=0)
    return today - timedelta(days=_PERIOD_DAYS[period])


def _by_root(sessions: list[dict[str, Any]]) -> dict[str, dict[str, Any]]:
    roots: dict[str, dict[str, Any]] = {}
    for timestamp, detail in _details(sessions):
        entry = roots.setdefault(
            detail["root"],
            {"bytes_deleted": 0, "files_deleted": 0, "runs": 0, "last_run": timestamp},
        )
        entry["bytes_deleted"] += detail.get("bytes_deleted", 0)
        entry["files_deleted"] += detail.get("files_deleted", 0)
        entry["runs"] += 1
        entry["last_run"] = max(entry["last_run"], timestamp)
    return roots


class Tracker:
    """Collects live runs of one session and keeps the history file.

    Dry runs are dropped at :meth:`record`, so they never reach the history.
    """

    def __init__(self) -> None:
        self._pending: list[dict[str, Any]] = []

    @property
    def session_bytes_deleted(self) -> int:
        return _totals(self._pending)["bytes_deleted"]

    @property
    def session_files_deleted(self) -> int:
        return _totals(self._pending)["files_deleted"]

    def record(self, summaries: Iterable[RunSummary]) -> None:
        for summary in summaries:
            if summary.dry_run:
                log.debug("Not recording dry run of %s", summary.root)
            else:
                self._pending.append(_detail(summary))

    def save_session(self) -> dict[str, Any] | None:
        """Append the pending runs to the history as one session.

        Returns the stored session, or None when nothing was pending.
        """
        if not self._pending:
            return None
        session = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "details": self._pending,
        }
        history = load_history()
        history["sessions"].append(session)
        save_history(history)
        self._pending = []

        totals = _totals(session["details"])
        log.info(
            "Saved session: %d bytes, %d files deleted in %d run(s)",
            totals["bytes_deleted"],
            totals["files_deleted"],
            len(session["details"]),
        )
        return session

    def get_last_run_time(self) -> str | None:
        """ISO timestamp of the newest session, or None."""
        sessions = load_history()["sessions"]
        return sessions[-1]["timestamp"] if sessions else None

    def get_stats(self, period: str = "all") -> dict[str, Any]:
        """Aggregate the history over *period* (one of :data:`PERIODS`).

        Raises:
            ValueError: If *period* is not a known period.
        """
        cutoff = _cutoff(period)
        everything = load_history()["sessions"]
        sessions = [
            s for s in everything
            if cutoff is None or datetime.fromisoformat(s["timestamp"]) >= cutoff
        ]

        stats: dict[str, Any] = {"period": period}
        stats.update(_totals(detail for _, detail in _details(sessions)))
        stats["session_count"] = len(sessions)
        stats["lifetime_bytes_deleted"] = _totals(d for _, d in _details(everything))["bytes_deleted"]
        stats["per_root"] = _by_root(sessions)
        return stats
