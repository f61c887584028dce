"""Run summary dataclasses."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(slots=True)
class RunSummary:
    """Totals of a finished traversal."""

    root: str
    dry_run: bool = False
    directories_visited: int = 0
    files_visited: int = 0
    directories_deleted: int = 0
    files_deleted: int = 0
    bytes_deleted: int = 0
    warnings: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "root": self.root,
            "dry_run": self.dry_run,
            "directories_visited": self.directories_visited,
            "files_visited": self.files_visited,
            "directories_deleted": self.directories_deleted,
            "files_deleted": self.files_deleted,
            "bytes_deleted": self.bytes_deleted,
            "warnings": list(self.warnings),
        }


@dataclass(slots=True)
class TransferSummary:
    """Totals of a finished copy or move."""

    source: str
    destination: str
    dry_run: bool = False
    directories_created: int = 0
    directories_removed: int = 0
    files_transferred: int = 0
    bytes_transferred: int = 0
    warnings: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "source": self.source,
            "destination": self.destination,
            "dry_run": self.dry_run,
            "directories_created": self.directories_created,
            "directories_removed": self.directories_removed,
            "files_transferred": self.files_transferred,
            "bytes_transferred": self.bytes_transferred,
            "warnings": list(self.warnings),
        }
