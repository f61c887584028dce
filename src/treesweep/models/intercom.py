"""Signals a hook uses to tell the engine what to do with the current node."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class DirectoryIntercom:
    """Skip or delete intent for the directory currently being visited.

    A fresh instance is handed to each directory hook and read by the
    engine as soon as the hook returns.
    """

    skipped: bool = False
    delete_requested: bool = False
    delete_contents: bool = False
    dry_run: bool = False

    def skip(self) -> None:
        """Ask the engine to leave this directory's own files alone."""
        self.skipped = True

    def request_delete(self, delete_contents: bool = False, dry_run: bool = False) -> None:
        """Ask the engine to delete this directory.

        Args:
            delete_contents: Delete everything beneath the directory but keep
                the directory itself.  Only honoured at filter-match time.
            dry_run: Go through the motions without touching the disk.
        """
        self.delete_requested = True
        self.delete_contents = delete_contents
        self.dry_run = dry_run


@dataclass(slots=True)
class FileIntercom:
    """Skip, delete or custom-action intent for the current file.

    Setting ``action_name`` records that name verbatim in the run
    statistics when neither skip nor delete was requested.
    """

    action_name: str | None = None
    skipped: bool = False
    delete_requested: bool = False
    dry_run: bool = False

    def skip(self) -> None:
        self.skipped = True

    def request_delete(self, dry_run: bool = False) -> None:
        self.delete_requested = True
        self.dry_run = dry_run
