"""Depth-first traversal engine with hook-driven skip and delete handling."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from treesweep.core.paths import DirectoryPath, FilePath
from treesweep.core.statistics import TraversalStatistics
from treesweep.models.filters import TraversalFilters
from treesweep.models.hooks import TraversalHooks
from treesweep.models.intercom import DirectoryIntercom, FileIntercom
from treesweep.models.run_summary import RunSummary
from treesweep.models.statistics import (
    CONTENTS_DELETED,
    DELETED,
    DELETING,
    SKIPPED,
    ObjectType,
)
from treesweep.utils import normalize_root, virtual_path

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class _DeleteScope:
    """Recursive-delete state handed down to every descendant.

    ``keep`` is the directory whose contents are deleted while the
    directory itself survives.
    """

    dry_run: bool = False
    keep: DirectoryPath | None = None


class TraversalEngine:
    """Walks a directory tree and lets hooks decide what happens to each node.

    Files of a directory are visited before its subdirectories.  Hooks that
    receive an intercom can ask the engine to skip or delete the current
    node; the engine reads the intercom as soon as the hook returns.

    Args:
        root: Directory to traverse.  Nothing outside it is ever visited.
        statistics: Log to record into.  A new one is created if omitted.
        filters: Name patterns and predicates.  Defaults to no filtering.
        hooks: Callbacks.  Defaults to no-ops.
        dry_run: Fire every hook and record every action, but never delete.
    """

    def __init__(
        self,
        root: str | os.PathLike[str],
        statistics: TraversalStatistics | None = None,
        filters: TraversalFilters | None = None,
        hooks: TraversalHooks | None = None,
        dry_run: bool = False,
    ) -> None:
        self.root = DirectoryPath(normalize_root(root))
        self.statistics = statistics if statistics is not None else TraversalStatistics()
        self.filters = filters if filters is not None else TraversalFilters()
        self.hooks = hooks if hooks is not None else TraversalHooks()
        self.dry_run = dry_run
        self.recursive_delete_mode = False
        self.warnings: list[str] = []

    def start(self) -> None:
        """Traverse the tree from the root."""
        self._begin("traversal")
        self._iterate(self.root, self.filters.matches_directory(self.root), None)
        self._finish()

    def start_recursive_delete(self, keep_root: bool = False) -> None:
        """Traverse the tree deleting the root and everything beneath it.

        Args:
            keep_root: Delete only the root's contents.
        """
        self._begin("recursive delete")
        scope = _DeleteScope(keep=self.root if keep_root else None)
        self._iterate(self.root, self.filters.matches_directory(self.root), scope)
        self._finish()

    def summary(self) -> RunSummary:
        """Totals derived from the statistics log."""
        stats = self.statistics
        return RunSummary(
            root=self.root.full_name,
            dry_run=self.dry_run,
            directories_visited=stats.directory_count,
            files_visited=stats.total_file_count,
            directories_deleted=stats.count(ObjectType.DIRECTORY, DELETED),
            files_deleted=stats.count(ObjectType.FILE, DELETED),
            bytes_deleted=stats.file_size(DELETED),
            warnings=list(self.warnings),
        )

    def virtual_path(self, node: DirectoryPath | FilePath) -> str:
        """*node*'s path relative to the root, e.g. ``/a/b.txt``."""
        return virtual_path(node, self.root)

    # ── traversal ────────────────────────────────────────────────────────

    def _begin(self, kind: str) -> None:
        self.warnings = []
        self.recursive_delete_mode = False
        log.info("Starting %s of %s%s", kind, self.root, " (dry run)" if self.dry_run else "")

    def _finish(self) -> None:
        log.info(
            "Finished %s: %d directories, %d files, %d warning(s)",
            self.root,
            self.statistics.directory_count,
            self.statistics.total_file_count,
            len(self.warnings),
        )

    def _iterate(self, directory: DirectoryPath, filter_match: bool, scope: _DeleteScope | None) -> None:
        self.recursive_delete_mode = scope is not None

        # Hello
        self.statistics.log_hello(directory, self.root)
        intercom = DirectoryIntercom()
        self.hooks.on_directory_hello(directory, self, intercom)

        # Disposition
        skipped = False
        if scope is not None:
            self._warn_recursive(directory, intercom.skipped, intercom.delete_requested)
            self.statistics.update_action(directory, self.root, DELETING)
            if scope.keep != directory:
                self.hooks.on_directory_deleting(directory, self)
        elif intercom.skipped:
            skipped = True
            self._skip_directory(directory)
        elif intercom.delete_requested:
            scope = self._enter_recursive_delete(directory, intercom)
        elif filter_match:
            intercom = DirectoryIntercom()
            self.hooks.on_directory_filter_match(directory, self, intercom)
            if intercom.delete_requested:
                scope = self._enter_recursive_delete(directory, intercom)
            elif intercom.skipped:
                skipped = True
                self._skip_directory(directory)
        else:
            skipped = True
            log.debug("Passing over %s (filtered out)", self.virtual_path(directory))

        # Files
        if scope is not None or not (skipped or self.filters.directories_only_mode):
            for file in self._files(directory, scope):
                self._visit_file(file, scope)

        # Subdirectories
        subdirectories = directory.get_directories()
        if scope is None and self.filters.has_directory_filter:
            selected = set(self.filters.select_directories(directory))
            for subdirectory in subdirectories:
                self._iterate(subdirectory, subdirectory in selected, None)
        else:
            for subdirectory in subdirectories:
                self._iterate(subdirectory, True, scope)

        # Goodbye
        self.recursive_delete_mode = scope is not None
        intercom = DirectoryIntercom()
        self.hooks.on_directory_goodbye(directory, self, intercom)
        if scope is not None:
            self._warn_recursive(directory, intercom.skipped, intercom.delete_requested)
            if scope.keep == directory:
                self.statistics.update_action(directory, self.root, CONTENTS_DELETED)
            else:
                self._delete_directory(directory, scope.dry_run)
        elif not skipped:
            self._goodbye_request(directory, intercom)

    def _goodbye_request(self, directory: DirectoryPath, intercom: DirectoryIntercom) -> None:
        vpath = self.virtual_path(directory)
        if intercom.skipped:
            self._warn(f"Skip denied for {vpath}: too late to skip a directory on exit")
        if not intercom.delete_requested:
            return
        if intercom.delete_contents:
            self._warn(f"Delete-contents ignored for {vpath}: only honoured on filter match")
        if not directory.exists:
            self._warn(f"Cannot delete {vpath}: directory no longer exists")
            return
        self.hooks.on_directory_deleting(directory, self)
        self._delete_directory(directory, intercom.dry_run)

    def _enter_recursive_delete(self, directory: DirectoryPath, intercom: DirectoryIntercom) -> _DeleteScope:
        keep = directory if intercom.delete_contents else None
        scope = _DeleteScope(dry_run=intercom.dry_run, keep=keep)
        self.recursive_delete_mode = True
        self.statistics.update_action(directory, self.root, DELETING)
        if keep is None:
            self.hooks.on_directory_deleting(directory, self)
        log.debug(
            "Recursive delete of %s%s",
            self.virtual_path(directory),
            " (keeping directory)" if keep is not None else "",
        )
        return scope

    def _skip_directory(self, directory: DirectoryPath) -> None:
        self.statistics.update_action(directory, self.root, SKIPPED)
        self.hooks.on_directory_skipped(directory, self)

    def _visit_file(self, file: FilePath, scope: _DeleteScope | None) -> None:
        size = file.size
        self.statistics.log_hello(file, self.root, file_size=size)
        intercom = FileIntercom()
        self.hooks.on_file_hello(file, self, intercom)

        if scope is not None:
            self._warn_recursive(file, intercom.skipped, intercom.delete_requested)
            self._delete_file(file, size, scope.dry_run)
        elif intercom.skipped:
            self.statistics.update_action(file, self.root, SKIPPED)
            self.hooks.on_file_skip(file, self)
        elif intercom.delete_requested:
            self._delete_file(file, size, intercom.dry_run)
        elif intercom.action_name:
            self.statistics.update_action(file, self.root, intercom.action_name)

    # ── enumeration ──────────────────────────────────────────────────────

    def _files(self, directory: DirectoryPath, scope: _DeleteScope | None) -> list[FilePath]:
        if scope is not None:
            return directory.get_files()
        return self.filters.select_files(directory)

    # ── destructive calls ────────────────────────────────────────────────

    def _delete_file(self, file: FilePath, size: int, dry_run: bool) -> None:
        if not (self.dry_run or dry_run):
            file.delete()
        self.statistics.update_action(file, self.root, DELETED)
        self.hooks.on_file_delete(file, self, size)

    def _delete_directory(self, directory: DirectoryPath, dry_run: bool) -> None:
        if not (self.dry_run or dry_run):
            directory.delete()
        self.statistics.update_action(directory, self.root, DELETED)
        self.hooks.on_directory_deleted(directory, self)

    # ── warnings ─────────────────────────────────────────────────────────

    def _warn_recursive(self, node: DirectoryPath | FilePath, skip: bool, delete: bool) -> None:
        if not (skip or delete):
            return
        vpath = self.virtual_path(node)
        if skip:
            self._warn(f"Skip denied for {vpath}: recursive delete in progress")
        if delete:
            self._warn(f"Delete request for {vpath} is redundant: recursive delete in progress")

    def _warn(self, message: str) -> None:
        log.warning(message)
        self.warnings.append(message)
        self.hooks.on_warning(message)
