"""Copy or move a whole tree under a destination directory."""

from __future__ import annotations

import dataclasses
import errno
import logging
import os
import shutil
from pathlib import Path

from treesweep.core.engine import TraversalEngine
from treesweep.core.paths import DirectoryPath, FilePath
from treesweep.models.hooks import TraversalHooks
from treesweep.models.intercom import DirectoryIntercom, FileIntercom
from treesweep.models.run_summary import TransferSummary
from treesweep.models.statistics import DELETED, ObjectType
from treesweep.utils import normalize_root

log = logging.getLogger(__name__)

COPIED = "Copied"
MOVED = "Moved"


class _TreeTransfer:
    """Mirrors the source tree under a destination, one file at a time.

    Destination directories are created as their source counterparts are
    entered.  Caller hooks fire before the transfer hooks; a file the
    caller skips or deletes is not transferred.
    """

    action = ""

    def __init__(
        self,
        source: str | os.PathLike[str],
        destination: str | os.PathLike[str],
        *,
        dry_run: bool = False,
        hooks: TraversalHooks | None = None,
    ) -> None:
        source_root = normalize_root(source)
        self.destination = normalize_root(destination)
        if self.destination == source_root or source_root in self.destination.parents:
            raise ValueError(f"Destination {self.destination} is inside {source_root}")

        self.directories_created = 0
        self._caller = hooks if hooks is not None else TraversalHooks()
        self.engine = TraversalEngine(source_root, hooks=self._wire(self._caller), dry_run=dry_run)

    def run(self) -> TransferSummary:
        self._check_destination()
        self.directories_created = 0
        self.engine.start()
        summary = self.summary()
        log.info(
            "%s %d file(s), %d bytes from %s to %s",
            self.action,
            summary.files_transferred,
            summary.bytes_transferred,
            summary.source,
            summary.destination,
        )
        return summary

    def summary(self) -> TransferSummary:
        stats = self.engine.statistics
        return TransferSummary(
            source=self.engine.root.full_name,
            destination=str(self.destination),
            dry_run=self.engine.dry_run,
            directories_created=self.directories_created,
            directories_removed=stats.count(ObjectType.DIRECTORY, DELETED),
            files_transferred=stats.count(ObjectType.FILE, self.action),
            bytes_transferred=stats.file_size(self.action),
            warnings=list(self.engine.warnings),
        )

    def target(self, node: DirectoryPath | FilePath) -> Path:
        """Where *node* ends up under the destination."""
        return self.destination / self.engine.virtual_path(node).lstrip("/")

    def _wire(self, hooks: TraversalHooks) -> TraversalHooks:
        return dataclasses.replace(
            hooks,
            on_directory_hello=self._on_directory,
            on_file_hello=self._on_file,
        )

    def _check_destination(self) -> None:
        pass

    def _transfer(self, file: FilePath, target: Path, dry_run: bool) -> None:
        raise NotImplementedError

    def _on_directory(self, directory: DirectoryPath, engine: TraversalEngine, intercom: DirectoryIntercom) -> None:
        self._caller.on_directory_hello(directory, engine, intercom)
        if engine.recursive_delete_mode or intercom.delete_requested:
            return
        target = self.target(directory)
        if target.is_dir():
            return
        if not engine.dry_run:
            target.mkdir(parents=True)
        self.directories_created += 1
        log.debug("Created directory %s", target)

    def _on_file(self, file: FilePath, engine: TraversalEngine, intercom: FileIntercom) -> None:
        self._caller.on_file_hello(file, engine, intercom)
        if engine.recursive_delete_mode or intercom.skipped or intercom.delete_requested:
            return
        self._transfer(file, self.target(file), engine.dry_run)
        intercom.action_name = self.action


class TreeCopier(_TreeTransfer):
    """Copies *source* and everything beneath it to *destination*.

    Files keep their metadata (``shutil.copy2``) and symlinks are copied as
    links.  An existing destination file raises ``FileExistsError`` unless
    *overwrite* is set.
    """

    action = COPIED

    def __init__(
        self,
        source: str | os.PathLike[str],
        destination: str | os.PathLike[str],
        *,
        overwrite: bool = False,
        dry_run: bool = False,
        hooks: TraversalHooks | None = None,
    ) -> None:
        self.overwrite = overwrite
        super().__init__(source, destination, dry_run=dry_run, hooks=hooks)

    def _transfer(self, file: FilePath, target: Path, dry_run: bool) -> None:
        if os.path.lexists(target) and not self.overwrite:
            raise FileExistsError(errno.EEXIST, "Destination file already exists", str(target))
        if not dry_run:
            shutil.copy2(file.path, target, follow_symlinks=False)
        log.debug("Copied %s to %s", file, target)


class TreeMover(_TreeTransfer):
    """Moves *source* and everything beneath it to *destination*.

    The destination must be missing or empty.  Source directories are
    removed on exit once emptied; a directory still holding something the
    caller chose to keep stays in place along with its ancestors.
    """

    action = MOVED

    def __init__(
        self,
        source: str | os.PathLike[str],
        destination: str | os.PathLike[str],
        *,
        dry_run: bool = False,
        hooks: TraversalHooks | None = None,
    ) -> None:
        self._retained: set[DirectoryPath] = set()
        super().__init__(source, destination, dry_run=dry_run, hooks=hooks)

    def run(self) -> TransferSummary:
        self._retained = set()
        return super().run()

    def _wire(self, hooks: TraversalHooks) -> TraversalHooks:
        return dataclasses.replace(
            super()._wire(hooks),
            on_directory_skipped=self._on_directory_skipped,
            on_file_skip=self._on_file_skip,
            on_directory_goodbye=self._on_goodbye,
        )

    def _check_destination(self) -> None:
        if self.destination.is_dir() and any(self.destination.iterdir()):
            raise FileExistsError(errno.ENOTEMPTY, "Destination directory is not empty", str(self.destination))

    def _transfer(self, file: FilePath, target: Path, dry_run: bool) -> None:
        if not dry_run:
            shutil.move(file.full_name, target)
        log.debug("Moved %s to %s", file, target)

    def _retain(self, directory: DirectoryPath | None) -> None:
        while directory is not None and directory not in self._retained:
            self._retained.add(directory)
            if directory == self.engine.root:
                return
            directory = directory.parent

    def _on_directory_skipped(self, directory: DirectoryPath, engine: TraversalEngine) -> None:
        self._caller.on_directory_skipped(directory, engine)
        self._retain(directory)

    def _on_file_skip(self, file: FilePath, engine: TraversalEngine) -> None:
        self._caller.on_file_skip(file, engine)
        self._retain(DirectoryPath(file.path.parent))

    def _on_goodbye(self, directory: DirectoryPath, engine: TraversalEngine, intercom: DirectoryIntercom) -> None:
        self._caller.on_directory_goodbye(directory, engine, intercom)
        if engine.recursive_delete_mode:
            return
        if directory in self._retained:
            log.debug("Keeping %s: it still holds skipped entries", engine.virtual_path(directory))
            return
        intercom.request_delete()
