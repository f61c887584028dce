"""Directory and file handles used by the traversal engine."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from treesweep.utils import matches_search_pattern

log = logging.getLogger(__name__)


class _NodePath:
    """Common identity for directory and file handles."""

    __slots__ = ("_path",)

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self._path = Path(os.path.abspath(os.fspath(path)))

    @property
    def path(self) -> Path:
        return self._path

    @property
    def name(self) -> str:
        return self._path.name

    @property
    def full_name(self) -> str:
        return str(self._path)

    def __fspath__(self) -> str:
        return self.full_name

    def __str__(self) -> str:
        return self.full_name

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.full_name!r})"

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self.full_name == other.full_name  # type: ignore[attr-defined]

    def __hash__(self) -> int:
        return hash((type(self).__name__, self.full_name))


class FilePath(_NodePath):
    """A file on disk.

    Symlinks (including links to directories) are treated as files so a
    traversal never follows them out of its root.
    """

    __slots__ = ()

    @property
    def exists(self) -> bool:
        return os.path.lexists(self._path)

    @property
    def size(self) -> int:
        """Size in bytes, without following symlinks."""
        return self._path.lstat().st_size

    def delete(self) -> None:
        self._path.unlink()
        log.debug("Removed file %s", self._path)


class DirectoryPath(_NodePath):
    """A directory on disk."""

    __slots__ = ()

    @property
    def exists(self) -> bool:
        return self._path.is_dir() and not self._path.is_symlink()

    @property
    def parent(self) -> DirectoryPath | None:
        """The parent directory, or None for a filesystem root."""
        parent = self._path.parent
        if parent == self._path:
            return None
        return DirectoryPath(parent)

    def get_files(self, pattern: str | None = None) -> list[FilePath]:
        """Files directly inside this directory, sorted by name.

        Args:
            pattern: Optional search pattern (``*`` and literal ``.``).
        """
        return [FilePath(p) for p in self._children(pattern, want_dirs=False)]

    def get_directories(self, pattern: str | None = None) -> list[DirectoryPath]:
        """Subdirectories directly inside this directory, sorted by name."""
        return [DirectoryPath(p) for p in self._children(pattern, want_dirs=True)]

    def delete(self) -> None:
        """Remove the directory, which must already be empty."""
        self._path.rmdir()
        log.debug("Removed directory %s", self._path)

    def _children(self, pattern: str | None, *, want_dirs: bool) -> list[str]:
        found: list[str] = []
        with os.scandir(self._path) as it:
            for entry in it:
                if entry.is_dir(follow_symlinks=False) != want_dirs:
                    continue
                if pattern is not None and not matches_search_pattern(entry.name, pattern):
                    continue
                found.append(entry.path)
        found.sort()
        return found
