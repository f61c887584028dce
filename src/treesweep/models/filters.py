"""Directory and file filter configuration."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable

from treesweep.utils import matches_search_pattern

if TYPE_CHECKING:
    from treesweep.core.paths import DirectoryPath, FilePath

DirectoryPredicate = Callable[["DirectoryPath"], bool]
FilePredicate = Callable[["FilePath"], bool]


@dataclass
class TraversalFilters:
    """Optional name patterns and predicates that narrow a traversal.

    Search patterns use ``*`` for any run of characters and ``.`` for a
    literal dot, and must match the whole name.  When a pattern and a
    predicate are both set, a node matches only if both accept it.
    """

    directories_only_mode: bool = False
    directory_filter: DirectoryPredicate | None = None
    file_filter: FilePredicate | None = None
    directory_search_pattern: str | None = None
    file_search_pattern: str | None = None

    @property
    def has_directory_filter(self) -> bool:
        return self.directory_filter is not None or self.directory_search_pattern is not None

    def matches_directory(self, directory: DirectoryPath) -> bool:
        """Return True if *directory* passes the directory pattern and predicate."""
        if self.directory_search_pattern is not None and not matches_search_pattern(
            directory.name, self.directory_search_pattern
        ):
            return False
        if self.directory_filter is not None and not self.directory_filter(directory):
            return False
        return True

    def select_files(self, directory: DirectoryPath) -> list[FilePath]:
        """Files of *directory* that pass the file pattern and predicate."""
        files = directory.get_files(self.file_search_pattern)
        if self.file_filter is None:
            return files
        return [f for f in files if self.file_filter(f)]

    def select_directories(self, directory: DirectoryPath) -> list[DirectoryPath]:
        """Subdirectories of *directory* that pass the directory pattern and predicate."""
        directories = directory.get_directories(self.directory_search_pattern)
        if self.directory_filter is None:
            return directories
        return [d for d in directories if self.directory_filter(d)]
