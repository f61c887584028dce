"""Read-only tree listing."""

from __future__ import annotations

import os

from treesweep.core.engine import TraversalEngine
from treesweep.core.paths import DirectoryPath, FilePath
from treesweep.models.filters import TraversalFilters
from treesweep.models.hooks import TraversalHooks
from treesweep.models.intercom import DirectoryIntercom, FileIntercom
from treesweep.utils import bytes_to_human

LISTED = "Listed"


def _depth(engine: TraversalEngine, node: DirectoryPath | FilePath) -> int:
    vpath = engine.virtual_path(node)
    return 0 if vpath == "/" else vpath.count("/")


class TreeLister:
    """Builds an indented listing of a tree without modifying it.

    Listed files are recorded in the statistics with the action ``Listed``.
    """

    def __init__(
        self,
        root: str | os.PathLike[str],
        *,
        file_pattern: str | None = None,
        directory_pattern: str | None = None,
    ) -> None:
        self.lines: list[str] = []
        filters = TraversalFilters(
            file_search_pattern=file_pattern,
            directory_search_pattern=directory_pattern,
        )
        hooks = TraversalHooks(
            on_directory_hello=self._on_directory,
            on_file_hello=self._on_file,
        )
        self.engine = TraversalEngine(root, filters=filters, hooks=hooks)

    def run(self) -> list[str]:
        self.lines = []
        self.engine.statistics.clear()
        self.engine.start()
        return self.lines

    def _on_directory(self, directory: DirectoryPath, engine: TraversalEngine, intercom: DirectoryIntercom) -> None:
        depth = _depth(engine, directory)
        self.lines.append("  " * depth + directory.name + "/")

    def _on_file(self, file: FilePath, engine: TraversalEngine, intercom: FileIntercom) -> None:
        depth = _depth(engine, file)
        self.lines.append("  " * depth + f"{file.name} ({bytes_to_human(file.size)})")
        intercom.action_name = LISTED
