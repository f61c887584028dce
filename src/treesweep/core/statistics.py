"""Per-node event log of a traversal."""

from __future__ import annotations

import logging
import os
from itertools import groupby
from typing import Iterator

from treesweep.core.paths import DirectoryPath, FilePath
from treesweep.models.statistics import HELLO, ObjectType, StatisticsEntry
from treesweep.utils import bytes_to_human, virtual_path

log = logging.getLogger(__name__)

Node = DirectoryPath | FilePath
Root = str | os.PathLike[str]


class StatisticsError(LookupError):
    """Raised when a node does not have exactly one statistics entry."""


def _object_type(node: Node) -> ObjectType:
    return ObjectType.DIRECTORY if isinstance(node, DirectoryPath) else ObjectType.FILE


class TraversalStatistics:
    """Ordered log of what happened to each directory and file.

    Every visited node gets one entry when it is first seen (``Hello``);
    the engine then rewrites that entry's action as the node's fate is
    decided.  Entries are keyed by virtual path and object type.
    """

    def __init__(self) -> None:
        self._entries: list[StatisticsEntry] = []

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[StatisticsEntry]:
        return iter(self._entries)

    @property
    def entries(self) -> list[StatisticsEntry]:
        """A copy of the log in the order nodes were visited."""
        return list(self._entries)

    def clear(self) -> None:
        self._entries.clear()

    @property
    def directory_count(self) -> int:
        return self.count(ObjectType.DIRECTORY)

    @property
    def total_file_count(self) -> int:
        return self.count(ObjectType.FILE)

    @property
    def total_file_size(self) -> int:
        return self.file_size()

    def count(self, object_type: ObjectType, action: str | None = None) -> int:
        """Number of entries of *object_type*, optionally with a given action."""
        return sum(
            1
            for e in self._entries
            if e.object_type is object_type and (action is None or e.action == action)
        )

    def file_size(self, action: str | None = None) -> int:
        """Summed size of file entries, optionally with a given action."""
        return sum(
            e.file_size or 0
            for e in self._entries
            if e.object_type is ObjectType.FILE and (action is None or e.action == action)
        )

    def log_hello(self, node: Node, root: Root, file_size: int | None = None) -> StatisticsEntry:
        """Record the first sighting of *node*.

        For files the size snapshot is *file_size* when given, otherwise it
        is read from the node.
        """
        object_type = _object_type(node)
        if object_type is ObjectType.FILE and file_size is None:
            file_size = node.size  # type: ignore[union-attr]
        entry = StatisticsEntry(
            virtual_path=virtual_path(node, root),
            object_type=object_type,
            action=HELLO,
            file_size=file_size if object_type is ObjectType.FILE else None,
        )
        self._entries.append(entry)
        return entry

    def find(self, node: Node, root: Root) -> StatisticsEntry:
        """Return the single entry recorded for *node*.

        Raises:
            StatisticsError: If there is no entry, or more than one.
        """
        object_type = _object_type(node)
        vpath = virtual_path(node, root)
        matches = [
            e for e in self._entries if e.object_type is object_type and e.virtual_path == vpath
        ]
        if len(matches) != 1:
            raise StatisticsError(
                f"Expected one {object_type.name.lower()} entry for {vpath}, found {len(matches)}"
            )
        return matches[0]

    def update_action(self, node: Node, root: Root, action: str) -> None:
        """Overwrite the action of the entry recorded for *node*."""
        entry = self.find(node, root)
        log.debug("%s -> %s", entry.virtual_path, action)
        entry.action = action

    def dump(self) -> str:
        """Render a report grouped by object type, then by action."""
        if not self._entries:
            return "No Entries\n"

        lines: list[str] = []
        by_type = sorted(self._entries, key=lambda e: (e.object_type, e.action))
        for object_type, type_group in groupby(by_type, key=lambda e: e.object_type):
            lines.append("Directories" if object_type is ObjectType.DIRECTORY else "Files")
            for action, action_group in groupby(type_group, key=lambda e: e.action):
                group = list(action_group)
                size = ""
                if object_type is ObjectType.FILE:
                    total = sum(e.file_size or 0 for e in group)
                    if total > 0:
                        size = f" ({bytes_to_human(total)})"
                lines.append(f"  {len(group)} {action}{size}")
        return "\n".join(lines) + "\n"
