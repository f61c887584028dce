"""Statistics entry dataclass."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

from treesweep.utils import bytes_to_human

HELLO = "Hello"
SKIPPED = "Skipped"
DELETING = "Deleting"
DELETED = "Deleted"
CONTENTS_DELETED = "ContentsDeleted"


class ObjectType(IntEnum):
    """Kind of node.  Directories sort before files in reports."""

    DIRECTORY = 0
    FILE = 1


@dataclass(slots=True)
class StatisticsEntry:
    """What happened to a single node during a traversal."""

    virtual_path: str
    object_type: ObjectType
    action: str = HELLO
    file_size: int | None = None

    def __str__(self) -> str:
        size = f" ({bytes_to_human(self.file_size)})" if self.file_size is not None else ""
        kind = " (dir)" if self.object_type is ObjectType.DIRECTORY else ""
        return f"{self.action}: {self.virtual_path}{size}{kind}"
