"""Listener hooks fired by the traversal engine."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable

from treesweep.models.intercom import DirectoryIntercom, FileIntercom

if TYPE_CHECKING:
    from treesweep.core.engine import TraversalEngine
    from treesweep.core.paths import DirectoryPath, FilePath

DirectorySignalHook = Callable[["DirectoryPath", "TraversalEngine", DirectoryIntercom], None]
DirectoryHook = Callable[["DirectoryPath", "TraversalEngine"], None]
FileSignalHook = Callable[["FilePath", "TraversalEngine", FileIntercom], None]
FileHook = Callable[["FilePath", "TraversalEngine"], None]
FileDeletedHook = Callable[["FilePath", "TraversalEngine", int], None]
WarningHook = Callable[[str], None]


def _noop(*_args: Any) -> None:
    return None


@dataclass
class TraversalHooks:
    """Callbacks for each point of a traversal.

    Every hook defaults to a no-op, so callers only set the ones they need::

        hooks = TraversalHooks(on_file_hello=lambda f, engine, cmd: cmd.skip())
    """

    on_directory_hello: DirectorySignalHook = _noop
    on_directory_filter_match: DirectorySignalHook = _noop
    on_directory_goodbye: DirectorySignalHook = _noop
    on_directory_skipped: DirectoryHook = _noop
    on_directory_deleting: DirectoryHook = _noop
    on_directory_deleted: DirectoryHook = _noop
    on_file_hello: FileSignalHook = _noop
    on_file_skip: FileHook = _noop
    on_file_delete: FileDeletedHook = _noop
    on_warning: WarningHook = _noop
