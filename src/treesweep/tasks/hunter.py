"""Hunt down directories by name and delete them."""

from __future__ import annotations

import dataclasses
import logging
import os
from typing import Iterable

from treesweep.core.engine import TraversalEngine
from treesweep.core.paths import DirectoryPath
from treesweep.models.filters import TraversalFilters
from treesweep.models.hooks import TraversalHooks
from treesweep.models.intercom import DirectoryIntercom
from treesweep.models.run_summary import RunSummary

log = logging.getLogger(__name__)


class DirectoryHunter:
    """Deletes every directory whose name is in *directory_names*.

    Only directories are scanned.  Each match is removed together with
    everything beneath it, or only emptied when *delete_contents* is set.
    Caller-supplied hooks still fire, except ``on_directory_filter_match``
    which the hunter owns.
    """

    def __init__(
        self,
        root: str | os.PathLike[str],
        directory_names: Iterable[str],
        *,
        delete_contents: bool = False,
        dry_run: bool = False,
        hooks: TraversalHooks | None = None,
    ) -> None:
        self.directory_names = frozenset(directory_names)
        if not self.directory_names:
            raise ValueError("At least one directory name is required")
        self.delete_contents = delete_contents

        hooks = dataclasses.replace(
            hooks if hooks is not None else TraversalHooks(),
            on_directory_filter_match=self._on_match,
        )
        filters = TraversalFilters(
            directories_only_mode=True,
            directory_filter=self._is_target,
        )
        self.engine = TraversalEngine(root, filters=filters, hooks=hooks, dry_run=dry_run)

    def run(self) -> RunSummary:
        self.engine.start()
        summary = self.engine.summary()
        log.info(
            "Hunted %d director%s under %s",
            summary.directories_deleted,
            "y" if summary.directories_deleted == 1 else "ies",
            summary.root,
        )
        return summary

    def _is_target(self, directory: DirectoryPath) -> bool:
        return directory.name in self.directory_names

    def _on_match(self, directory: DirectoryPath, engine: TraversalEngine, intercom: DirectoryIntercom) -> None:
        intercom.request_delete(delete_contents=self.delete_contents)
