"""Delete files matching name patterns anywhere under a root."""

from __future__ import annotations

import dataclasses
import logging
import os
from typing import Iterable

from treesweep.core.engine import TraversalEngine
from treesweep.core.paths import FilePath
from treesweep.models.filters import TraversalFilters
from treesweep.models.hooks import TraversalHooks
from treesweep.models.intercom import FileIntercom
from treesweep.models.run_summary import RunSummary
from treesweep.utils import matches_search_pattern

log = logging.getLogger(__name__)


class FilePurger:
    """Deletes every file whose name matches one of *patterns*.

    Patterns use the search-pattern syntax, e.g. ``*.tmp`` or ``Thumbs.db``.
    """

    def __init__(
        self,
        root: str | os.PathLike[str],
        patterns: Iterable[str],
        *,
        dry_run: bool = False,
        hooks: TraversalHooks | None = None,
    ) -> None:
        self.patterns = tuple(patterns)
        if not self.patterns:
            raise ValueError("At least one file pattern is required")

        hooks = dataclasses.replace(
            hooks if hooks is not None else TraversalHooks(),
            on_file_hello=self._on_file,
        )
        self.engine = TraversalEngine(
            root,
            filters=TraversalFilters(file_filter=self._is_target),
            hooks=hooks,
            dry_run=dry_run,
        )

    def run(self) -> RunSummary:
        self.engine.start()
        summary = self.engine.summary()
        log.info("Purged %d file(s), %d bytes under %s", summary.files_deleted, summary.bytes_deleted, summary.root)
        return summary

    def _is_target(self, file: FilePath) -> bool:
        return any(matches_search_pattern(file.name, p) for p in self.patterns)

    def _on_file(self, file: FilePath, engine: TraversalEngine, intercom: FileIntercom) -> None:
        intercom.request_delete()
