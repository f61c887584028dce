"""Recursive delete of a whole tree."""

from __future__ import annotations

import os

from treesweep.core.engine import TraversalEngine
from treesweep.models.hooks import TraversalHooks
from treesweep.models.run_summary import RunSummary


def wipe(
    root: str | os.PathLike[str],
    *,
    keep_root: bool = False,
    dry_run: bool = False,
    hooks: TraversalHooks | None = None,
) -> RunSummary:
    """Delete *root* and everything beneath it.

    Args:
        root: Directory to remove.
        keep_root: Empty the directory but leave it in place.
        dry_run: Report what would be removed without removing anything.
        hooks: Optional callbacks, e.g. for progress output.
    """
    engine = TraversalEngine(root, hooks=hooks, dry_run=dry_run)
    engine.start_recursive_delete(keep_root=keep_root)
    return engine.summary()
