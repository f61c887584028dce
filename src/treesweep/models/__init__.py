"""Treesweep data models."""

from treesweep.models.filters import TraversalFilters
from treesweep.models.hooks import TraversalHooks
from treesweep.models.intercom import DirectoryIntercom, FileIntercom
from treesweep.models.run_summary import RunSummary, TransferSummary
from treesweep.models.statistics import ObjectType, StatisticsEntry

__all__ = [
    "DirectoryIntercom",
    "FileIntercom",
    "ObjectType",
    "RunSummary",
    "StatisticsEntry",
    "TransferSummary",
    "TraversalFilters",
    "TraversalHooks",
]
