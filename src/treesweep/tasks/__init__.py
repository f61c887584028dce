"""Ready-made tasks built on the traversal engine."""

from treesweep.tasks.hunter import DirectoryHunter
from treesweep.tasks.listing import TreeLister
from treesweep.tasks.purger import FilePurger
from treesweep.tasks.transfer import TreeCopier, TreeMover
from treesweep.tasks.wipe import wipe

__all__ = [
    "DirectoryHunter",
    "FilePurger",
    "TreeCopier",
    "TreeLister",
    "TreeMover",
    "wipe",
]
