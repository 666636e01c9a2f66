"""Directory mirroring with gitignore-style exclusions."""

from __future__ import annotations

from .copier import copy_file
from .engine import check_disjoint, synchronize
from .errors import CopyError, OverlappingTreesError, ReclaimError, SyncError, TraversalError
from .patterns import ExclusionPattern, match_pattern, should_exclude
from .reclaim import find_orphans, reclaim_orphans
from .report import SyncReport
from .tree import TreeEntry, WalkControl, walk_tree
from .walker import mirror_tree

__all__ = [
    # Patterns
    "ExclusionPattern",
    "match_pattern",
    "should_exclude",
    # Traversal
    "TreeEntry",
    "WalkControl",
    "walk_tree",
    # Phases
    "copy_file",
    "mirror_tree",
    "find_orphans",
    "reclaim_orphans",
    "check_disjoint",
    "synchronize",
    "SyncReport",
    # Errors
    "SyncError",
    "TraversalError",
    "CopyError",
    "ReclaimError",
    "OverlappingTreesError",
]
