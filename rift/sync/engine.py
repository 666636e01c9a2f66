"""Two-phase tree synchronization: mirror forward, then reclaim orphans."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Sequence, Union

from .errors import OverlappingTreesError
from .patterns import should_exclude
from .reclaim import reclaim_orphans
from .report import SyncReport
from .walker import mirror_tree

logger = logging.getLogger("rift.sync.engine")


def synchronize(
    source_root: Union[str, Path],
    dest_root: Union[str, Path],
    patterns: Sequence[str],
) -> SyncReport:
    """Make ``dest_root`` an exact mirror of the non-excluded part of ``source_root``.

    The forward phase runs to completion before any orphan is removed. Any
    failure raises a ``SyncError`` subclass; work already done stays on disk.
    """

    source = Path(source_root).absolute()
    dest = Path(dest_root).absolute()
    patterns = tuple(patterns)

    check_disjoint(source, dest, patterns)

    report = SyncReport(source_root=source, dest_root=dest)
    logger.info("Syncing %s -> %s with %d pattern(s)", source, dest, len(patterns))

    valid_paths = mirror_tree(source, dest, patterns, report)
    report.removed.extend(reclaim_orphans(dest, valid_paths))

    logger.info("Sync finished: %s", report.summary())
    return report


def check_disjoint(source: Path, dest: Path, patterns: Sequence[str]) -> None:
    """Reject source and destination trees that overlap.

    A destination nested inside the source is allowed only when one of its
    ancestors below the source root is an excluded directory, since the
    forward walk never enters it.
    """

    source_real = source.resolve()
    dest_real = dest.resolve()

    if source_real == dest_real:
        raise OverlappingTreesError(
            dest, message="destination is the source directory"
        )

    if _is_within(source_real, dest_real):
        raise OverlappingTreesError(
            dest, message=f"destination contains the source directory {source}"
        )

    if _is_within(dest_real, source_real):
        rel_parts = dest_real.relative_to(source_real).parts
        for depth in range(1, len(rel_parts) + 1):
            ancestor = "/".join(rel_parts[:depth])
            if should_exclude(ancestor, patterns, True):
                return
        raise OverlappingTreesError(
            dest, message=f"destination is inside the source directory {source}"
        )


def _is_within(path: Path, parent: Path) -> bool:
    try:
        path.relative_to(parent)
        return True
    except ValueError:
        return False


__all__ = ["check_disjoint", "synchronize"]
