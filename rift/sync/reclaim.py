"""Backward phase: delete destination paths with no surviving source entry."""

from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import AbstractSet, List

from .errors import ReclaimError
from .tree import TreeEntry, WalkControl, walk_tree

logger = logging.getLogger("rift.sync.reclaim")


def find_orphans(dest_root: Path, valid_paths: AbstractSet[Path]) -> List[Path]:
    """List destination paths absent from ``valid_paths``, outermost first.

    Orphaned directories are not descended into; removing them takes their
    contents along.
    """

    orphans: List[Path] = []

    def visit(entry: TreeEntry) -> WalkControl:
        if entry.path in valid_paths:
            return WalkControl.CONTINUE
        orphans.append(entry.path)
        return WalkControl.SKIP_DIR if entry.is_dir else WalkControl.CONTINUE

    walk_tree(dest_root, visit, operation="scanning destination")
    return orphans


def reclaim_orphans(dest_root: Path, valid_paths: AbstractSet[Path]) -> List[Path]:
    """Remove every orphan below ``dest_root`` and return the removed paths.

    A missing ``dest_root`` means there is nothing to reconcile. Deletion only
    starts once the scan has finished; the first failure stops the run and
    earlier deletions stay in effect.
    """

    if not dest_root.exists():
        logger.debug("Destination %s does not exist; nothing to reclaim", dest_root)
        return []

    orphans = find_orphans(dest_root, valid_paths)
    for path in orphans:
        try:
            _remove(path)
        except OSError as exc:
            raise ReclaimError(path, exc) from exc
        logger.info("Removed orphan %s", path)
    return orphans


def _remove(path: Path) -> None:
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
    else:
        path.unlink(missing_ok=True)


__all__ = ["find_orphans", "reclaim_orphans"]
