"""Forward phase: mirror surviving source entries into the destination."""

from __future__ import annotations

import logging
import stat
from pathlib import Path
from typing import Optional, Sequence, Set

from .copier import copy_file
from .errors import CopyError
from .patterns import should_exclude
from .report import SyncReport
from .tree import TreeEntry, WalkControl, walk_tree

logger = logging.getLogger("rift.sync.walker")


def mirror_tree(
    source_root: Path,
    dest_root: Path,
    patterns: Sequence[str],
    report: Optional[SyncReport] = None,
) -> Set[Path]:
    """Copy every non-excluded entry of ``source_root`` below ``dest_root``.

    Excluded directories are pruned whole. Returns the set of destination
    paths that must survive the reclaim phase.
    """

    patterns = tuple(patterns)
    report = report or SyncReport(source_root=source_root, dest_root=dest_root)
    valid_paths: Set[Path] = set()

    def visit(entry: TreeEntry) -> WalkControl:
        if should_exclude(entry.rel_path, patterns, entry.is_dir):
            report.excluded += 1
            logger.debug("Excluded %s%s", entry.rel_path, "/" if entry.is_dir else "")
            return WalkControl.SKIP_DIR if entry.is_dir else WalkControl.CONTINUE

        dest_path = dest_root / entry.rel_path
        valid_paths.add(dest_path)

        if entry.is_dir:
            if _ensure_directory(entry.path, dest_path):
                report.directories_created += 1
        elif copy_file(entry.path, dest_path):
            report.files_copied += 1
        else:
            report.files_unchanged += 1
        return WalkControl.CONTINUE

    walk_tree(source_root, visit, operation="walking source")
    logger.info(
        "Mirrored %s -> %s (%d paths kept)", source_root, dest_root, len(valid_paths)
    )
    return valid_paths


def _ensure_directory(source_dir: Path, dest_dir: Path) -> bool:
    """Create ``dest_dir`` with the source's permission bits; True if created."""

    if dest_dir.is_dir():
        return False
    try:
        mode = stat.S_IMODE(source_dir.stat().st_mode)
        dest_dir.mkdir(mode=mode, parents=True, exist_ok=True)
    except OSError as exc:
        raise CopyError(dest_dir, exc, operation="creating directory") from exc
    return True


__all__ = ["mirror_tree"]
