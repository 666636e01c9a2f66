"""Incremental single-file copy."""

from __future__ import annotations

import logging
import os
import shutil
import stat
from pathlib import Path
from typing import Union

from .errors import CopyError

logger = logging.getLogger("rift.sync.copier")

CHUNK_SIZE = 1024 * 1024


def copy_file(source: Union[str, Path], dest: Union[str, Path]) -> bool:
    """Copy ``source`` to ``dest`` unless the destination is already in sync.

    A destination with the same size and modification time as the source is
    left alone. Otherwise the file is rewritten, created with the source's
    permission bits, and stamped with the source's modification time so the
    next run can skip it.

    Returns True when bytes were copied, False when the copy was skipped.
    """

    source = Path(source)
    dest = Path(dest)

    try:
        info = source.stat()
    except OSError as exc:
        raise CopyError(source, exc, operation="reading") from exc

    try:
        dest.parent.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise CopyError(dest.parent, exc, operation="creating directory") from exc

    if is_unchanged(info, dest):
        logger.debug("Unchanged, skipping %s", dest)
        return False

    try:
        with open(source, "rb") as src:
            fd = os.open(dest, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, stat.S_IMODE(info.st_mode))
            with os.fdopen(fd, "wb") as dst:
                shutil.copyfileobj(src, dst, CHUNK_SIZE)
    except OSError as exc:
        raise CopyError(dest, exc) from exc

    try:
        os.utime(dest, ns=(info.st_mtime_ns, info.st_mtime_ns))
    except OSError as exc:
        raise CopyError(dest, exc, operation="setting modification time") from exc

    logger.debug("Copied %s -> %s (%d bytes)", source, dest, info.st_size)
    return True


def is_unchanged(source_info: os.stat_result, dest: Path) -> bool:
    """Size and modification time equality; contents are never compared."""
    try:
        dest_info = dest.stat()
    except OSError:
        return False
    return (
        dest_info.st_size == source_info.st_size
        and dest_info.st_mtime_ns == source_info.st_mtime_ns
    )


__all__ = ["copy_file", "is_unchanged"]
