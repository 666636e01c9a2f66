"""Pre-order directory traversal with subtree pruning."""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, Union

from .errors import TraversalError
from .patterns import SEPARATOR


class WalkControl(str, Enum):
    """Value returned by a visit callback to steer the traversal."""
    CONTINUE = "continue"
    SKIP_DIR = "skip_dir"


@dataclass(frozen=True)
class TreeEntry:
    """A path seen during a walk, relative to the tree root."""

    path: Path  # Absolute (root-joined) path
    rel_path: str  # Forward-slash path relative to the root
    is_dir: bool


Visitor = Callable[[TreeEntry], WalkControl]


def walk_tree(
    root: Union[str, Path],
    visit: Visitor,
    *,
    operation: str = "walking source",
) -> None:
    """Visit every entry below ``root`` depth-first, parents before children.

    The root itself is not visited. Siblings are visited in name order. When
    ``visit`` returns ``WalkControl.SKIP_DIR`` for a directory its children are
    never listed. Symbolic links are reported as non-directories and never
    followed. A directory that cannot be listed raises ``TraversalError``
    tagged with ``operation``.
    """

    _walk_directory(Path(root), "", visit, operation)


def _walk_directory(
    directory: Path,
    prefix: str,
    visit: Visitor,
    operation: str,
) -> None:
    try:
        with os.scandir(directory) as it:
            entries = sorted(it, key=lambda item: item.name)
    except OSError as exc:
        raise TraversalError(directory, exc, operation=operation) from exc

    for dir_entry in entries:
        rel_path = f"{prefix}{SEPARATOR}{dir_entry.name}" if prefix else dir_entry.name
        try:
            is_dir = dir_entry.is_dir(follow_symlinks=False)
        except OSError as exc:
            raise TraversalError(dir_entry.path, exc, operation=operation) from exc

        entry = TreeEntry(path=directory / dir_entry.name, rel_path=rel_path, is_dir=is_dir)
        control = visit(entry)
        if entry.is_dir and control is not WalkControl.SKIP_DIR:
            _walk_directory(entry.path, rel_path, visit, operation)


__all__ = ["TreeEntry", "WalkControl", "Visitor", "walk_tree"]
