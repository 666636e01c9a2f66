"""Error types raised by the tree synchronization engine."""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Union

PathLike = Union[str, Path]


class SyncError(Exception):
    """Base class for failures that abort a synchronization run.

    Each error carries the phase or operation that failed, the offending path
    and the underlying cause so callers can report
    ``walking source: <path>: <cause>`` style diagnostics.
    """

    operation = "sync"
    path_separator = " "

    def __init__(
        self,
        path: Optional[PathLike] = None,
        cause: Optional[BaseException] = None,
        *,
        operation: Optional[str] = None,
        message: Optional[str] = None,
    ) -> None:
        self.path = Path(path) if path is not None else None
        self.cause = cause
        if operation is not None:
            self.operation = operation
        self.message = message
        super().__init__(self._render())

    def _render(self) -> str:
        head = self.operation
        if self.path is not None:
            head = f"{head}{self.path_separator}{self.path}"
        parts = [head]
        if self.message:
            parts.append(self.message)
        elif self.cause is not None:
            parts.append(_describe(self.cause))
        return ": ".join(parts)


class TraversalError(SyncError):
    """Iterating a directory of the source or destination tree failed."""

    operation = "walking source"
    path_separator = ": "


class CopyError(SyncError):
    """Stat, open, write or timestamp update of a single file failed."""

    operation = "copying"


class ReclaimError(SyncError):
    """Removing an orphaned destination path failed."""

    operation = "removing"


class OverlappingTreesError(SyncError):
    """Source and destination trees are equal or nested inside each other."""

    operation = "refusing to sync"


def _describe(exc: BaseException) -> str:
    if isinstance(exc, OSError) and exc.strerror:
        return exc.strerror
    return str(exc) or exc.__class__.__name__


__all__ = [
    "SyncError",
    "TraversalError",
    "CopyError",
    "ReclaimError",
    "OverlappingTreesError",
]
