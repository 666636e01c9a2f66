"""Summary of a synchronization run."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List


@dataclass
class SyncReport:
    """Counters collected while a run progresses."""

    source_root: Path
    dest_root: Path
    directories_created: int = 0
    files_copied: int = 0
    files_unchanged: int = 0
    excluded: int = 0
    removed: List[Path] = field(default_factory=list)

    @property
    def orphans_removed(self) -> int:
        return len(self.removed)

    @property
    def has_changes(self) -> bool:
        return bool(self.directories_created or self.files_copied or self.removed)

    def summary(self) -> str:
        return (
            f"{self.files_copied} copied, {self.files_unchanged} unchanged, "
            f"{self.orphans_removed} removed, {self.excluded} excluded"
        )


__all__ = ["SyncReport"]
