from __future__ import annotations

from pathlib import Path
from typing import Callable, Dict

import pytest


def _write_tree(root: Path, files: Dict[str, str]) -> None:
    for rel_path, content in files.items():
        path = root / rel_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")


@pytest.fixture
def write_tree() -> Callable[[Path, Dict[str, str]], None]:
    """Create files (relative path -> text content) below a root."""
    return _write_tree


@pytest.fixture
def source(tmp_path: Path) -> Path:
    path = tmp_path / "source"
    path.mkdir()
    return path


@pytest.fixture
def dest(tmp_path: Path) -> Path:
    return tmp_path / "dest"
