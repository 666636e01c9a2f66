"""Tests for the pruning tree walk."""

from __future__ import annotations

import os
from pathlib import Path
from typing import List

import pytest

from rift.sync import tree
from rift.sync.errors import TraversalError
from rift.sync.tree import TreeEntry, WalkControl, walk_tree


def test_walk_is_preorder_and_sorted(source: Path, write_tree):
    write_tree(source, {"b.txt": "", "a/z.txt": "", "a/m/n.txt": "", "c/d.txt": ""})
    seen: List[str] = []

    def visit(entry: TreeEntry) -> WalkControl:
        seen.append(entry.rel_path)
        return WalkControl.CONTINUE

    walk_tree(source, visit)

    assert seen == ["a", "a/m", "a/m/n.txt", "a/z.txt", "b.txt", "c", "c/d.txt"]


def test_skip_dir_prunes_children(source: Path, write_tree):
    write_tree(source, {"keep/file.txt": "", "skip/nested/file.txt": "", "skip/top.txt": ""})
    seen: List[str] = []

    def visit(entry: TreeEntry) -> WalkControl:
        seen.append(entry.rel_path)
        if entry.rel_path == "skip":
            return WalkControl.SKIP_DIR
        return WalkControl.CONTINUE

    walk_tree(source, visit)

    assert seen == ["keep", "keep/file.txt", "skip"]


def test_entries_report_paths_and_kind(source: Path, write_tree):
    write_tree(source, {"dir/file.txt": "x"})
    entries: List[TreeEntry] = []
    walk_tree(source, lambda entry: entries.append(entry) or WalkControl.CONTINUE)

    assert entries[0] == TreeEntry(path=source / "dir", rel_path="dir", is_dir=True)
    assert entries[1] == TreeEntry(
        path=source / "dir" / "file.txt", rel_path="dir/file.txt", is_dir=False
    )


@pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unavailable")
def test_symlinked_directories_are_not_followed(source: Path, tmp_path: Path, write_tree):
    outside = tmp_path / "outside"
    write_tree(outside, {"secret.txt": ""})
    try:
        (source / "link").symlink_to(outside, target_is_directory=True)
    except OSError:
        pytest.skip("cannot create symlinks here")
    entries: List[TreeEntry] = []
    walk_tree(source, lambda entry: entries.append(entry) or WalkControl.CONTINUE)

    assert [(entry.rel_path, entry.is_dir) for entry in entries] == [("link", False)]


def test_missing_root_raises_traversal_error(tmp_path: Path):
    with pytest.raises(TraversalError) as excinfo:
        walk_tree(tmp_path / "missing", lambda entry: WalkControl.CONTINUE)

    assert excinfo.value.path == tmp_path / "missing"
    assert str(excinfo.value).startswith("walking source: ")


def test_listing_failure_carries_operation(
    source: Path, monkeypatch: pytest.MonkeyPatch, write_tree
):
    write_tree(source, {"locked/file.txt": ""})
    real_scandir = os.scandir

    def fake_scandir(path):
        if Path(path).name == "locked":
            raise PermissionError(13, "Permission denied")
        return real_scandir(path)

    monkeypatch.setattr(tree.os, "scandir", fake_scandir)

    with pytest.raises(TraversalError) as excinfo:
        walk_tree(source, lambda entry: WalkControl.CONTINUE, operation="scanning destination")

    assert excinfo.value.path == source / "locked"
    assert str(excinfo.value) == f"scanning destination: {source / 'locked'}: Permission denied"
