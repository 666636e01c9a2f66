"""End-to-end tests for two-phase tree synchronization."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Dict

import pytest

from rift.sync import OverlappingTreesError, SyncError, TraversalError, synchronize


def _mtimes(root: Path) -> Dict[str, int]:
    return {
        path.relative_to(root).as_posix(): path.stat().st_mtime_ns
        for path in root.rglob("*")
        if path.is_file()
    }


def test_sync_copies_and_excludes(source: Path, dest: Path, write_tree):
    write_tree(source, {"file1.txt": "hello", "subdir/file2.txt": "world", "ignore.log": "logs"})

    report = synchronize(source, dest, ["*.log"])

    assert (dest / "file1.txt").read_text(encoding="utf-8") == "hello"
    assert (dest / "subdir" / "file2.txt").read_text(encoding="utf-8") == "world"
    assert not (dest / "ignore.log").exists()
    assert report.files_copied == 2
    assert report.directories_created == 1
    assert report.excluded == 1


def test_sync_removes_orphan_file(source: Path, dest: Path, write_tree):
    write_tree(source, {"keep.txt": "keep"})
    write_tree(dest, {"orphan.txt": "orphan"})

    report = synchronize(source, dest, [])

    assert not (dest / "orphan.txt").exists()
    assert (dest / "keep.txt").exists()
    assert report.removed == [dest / "orphan.txt"]


def test_sync_removes_orphan_subtree(source: Path, dest: Path, write_tree):
    write_tree(source, {"keep.txt": "keep"})
    write_tree(dest, {"old/a.txt": "", "old/deeper/b.txt": "", "old/deeper/c/d.txt": ""})

    report = synchronize(source, dest, [])

    assert not (dest / "old").exists()
    assert report.removed == [dest / "old"]


def test_excluded_directory_is_pruned(source: Path, dest: Path, write_tree):
    write_tree(
        source,
        {"main.py": "", "node_modules/pkg/index.js": "", "node_modules/readme.txt": ""},
    )

    report = synchronize(source, dest, ["node_modules/"])

    assert (dest / "main.py").exists()
    assert not (dest / "node_modules").exists()
    assert report.excluded == 1


def test_previously_synced_excluded_entries_become_orphans(source: Path, dest: Path, write_tree):
    write_tree(source, {"app.py": "", "build/out.bin": ""})
    synchronize(source, dest, [])
    assert (dest / "build" / "out.bin").exists()

    synchronize(source, dest, ["build/"])

    assert not (dest / "build").exists()
    assert (dest / "app.py").exists()


def test_second_run_copies_nothing(source: Path, dest: Path, write_tree):
    write_tree(source, {"a.txt": "a", "dir/b.txt": "bb", "dir/sub/c.txt": "ccc"})
    synchronize(source, dest, [])
    before = _mtimes(dest)

    report = synchronize(source, dest, [])

    assert report.files_copied == 0
    assert report.files_unchanged == 3
    assert report.directories_created == 0
    assert not report.has_changes
    assert _mtimes(dest) == before


def test_changed_source_file_is_recopied(source: Path, dest: Path, write_tree):
    write_tree(source, {"a.txt": "one"})
    synchronize(source, dest, [])

    (source / "a.txt").write_text("three", encoding="utf-8")
    report = synchronize(source, dest, [])

    assert report.files_copied == 1
    assert (dest / "a.txt").read_text(encoding="utf-8") == "three"


def test_git_directory_and_rooted_patterns(source: Path, dest: Path, write_tree):
    write_tree(
        source,
        {
            ".git/HEAD": "ref",
            ".gitignore": "*.log",
            "build/output/x": "",
            "src/build/output/y": "",
        },
    )

    synchronize(source, dest, [".git", "build/output"])

    assert not (dest / ".git").exists()
    assert (dest / ".gitignore").exists()
    assert not (dest / "build" / "output").exists()
    assert (dest / "build").is_dir()
    assert (dest / "src" / "build" / "output" / "y").exists()


@pytest.mark.skipif(os.name == "nt", reason="backslash is a separator on Windows")
def test_backslash_in_directory_name_is_not_a_separator(source: Path, dest: Path, write_tree):
    write_tree(source, {"a\\b/f.txt": "data", "b/skip.txt": ""})

    synchronize(source, dest, ["b"])

    assert (dest / "a\\b" / "f.txt").read_text(encoding="utf-8") == "data"
    assert not (dest / "b").exists()


def test_destination_created_when_missing(source: Path, tmp_path: Path, write_tree):
    write_tree(source, {"a.txt": "a"})
    target = tmp_path / "deep" / "nested" / "dest"

    synchronize(source, target, [])

    assert (target / "a.txt").exists()


def test_empty_source_clears_destination(source: Path, dest: Path, write_tree):
    write_tree(dest, {"x.txt": "", "y/z.txt": ""})

    synchronize(source, dest, [])

    assert dest.is_dir()
    assert list(dest.iterdir()) == []


def test_missing_source_raises_traversal_error(tmp_path: Path, dest: Path):
    with pytest.raises(TraversalError) as excinfo:
        synchronize(tmp_path / "missing", dest, [])

    assert "walking source" in str(excinfo.value)


def test_destination_equal_to_source_is_rejected(source: Path):
    with pytest.raises(OverlappingTreesError):
        synchronize(source, source, [])


def test_destination_inside_source_is_rejected(source: Path, write_tree):
    write_tree(source, {"a.txt": ""})

    with pytest.raises(OverlappingTreesError):
        synchronize(source, source / "mirror", [])

    assert not (source / "mirror").exists()


def test_destination_inside_excluded_source_dir_is_allowed(source: Path, write_tree):
    write_tree(source, {"a.txt": "a", "out/stale.txt": ""})

    synchronize(source, source / "out" / "mirror", ["out/"])

    assert (source / "out" / "mirror" / "a.txt").exists()
    assert not (source / "out" / "mirror" / "out").exists()


def test_source_inside_destination_is_rejected(tmp_path: Path, write_tree):
    outer = tmp_path / "outer"
    inner = outer / "project"
    write_tree(inner, {"a.txt": ""})

    with pytest.raises(SyncError):
        synchronize(inner, outer, [])

    assert (inner / "a.txt").exists()
