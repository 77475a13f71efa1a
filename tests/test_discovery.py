"""Tests for file-set resolution (discovery.py)."""

from __future__ import annotations

from pathlib import Path

from lcovr.discovery import FileSet, resolve_inputs, resolve_source_dirs


def _make_files(root: Path, rel_paths: list[str]) -> None:
    """Create empty files (with parent directories) under *root*."""
    for rel in rel_paths:
        f = root / rel
        f.parent.mkdir(parents=True, exist_ok=True)
        f.touch()


def test_default_includes_find_info_and_lcov(tmp_path: Path) -> None:
    _make_files(tmp_path, ["a.info", "sub/b.lcov", "sub/deeper/c.info", "notes.txt"])
    found = FileSet(tmp_path).included_files()
    assert found == sorted(
        [tmp_path / "a.info", tmp_path / "sub/b.lcov", tmp_path / "sub/deeper/c.info"]
    )


def test_excludes(tmp_path: Path) -> None:
    _make_files(tmp_path, ["keep.info", "vendor/skip.info"])
    fileset = FileSet(tmp_path, includes=("**/*.info",), excludes=("vendor/*.info",))
    assert fileset.included_files() == [tmp_path / "keep.info"]


def test_missing_base_dir(tmp_path: Path) -> None:
    assert FileSet(tmp_path / "nope").included_files() == []


def test_included_directories(tmp_path: Path) -> None:
    (tmp_path / "mod-b" / "src").mkdir(parents=True)
    (tmp_path / "mod-a" / "src").mkdir(parents=True)
    _make_files(tmp_path, ["mod-c/src"])
    fileset = FileSet(tmp_path, includes=("*/src",))
    assert fileset.included_directories() == [tmp_path / "mod-a/src", tmp_path / "mod-b/src"]


def test_no_includes_selects_base_directory(tmp_path: Path) -> None:
    assert FileSet(tmp_path, includes=()).included_directories() == [tmp_path]


def test_resolve_keeps_fileset_order(tmp_path: Path) -> None:
    _make_files(tmp_path, ["z/1.info", "a/2.info"])
    inputs = resolve_inputs([FileSet(tmp_path / "z"), FileSet(tmp_path / "a")])
    assert inputs == [tmp_path / "z/1.info", tmp_path / "a/2.info"]

    dirs = resolve_source_dirs(
        [FileSet(tmp_path / "z", includes=()), FileSet(tmp_path / "a", includes=())]
    )
    assert dirs == [tmp_path / "z", tmp_path / "a"]
