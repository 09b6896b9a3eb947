#!/usr/bin/env python3
"""
Tests for the bounded tree walker
"""

import os

import pytest

from filescleanup.core import walker as walker_module
from filescleanup.core.config import Config
from filescleanup.core.duplicate_index import DuplicateIndex
from filescleanup.core.hashing import HashComputer
from filescleanup.core.walker import (
    EMPTY_DIRECTORY,
    EMPTY_FILE,
    ERROR,
    LIMITED_SCAN,
    MAX_DEPTH_REACHED,
    MAX_FILES_REACHED,
    TIME_LIMIT_REACHED,
    Finding,
    ScanBudget,
    TreeWalker,
    is_excluded_path,
)


class FakeClock:
    """Clock that only moves when told to"""

    def __init__(self):
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


class SlowHasher(HashComputer):
    """Hasher that makes every identification take ten seconds"""

    def __init__(self, clock: FakeClock):
        super().__init__()
        self.clock = clock

    def identify(self, path):
        self.clock.now += 10
        return super().identify(path)


class FailingHasher(HashComputer):
    """Hasher that cannot read files named bad.*"""

    def identify(self, path):
        if os.path.basename(path).startswith("bad."):
            raise PermissionError("Permission denied")
        return super().identify(path)


def make_walker(max_depth=5, max_files=1000, config=None, clock=None, hasher=None):
    config = config or Config()
    clock = clock or FakeClock()
    budget = ScanBudget(max_depth, max_files, config.time_limit_ms, clock=clock)
    index = DuplicateIndex()
    return TreeWalker(config, budget, index, hasher or HashComputer())


def test_clean_tree_has_no_findings(tmp_path):
    (tmp_path / "a.txt").write_text("a")
    (tmp_path / "sub").mkdir()
    (tmp_path / "sub" / "b.md").write_text("b")

    walker = make_walker()

    assert walker.walk(str(tmp_path)) == []
    assert walker.budget.files_processed == 3
    assert walker.stats.directories_visited == 2


def test_empty_file(tmp_path):
    (tmp_path / "a.txt").touch()
    (tmp_path / "b.txt").write_text("b")

    findings = make_walker().walk(str(tmp_path))

    assert findings == [Finding(str(tmp_path / "a.txt"), EMPTY_FILE, "empty file")]
    assert str(findings[0]) == f"{tmp_path / 'a.txt'} (empty file)"


def test_empty_directories(tmp_path):
    (tmp_path / "full").mkdir()
    (tmp_path / "full" / "x.txt").write_text("x")
    (tmp_path / "hollow").mkdir()

    findings = make_walker().walk(str(tmp_path))

    assert findings == [Finding(str(tmp_path / "hollow"), EMPTY_DIRECTORY, "empty directory")]


def test_empty_root(tmp_path):
    findings = make_walker().walk(str(tmp_path))

    assert [str(f) for f in findings] == [f"{tmp_path} (empty directory)"]


def test_findings_are_pre_order(tmp_path):
    (tmp_path / "a").mkdir()
    (tmp_path / "a" / "inner.txt").touch()
    (tmp_path / "b.txt").touch()
    (tmp_path / "c").mkdir()

    findings = make_walker().walk(str(tmp_path))

    assert [f.path for f in findings] == [
        str(tmp_path / "a" / "inner.txt"),
        str(tmp_path / "b.txt"),
        str(tmp_path / "c"),
    ]


def test_common_extensions_are_indexed(tmp_path):
    (tmp_path / "x.txt").write_text("same")
    (tmp_path / "y.txt").write_text("same")
    (tmp_path / "z.dat").write_text("same")

    walker = make_walker()
    walker.walk(str(tmp_path))

    groups = walker.index.groups()
    assert len(groups) == 1
    assert groups[0].paths == [str(tmp_path / "x.txt"), str(tmp_path / "y.txt")]
    assert walker.stats.files_hashed == 2


def test_max_depth_zero_does_not_descend(tmp_path):
    (tmp_path / "sub").mkdir()
    (tmp_path / "sub" / "child.txt").touch()

    walker = make_walker(max_depth=0)
    findings = walker.walk(str(tmp_path))

    assert findings == [Finding(str(tmp_path / "sub"), MAX_DEPTH_REACHED, "max depth reached")]
    assert walker.budget.files_processed == 1


def test_fan_out_cap(tmp_path):
    for i in range(150):
        (tmp_path / f"file{i:03d}.dat").write_text("x")

    walker = make_walker()
    findings = walker.walk(str(tmp_path))

    assert findings == [Finding(str(tmp_path), LIMITED_SCAN, "limited scan: 100/150 items")]
    assert walker.budget.files_processed == 100


def test_max_files_during_processing(tmp_path):
    for name in ("a.dat", "b.dat", "c.dat"):
        (tmp_path / name).touch()

    walker = make_walker(max_files=2)
    findings = walker.walk(str(tmp_path))

    assert [str(f) for f in findings] == [
        f"{tmp_path / 'a.dat'} (empty file)",
        f"{tmp_path / 'b.dat'} (empty file)",
        f"{tmp_path} (max files limit reached during processing)",
    ]
    assert walker.budget.files_processed == 2


def test_max_files_shared_across_subdirectories(tmp_path):
    (tmp_path / "a").mkdir()
    (tmp_path / "a" / "one.dat").touch()
    (tmp_path / "b.dat").touch()

    findings = make_walker(max_files=1).walk(str(tmp_path))

    assert findings == [
        Finding(str(tmp_path / "a"), MAX_FILES_REACHED, "max files limit reached"),
        Finding(str(tmp_path), MAX_FILES_REACHED, "max files limit reached during processing"),
    ]


def test_earlier_subtrees_keep_results_after_file_limit(tmp_path):
    (tmp_path / "a").mkdir()
    (tmp_path / "a" / "empty.dat").touch()
    (tmp_path / "b").mkdir()
    (tmp_path / "b" / "never.dat").touch()

    findings = make_walker(max_files=2).walk(str(tmp_path))

    assert [f.path for f in findings] == [
        str(tmp_path / "a" / "empty.dat"),
        str(tmp_path / "a"),
        str(tmp_path),
    ]
    assert findings[1].kind == MAX_FILES_REACHED


def test_time_limit_on_entry(tmp_path):
    (tmp_path / "a.txt").touch()
    clock = FakeClock()
    walker = make_walker(clock=clock)
    clock.now = 6.0

    findings = walker.walk(str(tmp_path))

    assert findings == [Finding(str(tmp_path), TIME_LIMIT_REACHED, "execution time limit reached")]
    assert walker.budget.files_processed == 0


def test_time_limit_during_processing(tmp_path):
    for name in ("a.txt", "b.txt", "c.txt"):
        (tmp_path / name).write_text(name)
    clock = FakeClock()

    walker = make_walker(clock=clock, hasher=SlowHasher(clock))
    findings = walker.walk(str(tmp_path))

    assert findings == [
        Finding(str(tmp_path), TIME_LIMIT_REACHED, "execution time limit reached during processing"),
    ]
    assert walker.hasher.files_hashed == 1


def test_excluded_directories(tmp_path):
    for name in ("node_modules", ".git", ".github"):
        (tmp_path / name).mkdir()
        (tmp_path / name / "empty.txt").touch()
    (tmp_path / ".gitignore").touch()

    walker = make_walker()
    findings = walker.walk(str(tmp_path))

    # files are never matched against the exclusion markers
    assert [str(f) for f in findings] == [f"{tmp_path / '.gitignore'} (empty file)"]
    assert walker.stats.directories_excluded == 3


def test_exclusion_is_a_substring_match():
    markers = ["node_modules", ".git"]

    assert is_excluded_path("/home/me/project/.git", markers)
    assert is_excluded_path("/home/me/my.gitstuff/docs", markers)
    assert is_excluded_path("/srv/node_modules_backup", markers)
    assert not is_excluded_path("/home/me/git/docs", markers)


def test_root_inside_excluded_path(tmp_path):
    root = tmp_path / "node_modules"
    root.mkdir()
    (root / "empty.txt").touch()

    assert make_walker().walk(str(root)) == []


def test_missing_directory_raises(tmp_path):
    with pytest.raises(FileNotFoundError, match="Directory does not exist"):
        make_walker().walk(str(tmp_path / "missing"))


def test_listing_failure_is_a_finding(tmp_path, monkeypatch):
    locked = tmp_path / "locked"
    locked.mkdir()
    (locked / "hidden.txt").touch()
    (tmp_path / "visible.txt").touch()
    real_listdir = os.listdir

    def listdir(path):
        if path == str(locked):
            raise PermissionError(13, "Permission denied", path)
        return real_listdir(path)

    monkeypatch.setattr(walker_module.os, "listdir", listdir)

    findings = make_walker().walk(str(tmp_path))

    assert findings[0] == Finding(
        str(locked), ERROR, f"error: [Errno 13] Permission denied: '{locked}'"
    )
    assert findings[1].path == str(tmp_path / "visible.txt")
    assert len(findings) == 2


def test_entry_errors_are_isolated(tmp_path):
    (tmp_path / "bad.txt").write_text("unreadable")
    (tmp_path / "good.txt").write_text("fine")

    walker = make_walker(hasher=FailingHasher())
    findings = walker.walk(str(tmp_path))

    assert findings == [Finding(str(tmp_path / "bad.txt"), ERROR, "error: Permission denied")]
    assert len(walker.index) == 1
    assert walker.stats.error_count == 1


def test_symlinked_files_are_not_indexed(tmp_path):
    (tmp_path / "real.txt").write_text("content")
    (tmp_path / "zlink.txt").symlink_to(tmp_path / "real.txt")

    walker = make_walker()
    findings = walker.walk(str(tmp_path))

    assert findings == []
    assert walker.index.groups() == []
    assert walker.budget.files_processed == 2


def test_vanished_subdirectory_is_an_entry_error(tmp_path, monkeypatch):
    sub = tmp_path / "sub"
    sub.mkdir()
    (sub / "child.txt").touch()
    (tmp_path / "z.txt").touch()
    real_exists = os.path.exists
    monkeypatch.setattr(walker_module.os.path, "exists", lambda p: p != str(sub) and real_exists(p))

    findings = make_walker().walk(str(tmp_path))

    assert [str(f) for f in findings] == [
        f"{sub} (error: Directory does not exist: {sub})",
        f"{tmp_path / 'z.txt'} (empty file)",
    ]
