#!/usr/bin/env python3
"""
Bounded Tree Walker

Depth-first, pre-order traversal of a directory tree that reports empty files
and directories and feeds content identities into a DuplicateIndex.

Every walk runs inside a ScanBudget shared by all recursive calls:
- elapsed wall-clock time, checked on entering a directory and after each entry
- total entries processed, checked at the same points
- depth, checked on entering a directory
- fan-out, at most ``max_items_per_dir`` entries per directory

Exceeding a budget produces one finding and stops work in the current
directory. Findings already collected elsewhere in the tree are kept, so a
cut-short scan yields partial but correctly labelled results.
"""

import logging
import os
import stat
import time
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Callable, Iterable, List

from .config import Config
from .duplicate_index import DuplicateIndex, extension_of
from .hashing import HashComputer

logger = logging.getLogger(__name__)

# ---------------------------
# Findings
# ---------------------------

EMPTY_FILE = "empty_file"
EMPTY_DIRECTORY = "empty_directory"
MAX_DEPTH_REACHED = "max_depth"
MAX_FILES_REACHED = "max_files"
TIME_LIMIT_REACHED = "time_limit"
LIMITED_SCAN = "limited_scan"
ERROR = "error"

# Kinds that mean part of the tree was never looked at
PARTIAL_KINDS = {MAX_DEPTH_REACHED, MAX_FILES_REACHED, TIME_LIMIT_REACHED, LIMITED_SCAN}


@dataclass(frozen=True)
class Finding:
    """A path flagged during a scan, with the reason it was flagged"""
    path: str
    kind: str
    reason: str

    def __str__(self) -> str:
        return f"{self.path} ({self.reason})"

    def to_dict(self) -> dict:
        return {'path': self.path, 'kind': self.kind, 'reason': self.reason}


def is_excluded_path(path: str, markers: Iterable[str]) -> bool:
    """Substring match on the whole path, so '.github' also matches '.git'"""
    return any(marker in path for marker in markers)

# ---------------------------
# Budget & Statistics
# ---------------------------

@dataclass
class ScanBudget:
    """Limits and counters shared by every recursive call of one scan"""
    max_depth: int
    max_files: int
    time_limit_ms: int
    clock: Callable[[], float] = time.monotonic
    files_processed: int = 0
    start_time: float = field(init=False)

    def __post_init__(self):
        self.start_time = self.clock()

    def elapsed_ms(self) -> float:
        return (self.clock() - self.start_time) * 1000

    def time_exceeded(self) -> bool:
        return self.elapsed_ms() > self.time_limit_ms

    def files_exhausted(self) -> bool:
        return self.files_processed >= self.max_files

    def depth_exceeded(self, depth: int) -> bool:
        return depth > self.max_depth


@dataclass
class ScanStats:
    """Scan statistics"""
    files_processed: int = 0
    directories_visited: int = 0
    directories_excluded: int = 0
    files_hashed: int = 0
    bytes_hashed: int = 0
    error_count: int = 0
    duration: float = 0.0

    def to_dict(self) -> dict:
        return {
            'files_processed': self.files_processed,
            'directories_visited': self.directories_visited,
            'directories_excluded': self.directories_excluded,
            'files_hashed': self.files_hashed,
            'bytes_hashed': self.bytes_hashed,
            'error_count': self.error_count,
            'duration_seconds': round(self.duration, 3),
        }

# ---------------------------
# Progress Tracker
# ---------------------------

class ProgressTracker:
    """Log throttled progress while a walk runs"""

    def __init__(self, config: Config, budget: ScanBudget):
        self.config = config
        self.budget = budget
        self.last_update = budget.clock()
        self.last_count = 0

    def update(self, force: bool = False) -> None:
        now = self.budget.clock()
        if not force and now - self.last_update < self.config.progress_interval:
            return

        current_count = self.budget.files_processed
        interval_time = now - self.last_update
        current_rate = (current_count - self.last_count) / interval_time if interval_time > 0 else 0

        parts = [
            f"Entries: {current_count:,}/{self.budget.max_files:,}",
            f"Rate: {current_rate:.1f}/s",
            f"Time: {timedelta(milliseconds=int(self.budget.elapsed_ms()))}",
        ]
        logger.info(" | ".join(parts))

        self.last_update = now
        self.last_count = current_count

# ---------------------------
# Tree Walker
# ---------------------------

class TreeWalker:
    """Walks one tree for one scan; not reusable across scans"""

    def __init__(self, config: Config, budget: ScanBudget, index: DuplicateIndex,
                 hasher: HashComputer, stats: ScanStats = None):
        self.config = config
        self.budget = budget
        self.index = index
        self.hasher = hasher
        self.stats = stats or ScanStats()
        self.common_extensions = set(config.common_extensions)
        self.progress = ProgressTracker(config, budget)

    def walk(self, path: str, depth: int = 0) -> List[Finding]:
        """
        Walk a directory and everything below it.

        Raises FileNotFoundError if the directory does not exist when it is
        visited. Every other problem is reported as a finding.
        """
        findings: List[Finding] = []

        if is_excluded_path(path, self.config.exclusion_markers):
            logger.debug(f"Excluded {path}")
            self.stats.directories_excluded += 1
            return findings

        if self.budget.time_exceeded():
            findings.append(Finding(path, TIME_LIMIT_REACHED, "execution time limit reached"))
            return findings

        if self.budget.files_exhausted():
            findings.append(Finding(path, MAX_FILES_REACHED, "max files limit reached"))
            return findings

        if self.budget.depth_exceeded(depth):
            findings.append(Finding(path, MAX_DEPTH_REACHED, "max depth reached"))
            return findings

        if not os.path.exists(path):
            raise FileNotFoundError(f"Directory does not exist: {path}")

        try:
            items = sorted(os.listdir(path))
        except OSError as e:
            self.stats.error_count += 1
            logger.debug(f"Cannot list {path}: {e}")
            return [Finding(path, ERROR, f"error: {e}")]

        self.stats.directories_visited += 1

        if not items:
            findings.append(Finding(path, EMPTY_DIRECTORY, "empty directory"))
            return findings

        limit = self.config.max_items_per_dir
        if len(items) > limit:
            findings.append(Finding(path, LIMITED_SCAN, f"limited scan: {limit}/{len(items)} items"))

        for item in items[:limit]:
            item_path = os.path.join(path, item)

            try:
                self._process_entry(item_path, depth, findings)
            except OSError as e:
                self.stats.error_count += 1
                logger.debug(f"Error processing {item_path}: {e}")
                findings.append(Finding(item_path, ERROR, f"error: {e}"))

            self.progress.update()

            if self.budget.time_exceeded():
                logger.warning(f"Time limit reached while scanning {path}")
                findings.append(Finding(path, TIME_LIMIT_REACHED, "execution time limit reached during processing"))
                break

            if self.budget.files_exhausted():
                logger.warning(f"File limit reached while scanning {path}")
                findings.append(Finding(path, MAX_FILES_REACHED, "max files limit reached during processing"))
                break

        return findings

    def _process_entry(self, item_path: str, depth: int, findings: List[Finding]) -> None:
        self.budget.files_processed += 1
        self.stats.files_processed = self.budget.files_processed
        info = os.lstat(item_path)

        if stat.S_ISDIR(info.st_mode):
            findings.extend(self.walk(item_path, depth + 1))
            return

        if info.st_size == 0:
            findings.append(Finding(item_path, EMPTY_FILE, "empty file"))

        if extension_of(item_path) in self.common_extensions:
            identity = self.hasher.identify(item_path)
            if identity:
                self.index.insert(identity, item_path)
                self.stats.files_hashed = self.hasher.files_hashed
                self.stats.bytes_hashed = self.hasher.bytes_read
