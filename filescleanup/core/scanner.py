#!/usr/bin/env python3
"""
Scan orchestration

Runs one bounded walk per request with its own budget and duplicate index,
then turns the walk's findings and the index's duplicates into a ScanReport.
This is the only place errors are contained: nothing raised by the walk
escapes ``UselessFileScanner.scan``.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

from .config import DEFAULT_MAX_DEPTH, DEFAULT_MAX_FILES, Config
from .duplicate_index import DuplicateGroup, DuplicateIndex, DuplicateRelation
from .hashing import HashComputer
from .walker import PARTIAL_KINDS, Finding, ScanBudget, ScanStats, TreeWalker

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScanRequest:
    """One scan invocation"""
    directory: str
    max_depth: int = DEFAULT_MAX_DEPTH
    max_files: int = DEFAULT_MAX_FILES


@dataclass
class ScanReport:
    """Everything one scan found"""
    directory: str
    findings: List[Finding] = field(default_factory=list)
    duplicates: List[DuplicateRelation] = field(default_factory=list)
    groups: List[DuplicateGroup] = field(default_factory=list)
    stats: ScanStats = field(default_factory=ScanStats)
    error: Optional[str] = None

    @property
    def is_partial(self) -> bool:
        """True when a budget stopped the walk before it covered the whole tree"""
        return any(f.kind in PARTIAL_KINDS for f in self.findings)

    def to_text_blocks(self) -> List[str]:
        """Render the report as the text blocks returned to callers"""
        if self.error is not None:
            return [f"Error scanning directory: {self.error}"]

        if not self.findings and not self.duplicates:
            return [f"No useless files found in: {self.directory}"]

        return [
            f"Found {len(self.findings)} potentially useless files/directories in: {self.directory}",
            "\n".join(str(f) for f in self.findings),
            f"Found {len(self.duplicates)} duplicate files in: {self.directory}",
            "\n".join(str(d) for d in self.duplicates),
        ]

    def to_dict(self) -> Dict:
        return {
            'directory': self.directory,
            'error': self.error,
            'partial': self.is_partial,
            'stats': self.stats.to_dict(),
            'findings': [f.to_dict() for f in self.findings],
            'duplicates': [d.to_dict() for d in self.duplicates],
        }


class UselessFileScanner:
    """
    Scans directories for empty files, empty directories and duplicates.

    A scanner holds configuration only. Each call to ``scan`` builds its own
    budget, index and hasher, so concurrent scans never share state.
    """

    def __init__(self, config: Optional[Config] = None, clock: Callable[[], float] = time.monotonic):
        self.config = config or Config()
        self.config.validate()
        self.clock = clock

    def scan(self, request: ScanRequest) -> ScanReport:
        """Scan a directory, returning an error report instead of raising"""
        report = ScanReport(request.directory)
        started = time.time()

        try:
            budget = ScanBudget(
                max_depth=self.config.clamp_depth(request.max_depth),
                max_files=self.config.clamp_files(request.max_files),
                time_limit_ms=self.config.time_limit_ms,
                clock=self.clock,
            )
            index = DuplicateIndex()
            hasher = HashComputer(self.config.hash_algorithm, self.config.chunk_size)

            logger.info(
                f"Scanning: {request.directory} "
                f"(depth <= {budget.max_depth}, files <= {budget.max_files}, "
                f"{budget.time_limit_ms} ms)"
            )

            walker = TreeWalker(self.config, budget, index, hasher, report.stats)
            report.findings = walker.walk(request.directory, 0)
            report.duplicates = index.derive_groups(self.config.common_extensions)
            report.groups = index.groups()
        except Exception as e:
            logger.error(f"Scan failed: {e}", exc_info=self.config.verbose)
            report.findings = []
            report.duplicates = []
            report.groups = []
            report.error = str(e)
        finally:
            report.stats.duration = time.time() - started

        if report.error is None:
            logger.info(
                f"Scan complete: {len(report.findings)} findings, "
                f"{len(report.duplicates)} duplicates, "
                f"{report.stats.files_processed:,} entries in {report.stats.duration:.2f}s"
            )
            if report.is_partial:
                logger.warning("Scan stopped early by a limit; results are partial")

        return report


def find_useless_files(directory: str, max_depth: int = DEFAULT_MAX_DEPTH,
                       max_files: int = DEFAULT_MAX_FILES,
                       config: Optional[Config] = None) -> Dict[str, List[str]]:
    """Entry point used by the front ends: scan and render as text blocks"""
    scanner = UselessFileScanner(config)
    report = scanner.scan(ScanRequest(directory, max_depth, max_files))
    return {"findings": report.to_text_blocks()}
