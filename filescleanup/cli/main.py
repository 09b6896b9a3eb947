#!/usr/bin/env python3
"""
files-cleanup - Bounded Useless File Scanner v1.0
Find empty files, empty directories and duplicate files without touching them

Features:
- Depth-first scan with depth, file count, time and per-directory limits
- Duplicate detection by content hash (MD5, SHA1, SHA256, xxHash)
- Partial results clearly labelled when a limit cuts the scan short
- Export to CSV/JSON
"""

import argparse
import csv
import json
import logging
import os
import sys
from datetime import datetime, timedelta
from typing import List, Optional

from filescleanup import __version__
from filescleanup.core.config import (
    DEFAULT_MAX_DEPTH,
    DEFAULT_MAX_FILES,
    MAX_EXECUTION_TIME_MS,
    Config,
)
from filescleanup.core.hashing import DEFAULT_CHUNK_SIZE, SUPPORTED_ALGORITHMS
from filescleanup.core.scanner import ScanReport, ScanRequest, UselessFileScanner

# ---------------------------
# Logging Configuration
# ---------------------------
logging.basicConfig(
    level=logging.INFO,
    format='[%(asctime)s] %(levelname)s: %(message)s',
    datefmt='%H:%M:%S'
)
logger = logging.getLogger(__name__)

# ---------------------------
# Utility Functions
# ---------------------------

def format_size(bytes_val: int) -> str:
    """Format bytes as human readable"""
    for unit in ['B', 'KB', 'MB', 'GB']:
        if bytes_val < 1024.0:
            return f"{bytes_val:.1f} {unit}"
        bytes_val /= 1024.0
    return f"{bytes_val:.1f} TB"


def parse_size(size_str: str) -> int:
    """Parse human-readable size: a plain byte count or a number with a
    B, KB, MB or GB suffix ('64KB', '1.5 MB'), case-insensitive"""
    size_str = size_str.strip().upper()

    # Order matters: longer suffixes first to avoid 'B' matching 'MB'
    multipliers = [
        ('GB', 1024**3),
        ('MB', 1024**2),
        ('KB', 1024),
        ('B', 1),
    ]

    for suffix, multiplier in multipliers:
        if size_str.endswith(suffix):
            number = size_str[:-len(suffix)].strip()
            return int(float(number) * multiplier)

    return int(size_str)


def printable(text: str) -> str:
    """Undecodable filename bytes shown as backslash escapes instead of crashing print"""
    return os.fsencode(text).decode("utf-8", "backslashreplace")


def parse_extensions(value: str) -> List[str]:
    """Parse a comma separated extension list ('txt,.md, PNG')"""
    return [ext.strip().lower().lstrip(".") for ext in value.split(",") if ext.strip()]

# ---------------------------
# Export
# ---------------------------

def export_json(report: ScanReport, output_path: Optional[str] = None) -> str:
    """Export to JSON"""
    output_path = output_path or "useless_files.json"

    data = {
        "scan_info": {
            "version": __version__,
            "date": datetime.now().isoformat(),
        },
        **report.to_dict(),
        "duplicate_groups": [
            {"hash": group.identity, "count": group.count, "paths": group.paths}
            for group in report.groups
        ],
    }

    with open(output_path, 'w', encoding='utf-8') as f:
        json.dump(data, f, indent=2)
    return output_path


def export_csv(report: ScanReport, output_path: Optional[str] = None) -> str:
    """Export to CSV, one row per finding and one per duplicate"""
    output_path = output_path or "useless_files.csv"

    with open(output_path, 'w', newline='', encoding='utf-8', errors='surrogateescape') as f:
        writer = csv.writer(f)
        writer.writerow(["Type", "Path", "Reason", "Original", "Hash"])

        for finding in report.findings:
            writer.writerow([finding.kind, finding.path, finding.reason, "", ""])

        for dupe in report.duplicates:
            writer.writerow(["duplicate", dupe.duplicate, "duplicate", dupe.original, dupe.identity])
    return output_path

# ---------------------------
# Report Generator
# ---------------------------

def generate_report(report: ScanReport) -> None:
    """Print the scan result and a summary"""
    for block in report.to_text_blocks():
        if block:
            print(printable(block))

    if report.error is not None:
        return

    stats = report.stats
    print("\n" + "="*70)
    print("SCAN SUMMARY")
    print("="*70)
    print(f"  Duration: {timedelta(seconds=round(stats.duration, 3))}")
    print(f"  Entries processed: {stats.files_processed:,}")
    print(f"  Directories visited: {stats.directories_visited:,}")
    print(f"  Directories excluded: {stats.directories_excluded:,}")
    print(f"  Files hashed: {stats.files_hashed:,} ({format_size(stats.bytes_hashed)})")
    if stats.error_count:
        print(f"  Errors: {stats.error_count:,}")

    if report.is_partial:
        print("\nScan limits were reached: results are partial.")

# ---------------------------
# CLI Interface
# ---------------------------

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="files-cleanup",
        description="files-cleanup - Find empty and duplicate files (read-only)",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )

    parser.add_argument("directory", help="Directory to scan")

    # Limits
    parser.add_argument(
        "--max-depth",
        type=int,
        default=DEFAULT_MAX_DEPTH,
        help="Maximum directory depth to search, max value is 10"
    )
    parser.add_argument(
        "--max-files",
        type=int,
        default=DEFAULT_MAX_FILES,
        help="Maximum number of entries to process, max value is 1000"
    )
    parser.add_argument(
        "--time-limit",
        type=int,
        default=MAX_EXECUTION_TIME_MS,
        help="Scan time limit in milliseconds"
    )

    # Hashing
    parser.add_argument(
        "--algorithm",
        choices=SUPPORTED_ALGORITHMS,
        default="md5",
        help="Hash algorithm for duplicate detection"
    )
    parser.add_argument(
        "--chunk-size",
        type=parse_size,
        default=DEFAULT_CHUNK_SIZE,
        help="Read size for hashing (e.g. 64KB, 1MB)"
    )
    parser.add_argument(
        "--extensions",
        type=parse_extensions,
        help="Comma separated extensions to hash and report as duplicates"
    )

    # Output
    parser.add_argument(
        "--export",
        choices=["csv", "json"],
        help="Export results to a file"
    )
    parser.add_argument(
        "--export-path",
        help="Export file path"
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Only print results and warnings"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Debug logging"
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}"
    )
    return parser


def config_from_args(args: argparse.Namespace) -> Config:
    config = Config(
        time_limit_ms=args.time_limit,
        hash_algorithm=args.algorithm,
        chunk_size=args.chunk_size,
        quiet=args.quiet,
        verbose=args.verbose,
    )
    if args.extensions is not None:
        config.common_extensions = args.extensions
    return config


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point"""
    parser = build_parser()
    args = parser.parse_args(argv)

    # Set logging level
    root_logger = logging.getLogger("filescleanup")
    if args.quiet:
        root_logger.setLevel(logging.WARNING)
    elif args.verbose:
        root_logger.setLevel(logging.DEBUG)

    try:
        scanner = UselessFileScanner(config_from_args(args))
    except ValueError as e:
        parser.error(str(e))

    if not args.quiet:
        print(f"files-cleanup v{__version__}")
        print("="*70)

    try:
        report = scanner.scan(ScanRequest(args.directory, args.max_depth, args.max_files))
    except KeyboardInterrupt:
        print("\nScan interrupted by user")
        return 1

    generate_report(report)

    if report.error is not None:
        return 1

    if args.export:
        exporter = export_csv if args.export == "csv" else export_json
        path = exporter(report, args.export_path)
        logger.info(f"Results exported to: {path}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
