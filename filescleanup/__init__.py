"""
files-cleanup - Bounded Useless File Scanner

Flags empty files, empty directories and byte-identical duplicates in a
directory tree without ever modifying it.
"""

__version__ = "1.0.0"
__author__ = "files-cleanup Team"
__email__ = "info@files-cleanup.dev"
__license__ = "MIT"

from .core.scanner import Config, ScanRequest, UselessFileScanner, find_useless_files

__all__ = [
    "Config",
    "ScanRequest",
    "UselessFileScanner",
    "find_useless_files",
]
