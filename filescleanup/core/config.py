#!/usr/bin/env python3
"""
Scanner configuration with hard ceilings and smart defaults
"""

import logging
from dataclasses import dataclass, field
from typing import List

from .hashing import DEFAULT_CHUNK_SIZE, SUPPORTED_ALGORITHMS

logger = logging.getLogger(__name__)

# ---------------------------
# Hard limits
# ---------------------------
MAX_DEPTH = 10
MAX_FILES_TO_PROCESS = 1000
MAX_EXECUTION_TIME_MS = 5000
MAX_ITEMS_PER_DIR = 100

DEFAULT_MAX_DEPTH = 5
DEFAULT_MAX_FILES = 1000

# Only these extensions are hashed and reported as duplicates
COMMON_FILE_EXTENSIONS = [
    "txt", "js", "html", "css", "json", "xml", "md", "pdf",
    "jpg", "jpeg", "png", "gif", "bmp", "svg",
    "mp3", "wav", "ogg", "flac",
    "mp4", "avi", "mkv",
    "doc", "docx", "xls", "xlsx", "ppt", "pptx",
]

# Matched as substrings of the full directory path
EXCLUSION_MARKERS = ["node_modules", ".git"]


@dataclass
class Config:
    """Scanner configuration"""
    # Ceilings applied to every request
    max_depth_ceiling: int = MAX_DEPTH
    max_files_ceiling: int = MAX_FILES_TO_PROCESS
    time_limit_ms: int = MAX_EXECUTION_TIME_MS
    max_items_per_dir: int = MAX_ITEMS_PER_DIR

    # Hashing
    hash_algorithm: str = "md5"  # md5, sha1, sha256, xxhash
    chunk_size: int = DEFAULT_CHUNK_SIZE

    # Filters
    common_extensions: List[str] = field(default_factory=lambda: list(COMMON_FILE_EXTENSIONS))
    exclusion_markers: List[str] = field(default_factory=lambda: list(EXCLUSION_MARKERS))

    # Output
    progress_interval: float = 2.0
    quiet: bool = False
    verbose: bool = False

    def validate(self) -> None:
        """Validate configuration"""
        if self.max_depth_ceiling < 0:
            raise ValueError("Depth ceiling cannot be negative")
        if self.max_files_ceiling < 1:
            raise ValueError("File ceiling must be >= 1")
        if self.time_limit_ms <= 0:
            raise ValueError("Time limit must be positive")
        if self.max_items_per_dir < 1:
            raise ValueError("Items per directory must be >= 1")
        if self.chunk_size < 1024:
            raise ValueError("Chunk size must be >= 1KB")
        if self.hash_algorithm not in SUPPORTED_ALGORITHMS:
            raise ValueError(f"Unknown hash algorithm: {self.hash_algorithm}")
        self.common_extensions = [ext.lower().lstrip(".") for ext in self.common_extensions]

    def clamp_depth(self, max_depth: int) -> int:
        return max(0, min(max_depth, self.max_depth_ceiling))

    def clamp_files(self, max_files: int) -> int:
        return max(1, min(max_files, self.max_files_ceiling))
