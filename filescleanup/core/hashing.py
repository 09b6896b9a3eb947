#!/usr/bin/env python3
"""
Content identity for duplicate detection

Streams a file through a digest so multi-gigabyte files never sit in memory.
"""

import hashlib
import logging
import os
import stat
from pathlib import Path
from typing import Optional, Union

# Optional imports
try:
    import xxhash
    XXHASH_AVAILABLE = True
except ImportError:
    XXHASH_AVAILABLE = False

logger = logging.getLogger(__name__)

SUPPORTED_ALGORITHMS = ("md5", "sha1", "sha256", "xxhash")
DEFAULT_CHUNK_SIZE = 64 * 1024  # 64 KB


class HashComputer:
    """Compute content identities with a configurable algorithm"""

    def __init__(self, algorithm: str = "md5", chunk_size: int = DEFAULT_CHUNK_SIZE):
        if algorithm not in SUPPORTED_ALGORITHMS:
            raise ValueError(f"Unsupported hash algorithm: {algorithm}")
        if algorithm == "xxhash" and not XXHASH_AVAILABLE:
            logger.warning("xxhash not available, falling back to md5")
            algorithm = "md5"
        self.algorithm = algorithm
        self.chunk_size = chunk_size
        self.files_hashed = 0
        self.bytes_read = 0

    def _get_hasher(self):
        """Get hasher for algorithm"""
        if self.algorithm == "sha1":
            return hashlib.sha1()
        elif self.algorithm == "sha256":
            return hashlib.sha256()
        elif self.algorithm == "xxhash":
            return xxhash.xxh64()
        return hashlib.md5()

    def identify(self, path: Union[str, Path]) -> Optional[str]:
        """
        Return the hex digest of a file's full contents.

        Returns None when the path is not a regular file at read time
        (symlinks included). Read errors are raised, never mapped to a
        digest, since an empty digest would group with real empty files.
        """
        info = os.lstat(path)
        if not stat.S_ISREG(info.st_mode):
            return None

        # The entry can be swapped between lstat and open: O_NONBLOCK keeps a
        # FIFO from blocking the open, O_NOFOLLOW refuses a new symlink.
        flags = os.O_RDONLY | getattr(os, "O_NONBLOCK", 0) | getattr(os, "O_NOFOLLOW", 0)
        hasher = self._get_hasher()
        with os.fdopen(os.open(path, flags), "rb") as f:
            if not stat.S_ISREG(os.fstat(f.fileno()).st_mode):
                return None
            while chunk := f.read(self.chunk_size):
                hasher.update(chunk)
                self.bytes_read += len(chunk)

        self.files_hashed += 1
        digest = hasher.hexdigest()
        logger.debug(f"{self.algorithm} {digest} {path}")
        return digest
