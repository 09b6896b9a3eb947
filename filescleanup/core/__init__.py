"""
files-cleanup Core Modules

Tree walking, content hashing, duplicate indexing and scan orchestration.
"""

from . import config
from . import duplicate_index
from . import hashing
from . import walker
from . import scanner

__all__ = [
    "config",
    "duplicate_index",
    "hashing",
    "walker",
    "scanner",
]
