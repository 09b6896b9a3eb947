#!/usr/bin/env python3
"""
Duplicate Index - groups scanned paths by content identity

The first path recorded for an identity is treated as the original and every
later path with the same identity as a duplicate of it.
"""

import logging
import os
from dataclasses import dataclass
from typing import Dict, Iterable, List

logger = logging.getLogger(__name__)


def extension_of(path: str) -> str:
    """Lower-cased extension without the leading dot ('' when there is none)"""
    return os.path.splitext(path)[1][1:].lower()


@dataclass(frozen=True)
class DuplicateRelation:
    """One path found to be a byte-identical copy of an earlier one"""
    duplicate: str
    original: str
    identity: str

    def __str__(self) -> str:
        return f"{self.duplicate} (duplicate of {self.original})"

    def to_dict(self) -> Dict:
        return {
            'duplicate': self.duplicate,
            'original': self.original,
            'hash': self.identity,
        }


@dataclass
class DuplicateGroup:
    """All paths sharing one content identity, original first"""
    identity: str
    paths: List[str]

    @property
    def count(self) -> int:
        return len(self.paths)

    @property
    def original(self) -> str:
        return self.paths[0]


class DuplicateIndex:
    """Insertion-ordered mapping of content identity to paths for one scan"""

    def __init__(self):
        self._paths_by_identity: Dict[str, List[str]] = {}

    def __len__(self) -> int:
        return len(self._paths_by_identity)

    def insert(self, identity: str, path: str) -> None:
        """Record a path under its identity"""
        self._paths_by_identity.setdefault(identity, []).append(path)

    def reset(self) -> None:
        self._paths_by_identity.clear()

    def groups(self) -> List[DuplicateGroup]:
        """Identities seen at least twice, in first-seen order"""
        return [
            DuplicateGroup(identity, list(paths))
            for identity, paths in self._paths_by_identity.items()
            if len(paths) > 1
        ]

    def derive_groups(self, allowed_extensions: Iterable[str]) -> List[DuplicateRelation]:
        """
        Derive duplicate relations from the recorded paths.

        Both the original and the duplicate must carry an allowed extension;
        an empty allow-list includes everything.
        """
        allowed = {ext.lower().lstrip(".") for ext in allowed_extensions}
        relations = []

        for group in self.groups():
            original = group.original
            for dupe in group.paths[1:]:
                if not allowed or (extension_of(original) in allowed and extension_of(dupe) in allowed):
                    relations.append(DuplicateRelation(dupe, original, group.identity))

        logger.debug(f"Derived {len(relations)} duplicate relations from {len(self)} identities")
        return relations
