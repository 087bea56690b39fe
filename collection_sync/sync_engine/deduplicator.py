"""
Duplicate Detector

Finds identity keys that occur at more than one path within a tree.
Used to refuse ambiguous source trees and to report redundant copies in
the target.

Author: Collection Sync Project
License: MIT
"""

from dataclasses import dataclass
from pathlib import Path
from typing import List

from .indexer import IdentityKey, TreeIndex


@dataclass(frozen=True)
class DuplicateGroup:
    """All paths of one tree that share an identity key."""
    key: IdentityKey
    paths: List[Path]


def find_duplicate_groups(index: TreeIndex) -> List[DuplicateGroup]:
    """
    Collect every key of the index that maps to two or more paths.

    Args:
        index: Tree index to scan

    Returns:
        Groups in key order, paths in index order
    """
    return [
        DuplicateGroup(key=key, paths=paths)
        for key, paths in index.items()
        if len(paths) > 1
    ]


def find_duplicates(index: TreeIndex) -> List[List[Path]]:
    """Path groups of find_duplicate_groups() without their keys."""
    return [group.paths for group in find_duplicate_groups(index)]
