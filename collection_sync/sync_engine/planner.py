"""
Reconciliation Planner

Compares the source and target indexes and produces the operations that
give the target the source's folder layout. The target only ever gains
copies of missing files, has misplaced files moved, and loses redundant
copies of files it keeps. Files the source does not have are left alone.

Author: Collection Sync Project
License: MIT
"""

from pathlib import Path
from typing import List

from ..exceptions import EmptyPathListError, SourceHasDuplicatesError
from ..utils.logger import get_logger
from .deduplicator import find_duplicates
from .indexer import IdentityKey, TreeIndex
from .operations import (
    CopyOperation,
    MoveOperation,
    Plan,
    RemoveDuplicateOperation,
)

logger = get_logger(__name__)


def plan(source: TreeIndex, target: TreeIndex) -> Plan:
    """
    Build the reconciliation plan for a source and target index.

    Keys are processed in sorted order. For each source key the target
    either receives a copy, has one of its copies moved into place, or
    already holds it at the right path; every further target copy of that
    key becomes a duplicate removal whose original is the source path.

    Args:
        source: Index of the authoritative tree
        target: Index of the tree to reorganize

    Returns:
        Plan with moves ordered before the removals of the same key

    Raises:
        SourceHasDuplicatesError: If any source key has several paths
        EmptyPathListError: If an index entry holds no paths
    """
    duplicates = find_duplicates(source)
    if duplicates:
        raise SourceHasDuplicatesError(duplicates)

    result = Plan()
    for key, source_paths in source.items():
        if not source_paths:
            raise EmptyPathListError(key)
        result.extend(_plan_key(key, source_paths[0], target))

    summary = result.summary()
    logger.info(
        f"Planned {len(result)} operations: {summary['copy']} copies, "
        f"{summary['move']} moves, {summary['remove_duplicate']} duplicate removals"
    )
    return result


def _plan_key(key: IdentityKey, wanted: Path, target: TreeIndex) -> List:
    if key not in target:
        return [CopyOperation(source_rel=wanted, target_rel=wanted)]

    target_paths = target.paths(key)
    if not target_paths:
        raise EmptyPathListError(key)

    # Lexicographic order keeps the choice independent of directory listing order
    candidates = sorted(target_paths, key=lambda p: p.as_posix())
    operations = []

    if wanted in candidates:
        chosen = wanted
    else:
        chosen = candidates[0]
        operations.append(MoveOperation(source_rel=chosen, target_rel=wanted))

    for path in candidates:
        if path != chosen:
            operations.append(
                RemoveDuplicateOperation(duplicate_rel=path, original_rel=wanted)
            )

    return operations
