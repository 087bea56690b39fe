"""
Sync Engine Module

Matching and reconciliation: tree indexing, duplicate detection,
planning and execution of file operations.

Author: Collection Sync Project
License: MIT
"""

from .indexer import IdentityKey, TreeIndex, build_index
from .deduplicator import DuplicateGroup, find_duplicate_groups, find_duplicates
from .operations import (
    CopyOperation,
    MoveOperation,
    OperationKind,
    Plan,
    RemoveDuplicateOperation,
)
from .planner import plan
from .executor import ExecutionReport, OperationExecutor

__all__ = [
    'IdentityKey', 'TreeIndex', 'build_index',
    'DuplicateGroup', 'find_duplicate_groups', 'find_duplicates',
    'CopyOperation', 'MoveOperation', 'RemoveDuplicateOperation',
    'OperationKind', 'Plan', 'plan',
    'ExecutionReport', 'OperationExecutor'
]
