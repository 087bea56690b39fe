"""
Operations

File operations that reconcile a target tree with a source tree, and the
ordered plan that holds them. All paths are relative; the executor
resolves them against the configured roots.

Author: Collection Sync Project
License: MIT
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, Iterator, List, Optional


class OperationKind(Enum):
    """Kinds of planned file operations."""
    COPY = "copy"
    MOVE = "move"
    REMOVE_DUPLICATE = "remove_duplicate"


@dataclass(frozen=True)
class CopyOperation:
    """Copy a file from the source tree into the target tree."""
    source_rel: Path
    target_rel: Path
    kind: OperationKind = field(default=OperationKind.COPY, init=False)

    def describe(self) -> str:
        return f"copy {self.source_rel.as_posix()} -> {self.target_rel.as_posix()}"

    def to_dict(self) -> dict:
        return {
            'kind': self.kind.value,
            'source': self.source_rel.as_posix(),
            'target': self.target_rel.as_posix()
        }


@dataclass(frozen=True)
class MoveOperation:
    """Relocate a file within the target tree."""
    source_rel: Path
    target_rel: Path
    kind: OperationKind = field(default=OperationKind.MOVE, init=False)

    def describe(self) -> str:
        return f"move {self.source_rel.as_posix()} -> {self.target_rel.as_posix()}"

    def to_dict(self) -> dict:
        return {
            'kind': self.kind.value,
            'source': self.source_rel.as_posix(),
            'target': self.target_rel.as_posix()
        }


@dataclass(frozen=True)
class RemoveDuplicateOperation:
    """Delete a redundant copy in the target tree, keeping original_rel."""
    duplicate_rel: Path
    original_rel: Path
    kind: OperationKind = field(default=OperationKind.REMOVE_DUPLICATE, init=False)

    def describe(self) -> str:
        return (
            f"remove duplicate {self.duplicate_rel.as_posix()} "
            f"(original: {self.original_rel.as_posix()})"
        )

    def to_dict(self) -> dict:
        return {
            'kind': self.kind.value,
            'duplicate': self.duplicate_rel.as_posix(),
            'original': self.original_rel.as_posix()
        }


class Plan:
    """
    Ordered list of operations.

    Order matters when executing: a move must run before the duplicate
    removals that keep its destination as their original.
    """

    def __init__(self, operations: Optional[List] = None):
        self.operations = list(operations or [])

    def append(self, operation):
        self.operations.append(operation)

    def extend(self, operations):
        self.operations.extend(operations)

    @property
    def is_empty(self) -> bool:
        return not self.operations

    def of_kind(self, kind: OperationKind) -> List:
        """Get the operations of one kind, in plan order."""
        return [op for op in self.operations if op.kind == kind]

    def summary(self) -> Dict[str, int]:
        """Count operations per kind."""
        counts = {kind.value: 0 for kind in OperationKind}
        for op in self.operations:
            counts[op.kind.value] += 1
        return counts

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            'operations': [op.to_dict() for op in self.operations],
            'summary': self.summary()
        }

    def __iter__(self) -> Iterator:
        return iter(self.operations)

    def __len__(self) -> int:
        return len(self.operations)

    def __getitem__(self, item):
        return self.operations[item]

    def __eq__(self, other) -> bool:
        if isinstance(other, Plan):
            return self.operations == other.operations
        if isinstance(other, list):
            return self.operations == other
        return NotImplemented

    def __repr__(self) -> str:
        return f"Plan({self.operations!r})"
