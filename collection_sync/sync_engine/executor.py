"""
Operation Executor

Applies a reconciliation plan to the filesystem, one operation at a time
and in plan order. The first failure stops the run; operations already
applied stay applied. Existing files in the target are never overwritten.

Author: Collection Sync Project
License: MIT
"""

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional

from ..exceptions import (
    CopyVerificationError,
    ExecutionError,
    ExecutionIOError,
    InsufficientSpaceError,
    MissingOriginalError,
    UnsafePathError,
    WouldOverwriteError,
)
from ..utils.file_ops import (
    available_space,
    calculate_file_hash,
    copy_file,
    path_occupied,
    rename_file,
)
from ..utils.logger import get_logger
from .operations import (
    CopyOperation,
    MoveOperation,
    Plan,
    RemoveDuplicateOperation,
)

logger = get_logger(__name__)


@dataclass
class ExecutionReport:
    """Counts of operations applied by one execute() call."""
    copies: int = 0
    moves: int = 0
    duplicates_removed: int = 0
    bytes_copied: int = 0

    @property
    def total(self) -> int:
        return self.copies + self.moves + self.duplicates_removed


class OperationExecutor:
    """
    Applies planned operations below a source and a target root.

    Features:
    - Refuses to overwrite anything already in the target
    - Keeps every resolved path inside its root
    - Optional free-space check before copies (10% buffer)
    - Optional hash verification of copies
    - History of applied operations
    """

    SPACE_BUFFER = 1.1

    def __init__(
        self,
        source_root,
        target_root,
        verify_copies: bool = False,
        check_disk_space: bool = True
    ):
        """
        Initialize executor.

        Args:
            source_root: Root of the source tree (read only)
            target_root: Root of the target tree
            verify_copies: Compare SHA-256 of source and copy after copying
            check_disk_space: Check target free space before each copy
        """
        self.source_root = Path(source_root)
        self.target_root = Path(target_root)
        self.verify_copies = verify_copies
        self.check_disk_space = check_disk_space
        self._history: List[Dict] = []

    def execute(self, plan: Plan) -> ExecutionReport:
        """
        Apply every operation of the plan in order.

        Args:
            plan: Plan to apply

        Returns:
            ExecutionReport with per-kind counts

        Raises:
            ExecutionError: On the first operation that cannot be applied
        """
        report = ExecutionReport()
        total = len(plan)

        for position, operation in enumerate(plan, start=1):
            logger.info(f"[{position}/{total}] {operation.describe()}")

            if isinstance(operation, CopyOperation):
                report.bytes_copied += self._copy(operation)
                report.copies += 1
            elif isinstance(operation, MoveOperation):
                self._move(operation)
                report.moves += 1
            elif isinstance(operation, RemoveDuplicateOperation):
                self._remove_duplicate(operation)
                report.duplicates_removed += 1
            else:
                raise ExecutionError(f"Unknown operation: {operation!r}", operation)

            self._log_operation(operation)

        logger.info(
            f"Applied {report.total} operations: {report.copies} copies, "
            f"{report.moves} moves, {report.duplicates_removed} duplicate removals"
        )
        return report

    def _copy(self, operation: CopyOperation) -> int:
        source = self._resolve(self.source_root, operation.source_rel, operation)
        destination = self._resolve(self.target_root, operation.target_rel, operation)

        if path_occupied(destination):
            raise WouldOverwriteError(destination, operation)

        try:
            if self.check_disk_space:
                self._check_disk_space(source, destination, operation)
            size = copy_file(source, destination)
        except FileExistsError as e:
            # Raised before any byte is written
            self._raise_exists(destination, operation, e)
        except OSError as e:
            self._discard_partial_copy(destination)
            raise ExecutionIOError(operation, e) from e

        if self.verify_copies:
            self._verify_copy(source, destination, operation)

        return size

    def _move(self, operation: MoveOperation):
        source = self._resolve(self.target_root, operation.source_rel, operation)
        destination = self._resolve(self.target_root, operation.target_rel, operation)

        if path_occupied(destination):
            raise WouldOverwriteError(destination, operation)

        try:
            rename_file(source, destination)
        except FileExistsError as e:
            self._raise_exists(destination, operation, e)
        except OSError as e:
            raise ExecutionIOError(operation, e) from e

    def _raise_exists(self, destination: Path, operation, error: FileExistsError):
        """
        Report a FileExistsError from a copy or rename.

        Only an occupied destination is an overwrite; a regular file standing
        in for one of its parent directories is an I/O failure.
        """
        if path_occupied(destination):
            raise WouldOverwriteError(destination, operation) from error
        raise ExecutionIOError(operation, error) from error

    def _discard_partial_copy(self, destination: Path):
        """Remove whatever a failed copy left at its destination."""
        if not path_occupied(destination):
            return
        logger.error(f"Removing incomplete copy {destination}")
        try:
            destination.unlink()
        except OSError as e:
            logger.error(f"Could not remove incomplete copy {destination}: {e}")

    def _remove_duplicate(self, operation: RemoveDuplicateOperation):
        duplicate = self._resolve(self.target_root, operation.duplicate_rel, operation)
        original = self._resolve(self.target_root, operation.original_rel, operation)

        if duplicate == original:
            raise ExecutionError(
                f"Duplicate and original are the same path: {duplicate}", operation
            )
        if not original.is_file():
            raise MissingOriginalError(original, operation)

        try:
            duplicate.unlink()
        except OSError as e:
            raise ExecutionIOError(operation, e) from e

    def _resolve(self, root: Path, rel_path: Path, operation) -> Path:
        """
        Join a relative path to its root.

        Raises:
            UnsafePathError: If the path is absolute or climbs out of root
        """
        rel_path = Path(rel_path)
        if rel_path.is_absolute() or rel_path.anchor or ".." in rel_path.parts:
            raise UnsafePathError(rel_path, root, operation)
        return root / rel_path

    def _check_disk_space(self, source: Path, destination: Path, operation):
        required = int(source.stat().st_size * self.SPACE_BUFFER)
        available = available_space(destination.parent)
        if available < required:
            raise InsufficientSpaceError(destination, required, available, operation)

    def _verify_copy(self, source: Path, destination: Path, operation):
        try:
            matches = calculate_file_hash(str(source)) == calculate_file_hash(str(destination))
        except OSError as e:
            raise ExecutionIOError(operation, e) from e

        if not matches:
            logger.error(f"Hash mismatch after copy of {source}")
            self._discard_partial_copy(destination)
            raise CopyVerificationError(destination, operation)

    def _log_operation(self, operation):
        """Record an applied operation."""
        entry = operation.to_dict()
        entry['timestamp'] = datetime.now().isoformat()
        self._history.append(entry)

    def get_history(self, limit: Optional[int] = None) -> List[Dict]:
        """
        Get applied operations, oldest first.

        Args:
            limit: Maximum number of most recent entries to return
        """
        if limit is None:
            return list(self._history)
        return self._history[-limit:]

    def clear_history(self):
        """Clear the operation history."""
        self._history.clear()
