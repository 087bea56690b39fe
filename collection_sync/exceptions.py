"""
Exceptions

Error taxonomy for indexing, validation, planning and execution. Every
error raised by the engine derives from CollectionSyncError so callers can
report any failure with a single handler.

Author: Collection Sync Project
License: MIT
"""

from pathlib import Path
from typing import List, Optional


class CollectionSyncError(Exception):
    """Base exception for all collection sync errors."""

    pass


class ConfigurationError(CollectionSyncError):
    """Raised when configuration cannot be loaded or validated."""

    pass


class IndexingError(CollectionSyncError):
    """Raised when a directory tree cannot be indexed."""

    def __init__(self, message: str, path: Path, cause: Optional[BaseException] = None):
        """
        Initialize indexing error.

        Args:
            message: Error message
            path: Path that could not be processed
            cause: Underlying OS error, if any
        """
        if cause is not None:
            message = f"{message}: {path}: {cause}"
        else:
            message = f"{message}: {path}"
        super().__init__(message)
        self.path = path
        self.cause = cause


class ValidationError(CollectionSyncError):
    """Raised when an index is not acceptable input for planning."""

    pass


class SourceHasDuplicatesError(ValidationError):
    """Raised when the source tree holds files sharing size and name."""

    def __init__(self, groups: List[List[Path]]):
        """
        Initialize source duplicate error.

        Args:
            groups: Every group of source paths sharing one identity key
        """
        listing = "; ".join(
            ", ".join(p.as_posix() for p in group) for group in groups
        )
        super().__init__(
            f"Source collection contains {len(groups)} duplicate group(s): {listing}"
        )
        self.groups = groups


class PlanError(CollectionSyncError):
    """Raised when planning hits a broken internal invariant."""

    pass


class EmptyPathListError(PlanError):
    """Raised when an index entry has no paths."""

    def __init__(self, key):
        super().__init__(f"Index entry has an empty path list: {key}")
        self.key = key


class ExecutionError(CollectionSyncError):
    """Base exception for failures while applying a plan."""

    def __init__(self, message: str, operation=None):
        super().__init__(message)
        self.operation = operation


class WouldOverwriteError(ExecutionError):
    """Raised instead of replacing an existing file in the target."""

    def __init__(self, path: Path, operation=None):
        super().__init__(f"Refusing to overwrite existing path: {path}", operation)
        self.path = path


class ExecutionIOError(ExecutionError):
    """Raised when the filesystem rejects an operation."""

    def __init__(self, operation, cause: OSError):
        super().__init__(f"Failed to {operation.describe()}: {cause}", operation)
        self.cause = cause


class UnsafePathError(ExecutionError):
    """Raised when a relative path would resolve outside its root."""

    def __init__(self, path: Path, root: Path, operation=None):
        super().__init__(f"Path {path} escapes root {root}", operation)
        self.path = path
        self.root = root


class MissingOriginalError(ExecutionError):
    """Raised when removing a duplicate whose kept copy is absent."""

    def __init__(self, original: Path, operation=None):
        super().__init__(
            f"Refusing to remove duplicate, original is missing: {original}", operation
        )
        self.original = original


class InsufficientSpaceError(ExecutionError):
    """Raised when the target filesystem cannot hold a copied file."""

    def __init__(self, path: Path, required: int, available: int, operation=None):
        super().__init__(
            f"Insufficient disk space for {path}. "
            f"Required: {required / 1024 / 1024:.2f} MB, "
            f"Available: {available / 1024 / 1024:.2f} MB",
            operation,
        )
        self.path = path
        self.required = required
        self.available = available


class CopyVerificationError(ExecutionError):
    """Raised when a copied file does not hash to its source."""

    def __init__(self, path: Path, operation=None):
        super().__init__(f"Hash mismatch after copy: {path}", operation)
        self.path = path
