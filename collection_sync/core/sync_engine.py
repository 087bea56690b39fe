"""
Sync Engine

Drives one reconciliation run: indexes both trees, validates the source,
plans the operations and applies them unless running dry.

Author: Collection Sync Project
License: MIT
"""

from pathlib import Path
from typing import Dict, List, Optional
from datetime import datetime
from enum import Enum

from ..config.schema import Config
from ..exceptions import ConfigurationError, SourceHasDuplicatesError
from ..utils.logger import get_logger
from ..sync_engine.deduplicator import DuplicateGroup, find_duplicate_groups
from ..sync_engine.executor import ExecutionReport, OperationExecutor
from ..sync_engine.indexer import TreeIndex, build_index
from ..sync_engine.operations import Plan
from ..sync_engine.planner import plan as build_plan

logger = get_logger(__name__)


class SyncStatus(Enum):
    """Outcome of a sync run."""
    UP_TO_DATE = "up_to_date"
    PLANNED = "planned"
    COMPLETED = "completed"


class SyncResult:
    """Result of a sync run."""

    def __init__(
        self,
        status: SyncStatus,
        source_index: TreeIndex,
        target_index: TreeIndex,
        plan: Plan,
        target_duplicates: Optional[List[DuplicateGroup]] = None,
        execution: Optional[ExecutionReport] = None
    ):
        """
        Initialize sync result.

        Args:
            status: Sync status
            source_index: Index of the source tree
            target_index: Index of the target tree before execution
            plan: Planned operations
            target_duplicates: Duplicate groups found in the target
            execution: Execution report (None for dry runs)
        """
        self.status = status
        self.source_index = source_index
        self.target_index = target_index
        self.plan = plan
        self.target_duplicates = target_duplicates or []
        self.execution = execution
        self.timestamp = datetime.now()

    def __repr__(self) -> str:
        return f"SyncResult(status={self.status.value}, operations={len(self.plan)})"


class SyncEngine:
    """
    Core synchronization engine.

    Coordinates the run: index source and target, refuse an ambiguous
    source, plan, and execute.
    """

    def __init__(self, config: Config):
        """
        Initialize sync engine.

        Args:
            config: Configuration with source and target directories set

        Raises:
            ConfigurationError: If source or target directory is missing
        """
        if not config.source_directory or not config.target_directory:
            raise ConfigurationError("Both source and target directories are required")

        self.config = config
        self.source_root = Path(config.source_directory).expanduser().resolve()
        self.target_root = Path(config.target_directory).expanduser().resolve()

        self.stats = self._empty_stats()
        logger.debug("SyncEngine initialized")

    def index(self):
        """
        Index the source and target trees.

        Returns:
            Tuple of (source_index, target_index)
        """
        source_index = build_index(self.source_root)
        target_index = build_index(self.target_root)

        self.stats["source_files"] = source_index.file_count
        self.stats["target_files"] = target_index.file_count
        self.stats["skipped_entries"] = len(source_index.skipped) + len(target_index.skipped)
        return source_index, target_index

    def prepare(self) -> SyncResult:
        """
        Index both trees, validate the source and build the plan.

        Nothing is changed on disk.

        Returns:
            SyncResult with status PLANNED, or UP_TO_DATE for an empty plan

        Raises:
            IndexingError: If either tree cannot be indexed
            SourceHasDuplicatesError: If the source is ambiguous
        """
        logger.info(f"Synchronizing collection from {self.source_root} to {self.target_root}")
        self.stats = self._empty_stats()

        source_index, target_index = self.index()

        source_duplicates = find_duplicate_groups(source_index)
        if source_duplicates:
            for group in source_duplicates:
                paths = ", ".join(p.as_posix() for p in group.paths)
                logger.error(f"Duplicate in source: {group.key}: {paths}")
            raise SourceHasDuplicatesError([group.paths for group in source_duplicates])

        target_duplicates = []
        if self.config.sync.report_target_duplicates:
            target_duplicates = find_duplicate_groups(target_index)
            for group in target_duplicates:
                paths = ", ".join(p.as_posix() for p in group.paths)
                logger.warning(f"Duplicate in target: {group.key}: {paths}")

        plan = build_plan(source_index, target_index)
        if plan.is_empty:
            logger.info("Target already matches source layout")

        return SyncResult(
            status=SyncStatus.UP_TO_DATE if plan.is_empty else SyncStatus.PLANNED,
            source_index=source_index,
            target_index=target_index,
            plan=plan,
            target_duplicates=target_duplicates
        )

    def apply(self, result: SyncResult) -> SyncResult:
        """
        Execute a prepared plan.

        Args:
            result: Result returned by prepare()

        Returns:
            The same result, with status COMPLETED and its execution report

        Raises:
            ExecutionError: On the first operation that fails
        """
        if result.plan.is_empty:
            return result

        executor = OperationExecutor(
            self.source_root,
            self.target_root,
            verify_copies=self.config.sync.verify_copies,
            check_disk_space=self.config.sync.check_disk_space
        )
        execution = executor.execute(result.plan)

        self.stats["copies"] = execution.copies
        self.stats["moves"] = execution.moves
        self.stats["duplicates_removed"] = execution.duplicates_removed
        self.stats["bytes_copied"] = execution.bytes_copied

        result.execution = execution
        result.status = SyncStatus.COMPLETED
        return result

    def run(self) -> SyncResult:
        """
        Run a full reconciliation, applying the plan unless dry_run is set.

        Returns:
            SyncResult with indexes, plan and execution report
        """
        result = self.prepare()
        if self.config.sync.dry_run:
            if not result.plan.is_empty:
                logger.info("Dry run, no changes applied")
            return result
        return self.apply(result)

    def get_stats(self) -> Dict:
        """Get statistics of the last run."""
        return self.stats.copy()

    @staticmethod
    def _empty_stats() -> Dict:
        return {
            "source_files": 0,
            "target_files": 0,
            "skipped_entries": 0,
            "copies": 0,
            "moves": 0,
            "duplicates_removed": 0,
            "bytes_copied": 0
        }
