"""
Unit Tests for the Reconciliation Planner

Tests the copy/move/remove decisions, tie-breaks, ordering and the
validation gates of plan().

Author: Collection Sync Project
License: MIT
"""

import pytest
from pathlib import Path

from collection_sync.exceptions import EmptyPathListError, SourceHasDuplicatesError
from collection_sync.sync_engine.indexer import IdentityKey, TreeIndex, build_index
from collection_sync.sync_engine.operations import (
    CopyOperation,
    MoveOperation,
    OperationKind,
    RemoveDuplicateOperation,
)
from collection_sync.sync_engine.planner import plan

from conftest import write_tree


def make_index(root: Path, entries: dict) -> TreeIndex:
    """Build an index from {relative path: size} without touching disk."""
    index = TreeIndex(root)
    for rel_path, size in entries.items():
        rel_path = Path(rel_path)
        index.add(IdentityKey(size, rel_path.name), rel_path)
    return index


class TestScenarios:
    """Reference scenarios for plan()."""

    def test_missing_file_is_copied(self, tmp_path):
        """Scenario A: empty target receives a copy at the source path."""
        source = make_index(tmp_path, {"photos/a.jpg": 1000})
        target = make_index(tmp_path, {})

        result = plan(source, target)

        assert result == [CopyOperation(Path("photos/a.jpg"), Path("photos/a.jpg"))]

    def test_misplaced_file_is_moved(self, tmp_path):
        """Scenario B: a matching target file elsewhere is moved into place."""
        source = make_index(tmp_path, {"a.jpg": 1000})
        target = make_index(tmp_path, {"misc/a.jpg": 1000})

        result = plan(source, target)

        assert result == [MoveOperation(Path("misc/a.jpg"), Path("a.jpg"))]

    def test_duplicates_move_first_then_remove(self, tmp_path):
        """Scenario C: first path is moved, the rest are removed."""
        source = make_index(tmp_path, {"a.jpg": 1000})
        target = make_index(tmp_path, {"x/a.jpg": 1000, "y/a.jpg": 1000})

        result = plan(source, target)

        assert result == [
            MoveOperation(Path("x/a.jpg"), Path("a.jpg")),
            RemoveDuplicateOperation(Path("y/a.jpg"), Path("a.jpg")),
        ]

    def test_source_duplicates_rejected(self, tmp_path):
        """Scenario D: ambiguous source fails before any operation."""
        source = make_index(tmp_path, {"one/a.jpg": 1000, "two/a.jpg": 1000})
        target = make_index(tmp_path, {})

        with pytest.raises(SourceHasDuplicatesError) as excinfo:
            plan(source, target)

        assert excinfo.value.groups == [[Path("one/a.jpg"), Path("two/a.jpg")]]


class TestPlanDecisions:
    """Test suite for individual planning rules."""

    def test_file_in_place_needs_nothing(self, tmp_path):
        """Test no operation when the target already has the file at the right path."""
        source = make_index(tmp_path, {"2024/a.jpg": 10})
        target = make_index(tmp_path, {"2024/a.jpg": 10})

        assert plan(source, target).is_empty

    def test_in_place_copy_is_kept_over_earlier_paths(self, tmp_path):
        """Test the path matching the source wins even if others sort first."""
        source = make_index(tmp_path, {"z/a.jpg": 10})
        target = make_index(tmp_path, {"a/a.jpg": 10, "z/a.jpg": 10, "m/a.jpg": 10})

        result = plan(source, target)

        assert result == [
            RemoveDuplicateOperation(Path("a/a.jpg"), Path("z/a.jpg")),
            RemoveDuplicateOperation(Path("m/a.jpg"), Path("z/a.jpg")),
        ]

    def test_tie_break_ignores_index_order(self, tmp_path):
        """Test the moved copy is chosen lexicographically, not by insertion order."""
        source = make_index(tmp_path, {"a.jpg": 10})
        target = TreeIndex(tmp_path)
        key = IdentityKey(10, "a.jpg")
        target.add(key, Path("y/a.jpg"))
        target.add(key, Path("x/a.jpg"))

        result = plan(source, target)

        assert result[0] == MoveOperation(Path("x/a.jpg"), Path("a.jpg"))
        assert result[1] == RemoveDuplicateOperation(Path("y/a.jpg"), Path("a.jpg"))

    def test_size_mismatch_is_not_a_match(self, tmp_path):
        """Test a same-named file of another size is not moved."""
        source = make_index(tmp_path, {"a.jpg": 10})
        target = make_index(tmp_path, {"old/a.jpg": 11})

        result = plan(source, target)

        assert result == [CopyOperation(Path("a.jpg"), Path("a.jpg"))]

    def test_target_only_files_never_referenced(self, tmp_path):
        """Test content unique to the target is left alone."""
        source = make_index(tmp_path, {"a.jpg": 1, "b/b.jpg": 2})
        target = make_index(tmp_path, {
            "keep/only.jpg": 99,
            "keep/also/only2.jpg": 98,
            "elsewhere/b.jpg": 2,
        })
        target_only = {Path("keep/only.jpg"), Path("keep/also/only2.jpg")}

        result = plan(source, target)

        for op in result:
            referenced = {getattr(op, name) for name in
                          ("source_rel", "target_rel", "duplicate_rel", "original_rel")
                          if hasattr(op, name)}
            assert not referenced & target_only

    def test_only_copy_reads_from_source(self, tmp_path):
        """Test moves and removals only ever name target paths."""
        source = make_index(tmp_path, {"a.jpg": 1, "b.jpg": 2, "c/c.jpg": 3})
        target = make_index(tmp_path, {"x/b.jpg": 2, "y/c.jpg": 3, "z/c.jpg": 3})

        target_paths = {p for _, paths in target.items() for p in paths}

        result = plan(source, target)

        assert result.of_kind(OperationKind.COPY) == [CopyOperation(Path("a.jpg"), Path("a.jpg"))]
        for op in result.of_kind(OperationKind.MOVE):
            assert op.source_rel in target_paths
        for op in result.of_kind(OperationKind.REMOVE_DUPLICATE):
            assert op.duplicate_rel in target_paths

    def test_moves_precede_removals_of_same_key(self, tmp_path):
        """Test each key's move comes before its removals."""
        source = make_index(tmp_path, {"a.jpg": 1, "b.jpg": 2})
        target = make_index(tmp_path, {
            "1/a.jpg": 1, "2/a.jpg": 1,
            "1/b.jpg": 2, "2/b.jpg": 2, "3/b.jpg": 2,
        })

        result = plan(source, target)

        kinds = [op.kind for op in result]
        assert kinds == [
            OperationKind.MOVE, OperationKind.REMOVE_DUPLICATE,
            OperationKind.MOVE, OperationKind.REMOVE_DUPLICATE, OperationKind.REMOVE_DUPLICATE,
        ]

    def test_operations_follow_key_order(self, tmp_path):
        """Test per-key groups are emitted in sorted key order."""
        source = make_index(tmp_path, {"big.jpg": 500, "small.jpg": 5, "mid.jpg": 50})
        target = make_index(tmp_path, {})

        result = plan(source, target)

        assert [op.source_rel for op in result] == [
            Path("small.jpg"), Path("mid.jpg"), Path("big.jpg")
        ]

    def test_empty_source_entry_is_an_error(self, tmp_path):
        """Test an index entry without paths signals a broken index."""
        source = TreeIndex(tmp_path)
        source._entries[IdentityKey(1, "a.jpg")] = []
        target = make_index(tmp_path, {})

        with pytest.raises(EmptyPathListError):
            plan(source, target)

    def test_empty_target_entry_is_an_error(self, tmp_path):
        """Test a present but empty target entry signals a broken index."""
        source = make_index(tmp_path, {"a.jpg": 1})
        target = TreeIndex(tmp_path)
        target._entries[IdentityKey(1, "a.jpg")] = []

        with pytest.raises(EmptyPathListError):
            plan(source, target)


class TestPlanFromDisk:
    """plan() over indexes built from real trees."""

    def test_mixed_reorganization(self, tmp_path):
        """Test a realistic mix of copies, moves and removals."""
        source = write_tree(tmp_path / "source", {
            "2023/beach.jpg": 100,
            "2023/party.jpg": 200,
            "2024/snow.jpg": 300,
        })
        target = write_tree(tmp_path / "target", {
            "unsorted/beach.jpg": 100,
            "backup/beach.jpg": 100,
            "2024/snow.jpg": 300,
            "notes.txt": 7,
        })

        result = plan(build_index(source), build_index(target))

        assert result == [
            MoveOperation(Path("backup/beach.jpg"), Path("2023/beach.jpg")),
            RemoveDuplicateOperation(Path("unsorted/beach.jpg"), Path("2023/beach.jpg")),
            CopyOperation(Path("2023/party.jpg"), Path("2023/party.jpg")),
        ]


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
