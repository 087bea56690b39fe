"""
Unit Tests for the Duplicate Detector

Author: Collection Sync Project
License: MIT
"""

import pytest
from pathlib import Path

from collection_sync.sync_engine.deduplicator import find_duplicate_groups, find_duplicates
from collection_sync.sync_engine.indexer import IdentityKey, TreeIndex, build_index

from conftest import write_tree


class TestFindDuplicates:
    """Test suite for duplicate detection."""

    def test_no_duplicates(self, tmp_path):
        """Test a tree of unique files has no groups."""
        root = write_tree(tmp_path / "tree", {"a.jpg": 1, "b.jpg": 1, "c/a.jpg": 2})

        assert find_duplicates(build_index(root)) == []

    def test_groups_hold_every_path(self, tmp_path):
        """Test each group lists all paths sharing a key."""
        root = write_tree(tmp_path / "tree", {
            "x/a.jpg": 1000,
            "y/a.jpg": 1000,
            "z/a.jpg": 1000,
            "unique.jpg": 5,
        })

        groups = find_duplicates(build_index(root))

        assert groups == [[Path("x/a.jpg"), Path("y/a.jpg"), Path("z/a.jpg")]]

    def test_groups_in_key_order(self, tmp_path):
        """Test groups are returned in key order with their keys."""
        index = TreeIndex(tmp_path)
        index.add(IdentityKey(50, "b.jpg"), Path("1/b.jpg"))
        index.add(IdentityKey(50, "b.jpg"), Path("2/b.jpg"))
        index.add(IdentityKey(10, "a.jpg"), Path("1/a.jpg"))
        index.add(IdentityKey(10, "a.jpg"), Path("2/a.jpg"))

        groups = find_duplicate_groups(index)

        assert [g.key for g in groups] == [IdentityKey(10, "a.jpg"), IdentityKey(50, "b.jpg")]

    def test_does_not_modify_index(self, tmp_path):
        """Test detection is side-effect free."""
        root = write_tree(tmp_path / "tree", {"x/a.jpg": 3, "y/a.jpg": 3})
        index = build_index(root)

        groups = find_duplicates(index)
        groups[0].append(Path("bogus"))

        assert index.paths(IdentityKey(3, "a.jpg")) == [Path("x/a.jpg"), Path("y/a.jpg")]


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
