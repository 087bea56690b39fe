"""
Unit Tests for File Operations

Tests file hashing, non-clobbering copy and rename, and free-space
queries.

Author: Collection Sync Project
License: MIT
"""

import os
import pytest
from pathlib import Path

from collection_sync.utils.file_ops import (
    available_space,
    calculate_file_hash,
    copy_file,
    ensure_parent_directory,
    path_occupied,
    rename_file
)


class TestFileHashing:
    """Test suite for file hashing functions."""

    def test_calculate_hash_sha256(self, tmp_path):
        """Test SHA256 hash calculation."""
        test_file = tmp_path / "test.txt"
        test_file.write_text("Hello, World!")

        hash_value = calculate_file_hash(str(test_file), algorithm="sha256")

        # SHA256 of "Hello, World!"
        expected = "dffd6021bb2bd5b0af676290809ec3a53191dd81c7f70a4b28688a362182986f"
        assert hash_value == expected

    def test_hash_nonexistent_file_raises_error(self):
        """Test that hashing non-existent file raises error."""
        with pytest.raises(FileNotFoundError):
            calculate_file_hash("/nonexistent/file.txt")

    def test_unsupported_algorithm(self, tmp_path):
        """Test that unknown algorithms are rejected."""
        test_file = tmp_path / "test.txt"
        test_file.write_text("x")

        with pytest.raises(ValueError):
            calculate_file_hash(str(test_file), algorithm="not-a-hash")


class TestCopyFile:
    """Test suite for copy_file()."""

    def test_copy_creates_parents(self, tmp_path):
        """Test copying into a missing directory."""
        source = tmp_path / "source.jpg"
        source.write_bytes(b"12345")
        destination = tmp_path / "out" / "nested" / "source.jpg"

        size = copy_file(source, destination)

        assert size == 5
        assert destination.read_bytes() == b"12345"
        assert source.exists()

    def test_copy_preserves_mtime(self, tmp_path):
        """Test timestamps are carried over."""
        source = tmp_path / "source.jpg"
        source.write_bytes(b"x")
        os.utime(source, (1_000_000_000, 1_000_000_000))
        destination = tmp_path / "copy.jpg"

        copy_file(source, destination)

        assert int(destination.stat().st_mtime) == 1_000_000_000

    def test_copy_refuses_existing_destination(self, tmp_path):
        """Test existing files are never overwritten."""
        source = tmp_path / "source.jpg"
        source.write_bytes(b"new")
        destination = tmp_path / "dest.jpg"
        destination.write_bytes(b"old")

        with pytest.raises(FileExistsError):
            copy_file(source, destination)

        assert destination.read_bytes() == b"old"


class TestRenameFile:
    """Test suite for rename_file()."""

    def test_rename_into_new_directory(self, tmp_path):
        """Test renaming creates the destination directory."""
        source = tmp_path / "a.jpg"
        source.write_bytes(b"a")
        destination = tmp_path / "sorted" / "a.jpg"

        rename_file(source, destination)

        assert not source.exists()
        assert destination.read_bytes() == b"a"

    def test_rename_refuses_existing_destination(self, tmp_path):
        """Test rename never replaces a file."""
        source = tmp_path / "a.jpg"
        source.write_bytes(b"a")
        destination = tmp_path / "b.jpg"
        destination.write_bytes(b"b")

        with pytest.raises(FileExistsError):
            rename_file(source, destination)

        assert source.exists()
        assert destination.read_bytes() == b"b"


class TestUtilityFunctions:
    """Test suite for utility functions."""

    @pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unsupported")
    def test_dangling_symlink_is_occupied(self, tmp_path):
        """Test a broken symlink still blocks a destination."""
        link = tmp_path / "link.jpg"
        link.symlink_to(tmp_path / "missing.jpg")

        assert not link.exists()
        assert path_occupied(link) is True
        assert path_occupied(tmp_path / "free.jpg") is False

    def test_ensure_parent_directory(self, tmp_path):
        """Test parent directory creation."""
        path = tmp_path / "new" / "nested" / "file.jpg"

        ensure_parent_directory(path)

        assert path.parent.is_dir()
        assert not path.exists()

    def test_available_space_for_missing_path(self, tmp_path):
        """Test free space is reported via the nearest existing ancestor."""
        assert available_space(tmp_path / "not" / "yet" / "created") > 0


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
