"""
File Operation Utilities

Low-level file primitives used by the operation executor: hashing,
non-clobbering copy and rename, and free-space queries.

Author: Collection Sync Project
License: MIT
"""

import os
import shutil
import hashlib
from pathlib import Path

from .logger import get_logger

logger = get_logger(__name__)


def calculate_file_hash(file_path: str, algorithm: str = "sha256", chunk_size: int = 65536) -> str:
    """
    Calculate hash of a file.

    Args:
        file_path: Path to the file
        algorithm: Hash algorithm (md5, sha1, sha256, etc.)
        chunk_size: Size of chunks to read (bytes)

    Returns:
        Hexadecimal hash string

    Raises:
        FileNotFoundError: If file doesn't exist
        ValueError: If algorithm is unsupported
    """
    if not os.path.exists(file_path):
        raise FileNotFoundError(f"File not found: {file_path}")

    try:
        hash_func = hashlib.new(algorithm)
    except ValueError:
        raise ValueError(f"Unsupported hash algorithm: {algorithm}")

    with open(file_path, 'rb') as f:
        while chunk := f.read(chunk_size):
            hash_func.update(chunk)

    return hash_func.hexdigest()


def path_occupied(path: Path) -> bool:
    """
    Check whether anything exists at a path.

    Unlike Path.exists(), a dangling symlink counts as occupied.
    """
    return os.path.lexists(path)


def ensure_parent_directory(path: Path) -> None:
    """Create the parent directories of a path if they are missing."""
    path.parent.mkdir(parents=True, exist_ok=True)


def copy_file(source: Path, destination: Path) -> int:
    """
    Copy a file, creating missing parent directories.

    Contents and timestamps are copied; the source is only read.

    Args:
        source: File to copy
        destination: Path of the new file

    Returns:
        Number of bytes copied

    Raises:
        FileExistsError: If destination already exists
        OSError: If the copy fails
    """
    if path_occupied(destination):
        raise FileExistsError(f"Destination exists: {destination}")

    ensure_parent_directory(destination)
    shutil.copy2(source, destination)
    size = destination.stat().st_size
    logger.debug(f"Copied: {source} -> {destination} ({size} bytes)")
    return size


def rename_file(source: Path, destination: Path) -> None:
    """
    Rename a file within one filesystem, creating missing parents.

    Raises:
        FileExistsError: If destination already exists
        OSError: If the rename fails
    """
    if path_occupied(destination):
        raise FileExistsError(f"Destination exists: {destination}")

    ensure_parent_directory(destination)
    os.rename(source, destination)
    logger.debug(f"Renamed: {source} -> {destination}")


def available_space(path: Path) -> int:
    """
    Get free bytes on the filesystem that holds path.

    Walks up to the nearest existing ancestor so the destination of a copy
    can be queried before its directories are created.
    """
    existing = path
    while not existing.exists() and existing != existing.parent:
        existing = existing.parent
    return shutil.disk_usage(existing).free
