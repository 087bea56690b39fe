"""
Tree Indexer

Walks a directory tree and builds an identity index of its regular files.
A file's identity is its size in bytes together with its file name; the
index maps each identity to every relative path where it occurs.

Author: Collection Sync Project
License: MIT
"""

import os
import stat
from pathlib import Path
from typing import Dict, Iterator, List, NamedTuple, Tuple

from ..exceptions import IndexingError
from ..utils.logger import get_logger

logger = get_logger(__name__)


class IdentityKey(NamedTuple):
    """Size and file name pair standing in for "same file"."""
    size: int
    name: str

    def __str__(self) -> str:
        return f"{self.name} ({self.size} bytes)"


class TreeIndex:
    """
    Identity index of one directory tree.

    Keys iterate in sorted order (size, then name). Paths under a key are
    kept in traversal order and are always relative to the root.
    """

    def __init__(self, root: Path):
        """
        Initialize an empty index.

        Args:
            root: Directory the relative paths are anchored at
        """
        self.root = root
        self.skipped: List[Path] = []
        self._entries: Dict[IdentityKey, List[Path]] = {}

    def add(self, key: IdentityKey, rel_path: Path):
        """Record a file under its identity key."""
        if rel_path.is_absolute():
            raise ValueError(f"Index paths must be relative: {rel_path}")
        self._entries.setdefault(key, []).append(rel_path)

    def paths(self, key: IdentityKey) -> List[Path]:
        """Get the paths recorded for a key (empty if absent)."""
        return list(self._entries.get(key, []))

    def keys(self) -> List[IdentityKey]:
        return sorted(self._entries)

    def items(self) -> Iterator[Tuple[IdentityKey, List[Path]]]:
        for key in self.keys():
            yield key, list(self._entries[key])

    @property
    def file_count(self) -> int:
        """Number of indexed files, duplicates included."""
        return sum(len(paths) for paths in self._entries.values())

    def __contains__(self, key) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[IdentityKey]:
        return iter(self.keys())

    def __repr__(self) -> str:
        return f"TreeIndex(root={self.root}, keys={len(self)}, files={self.file_count})"


def build_index(root) -> TreeIndex:
    """
    Index every regular file below root.

    Directories are descended and their entries visited in name order, so
    the path order under each key is reproducible. Symlinks and special
    files are skipped with a warning and listed in ``TreeIndex.skipped``.

    Args:
        root: Directory to index

    Returns:
        Populated TreeIndex

    Raises:
        IndexingError: If the root is not a directory, a directory cannot be
            listed, an entry cannot be stat'ed, or a path cannot be made
            relative to the root. No partial index is returned.
    """
    root = Path(root)
    if not root.is_dir():
        raise IndexingError("Not a directory", root)

    logger.info(f"Indexing {root}")
    index = TreeIndex(root)
    pending: List[Path] = [root]

    while pending:
        directory = pending.pop()
        try:
            entries = sorted(os.scandir(directory), key=lambda e: e.name)
        except OSError as e:
            raise IndexingError("Cannot list directory", directory, e) from e

        subdirectories = []
        for entry in entries:
            path = Path(entry.path)
            try:
                mode = entry.stat(follow_symlinks=False).st_mode
            except OSError as e:
                raise IndexingError("Cannot read metadata", path, e) from e

            if stat.S_ISDIR(mode):
                subdirectories.append(path)
            elif stat.S_ISREG(mode):
                _index_file(index, root, path, entry)
            else:
                rel_path = _relative(root, path)
                logger.warning(f"Skipping non-regular file: {rel_path}")
                index.skipped.append(rel_path)

        # Reversed so the stack pops subdirectories in name order
        pending.extend(reversed(subdirectories))

    logger.info(
        f"Indexed {index.file_count} files ({len(index)} distinct) in {root}"
    )
    return index


def _index_file(index: TreeIndex, root: Path, path: Path, entry: os.DirEntry):
    try:
        size = entry.stat(follow_symlinks=False).st_size
    except OSError as e:
        raise IndexingError("Cannot read metadata", path, e) from e

    index.add(IdentityKey(size, path.name), _relative(root, path))


def _relative(root: Path, path: Path) -> Path:
    try:
        rel_path = path.relative_to(root)
    except ValueError as e:
        raise IndexingError(f"Path is not inside {root}", path, e) from e
    if not rel_path.parts:
        raise IndexingError("Path is the root itself", path)
    return rel_path
