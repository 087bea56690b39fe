"""
Shared test fixtures.

Author: Collection Sync Project
License: MIT
"""

import logging
import pytest
from pathlib import Path

from collection_sync.utils.logger import ROOT_LOGGER_NAME


def write_tree(root: Path, files: dict) -> Path:
    """
    Create files below root.

    Args:
        root: Directory to populate (created if missing)
        files: Mapping of relative path -> size in bytes or bytes content

    Returns:
        The root directory
    """
    root.mkdir(parents=True, exist_ok=True)
    for rel_path, content in files.items():
        path = root / rel_path
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, int):
            content = b"x" * content
        path.write_bytes(content)
    return root


def list_files(root: Path) -> dict:
    """Map relative POSIX path -> bytes for every file below root."""
    return {
        p.relative_to(root).as_posix(): p.read_bytes()
        for p in sorted(root.rglob("*"))
        if p.is_file()
    }


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Let records reach caplog even after a test configured logging."""
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    yield
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


@pytest.fixture
def trees(tmp_path):
    """Empty source and target directories."""
    source = tmp_path / "source"
    target = tmp_path / "target"
    source.mkdir()
    target.mkdir()
    return source, target
