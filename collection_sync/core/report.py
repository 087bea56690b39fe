"""
Report Formatting

Renders indexes, duplicate groups and plans as console lines.

Author: Collection Sync Project
License: MIT
"""

import os
import sys
from pathlib import Path
from typing import List

from ..sync_engine.deduplicator import DuplicateGroup
from ..sync_engine.indexer import TreeIndex
from ..sync_engine.operations import Plan


def printable(text: str) -> str:
    """
    Make text safe to write to a UTF-8 console.

    File names that are not valid in the filesystem encoding are decoded
    with surrogate escapes; their raw bytes are shown as \\xNN instead.
    """
    return os.fsencode(text).decode(sys.getfilesystemencoding(), "backslashreplace")


def format_index(title: str, index: TreeIndex) -> List[str]:
    """One header line, then one line per key with its paths."""
    lines = [f"{title}: {index.root} ({index.file_count} files, {len(index)} distinct)"]
    for key, paths in index.items():
        joined = ", ".join(p.as_posix() for p in paths)
        lines.append(f"  {key.name} [{key.size}]: {joined}")
    for path in index.skipped:
        lines.append(f"  skipped: {path.as_posix()}")
    return lines


def format_duplicates(title: str, groups) -> List[str]:
    """
    Render duplicate groups.

    Accepts DuplicateGroup objects or plain lists of paths.
    """
    if not groups:
        return []
    lines = [f"{title}: {len(groups)} group(s)"]
    for group in groups:
        if isinstance(group, DuplicateGroup):
            header = f"  {group.key.name} [{group.key.size}]:"
            paths = group.paths
        else:
            header = "  group:"
            paths = group
        lines.append(header)
        lines.extend(f"    {Path(p).as_posix()}" for p in paths)
    return lines


def format_plan(plan: Plan) -> List[str]:
    if plan.is_empty:
        return ["Plan: nothing to do"]
    lines = [f"Plan: {len(plan)} operation(s)"]
    lines.extend(f"  {operation.describe()}" for operation in plan)
    return lines


def format_summary(plan: Plan, dry_run: bool) -> str:
    summary = plan.summary()
    prefix = "Would apply" if dry_run else "Applied"
    return (
        f"{prefix} {summary['copy']} copies, {summary['move']} moves, "
        f"{summary['remove_duplicate']} duplicate removals"
    )
