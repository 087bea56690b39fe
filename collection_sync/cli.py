"""
Command Line Interface

Update a target collection to have the folder structure of a source
collection. Files matching in name and size are moved rather than copied,
the source is never modified and unique target files are never deleted.

Author: Collection Sync Project
License: MIT
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Iterable, Optional

from . import __version__
from .config.config_loader import ConfigLoader
from .core.report import (
    format_duplicates,
    format_index,
    format_plan,
    format_summary,
    printable,
)
from .core.sync_engine import SyncEngine, SyncStatus
from .exceptions import CollectionSyncError, SourceHasDuplicatesError
from .utils.logger import setup_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="collection-sync",
        description=(
            "Reorganize a target collection to match the folder structure of a "
            "source collection. The source is never modified."
        ),
    )
    parser.add_argument("source_directory", help="Source collection")
    parser.add_argument("target_directory", help="Target collection")
    parser.add_argument(
        "-n",
        "--dry-run",
        action="store_true",
        help="Don't do anything, just list the actions",
    )
    parser.add_argument("-c", "--config", default=None, help="YAML configuration file")
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        type=str.upper,
        help="Logging level",
    )
    parser.add_argument("--log-file", default=None, help="Also log to this file")
    parser.add_argument("--json-logs", action="store_true", help="Emit log records as JSON")
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the plan as JSON instead of the text report",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def _overrides(args: argparse.Namespace, source: Path, target: Path) -> dict:
    overrides = {
        "source_directory": str(source),
        "target_directory": str(target),
    }
    if args.dry_run:
        overrides.setdefault("sync", {})["dry_run"] = True
    if args.log_level:
        overrides.setdefault("logging", {})["level"] = args.log_level
    if args.log_file:
        overrides.setdefault("logging", {}).update(log_to_file=True, log_file_path=args.log_file)
    if args.json_logs:
        overrides.setdefault("logging", {})["json_format"] = True
    return overrides


def _check_directory(label: str, path: Path) -> None:
    if not path.exists() or not path.is_dir():
        raise SystemExit(f"{label} directory does not exist or is not a directory: {path}")


def _emit(lines) -> None:
    for line in lines:
        print(printable(line))


def _error(message) -> int:
    print(f"Error: {printable(str(message))}", file=sys.stderr)
    return 1


def main(argv: Optional[Iterable[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    source = Path(args.source_directory).expanduser().resolve()
    target = Path(args.target_directory).expanduser().resolve()
    _check_directory("Source", source)
    _check_directory("Target", target)

    try:
        config = ConfigLoader(args.config).load(_overrides(args, source, target))
    except CollectionSyncError as e:
        return _error(e)

    try:
        setup_logging(
            log_level=config.logging.level,
            log_to_file=config.logging.log_to_file,
            log_file_path=config.logging.log_file_path,
            log_rotation_size=config.logging.rotation_size,
            log_retention_count=config.logging.retention_count,
            json_format=config.logging.json_format,
        )
    except OSError as e:
        return _error(f"Cannot set up logging: {e}")

    dry_run = config.sync.dry_run
    engine = SyncEngine(config)

    try:
        result = engine.prepare()
    except SourceHasDuplicatesError as e:
        if not args.json:
            _emit(format_duplicates("Duplicates in source", e.groups))
        return _error(e)
    except CollectionSyncError as e:
        return _error(e)

    if args.json:
        print(json.dumps(result.plan.to_dict(), indent=2))
    else:
        _emit([f"Synchronize collection from {source} to {target}."])
        _emit(format_index("Source", result.source_index))
        _emit(format_index("Target", result.target_index))
        _emit(format_duplicates("Duplicates in target", result.target_duplicates))
        _emit(format_plan(result.plan))

    if dry_run or result.status == SyncStatus.UP_TO_DATE:
        if not args.json and not result.plan.is_empty:
            print(format_summary(result.plan, dry_run=True))
        return 0

    try:
        engine.apply(result)
    except CollectionSyncError as e:
        return _error(e)

    if not args.json:
        print(format_summary(result.plan, dry_run=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
