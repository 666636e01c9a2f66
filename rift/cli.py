"""Command-line entry point: ``rift --to <destination>``."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import List, NoReturn, Optional, Sequence

from rich.console import Console
from rich.table import Table

from .configuration import (
    ConfigurationBundle,
    SyncSettings,
    load_runtime_configuration,
)
from .ignore import collect_patterns
from .logging_utils import setup_logging
from .sync import SyncError, SyncReport, synchronize

logger = logging.getLogger("rift")

LOG_LEVEL_ENV = "RIFT_LOG_LEVEL"
MAX_LISTED_REMOVALS = 10

DESCRIPTION = "rift - Sync project files to a destination"
EXAMPLES = """\
Examples:
  rift --to /backup
  rift --to /games/addons --name MyAddon
  rift --to ~/projects-backup --exclude "*.log" --exclude "tmp/"
"""


class UsageError(Exception):
    """Raised for malformed command lines."""


class _ArgumentParser(argparse.ArgumentParser):
    def error(self, message: str) -> NoReturn:
        raise UsageError(message)


def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog="rift",
        description=DESCRIPTION,
        epilog=EXAMPLES,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        add_help=False,
        allow_abbrev=False,
    )
    parser.add_argument("--to", metavar="DESTINATION", help="Destination path (required).")
    parser.add_argument(
        "--name",
        help="Name for destination folder (defaults to current directory name).",
    )
    parser.add_argument(
        "--exclude",
        action="append",
        default=[],
        metavar="PATTERN",
        help="Additional pattern to exclude (repeatable).",
    )
    parser.add_argument(
        "--log-level",
        metavar="LEVEL",
        help=f"Logging level (overrides {LOG_LEVEL_ENV} and logging.level).",
    )
    parser.add_argument(
        "--config",
        type=Path,
        metavar="DIR",
        help="Configuration directory (defaults to $RIFT_CONFIG_DIR or ~/.config/rift).",
    )
    parser.add_argument("-h", "--help", action="store_true", help="Show this help.")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run one sync of the current directory; returns the process exit code."""

    try:
        return run(list(sys.argv[1:] if argv is None else argv))
    except (UsageError, SyncError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1


def run(argv: List[str]) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.help:
        parser.print_help()
        return 0

    source_root = Path.cwd()
    bundle = load_runtime_configuration(source_root, config_dir=args.config)
    _configure_logging(bundle, args.log_level)
    emit_configuration_report(bundle)

    settings = SyncSettings.from_config(bundle.merged)
    destination = args.to or settings.destination
    if not destination:
        raise UsageError("--to flag is required")

    project_name = args.name or source_root.name
    dest_root = Path(destination).expanduser() / project_name

    patterns = collect_patterns(
        source_root,
        [*settings.exclude, *args.exclude],
        ignore_file=settings.ignore_file,
        always_exclude=settings.always_exclude,
    )

    report = synchronize(source_root, dest_root, patterns)

    if _ui_verbose(bundle):
        render_report(Console(), report)
    return 0


def _configure_logging(bundle: ConfigurationBundle, cli_level: Optional[str]) -> None:
    logging_cfg = bundle.merged.get("logging", {}) if bundle.merged else {}
    level_name = (
        cli_level
        or os.environ.get(LOG_LEVEL_ENV)
        or logging_cfg.get("level")
        or "WARNING"
    )
    log_file = logging_cfg.get("file") or None
    bundle.log_path = setup_logging(
        level_name.upper(),
        log_file=Path(log_file) if log_file else None,
        structured=bool(logging_cfg.get("structured", False)),
    )
    logger.debug("Configuration files loaded: %s", [str(path) for path in bundle.files_loaded])


def _ui_verbose(bundle: ConfigurationBundle) -> bool:
    ui_cfg = bundle.merged.get("ui", {}) if bundle.merged else {}
    return bool(ui_cfg.get("verbose", True))


def emit_configuration_report(bundle: ConfigurationBundle) -> None:
    """Print warnings and errors found while loading configuration."""

    problems = [diag for diag in bundle.diagnostics if diag.level != "info"]
    if not problems:
        return

    print("[config] Diagnostics:", file=sys.stderr)
    for diag in problems:
        prefix = diag.source or bundle.source_dir
        print(f"  - ({diag.level.upper()}) {diag.message} [{prefix}]", file=sys.stderr)


def render_report(console: Console, report: SyncReport) -> None:
    """Render a run summary table."""

    table = Table(title="rift", show_header=False)
    table.add_column("Property", style="bold")
    table.add_column("Value")

    table.add_row("Source", str(report.source_root))
    table.add_row("Destination", str(report.dest_root))
    table.add_row("Directories created", str(report.directories_created))
    table.add_row("Files copied", str(report.files_copied))
    table.add_row("Files unchanged", str(report.files_unchanged))
    table.add_row("Excluded", str(report.excluded))
    table.add_row("Orphans removed", str(report.orphans_removed))

    console.print(table)

    if report.removed:
        console.print("[red]Removed:[/red]")
        for path in report.removed[:MAX_LISTED_REMOVALS]:
            console.print(f"  - {path}")
        if len(report.removed) > MAX_LISTED_REMOVALS:
            console.print(f"  ... and {len(report.removed) - MAX_LISTED_REMOVALS} more")


__all__ = ["UsageError", "build_parser", "main", "render_report", "run"]
