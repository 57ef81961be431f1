"""
cli_entry.py - CLI Entry Point

Supports:
- Non-interactive mode (apply every non-conflicting rename)
- Text review mode
- GUI review mode
"""

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional

from ..core import (
    CliOverrides, ConfigError, DryRunApplier, RenamePlan, RenamePlanner,
    Unmatched, accept_non_conflicting, load_config, review_and_apply,
)
from ..core.config_merge import METADATA_CHOICES
from ..core.config_file import CONFIG_ENV
from ..core.plan_rename import PlanItem, conflicting_plans
from .cli_interactive import interactive_review

LOG_ENV = "PREFIX_BY_DATE_LOG"

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_CONFIG = 2


def create_parser() -> argparse.ArgumentParser:
    """Create command-line argument parser"""
    parser = argparse.ArgumentParser(
        prog="prefix-by-date",
        description="Prefix files by date",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"""
Examples:
  # Rename scans using the date found in their name
  prefix-by-date "Releve au 2023-10-15.pdf" IMG-20231117-holidays.jpg

  # Review every rename, falling back on the modification time
  prefix-by-date -i text -m modified ~/Scans/*

  # Prefix by today's date and time
  prefix-by-date --today --time notes.txt

The configuration is read from <DIR>/config.toml, where DIR defaults to
${CONFIG_ENV} or $XDG_CONFIG_HOME/prefix-by-date.
"""
    )

    parser.add_argument("paths", nargs="*", type=Path, help="Paths to process")
    parser.add_argument("-C", "--config", type=Path, metavar="DIR", help="Custom config directory")
    parser.add_argument("--today", action=argparse.BooleanOptionalAction, default=None,
                        help="Prefix by today's date when nothing else matches")
    parser.add_argument("--time", action=argparse.BooleanOptionalAction, default=None,
                        help="Prefix by date and time (--no-time: date only)")
    parser.add_argument("-m", "--metadata", choices=METADATA_CHOICES,
                        help="Metadata matchers to enable")
    parser.add_argument("-i", "--interactive", choices=["off", "text", "gui"], default="off",
                        help="Review renames interactively")
    parser.add_argument("-n", "--dry-run", action="store_true", help="Preview only, do not execute")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="More output")
    parser.add_argument("-q", "--quiet", action="count", default=0, help="Less output")

    return parser


def setup_logging(verbose: int = 0, quiet: int = 0) -> None:
    """Configure the root logger once for the run"""
    level = logging.WARNING - 10 * (verbose - quiet)
    level = min(max(level, logging.DEBUG), logging.CRITICAL)

    env_level = os.environ.get(LOG_ENV, "").upper()
    if env_level:
        level = logging.getLevelName(env_level)
        if not isinstance(level, int):
            level = logging.WARNING

    logging.basicConfig(level=level, format="%(levelname)s: %(message)s", stream=sys.stderr)


def print_plans(items: List[PlanItem]) -> None:
    """Show preview"""
    plans = [item for item in items if isinstance(item, RenamePlan)]
    print(f"Will perform {len(plans)} rename operations:")
    print("-" * 80)
    for item in items:
        if isinstance(item, Unmatched):
            print(f"  {item.source_path.name:<40} ({item.reason.value})")
            continue
        note = "  [conflict]" if item.conflict else ""
        print(f"  {item.source_path.name:<40} -> {item.target_path.name}{note}")
    print("-" * 80)

    conflicts = conflicting_plans(items)
    if conflicts:
        print(f"Note: {len(conflicts)} target(s) already taken, these files will not be renamed")


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point"""
    parser = create_parser()
    args = parser.parse_args(argv)
    setup_logging(args.verbose, args.quiet)

    try:
        overrides = CliOverrides(time=args.time, metadata=args.metadata, today=args.today)
        config = load_config(args.config)
        planner = RenamePlanner(config, overrides)
    except ConfigError as e:
        print(f"Error: invalid configuration: {e}", file=sys.stderr)
        return EXIT_CONFIG

    if args.interactive == "gui":
        try:
            from ..gui import main as gui_main
        except ImportError as e:
            print("Error: Unable to start GUI, please ensure PySide6 is installed", file=sys.stderr)
            print(f"Detailed error: {e}", file=sys.stderr)
            print("\nInstall command: pip install PySide6", file=sys.stderr)
            return EXIT_FAILED
        return gui_main(planner, args.paths, dry_run=args.dry_run)

    items = planner.build_plans(args.paths)
    applier = DryRunApplier() if args.dry_run else None

    if args.dry_run and args.interactive == "off":
        print_plans(items)
        print("\n[Preview mode] Will not actually execute")
        return EXIT_OK

    if args.interactive == "text":
        result = interactive_review(items, planner, applier)
    else:
        result = review_and_apply(items, accept_non_conflicting, applier, planner)

    if args.paths:
        print(result.summary())
    return EXIT_OK if result.failed_count == 0 else EXIT_FAILED


if __name__ == "__main__":
    sys.exit(main())
