#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Main CLI entry point for tagwalk.
"""

import argparse
import sys
import logging
from pathlib import Path

from . import config
from .commands.scan import ScanCommand
from .commands.checkpoint import cmd_list_checkpoints, cmd_cleanup_checkpoints, cmd_checkpoint_info
from .commands.stats import cmd_show_stats
from .commands.export import cmd_export_tracks
from .database.manager import DatabaseManager
from .jsonio import enable_json_logging, error

EXIT_INTERRUPTED = 130

# commands that only walk and never touch the store
STORELESS_COMMANDS = {"print"}


def setup_logging(verbose: bool):
    """Configure logging for the CLI tool."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)]
    )
    logging.debug("Verbose logging enabled (DEBUG level).")


def create_parser():
    """Create and configure the argument parser."""
    parser = argparse.ArgumentParser(
        prog="tagwalk",
        description="Find ID3-tagged audio files in directory trees and report or index their tags",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""Examples:
  # Print artist - album - title for every tagged file
  %(prog)s print ~/Music /mnt/archive

  # Index tags into SQLite, resumable
  %(prog)s --db library.db index ~/Music
  %(prog)s --db library.db index ~/Music --resume-scan-id scan_20261018_101500_000000_a1b2c3d4

  # Inspect the store
  %(prog)s --db library.db stats --detailed
  %(prog)s --db library.db export --out tracks.csv
  %(prog)s --db library.db --json list-checkpoints
        """
    )

    parser.add_argument("--db", default=config.DEFAULT_DB_PATH,
                        help=f"SQLite database path (default: {config.DEFAULT_DB_PATH})")
    parser.add_argument("--checkpoint-dir", default=config.DEFAULT_CHECKPOINT_DIR,
                        help=f"Directory for checkpoint files (default: {config.DEFAULT_CHECKPOINT_DIR})")
    parser.add_argument("--verbose", "-v", action="store_true",
                        help="Enable verbose (DEBUG) output")
    parser.add_argument("--json", action="store_true",
                        help="Output results as JSON instead of human-readable text")

    subparsers = parser.add_subparsers(dest="command", required=True, help="Available commands")

    _add_walk_parsers(subparsers)
    _add_checkpoint_parsers(subparsers)
    _add_store_parsers(subparsers)

    return parser


def _add_walk_options(p):
    p.add_argument("--follow-symlinks", action="store_true",
                   help="Descend into symlinked directories (cycles are expanded once)")
    p.add_argument("--unsorted", action="store_true",
                   help="Keep filesystem listing order instead of sorting siblings by name")


def _add_walk_parsers(subparsers):
    """Add print and index command parsers."""
    print_parser = subparsers.add_parser("print", help="Print tags of every ID3-tagged file")
    print_parser.add_argument("roots", nargs="+", help="Directories to walk")
    _add_walk_options(print_parser)

    index_parser = subparsers.add_parser("index", help="Insert tags of every ID3-tagged file into the database")
    index_parser.add_argument("roots", nargs="*", help="Directories to walk")
    _add_walk_options(index_parser)
    index_parser.add_argument("--no-progress", action="store_true",
                              help="Hide the progress bar")
    index_parser.add_argument("--checkpoint-every", type=int, default=config.DEFAULT_CHECKPOINT_INTERVAL,
                              help=f"Save a checkpoint every N files (default: {config.DEFAULT_CHECKPOINT_INTERVAL})")
    index_parser.add_argument("--resume-scan-id",
                              help="Resume an interrupted run from its checkpoint")
    index_parser.add_argument("--no-checkpoints", action="store_true",
                              help="Disable checkpoint saving")


def _add_checkpoint_parsers(subparsers):
    """Add checkpoint command parsers."""
    list_chk_parser = subparsers.add_parser("list-checkpoints", help="List available checkpoints")
    list_chk_parser.add_argument("--source", help="Filter by source path")

    info_chk_parser = subparsers.add_parser("checkpoint-info", help="Show checkpoint details")
    info_chk_parser.add_argument("--scan-id", required=True, help="Checkpoint scan ID")

    cleanup_chk_parser = subparsers.add_parser("cleanup-checkpoints", help="Clean up old checkpoints")
    cleanup_chk_parser.add_argument("--days", type=int, default=config.DEFAULT_CHECKPOINT_RETENTION_DAYS,
                                    help="Remove checkpoints older than N days "
                                         f"(default: {config.DEFAULT_CHECKPOINT_RETENTION_DAYS})")
    cleanup_chk_parser.add_argument("--scan-id", help="Remove specific checkpoint by scan ID")


def _add_store_parsers(subparsers):
    """Add stats and export command parsers."""
    stats_parser = subparsers.add_parser("stats", help="Show database statistics")
    stats_parser.add_argument("--detailed", action="store_true",
                              help="Show per-genre and per-artist breakdown")

    export_parser = subparsers.add_parser("export", help="Export stored tracks as CSV")
    export_parser.add_argument("--out", required=True, help="Output CSV file path")
    export_parser.add_argument("--null-marker", default=config.CSV_NULL_MARKER,
                               help=f"Text written for absent (NULL) fields (default: {config.CSV_NULL_MARKER})")


def run_command(args, db_manager) -> int:
    checkpoint_dir = Path(args.checkpoint_dir)

    if args.command in ("print", "index"):
        command = ScanCommand(db_manager, checkpoint_dir)
        roots = [Path(r) for r in args.roots]
        if args.command == "print":
            logging.info("Printing tags under %d root(s)", len(roots))
            return command.print_tags(
                roots,
                follow_symlinks=args.follow_symlinks,
                sort_entries=not args.unsorted,
                as_json=args.json,
            )
        logging.info("Indexing tags under %d root(s) into %s", len(roots), args.db)
        return command.index(
            roots,
            follow_symlinks=args.follow_symlinks,
            sort_entries=not args.unsorted,
            show_progress=not args.no_progress,
            checkpoint_every=args.checkpoint_every,
            resume_scan_id=args.resume_scan_id,
            auto_checkpoint=not args.no_checkpoints,
            as_json=args.json,
        )

    if args.command == "list-checkpoints":
        return cmd_list_checkpoints(db_manager, args.source, args.json, checkpoint_dir)

    if args.command == "checkpoint-info":
        return cmd_checkpoint_info(db_manager, args.scan_id, args.json, checkpoint_dir)

    if args.command == "cleanup-checkpoints":
        logging.info("Cleaning up checkpoints (days=%d, scan_id=%s)", args.days, args.scan_id)
        return cmd_cleanup_checkpoints(db_manager, args.days, args.scan_id, args.json, checkpoint_dir)

    if args.command == "stats":
        cmd_show_stats(db_manager, args.detailed, args.json)
        return 0

    if args.command == "export":
        logging.info("Exporting tracks to %s", args.out)
        return cmd_export_tracks(db_manager, Path(args.out), args.json, null_marker=args.null_marker)

    raise ValueError(f"Unknown command: {args.command}")


def main(argv=None) -> int:
    """Main CLI entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.json:
        enable_json_logging()
    else:
        setup_logging(args.verbose)

    logging.debug("Parsed arguments: %s", args)

    db_manager = None
    try:
        if args.command not in STORELESS_COMMANDS:
            logging.info("Using database: %s", args.db)
            db_manager = DatabaseManager(Path(args.db))
        return run_command(args, db_manager) or 0

    except KeyboardInterrupt:
        if args.json:
            return error(args.command, "Operation interrupted by user", code=EXIT_INTERRUPTED)
        logging.warning("Operation interrupted by user.")
        return EXIT_INTERRUPTED
    except Exception as e:
        if args.json:
            debug_info = {"exception_type": type(e).__name__} if args.verbose else None
            return error(args.command, str(e), debug=debug_info, code=1)
        logging.error("Error occurred: %s", e, exc_info=args.verbose)
        return 1
    finally:
        if db_manager is not None:
            db_manager.close()


if __name__ == "__main__":
    sys.exit(main())
