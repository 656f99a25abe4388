#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
`print` and `index` commands.

Both delegate the walking to TagScanner and differ only in the sink: the
console for `print`, the tracks table for `index`. Per-entry failures are
reported once every root has been walked.
"""

import sys
from pathlib import Path
from typing import List, Optional, Sequence

from ..checkpoint.manager import CheckpointManager
from ..config import DEFAULT_CHECKPOINT_INTERVAL, FOLLOW_SYMLINKS, SORT_SIBLINGS
from ..database.manager import DatabaseManager
from ..errors import RunSetupError
from ..jsonio import success, tracks_payload
from ..scanning.scanner import RunSummary, TagScanner
from ..scanning.sinks import CollectingSink, ConsoleSink, PersistenceAdapter
from ..utils.time import utc_now_str


def report_failures(summaries: Sequence[RunSummary], stream=None) -> int:
    """Print accumulated failures after the walk; returns how many there were."""
    stream = stream or sys.stderr
    failures = [f for s in summaries for f in s.failures]
    if failures:
        print(f"Failures ({len(failures):,}):", file=stream)
        for failure in failures:
            print(f"  {failure.describe()}", file=stream)
    return len(failures)


class ScanCommand:
    """CLI-facing wrapper around TagScanner."""

    def __init__(self, db_manager: Optional[DatabaseManager] = None,
                 checkpoint_dir: Optional[Path] = None):
        self.db_manager = db_manager
        self.checkpoint_dir = checkpoint_dir

    def print_tags(self, roots: Sequence[Path],
                   follow_symlinks: bool = FOLLOW_SYMLINKS,
                   sort_entries: bool = SORT_SIBLINGS,
                   as_json: bool = False) -> int:
        """Print "artist - album - title" for every qualifying file."""
        sink = CollectingSink() if as_json else ConsoleSink()
        scanner = TagScanner(sink, follow_symlinks=follow_symlinks, sort_entries=sort_entries)
        summaries = scanner.scan_roots(roots)

        if as_json:
            return success("print", {
                "tracks": tracks_payload(sink.results),
                "runs": [s.to_dict() for s in summaries],
            })

        report_failures(summaries)
        return 0

    def index(self, roots: Sequence[Path],
              follow_symlinks: bool = FOLLOW_SYMLINKS,
              sort_entries: bool = SORT_SIBLINGS,
              show_progress: bool = True,
              checkpoint_every: int = DEFAULT_CHECKPOINT_INTERVAL,
              resume_scan_id: Optional[str] = None,
              auto_checkpoint: bool = True,
              as_json: bool = False) -> int:
        """Insert one tracks row per qualifying file."""
        if self.db_manager is None:
            raise RunSetupError("index requires an open database")

        checkpoint_manager = None
        if auto_checkpoint or resume_scan_id:
            checkpoint_manager = CheckpointManager(self.db_manager, self.checkpoint_dir)

        sink = PersistenceAdapter(self.db_manager)
        scanner = TagScanner(
            sink,
            follow_symlinks=follow_symlinks,
            sort_entries=sort_entries,
            show_progress=show_progress and not as_json,
            checkpoint_manager=checkpoint_manager,
            checkpoint_interval=checkpoint_every if auto_checkpoint else 0,
        )

        roots = [Path(r) for r in roots]
        checkpoint = None
        if resume_scan_id:
            checkpoint = checkpoint_manager.load_checkpoint(resume_scan_id)
            if checkpoint is None:
                raise RunSetupError(f"Could not load checkpoint {resume_scan_id}")
            if roots and Path(checkpoint.source_path) not in roots:
                raise RunSetupError(
                    f"Source path mismatch: checkpoint={checkpoint.source_path}, "
                    f"current={', '.join(str(r) for r in roots)}")
            resumed_root = Path(checkpoint.source_path)
            roots = [r for r in roots if r != resumed_root]
            scanner.validate_roots([resumed_root])
        elif not roots:
            raise RunSetupError("No root paths given")

        valid_roots = scanner.validate_roots(roots)

        if not as_json:
            self._print_header(valid_roots, checkpoint)

        summaries: List[RunSummary] = []
        if checkpoint is not None:
            summaries.append(scanner.scan(Path(checkpoint.source_path), checkpoint=checkpoint))
        for root in valid_roots:
            summaries.append(scanner.scan(root))

        if as_json:
            return success("index", {
                "tracks_inserted": len(sink.rows),
                "total_tracks": self.db_manager.count_tracks(),
                "runs": [s.to_dict() for s in summaries],
            })

        for s in summaries:
            print(f"  - {s.root}: {s.processed:,} files, {len(s.failures):,} failures, "
                  f"{s.entries_visited:,} entries visited in {s.elapsed:.1f}s")
        print(f"Inserted {len(sink.rows):,} tracks ({self.db_manager.count_tracks():,} in database)")
        report_failures(summaries)
        print("=" * 80)
        return 0

    def _print_header(self, roots: Sequence[Path], checkpoint) -> None:
        print("=" * 80)
        print(f"TAGWALK INDEX - {utc_now_str()}")
        print("=" * 80)
        print(f"Database: {self.db_manager.db_path}")
        if checkpoint is not None:
            print(f"Resuming: {checkpoint.scan_id} ({checkpoint.source_path}, "
                  f"{checkpoint.processed_count:,} processed)")
        for root in roots:
            print(f"Source: {root}")
        print()
