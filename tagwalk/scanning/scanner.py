#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Run orchestration: walk a root, decode each qualifying file, hand the
result to a sink, and keep every per-file failure in the walk's ErrorSink.
"""

import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, Tuple, Dict, Any

from tqdm import tqdm

from ..checkpoint.manager import CheckpointManager
from ..config import DEFAULT_CHECKPOINT_INTERVAL, FOLLOW_SYMLINKS, SORT_SIBLINGS
from ..errors import DecodeError, PersistenceError, RunSetupError
from ..models.checkpoint import ScanCheckpoint
from ..models.failure import FailureRecord
from ..utils.time import utc_now_str
from .extractor import Id3TagExtractor, TagDecoder
from .filesystem import FileSystem, LocalFileSystem, StatKind
from .sinks import ResultSink
from .walker import TraversalEngine

logger = logging.getLogger(__name__)


@dataclass
class RunSummary:
    """Outcome of walking one root."""
    root: str
    processed: int = 0
    failures: Tuple[FailureRecord, ...] = ()
    entries_visited: int = 0
    directories_expanded: int = 0
    elapsed: float = 0.0
    scan_id: Optional[str] = None
    completed: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return {
            "root": self.root,
            "processed": self.processed,
            "failures": [f.to_dict() for f in self.failures],
            "entries_visited": self.entries_visited,
            "directories_expanded": self.directories_expanded,
            "elapsed_seconds": round(self.elapsed, 3),
            "scan_id": self.scan_id,
            "completed": self.completed,
        }


class TagScanner:
    """
    Coordinates TraversalEngine, TagDecoder and a ResultSink for one or more
    roots. Checkpointing is optional and only used when a CheckpointManager
    is supplied.
    """

    def __init__(self, sink: ResultSink,
                 decoder: Optional[TagDecoder] = None,
                 filesystem: Optional[FileSystem] = None,
                 follow_symlinks: bool = FOLLOW_SYMLINKS,
                 sort_entries: bool = SORT_SIBLINGS,
                 show_progress: bool = False,
                 checkpoint_manager: Optional[CheckpointManager] = None,
                 checkpoint_interval: int = DEFAULT_CHECKPOINT_INTERVAL):
        self.sink = sink
        self.decoder = decoder or Id3TagExtractor()
        self.filesystem = filesystem or LocalFileSystem(follow_symlinks=follow_symlinks)
        self.follow_symlinks = follow_symlinks
        self.sort_entries = sort_entries
        self.show_progress = show_progress
        self.checkpoint_manager = checkpoint_manager
        self.checkpoint_interval = checkpoint_interval
        # yielded by the engine but not yet accepted by the sink
        self._in_flight: Optional[Path] = None

    # ------------------------------------------------------------ run setup

    def validate_roots(self, roots: Iterable[Path]) -> List[Path]:
        """Check every root before any walking starts.

        A root that cannot be stat'ed is fatal. A root that exists but is
        not a directory has nothing to walk and is dropped with a warning.
        """
        valid = []
        for root in roots:
            root = Path(root)
            try:
                kind = self.filesystem.stat(root)
            except OSError as e:
                raise RunSetupError(f"Cannot access root {root}: {e}") from e
            if kind in (StatKind.DIRECTORY, StatKind.LINKED_DIRECTORY):
                valid.append(root)
            else:
                logger.warning("Skipping %s: not a directory", root)
        return valid

    def create_engine(self, root: Path) -> TraversalEngine:
        return TraversalEngine(root, filesystem=self.filesystem,
                               follow_symlinks=self.follow_symlinks,
                               sort_entries=self.sort_entries)

    def resume_engine(self, checkpoint: ScanCheckpoint) -> TraversalEngine:
        if checkpoint.walk_state is None:
            raise RunSetupError(f"Checkpoint {checkpoint.scan_id} holds no walk state")
        return TraversalEngine.from_state(checkpoint.walk_state, filesystem=self.filesystem,
                                          follow_symlinks=self.follow_symlinks,
                                          sort_entries=self.sort_entries)

    # ------------------------------------------------------------------ run

    def scan_roots(self, roots: Iterable[Path]) -> List[RunSummary]:
        """Validate all roots, then walk them one after another."""
        return [self.scan(root) for root in self.validate_roots(roots)]

    def scan(self, root: Path, checkpoint: Optional[ScanCheckpoint] = None) -> RunSummary:
        """Walk one root to exhaustion (or resume it from `checkpoint`)."""
        if checkpoint is not None:
            engine = self.resume_engine(checkpoint)
            scan_id = checkpoint.scan_id
            logger.info("Resuming %s from checkpoint %s (%d already processed)",
                        root, scan_id, checkpoint.processed_count)
        else:
            engine = self.create_engine(root)
            scan_id = (self.checkpoint_manager.generate_scan_id(str(root))
                       if self.checkpoint_manager else None)

        start_time = time.perf_counter()
        self._in_flight = None

        with tqdm(desc=f"Scanning {root}", unit="file", initial=engine.matches_yielded,
                  disable=not self.show_progress, leave=False) as progress:
            try:
                for path in engine:
                    self._in_flight = path
                    self._process(engine, path)
                    progress.update(1)
                    progress.set_postfix(failures=len(engine.errors), refresh=False)

                    if self._checkpoint_due(engine.matches_yielded):
                        self._save_checkpoint(scan_id, root, engine)
            except KeyboardInterrupt:
                if self.checkpoint_manager and scan_id:
                    self._save_checkpoint(scan_id, root, engine, unfinished=self._in_flight)
                    logger.warning("Scan interrupted; resume with --resume-scan-id %s", scan_id)
                raise

        if self.checkpoint_manager and scan_id:
            self.checkpoint_manager.cleanup_checkpoint(scan_id)

        summary = RunSummary(
            root=str(root),
            processed=engine.matches_yielded,
            failures=engine.errors.snapshot(),
            entries_visited=engine.entries_visited,
            directories_expanded=engine.directories_expanded,
            elapsed=time.perf_counter() - start_time,
            scan_id=scan_id,
        )
        logger.info("Finished %s: %d files, %d failures in %.1fs",
                    root, summary.processed, len(summary.failures), summary.elapsed)
        return summary

    def _process(self, engine: TraversalEngine, path: Path) -> None:
        """Decode one file and pass it to the sink; failures are recorded, not raised.

        The path stops being in flight as soon as the sink has it, so an
        interrupt after that point does not hand it out again on resume.
        """
        try:
            record = self.decoder.decode(path)
        except DecodeError as e:
            engine.errors.record(FailureRecord.decode_failure(path, e.message, e.cause))
            self._in_flight = None
            return

        try:
            self.sink.accept(path, record)
            self._in_flight = None
        except DecodeError as e:
            engine.errors.record(FailureRecord.decode_failure(path, e.message, e.cause))
            self._in_flight = None
        except PersistenceError as e:
            engine.errors.record(FailureRecord.persistence_failure(path, e.message, e.cause))
            self._in_flight = None

    # ---------------------------------------------------------- checkpoints

    def _checkpoint_due(self, processed: int) -> bool:
        return (self.checkpoint_manager is not None
                and self.checkpoint_interval > 0
                and processed % self.checkpoint_interval == 0)

    def _save_checkpoint(self, scan_id: str, root: Path, engine: TraversalEngine,
                         unfinished: Optional[Path] = None) -> None:
        state = engine.snapshot()
        if unfinished is not None:
            # pulled but not yet handed to the sink; classify it again on resume
            state.pending_files.append(str(unfinished))
            state.matches_yielded -= 1
        checkpoint = ScanCheckpoint(
            scan_id=scan_id,
            source_path=str(root),
            stage='walking',
            timestamp=utc_now_str(),
            walk_state=state,
            processed_count=state.matches_yielded,
            config={
                "follow_symlinks": self.follow_symlinks,
                "sort_entries": self.sort_entries,
                "checkpoint_interval": self.checkpoint_interval,
            },
        )
        self.checkpoint_manager.save_checkpoint(checkpoint)
