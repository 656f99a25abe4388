#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Pull-based directory walker.

The walk is held in two explicit stacks instead of the call stack:

* ``pending_directories`` - directories found but not yet listed
* ``pending_files`` - entries of the most recently listed directory that
  have not been classified yet

Each call to ``next_match()`` does just enough filesystem work to produce
the next qualifying file (or find that none remain) and then returns, so a
walk can be paused between any two results, snapshotted, and resumed.
Failures on individual entries go to ``errors`` and never stop the walk.
"""

import logging
from pathlib import Path
from typing import List, Optional, Set, Union

from ..config import FOLLOW_SYMLINKS, SORT_SIBLINGS
from ..models.checkpoint import WalkState
from ..models.entry import EntryClassification, EntryKind
from ..models.failure import FailureRecord
from .error_sink import ErrorSink
from .filesystem import FileSystem, LocalFileSystem, StatKind
from .sniffer import ContentSniffer

logger = logging.getLogger(__name__)


class TraversalEngine:
    """Depth-first, resumable search for files carrying a tag marker.

    Not safe for concurrent pulls from several threads.
    """

    def __init__(self, root: Union[str, Path],
                 filesystem: Optional[FileSystem] = None,
                 sniffer: Optional[ContentSniffer] = None,
                 follow_symlinks: bool = FOLLOW_SYMLINKS,
                 sort_entries: bool = SORT_SIBLINGS):
        self.root = Path(root)
        self.filesystem = filesystem or LocalFileSystem(follow_symlinks=follow_symlinks)
        self.sniffer = sniffer or ContentSniffer(self.filesystem)
        self.follow_symlinks = follow_symlinks
        self.sort_entries = sort_entries

        self.pending_directories: List[Path] = [self.root]
        self.pending_files: List[Path] = []
        self.errors = ErrorSink()
        self._visited_directories: Set[str] = set()

        self.entries_visited = 0
        self.directories_expanded = 0
        self.matches_yielded = 0

    # ------------------------------------------------------------------ pull

    def next_match(self) -> Optional[Path]:
        """Return the next qualifying file, or None once the walk is exhausted."""
        while True:
            while self.pending_files:
                # peek, so an entry interrupted mid-classification is still pending
                path = self.pending_files[-1]
                classification = self.classify(path)
                self.pending_files.pop()

                if classification.kind is EntryKind.QUALIFYING_FILE:
                    self.matches_yielded += 1
                    return path
                if classification.kind is EntryKind.DIRECTORY:
                    # deferred; expanded once the current listing is drained
                    self.pending_directories.append(path)
                elif classification.kind is EntryKind.UNREADABLE:
                    self._record(classification.failure)

            if not self.pending_directories:
                return None
            self._expand_next()

    def __iter__(self) -> 'TraversalEngine':
        return self

    def __next__(self) -> Path:
        path = self.next_match()
        if path is None:
            raise StopIteration
        return path

    @property
    def exhausted(self) -> bool:
        return not self.pending_directories and not self.pending_files

    # --------------------------------------------------------- classification

    def classify(self, path: Path) -> EntryClassification:
        """Stat and, for regular files, sniff a single entry."""
        self.entries_visited += 1
        try:
            kind = self.filesystem.stat(path)
        except OSError as e:
            return EntryClassification.unreadable(path, FailureRecord.io_failure(path, "stat", e))

        if kind is StatKind.DIRECTORY:
            return EntryClassification.directory(path)
        if kind is StatKind.LINKED_DIRECTORY:
            logger.debug("Not descending into symlinked directory %s", path)
            return EntryClassification.non_qualifying(path)
        if kind is not StatKind.REGULAR_FILE:
            return EntryClassification.non_qualifying(path)

        try:
            matched = self.sniffer.is_candidate(path)
        except OSError as e:
            return EntryClassification.unreadable(path, FailureRecord.io_failure(path, "read", e))

        if matched:
            return EntryClassification.qualifying(path)
        return EntryClassification.non_qualifying(path)

    def _expand_next(self) -> None:
        """List the top pending directory. It leaves the stack only once listed (or failed)."""
        directory = self.pending_directories[-1]
        key = None
        if self.follow_symlinks:
            key = self.filesystem.canonical(directory)
            if key in self._visited_directories:
                self.pending_directories.pop()
                logger.debug("Skipping already expanded directory %s (%s)", directory, key)
                return

        try:
            children = self.filesystem.list_dir(directory)
        except OSError as e:
            self.pending_directories.pop()
            self._mark_visited(key)
            self._record(FailureRecord.io_failure(directory, "list", e))
            return

        self.pending_directories.pop()
        self._mark_visited(key)
        self.directories_expanded += 1
        logger.debug("Expanded %s (%d entries)", directory, len(children))
        if self.sort_entries:
            # reversed so that pop() hands entries out in name order
            children = sorted(children, reverse=True)
        self.pending_files.extend(children)

    def _mark_visited(self, key: Optional[str]) -> None:
        if key is not None:
            self._visited_directories.add(key)

    def _record(self, failure: FailureRecord) -> None:
        logger.debug("Recorded failure: %s", failure.describe())
        self.errors.record(failure)

    # ------------------------------------------------------------- snapshots

    def snapshot(self) -> WalkState:
        """Capture the walk so it can be resumed later, possibly elsewhere."""
        return WalkState(
            root=str(self.root),
            pending_directories=[str(p) for p in self.pending_directories],
            pending_files=[str(p) for p in self.pending_files],
            visited_directories=sorted(self._visited_directories),
            failures=list(self.errors.snapshot()),
            entries_visited=self.entries_visited,
            directories_expanded=self.directories_expanded,
            matches_yielded=self.matches_yielded,
        )

    @classmethod
    def from_state(cls, state: WalkState,
                   filesystem: Optional[FileSystem] = None,
                   sniffer: Optional[ContentSniffer] = None,
                   follow_symlinks: bool = FOLLOW_SYMLINKS,
                   sort_entries: bool = SORT_SIBLINGS) -> 'TraversalEngine':
        """Rebuild an engine from a snapshot taken with snapshot()."""
        engine = cls(state.root, filesystem=filesystem, sniffer=sniffer,
                     follow_symlinks=follow_symlinks, sort_entries=sort_entries)
        engine.pending_directories = [Path(p) for p in state.pending_directories]
        engine.pending_files = [Path(p) for p in state.pending_files]
        engine._visited_directories = set(state.visited_directories)
        engine.errors = ErrorSink(state.failures)
        engine.entries_visited = state.entries_visited
        engine.directories_expanded = state.directories_expanded
        engine.matches_yielded = state.matches_yielded
        return engine

    def __repr__(self) -> str:
        return (f"TraversalEngine(root={str(self.root)!r}, "
                f"pending_directories={len(self.pending_directories)}, "
                f"pending_files={len(self.pending_files)}, errors={len(self.errors)})")
