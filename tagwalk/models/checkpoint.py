#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Data structures for walk state and checkpoints.
"""

from dataclasses import dataclass, asdict, field
from typing import Optional, List, Dict, Any

from .failure import FailureRecord, FailureKind


@dataclass
class WalkState:
    """Everything a TraversalEngine needs to continue where it stopped."""
    root: str
    pending_directories: List[str] = field(default_factory=list)
    pending_files: List[str] = field(default_factory=list)
    visited_directories: List[str] = field(default_factory=list)
    failures: List[FailureRecord] = field(default_factory=list)
    entries_visited: int = 0
    directories_expanded: int = 0
    matches_yielded: int = 0

    @property
    def exhausted(self) -> bool:
        return not self.pending_directories and not self.pending_files


@dataclass
class ScanCheckpoint:
    """Checkpoint data structure for resuming indexing runs."""
    scan_id: str
    source_path: str
    stage: str  # 'walking', 'completed'
    timestamp: str

    walk_state: Optional[WalkState] = None
    processed_count: int = 0

    # Configuration
    config: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert checkpoint to dictionary for serialization."""
        data = asdict(self)
        if self.walk_state is not None:
            data["walk_state"]["failures"] = [f.to_dict() for f in self.walk_state.failures]
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ScanCheckpoint':
        """Create checkpoint from dictionary."""
        data = dict(data)
        state = data.get("walk_state")
        if state is not None:
            state = dict(state)
            state["failures"] = [
                FailureRecord(**{**f, "kind": FailureKind(f["kind"])})
                for f in state.get("failures", [])
            ]
            data["walk_state"] = WalkState(**state)
        return cls(**data)
