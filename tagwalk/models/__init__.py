"""Data models for tagwalk."""

from .failure import FailureKind, FailureRecord
from .entry import EntryKind, EntryClassification
from .track import TagRecord, PersistedRow
from .checkpoint import ScanCheckpoint, WalkState

__all__ = [
    'FailureKind', 'FailureRecord',
    'EntryKind', 'EntryClassification',
    'TagRecord', 'PersistedRow',
    'ScanCheckpoint', 'WalkState',
]
