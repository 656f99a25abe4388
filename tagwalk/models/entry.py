#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Classification of a single filesystem entry during a walk.
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

from .failure import FailureRecord


class EntryKind(Enum):
    DIRECTORY = "directory"
    QUALIFYING_FILE = "qualifying_file"
    NON_QUALIFYING_FILE = "non_qualifying_file"
    UNREADABLE = "unreadable"


@dataclass(frozen=True)
class EntryClassification:
    """Result of inspecting one entry. `failure` is set only for UNREADABLE."""
    kind: EntryKind
    path: Path
    failure: Optional[FailureRecord] = None

    @classmethod
    def directory(cls, path: Path) -> 'EntryClassification':
        return cls(EntryKind.DIRECTORY, path)

    @classmethod
    def qualifying(cls, path: Path) -> 'EntryClassification':
        return cls(EntryKind.QUALIFYING_FILE, path)

    @classmethod
    def non_qualifying(cls, path: Path) -> 'EntryClassification':
        return cls(EntryKind.NON_QUALIFYING_FILE, path)

    @classmethod
    def unreadable(cls, path: Path, failure: FailureRecord) -> 'EntryClassification':
        return cls(EntryKind.UNREADABLE, path, failure)
