#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Result sinks: where decoded tags go once a file has been read.
"""

import sys
from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional, TextIO, Tuple

from ..config import MISSING_FIELD_PLACEHOLDER
from ..database.manager import DatabaseManager
from ..models.track import PersistedRow, TagRecord


class ResultSink(ABC):
    """Receives one (path, TagRecord) pair per qualifying file.

    accept() may raise DecodeError or PersistenceError; the scanner records
    those and moves on to the next file.
    """

    @abstractmethod
    def accept(self, path: Path, record: TagRecord) -> Optional[PersistedRow]:
        ...


def format_console_line(record: TagRecord, placeholder: str = MISSING_FIELD_PLACEHOLDER) -> str:
    """"artist - album - title" with a placeholder for absent fields."""
    def show(value: Optional[str]) -> str:
        return placeholder if value is None else value
    return f"{show(record.artist)} - {show(record.album)} - {show(record.title)}"


class ConsoleSink(ResultSink):
    """Prints one line per file."""

    def __init__(self, stream: Optional[TextIO] = None,
                 placeholder: str = MISSING_FIELD_PLACEHOLDER):
        self.stream = stream
        self.placeholder = placeholder

    def accept(self, path: Path, record: TagRecord) -> None:
        print(format_console_line(record, self.placeholder), file=self.stream or sys.stdout)
        return None


class CollectingSink(ResultSink):
    """Keeps results in memory, for JSON output."""

    def __init__(self):
        self.results: List[Tuple[Path, TagRecord]] = []

    def accept(self, path: Path, record: TagRecord) -> None:
        self.results.append((path, record))
        return None


class PersistenceAdapter(ResultSink):
    """Writes one tracks row per file, without batching."""

    def __init__(self, db_manager: DatabaseManager):
        self.db_manager = db_manager
        self.rows: List[PersistedRow] = []

    def accept(self, path: Path, record: TagRecord) -> PersistedRow:
        row = self.db_manager.insert_track(path, record)
        self.rows.append(row)
        return row
