#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Data structures for decoded tags and stored track rows.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class TagRecord:
    """Decoded metadata for one file. None means the field is absent."""
    title: Optional[str] = None
    artist: Optional[str] = None
    album: Optional[str] = None
    genre: Optional[str] = None
    track_number: Optional[int] = None


@dataclass(frozen=True)
class PersistedRow:
    """A row as written to the tracks table."""
    track_id: int
    source_path: str
    tags: TagRecord

    @property
    def title(self) -> Optional[str]:
        return self.tags.title

    @property
    def artist(self) -> Optional[str]:
        return self.tags.artist

    @property
    def album(self) -> Optional[str]:
        return self.tags.album

    @property
    def genre(self) -> Optional[str]:
        return self.tags.genre

    @property
    def track_number(self) -> Optional[int]:
        return self.tags.track_number
