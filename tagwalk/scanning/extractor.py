#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Tag extraction for qualifying files, using mutagen's ID3 reader.
"""

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

from mutagen import MutagenError
from mutagen.id3 import ID3

from ..config import TRACK_NUMBER_MAX, TRACK_NUMBER_MIN
from ..errors import DecodeError
from ..models.track import TagRecord

logger = logging.getLogger(__name__)

# TagRecord field -> ID3v2 frame id
ID3_TEXT_FRAMES = {
    "title": "TIT2",
    "artist": "TPE1",
    "album": "TALB",
}
ID3_GENRE_FRAME = "TCON"
ID3_TRACK_FRAME = "TRCK"


class TagDecoder(ABC):
    """Turns a file path into a TagRecord or raises DecodeError."""

    @abstractmethod
    def decode(self, path: Path) -> TagRecord:
        ...


def parse_track_number(path: Path, text: Optional[str]) -> Optional[int]:
    """Parse a TRCK value such as "7" or "7/12".

    Non-numeric values are treated as absent. Numbers outside the track
    number range raise DecodeError rather than being clamped.
    """
    if text is None:
        return None
    number = text.split("/", 1)[0].strip()
    if not number:
        return None
    try:
        value = int(number)
    except ValueError:
        logger.debug("Ignoring non-numeric track number %r in %s", text, path)
        return None
    if not TRACK_NUMBER_MIN <= value <= TRACK_NUMBER_MAX:
        raise DecodeError(path, f"track number {value} out of range "
                                f"[{TRACK_NUMBER_MIN}, {TRACK_NUMBER_MAX}]")
    return value


class Id3TagExtractor(TagDecoder):
    """Reads ID3v2 frames with mutagen. The file is closed when decode() returns."""

    def decode(self, path: Path) -> TagRecord:
        try:
            tags = ID3(str(path))
        except (MutagenError, OSError, ValueError) as e:
            raise DecodeError(path, f"cannot read ID3 tag: {e}", cause=e) from e

        fields = {name: self._first_text(tags, frame_id)
                  for name, frame_id in ID3_TEXT_FRAMES.items()}
        fields["genre"] = self._genre(tags)
        fields["track_number"] = parse_track_number(path, self._first_text(tags, ID3_TRACK_FRAME))
        return TagRecord(**fields)

    @staticmethod
    def _first_text(tags: ID3, frame_id: str) -> Optional[str]:
        frame = tags.get(frame_id)
        if frame is None:
            return None
        texts = getattr(frame, "text", None)
        if not texts:
            return None
        return str(texts[0])

    @staticmethod
    def _genre(tags: ID3) -> Optional[str]:
        frame = tags.get(ID3_GENRE_FRAME)
        if frame is None:
            return None
        # .genres resolves ID3v1 style references like "(17)" to names
        genres = frame.genres
        if genres:
            return str(genres[0])
        texts = frame.text
        return str(texts[0]) if texts else None
