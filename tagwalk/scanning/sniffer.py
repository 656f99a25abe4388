#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Content sniffing: decide from a file's leading bytes whether it carries an
ID3 tag container.
"""

from pathlib import Path
from typing import Optional

from ..config import ID3_MARKER
from .filesystem import FileSystem, LocalFileSystem


class ContentSniffer:
    """Matches files whose first bytes equal a fixed marker."""

    def __init__(self, filesystem: Optional[FileSystem] = None, marker: bytes = ID3_MARKER):
        self.filesystem = filesystem or LocalFileSystem()
        self.marker = marker

    def is_candidate(self, path: Path) -> bool:
        """Return True if `path` starts with the marker.

        Files shorter than the marker are simply not candidates. The bytes
        are compared raw, so content that is not valid text is a plain
        mismatch. OSError from open/read propagates to the caller.
        """
        with self.filesystem.open_read(path) as fh:
            head = self._read_head(fh, len(self.marker))
        return head == self.marker

    @staticmethod
    def _read_head(fh, size: int) -> bytes:
        # read() may legitimately return short counts; loop until EOF
        chunks = []
        remaining = size
        while remaining > 0:
            chunk = fh.read(remaining)
            if not chunk:
                break
            chunks.append(chunk)
            remaining -= len(chunk)
        return b"".join(chunks)
