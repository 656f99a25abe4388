#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Filesystem access used by the traversal engine.

The engine only needs stat, list and open-for-read, so those are the only
operations here. Tests substitute an in-memory implementation.
"""

import os
import stat as stat_mod
from abc import ABC, abstractmethod
from enum import Enum
from pathlib import Path
from typing import BinaryIO, List


class StatKind(Enum):
    DIRECTORY = "directory"
    REGULAR_FILE = "regular_file"
    LINKED_DIRECTORY = "linked_directory"  # directory reached through a symlink
    OTHER = "other"


class FileSystem(ABC):
    """Capability interface consumed by the walker and the sniffer.

    Every method raises OSError on failure.
    """

    @abstractmethod
    def stat(self, path: Path) -> StatKind:
        ...

    @abstractmethod
    def list_dir(self, path: Path) -> List[Path]:
        ...

    @abstractmethod
    def open_read(self, path: Path) -> BinaryIO:
        ...

    def canonical(self, path: Path) -> str:
        """Identity used to detect directory cycles."""
        return str(path)


class LocalFileSystem(FileSystem):
    """FileSystem backed by the operating system."""

    def __init__(self, follow_symlinks: bool = False):
        self.follow_symlinks = follow_symlinks

    def stat(self, path: Path) -> StatKind:
        st = os.stat(path)  # follows links; dangling links raise here
        if stat_mod.S_ISDIR(st.st_mode):
            if not self.follow_symlinks and os.path.islink(path):
                return StatKind.LINKED_DIRECTORY
            return StatKind.DIRECTORY
        if stat_mod.S_ISREG(st.st_mode):
            return StatKind.REGULAR_FILE
        return StatKind.OTHER

    def list_dir(self, path: Path) -> List[Path]:
        with os.scandir(path) as entries:
            return [Path(entry.path) for entry in entries]

    def open_read(self, path: Path) -> BinaryIO:
        return open(path, "rb")

    def canonical(self, path: Path) -> str:
        return os.path.realpath(path)
