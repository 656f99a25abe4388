#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Exception types for tagwalk.

Per-entry problems found while walking never escape as exceptions; they are
turned into FailureRecords. These exceptions cross component boundaries
(decoder -> scanner, store -> scanner) or abort a run outright.
"""

from pathlib import Path
from typing import Optional, Union


class TagwalkError(Exception):
    """Base class for all tagwalk errors."""


class DecodeError(TagwalkError):
    """Tags in a file could not be decoded, or hold an out-of-range value."""

    def __init__(self, path: Union[str, Path], message: str,
                 cause: Optional[BaseException] = None):
        super().__init__(f"{path}: {message}")
        self.path = str(path)
        self.message = message
        self.cause = cause


class PersistenceError(TagwalkError):
    """The relational store rejected an operation."""

    def __init__(self, message: str, path: Optional[Union[str, Path]] = None,
                 cause: Optional[BaseException] = None):
        super().__init__(message)
        self.path = str(path) if path is not None else None
        self.message = message
        self.cause = cause


class RunSetupError(TagwalkError):
    """A run could not be started (missing root, unusable store)."""
