#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Path helpers.
"""

from pathlib import Path


def ensure_dir(p: Path) -> None:
    """Create directory `p` (and parents) if missing."""
    Path(p).mkdir(parents=True, exist_ok=True)


def shorten(path: str, width: int) -> str:
    """Left-truncate a path for fixed-width tables."""
    if len(path) <= width:
        return path
    return "..." + path[-(width - 3):]
