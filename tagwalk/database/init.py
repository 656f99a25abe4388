#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Store bootstrap: open a SQLite database and make sure its schema exists.
"""

import sqlite3
from pathlib import Path
from typing import Union

from ..errors import PersistenceError
from .schema import TRACKS_SCHEMA, CHECKPOINT_SCHEMA

IN_MEMORY = ":memory:"


def open_connection(db_path: Union[str, Path]) -> sqlite3.Connection:
    """Connect and apply the pragmas every connection uses."""
    try:
        conn = sqlite3.connect(str(db_path))
        conn.execute("PRAGMA foreign_keys=ON;")
        if str(db_path) != IN_MEMORY:
            conn.execute("PRAGMA journal_mode=WAL;")
            conn.execute("PRAGMA synchronous=NORMAL;")
    except sqlite3.Error as e:
        raise PersistenceError(f"Cannot open database {db_path}: {e}", path=db_path, cause=e) from e
    return conn


def ensure_schema(conn: sqlite3.Connection) -> None:
    """Create tables and indexes if absent. Safe to call repeatedly."""
    try:
        conn.executescript(TRACKS_SCHEMA)
        conn.executescript(CHECKPOINT_SCHEMA)
        conn.commit()
    except sqlite3.Error as e:
        raise PersistenceError(f"Cannot create schema: {e}", cause=e) from e
