#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Global configuration and constants for tagwalk.
"""

import os

# Tag container signature
ID3_MARKER: bytes = b"ID3"

# Console output
MISSING_FIELD_PLACEHOLDER = "???"

# CSV export: written for NULL columns so they stay distinct from empty strings
CSV_NULL_MARKER = "\\N"

# Track numbers decoded from tags are unsigned 32-bit values
TRACK_NUMBER_MIN = 0
TRACK_NUMBER_MAX = 2**32 - 1

# SQLite INTEGER storage class is a signed 64-bit value
SQLITE_INTEGER_MIN = -(2**63)
SQLITE_INTEGER_MAX = 2**63 - 1

# Store defaults (can be overridden by env or CLI)
DEFAULT_DB_PATH = os.getenv("TAGWALK_DB", "tagwalk.db")

# Checkpoint defaults
DEFAULT_CHECKPOINT_INTERVAL = 500  # results between saves
DEFAULT_CHECKPOINT_DIR = ".checkpoints"
DEFAULT_CHECKPOINT_RETENTION_DAYS = 7

# Traversal defaults
SORT_SIBLINGS = True
FOLLOW_SYMLINKS = False
