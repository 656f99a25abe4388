#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Database schema definitions for tagwalk.

Every statement is IF NOT EXISTS so applying the schema to a store that
already has it is a no-op.
"""

# Decoded tags, one row per qualifying file
TRACKS_SCHEMA = """
CREATE TABLE IF NOT EXISTS tracks (
    track_id INTEGER PRIMARY KEY AUTOINCREMENT,
    path TEXT NOT NULL,
    title TEXT,
    number INTEGER,
    artist TEXT,
    album TEXT,
    genre TEXT
);

CREATE INDEX IF NOT EXISTS idx_tracks_path ON tracks(path);
CREATE INDEX IF NOT EXISTS idx_tracks_artist ON tracks(artist);
"""

# Checkpoint schema
CHECKPOINT_SCHEMA = """
CREATE TABLE IF NOT EXISTS scan_checkpoints (
    scan_id TEXT PRIMARY KEY,
    source_path TEXT NOT NULL,
    stage TEXT NOT NULL,
    timestamp TEXT NOT NULL,
    processed_count INTEGER DEFAULT 0,
    config_json TEXT,
    checkpoint_file TEXT
);

CREATE INDEX IF NOT EXISTS idx_checkpoints_stage ON scan_checkpoints(stage);
CREATE INDEX IF NOT EXISTS idx_checkpoints_timestamp ON scan_checkpoints(timestamp);
"""

TRACK_COLUMNS = ("track_id", "path", "title", "number", "artist", "album", "genre")
