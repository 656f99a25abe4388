#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Checkpoint manager for resumable indexing runs.

Checkpoint bodies are pickled to a directory; the store keeps one row per
scan in `scan_checkpoints` pointing at the file.
"""

import hashlib
import json
import logging
import pickle
from datetime import datetime
from pathlib import Path
from typing import Optional, List, Tuple

from ..config import DEFAULT_CHECKPOINT_DIR, DEFAULT_CHECKPOINT_RETENTION_DAYS
from ..database.manager import DatabaseManager
from ..models.checkpoint import ScanCheckpoint
from ..utils.path import ensure_dir
from ..utils.time import utc_cutoff_str

logger = logging.getLogger(__name__)


class CheckpointManager:
    """Manages scan checkpoints for resumability."""

    def __init__(self, db_manager: DatabaseManager, checkpoint_dir: Optional[Path] = None):
        self.db_manager = db_manager
        self.checkpoint_dir = Path(checkpoint_dir or DEFAULT_CHECKPOINT_DIR)

    def generate_scan_id(self, source_path: str) -> str:
        """Generate unique scan ID."""
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S_%f")
        path_hash = hashlib.md5(source_path.encode()).hexdigest()[:8]
        return f"scan_{timestamp}_{path_hash}"

    def save_checkpoint(self, checkpoint: ScanCheckpoint) -> Path:
        """Save checkpoint to disk and database."""
        ensure_dir(self.checkpoint_dir)
        checkpoint_file = self.checkpoint_dir / f"{checkpoint.scan_id}.pkl"

        with checkpoint_file.open('wb') as f:
            pickle.dump(checkpoint, f)

        with self.db_manager.get_connection() as conn:
            conn.execute("""
                INSERT OR REPLACE INTO scan_checkpoints
                (scan_id, source_path, stage, timestamp, processed_count,
                 config_json, checkpoint_file)
                VALUES (?, ?, ?, ?, ?, ?, ?)
            """, (
                checkpoint.scan_id, checkpoint.source_path, checkpoint.stage,
                checkpoint.timestamp, checkpoint.processed_count,
                json.dumps(checkpoint.config or {}), str(checkpoint_file)
            ))

        logger.info("Checkpoint saved: %s stage, %s items processed",
                    checkpoint.stage, f"{checkpoint.processed_count:,}")
        return checkpoint_file

    def load_checkpoint(self, scan_id: str) -> Optional[ScanCheckpoint]:
        """Load checkpoint from disk; None if unknown or unreadable."""
        row = self.db_manager.get_connection().execute("""
            SELECT checkpoint_file FROM scan_checkpoints WHERE scan_id = ?
        """, (scan_id,)).fetchone()
        if not row:
            return None

        checkpoint_file = Path(row[0])
        if not checkpoint_file.exists():
            logger.warning("Checkpoint file %s not found", checkpoint_file)
            return None

        try:
            with checkpoint_file.open('rb') as f:
                return pickle.load(f)
        except (OSError, pickle.UnpicklingError, EOFError, AttributeError) as e:
            logger.error("Error loading checkpoint %s: %s", scan_id, e)
            return None

    def list_checkpoints(self, source_path: Optional[str] = None) -> List[Tuple[str, str, str, str, int]]:
        """List available checkpoints, newest first."""
        conn = self.db_manager.get_connection()
        if source_path:
            return conn.execute("""
                SELECT scan_id, source_path, stage, timestamp, processed_count
                FROM scan_checkpoints
                WHERE source_path = ?
                ORDER BY timestamp DESC
            """, (source_path,)).fetchall()
        return conn.execute("""
            SELECT scan_id, source_path, stage, timestamp, processed_count
            FROM scan_checkpoints
            ORDER BY timestamp DESC
        """).fetchall()

    def cleanup_checkpoint(self, scan_id: str) -> None:
        """Remove one checkpoint, file and row."""
        with self.db_manager.get_connection() as conn:
            row = conn.execute("""
                SELECT checkpoint_file FROM scan_checkpoints WHERE scan_id = ?
            """, (scan_id,)).fetchone()
            if row and row[0]:
                Path(row[0]).unlink(missing_ok=True)
            conn.execute("DELETE FROM scan_checkpoints WHERE scan_id = ?", (scan_id,))

    def cleanup_old_checkpoints(self, days: int = DEFAULT_CHECKPOINT_RETENTION_DAYS) -> int:
        """Remove checkpoints older than `days`; returns how many were removed."""
        cutoff_str = utc_cutoff_str(days)

        with self.db_manager.get_connection() as conn:
            old_checkpoints = conn.execute("""
                SELECT scan_id, checkpoint_file FROM scan_checkpoints
                WHERE timestamp < ?
            """, (cutoff_str,)).fetchall()

            for scan_id, checkpoint_file in old_checkpoints:
                if checkpoint_file:
                    try:
                        Path(checkpoint_file).unlink(missing_ok=True)
                    except OSError as e:
                        logger.warning("Could not remove checkpoint file %s: %s", checkpoint_file, e)

            conn.execute("DELETE FROM scan_checkpoints WHERE timestamp < ?", (cutoff_str,))

        logger.info("Cleaned up %d old checkpoints", len(old_checkpoints))
        return len(old_checkpoints)
