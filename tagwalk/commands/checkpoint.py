#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Checkpoint command implementations.
"""

from pathlib import Path
from typing import Optional

from ..checkpoint.manager import CheckpointManager
from ..config import DEFAULT_CHECKPOINT_RETENTION_DAYS
from ..database.manager import DatabaseManager
from ..jsonio import success, error
from ..utils.path import shorten


def cmd_list_checkpoints(db_manager: DatabaseManager, source_path: Optional[str] = None,
                         as_json: bool = False, checkpoint_dir: Optional[Path] = None):
    """List available checkpoints."""
    checkpoint_manager = CheckpointManager(db_manager, checkpoint_dir)
    checkpoints = checkpoint_manager.list_checkpoints(source_path)

    if as_json:
        return success("list-checkpoints", {
            "checkpoints": [{
                "scan_id": scan_id,
                "source_path": source,
                "stage": stage,
                "timestamp": timestamp,
                "processed_count": processed_count,
            } for scan_id, source, stage, timestamp, processed_count in checkpoints],
            "total_count": len(checkpoints),
            "source_filter": source_path,
        })

    if not checkpoints:
        print("No checkpoints found.")
        return 0

    print("Available checkpoints:")
    print(f"{'Scan ID':<40} {'Source Path':<40} {'Stage':<10} {'Timestamp':<22} {'Items':<10}")
    print("-" * 124)
    for scan_id, source, stage, timestamp, processed_count in checkpoints:
        print(f"{scan_id:<40} {shorten(source, 37):<40} {stage:<10} {timestamp:<22} {processed_count:<10,}")
    return 0


def cmd_cleanup_checkpoints(db_manager: DatabaseManager, days: int = DEFAULT_CHECKPOINT_RETENTION_DAYS,
                            scan_id: Optional[str] = None, as_json: bool = False,
                            checkpoint_dir: Optional[Path] = None):
    """Clean up one checkpoint, or all older than `days`."""
    checkpoint_manager = CheckpointManager(db_manager, checkpoint_dir)

    if scan_id:
        known = {row[0] for row in checkpoint_manager.list_checkpoints()}
        if scan_id not in known:
            if as_json:
                return error("cleanup-checkpoints", f"Checkpoint {scan_id} not found")
            print(f"Checkpoint {scan_id} not found.")
            return 1

        checkpoint_manager.cleanup_checkpoint(scan_id)
        if as_json:
            return success("cleanup-checkpoints", {
                "mode": "single",
                "scan_id": scan_id,
                "message": f"Cleaned up checkpoint: {scan_id}",
            })
        print(f"Cleaned up checkpoint: {scan_id}")
        return 0

    cleaned_count = checkpoint_manager.cleanup_old_checkpoints(days)
    remaining = checkpoint_manager.list_checkpoints()

    if as_json:
        return success("cleanup-checkpoints", {
            "mode": "bulk",
            "days": days,
            "cleaned_count": cleaned_count,
            "remaining_count": len(remaining),
            "message": f"Cleaned up {cleaned_count} checkpoints older than {days} days",
        })
    print(f"Cleaned up {cleaned_count} checkpoints older than {days} days")
    return 0


def cmd_checkpoint_info(db_manager: DatabaseManager, scan_id: str, as_json: bool = False,
                        checkpoint_dir: Optional[Path] = None):
    """Show detailed checkpoint information."""
    checkpoint_manager = CheckpointManager(db_manager, checkpoint_dir)
    checkpoint = checkpoint_manager.load_checkpoint(scan_id)

    if not checkpoint:
        if as_json:
            return error("checkpoint-info", f"Checkpoint {scan_id} not found")
        print(f"Checkpoint {scan_id} not found.")
        return 1

    state = checkpoint.walk_state
    if as_json:
        return success("checkpoint-info", {
            "scan_id": checkpoint.scan_id,
            "source_path": checkpoint.source_path,
            "stage": checkpoint.stage,
            "timestamp": checkpoint.timestamp,
            "processed_count": checkpoint.processed_count,
            "pending_directories": len(state.pending_directories) if state else 0,
            "pending_files": len(state.pending_files) if state else 0,
            "failures": len(state.failures) if state else 0,
            "config": checkpoint.config or {},
        })

    print(f"=== Checkpoint: {scan_id} ===")
    print(f"Source: {checkpoint.source_path}")
    print(f"Stage: {checkpoint.stage}")
    print(f"Timestamp: {checkpoint.timestamp}")
    print(f"Processed: {checkpoint.processed_count:,} files")

    if state:
        print(f"Pending directories: {len(state.pending_directories):,}")
        print(f"Pending entries: {len(state.pending_files):,}")
        print(f"Entries visited: {state.entries_visited:,}")
        print(f"Failures so far: {len(state.failures):,}")

    if checkpoint.config:
        print("\nConfiguration:")
        for key, value in checkpoint.config.items():
            print(f"  {key}: {value}")
    return 0
