#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Export stored tracks to CSV.
"""

import csv
from pathlib import Path

from ..config import CSV_NULL_MARKER
from ..database.manager import DatabaseManager
from ..database.schema import TRACK_COLUMNS
from ..jsonio import success
from ..utils.path import ensure_dir


def cmd_export_tracks(db_manager: DatabaseManager, out_path: Path, as_json: bool = False,
                      null_marker: str = CSV_NULL_MARKER):
    """Write every tracks row to `out_path`.

    NULL columns are written as `null_marker` and empty strings as empty
    cells, so an absent tag field can be told apart from an empty one.
    """
    rows = db_manager.get_connection().execute(f"""
        SELECT {', '.join(TRACK_COLUMNS)}
        FROM tracks
        ORDER BY path, track_id
    """).fetchall()

    out_path = Path(out_path)
    ensure_dir(out_path.parent)

    with out_path.open('w', newline='', encoding='utf-8') as f:
        writer = csv.writer(f)
        writer.writerow(TRACK_COLUMNS)
        for row in rows:
            writer.writerow([null_marker if value is None else value for value in row])

    if as_json:
        return success("export", {
            "output_file": str(out_path),
            "records_exported": len(rows),
            "null_marker": null_marker,
        })

    print(f"Exported {len(rows):,} tracks to {out_path}")
    return 0
