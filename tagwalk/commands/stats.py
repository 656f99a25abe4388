#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Statistics command for the tracks store.

- Human output is printed to stdout.
- as_json=True writes the standard JSON success envelope to stdout instead.
"""

import logging
from typing import Dict, Any

from ..database.manager import DatabaseManager
from ..jsonio import success

TOP_N = 10


def cmd_show_stats(
    db_manager: DatabaseManager,
    detailed: bool = False,
    as_json: bool = False,
) -> Dict[str, Any]:
    """Show database statistics.

    Args:
        db_manager: DatabaseManager instance.
        detailed: If True, include per-genre and per-artist breakdowns.
        as_json: If True, emit a JSON success envelope to stdout instead.

    Returns:
        A dict of computed statistics (returned regardless of output mode).
    """
    logger = logging.getLogger(__name__)
    conn = db_manager.get_connection()

    totals = conn.execute(
        """
        SELECT
            COUNT(*) AS tracks,
            COUNT(DISTINCT artist) AS artists,
            COUNT(DISTINCT album) AS albums,
            COUNT(DISTINCT genre) AS genres,
            COUNT(DISTINCT path) AS paths
        FROM tracks
        """
    ).fetchone()

    # NULL columns are fields absent from the tag
    missing = conn.execute(
        """
        SELECT
            SUM(CASE WHEN title IS NULL THEN 1 ELSE 0 END),
            SUM(CASE WHEN artist IS NULL THEN 1 ELSE 0 END),
            SUM(CASE WHEN album IS NULL THEN 1 ELSE 0 END),
            SUM(CASE WHEN genre IS NULL THEN 1 ELSE 0 END),
            SUM(CASE WHEN number IS NULL THEN 1 ELSE 0 END)
        FROM tracks
        """
    ).fetchone()

    results: Dict[str, Any] = {
        "counts": {
            "tracks": int(totals[0] or 0),
            "artists": int(totals[1] or 0),
            "albums": int(totals[2] or 0),
            "genres": int(totals[3] or 0),
            "paths": int(totals[4] or 0),
        },
        "missing_fields": {
            "title": int(missing[0] or 0),
            "artist": int(missing[1] or 0),
            "album": int(missing[2] or 0),
            "genre": int(missing[3] or 0),
            "number": int(missing[4] or 0),
        },
    }

    if detailed or as_json:
        genre_rows = conn.execute(
            "SELECT genre, COUNT(*) FROM tracks GROUP BY genre ORDER BY COUNT(*) DESC, genre"
        ).fetchall()
        results["genres"] = {row[0] if row[0] is not None else "unknown": row[1] for row in genre_rows}

        artist_rows = conn.execute(
            """
            SELECT artist, COUNT(*) AS track_count, COUNT(DISTINCT album) AS album_count
            FROM tracks
            WHERE artist IS NOT NULL
            GROUP BY artist
            ORDER BY track_count DESC, artist
            LIMIT ?
            """,
            (TOP_N,),
        ).fetchall()
        results["top_artists"] = [
            {"artist": artist, "tracks": int(count), "albums": int(albums)}
            for artist, count, albums in artist_rows
        ]

    if as_json:
        success("stats", results)
    else:
        counts = results["counts"]
        print("=== Database Statistics ===")
        print(f"Tracks: {counts['tracks']:,}")
        print(f"Artists: {counts['artists']:,}")
        print(f"Albums: {counts['albums']:,}")
        print(f"Genres: {counts['genres']:,}")

        print("Missing fields:")
        for name, count in results["missing_fields"].items():
            print(f"  {name}: {count:,}")

        if detailed:
            print("=== Detailed Breakdown ===")
            print("Genres:")
            for genre, count in results.get("genres", {}).items():
                print(f"  {genre}: {count:,}")

            print("Top artists:")
            for a in results.get("top_artists", []):
                print(f"  {a['artist']}: {a['tracks']:,} tracks, {a['albums']} albums")

    logger.debug("Computed stats for %s tracks", results["counts"]["tracks"])
    return results
