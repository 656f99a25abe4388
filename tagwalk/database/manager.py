# tagwalk/database/manager.py
import logging
import sqlite3
from pathlib import Path
from typing import List, Optional, Tuple, Any, Union

from ..config import SQLITE_INTEGER_MAX, SQLITE_INTEGER_MIN
from ..errors import DecodeError, PersistenceError
from ..models.track import PersistedRow, TagRecord
from .init import ensure_schema, open_connection

logger = logging.getLogger(__name__)


def track_to_row(source_path: Union[str, Path], record: TagRecord) -> Tuple[Any, ...]:
    """Map a TagRecord onto the tracks columns (path, title, number, artist, album, genre).

    Absent fields become NULL. A track number that does not fit SQLite's
    INTEGER is rejected as a DecodeError instead of being narrowed.
    """
    number = record.track_number
    if number is not None and not SQLITE_INTEGER_MIN <= number <= SQLITE_INTEGER_MAX:
        raise DecodeError(source_path, f"track number {number} does not fit a 64-bit integer column")
    return (
        str(source_path),   # path
        record.title,       # title
        number,             # number
        record.artist,      # artist
        record.album,       # album
        record.genre,       # genre
    )


def row_to_track(row: Tuple[Any, ...]) -> PersistedRow:
    track_id, path, title, number, artist, album, genre = row
    return PersistedRow(
        track_id=int(track_id),
        source_path=path,
        tags=TagRecord(title=title, artist=artist, album=album, genre=genre, track_number=number),
    )


class DatabaseManager:
    """Manages the SQLite store: schema, track rows, and the raw connection."""

    def __init__(self, db_path: Union[str, Path]):
        self.db_path = db_path if str(db_path) == ":memory:" else Path(db_path)
        self.conn = open_connection(self.db_path)
        self.ensure_schema()

    def get_connection(self) -> sqlite3.Connection:
        return self.conn

    def ensure_schema(self) -> None:
        ensure_schema(self.conn)

    def close(self) -> None:
        try:
            self.conn.close()
        except sqlite3.Error as e:
            logger.warning("Error closing database %s: %s", self.db_path, e)

    def insert_track(self, source_path: Union[str, Path], record: TagRecord) -> PersistedRow:
        """Insert one row and return it with the store-assigned track_id.

        Raises DecodeError for values the column types cannot hold and
        PersistenceError if SQLite rejects the write.
        """
        row = track_to_row(source_path, record)
        try:
            with self.get_connection() as conn:
                cursor = conn.execute("""
                    INSERT INTO tracks (path, title, number, artist, album, genre)
                    VALUES (?, ?, ?, ?, ?, ?)
                """, row)
                track_id = cursor.lastrowid
        except sqlite3.Error as e:
            raise PersistenceError(f"Insert rejected: {e}", path=source_path, cause=e) from e

        logger.debug("Inserted track %d for %s", track_id, source_path)
        return PersistedRow(track_id=int(track_id), source_path=str(source_path), tags=record)

    def get_track(self, track_id: int) -> Optional[PersistedRow]:
        row = self.conn.execute("""
            SELECT track_id, path, title, number, artist, album, genre
            FROM tracks WHERE track_id = ?
        """, (track_id,)).fetchone()
        return row_to_track(row) if row else None

    def list_tracks(self) -> List[PersistedRow]:
        rows = self.conn.execute("""
            SELECT track_id, path, title, number, artist, album, genre
            FROM tracks ORDER BY track_id
        """).fetchall()
        return [row_to_track(r) for r in rows]

    def count_tracks(self) -> int:
        return int(self.conn.execute("SELECT COUNT(*) FROM tracks").fetchone()[0])
