#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Tests for the SQLite store and the tag-to-row mapping.
"""

import pytest

from tagwalk.config import SQLITE_INTEGER_MAX
from tagwalk.database.init import ensure_schema
from tagwalk.database.manager import DatabaseManager, track_to_row
from tagwalk.errors import DecodeError, PersistenceError
from tagwalk.models.track import TagRecord
from tagwalk.scanning.sinks import PersistenceAdapter

FULL = TagRecord(title="So What", artist="Miles Davis", album="Kind of Blue",
                 genre="Jazz", track_number=1)


def _schema(conn):
    return sorted(conn.execute(
        "SELECT type, name, sql FROM sqlite_master WHERE name NOT LIKE 'sqlite_%'"
    ).fetchall())


class TestSchema:

    def test_ensure_schema_is_idempotent(self, db):
        before = _schema(db.get_connection())
        db.ensure_schema()
        ensure_schema(db.get_connection())

        assert _schema(db.get_connection()) == before

    def test_tracks_columns(self, db):
        columns = [row[1] for row in db.get_connection().execute("PRAGMA table_info(tracks)")]
        assert columns == ["track_id", "path", "title", "number", "artist", "album", "genre"]

    def test_reopening_existing_file(self, tmp_path):
        path = tmp_path / "store.db"
        first = DatabaseManager(path)
        first.insert_track("/a.mp3", FULL)
        first.close()

        second = DatabaseManager(path)
        try:
            assert second.count_tracks() == 1
        finally:
            second.close()

    def test_unopenable_store_is_persistence_error(self, tmp_path):
        with pytest.raises(PersistenceError):
            DatabaseManager(tmp_path / "no" / "such" / "dir" / "store.db")


class TestInsert:

    def test_round_trip_all_fields(self, db):
        row = db.insert_track("/music/so_what.mp3", FULL)

        stored = db.get_track(row.track_id)
        assert stored == row
        assert stored.tags == FULL
        assert stored.source_path == "/music/so_what.mp3"

    def test_all_fields_absent_become_null(self, db):
        row = db.insert_track("/music/bare.mp3", TagRecord())

        raw = db.get_connection().execute(
            "SELECT title, number, artist, album, genre FROM tracks WHERE track_id = ?",
            (row.track_id,)).fetchone()
        assert raw == (None, None, None, None, None)
        assert db.get_track(row.track_id).tags == TagRecord()

    def test_empty_string_is_not_absent(self, db):
        row = db.insert_track("/music/blank.mp3", TagRecord(title="", artist=None))

        stored = db.get_track(row.track_id)
        assert stored.title == ""
        assert stored.artist is None

    def test_identical_tags_get_distinct_ids(self, db):
        first = db.insert_track("/music/a.mp3", FULL)
        second = db.insert_track("/music/b.mp3", FULL)

        assert first.track_id != second.track_id
        assert db.count_tracks() == 2
        assert [r.source_path for r in db.list_tracks()] == ["/music/a.mp3", "/music/b.mp3"]

    def test_ids_are_not_reused_after_delete(self, db):
        first = db.insert_track("/music/a.mp3", FULL)
        with db.get_connection() as conn:
            conn.execute("DELETE FROM tracks WHERE track_id = ?", (first.track_id,))

        second = db.insert_track("/music/a.mp3", FULL)
        assert second.track_id > first.track_id

    def test_largest_integer_is_stored_exactly(self, db):
        row = db.insert_track("/x.mp3", TagRecord(track_number=SQLITE_INTEGER_MAX))
        assert db.get_track(row.track_id).track_number == SQLITE_INTEGER_MAX

    def test_too_wide_track_number_is_decode_error(self, db):
        with pytest.raises(DecodeError):
            db.insert_track("/x.mp3", TagRecord(track_number=SQLITE_INTEGER_MAX + 1))
        assert db.count_tracks() == 0

    def test_rejected_write_is_persistence_error(self, db):
        with db.get_connection() as conn:
            conn.execute("DROP TABLE tracks")

        with pytest.raises(PersistenceError) as info:
            db.insert_track("/x.mp3", FULL)
        assert info.value.path == "/x.mp3"


class TestMapping:

    def test_track_to_row_order(self):
        assert track_to_row("/p.mp3", FULL) == (
            "/p.mp3", "So What", 1, "Miles Davis", "Kind of Blue", "Jazz")

    def test_persistence_adapter_collects_rows(self, db):
        adapter = PersistenceAdapter(db)
        row = adapter.accept("/p.mp3", FULL)

        assert adapter.rows == [row]
        assert row.track_id == db.list_tracks()[0].track_id
