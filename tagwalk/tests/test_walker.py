#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Tests for the pull-based TraversalEngine.
"""

import os
import sys
from pathlib import Path

import pytest

from tagwalk.models.entry import EntryKind
from tagwalk.models.failure import FailureKind
from tagwalk.scanning.walker import TraversalEngine
from tagwalk.tests.fixtures.library_setup import MemoryFileSystem, write_file

TAGGED = b"ID3\x04\x00\x00\x00\x00\x00\x00payload"
ROOT = Path("/music")


def music(*parts) -> Path:
    return ROOT.joinpath(*parts)


class InterruptOnceFileSystem(MemoryFileSystem):
    """Raises KeyboardInterrupt the first time `operation` is called on `target`."""

    def __init__(self, tree, operation, target, **kwargs):
        super().__init__(tree, **kwargs)
        self.operation = operation
        self.target = Path(target)
        self.fired = False

    def _maybe_interrupt(self, operation, path):
        if not self.fired and operation == self.operation and Path(path) == self.target:
            self.fired = True
            raise KeyboardInterrupt

    def stat(self, path):
        self._maybe_interrupt("stat", path)
        return super().stat(path)

    def list_dir(self, path):
        self._maybe_interrupt("list_dir", path)
        return super().list_dir(path)

    def open_read(self, path):
        self._maybe_interrupt("open_read", path)
        return super().open_read(path)


class TestScenarios:
    """End-to-end walks over small trees."""

    def test_tagged_file_next_to_text_file(self, tmp_path):
        """Only the file starting with ID3 is yielded."""
        song = write_file(tmp_path / "song.mp3", TAGGED)
        write_file(tmp_path / "notes.txt", b"hello")

        engine = TraversalEngine(tmp_path)

        assert list(engine) == [song]
        assert len(engine.errors) == 0

    def test_unlistable_directory_is_recorded_once(self):
        """A locked directory costs its subtree but not its siblings."""
        fs = MemoryFileSystem(
            {"locked": {"hidden.mp3": TAGGED}, "track.mp3": TAGGED},
            unlistable=["/music/locked"],
        )
        engine = TraversalEngine(ROOT, filesystem=fs)

        assert list(engine) == [music("track.mp3")]
        failures = engine.errors.snapshot()
        assert len(failures) == 1
        assert failures[0].kind == FailureKind.IO
        assert failures[0].operation == "list"
        assert failures[0].path == str(music("locked"))
        assert failures[0].error_type == "PermissionError"

    def test_empty_file_is_not_a_failure(self, tmp_path):
        write_file(tmp_path / "empty.mp3", b"")

        engine = TraversalEngine(tmp_path)

        assert list(engine) == []
        assert len(engine.errors) == 0

    @pytest.mark.parametrize("content", [b"", b"I", b"ID"])
    def test_short_files_are_non_qualifying(self, content):
        fs = MemoryFileSystem({"short.mp3": content})
        engine = TraversalEngine(ROOT, filesystem=fs)

        assert engine.classify(music("short.mp3")).kind is EntryKind.NON_QUALIFYING_FILE
        assert engine.next_match() is None
        assert not engine.errors

    def test_non_text_leading_bytes_are_a_plain_mismatch(self):
        fs = MemoryFileSystem({"noise.bin": b"\xff\xfe\xfd\x00", "ok.mp3": TAGGED})
        engine = TraversalEngine(ROOT, filesystem=fs)

        assert list(engine) == [music("ok.mp3")]
        assert not engine.errors

    def test_marker_must_be_at_offset_zero(self):
        fs = MemoryFileSystem({"late.mp3": b"xID3", "lower.mp3": b"id3 tag"})
        assert list(TraversalEngine(ROOT, filesystem=fs)) == []


class TestFailureAccumulation:
    """Per-entry failures are recorded and the walk carries on."""

    def test_unopenable_file_records_io_failure(self):
        fs = MemoryFileSystem(
            {"a.mp3": TAGGED, "b.mp3": TAGGED, "c.mp3": TAGGED},
            unopenable=["/music/b.mp3"],
        )
        engine = TraversalEngine(ROOT, filesystem=fs)

        assert list(engine) == [music("a.mp3"), music("c.mp3")]
        (failure,) = engine.errors.snapshot()
        assert failure.kind == FailureKind.IO
        assert failure.operation == "read"
        assert failure.path == str(music("b.mp3"))

    def test_vanished_entry_records_stat_failure(self):
        fs = MemoryFileSystem({"gone.mp3": TAGGED, "here.mp3": TAGGED},
                              unstatable=["/music/gone.mp3"])
        engine = TraversalEngine(ROOT, filesystem=fs)

        assert list(engine) == [music("here.mp3")]
        (failure,) = engine.errors.snapshot()
        assert failure.operation == "stat"
        assert failure.error_type == "FileNotFoundError"

    def test_several_failures_in_different_subtrees(self):
        fs = MemoryFileSystem(
            {
                "x": {"locked": {"a.mp3": TAGGED}, "ok.mp3": TAGGED},
                "y": {"broken.mp3": TAGGED, "fine.mp3": TAGGED},
            },
            unlistable=["/music/x/locked"],
            unopenable=["/music/y/broken.mp3"],
        )
        engine = TraversalEngine(ROOT, filesystem=fs)

        assert set(engine) == {music("x", "ok.mp3"), music("y", "fine.mp3")}
        assert {f.path for f in engine.errors} == {str(music("x", "locked")),
                                                   str(music("y", "broken.mp3"))}

    def test_unlistable_root_yields_nothing(self):
        fs = MemoryFileSystem({"a.mp3": TAGGED}, unlistable=["/music"])
        engine = TraversalEngine(ROOT, filesystem=fs)

        assert engine.next_match() is None
        assert len(engine.errors) == 1

    def test_errors_are_readable_mid_walk(self):
        fs = MemoryFileSystem({"a": {}, "b.mp3": TAGGED, "c.mp3": TAGGED},
                              unlistable=["/music/a"])
        engine = TraversalEngine(ROOT, filesystem=fs)

        assert engine.next_match() == music("b.mp3")
        assert len(engine.errors) == 0
        assert engine.next_match() == music("c.mp3")
        assert engine.next_match() is None
        assert len(engine.errors) == 1

    def test_file_handles_are_released(self):
        fs = MemoryFileSystem({
            "empty.mp3": b"",
            "short.mp3": b"ID",
            "text.txt": b"hello world",
            "tagged.mp3": TAGGED,
            "sub": {"more.mp3": TAGGED},
        })
        engine = TraversalEngine(ROOT, filesystem=fs)

        for _ in engine:
            assert fs.open_handles == 0
        assert fs.open_handles == 0

    def test_other_entries_are_skipped_silently(self):
        fs = MemoryFileSystem({"a.mp3": TAGGED}, others=["/music/pipe"])
        fs.directories[ROOT].append(music("pipe"))
        engine = TraversalEngine(ROOT, filesystem=fs)

        assert list(engine) == [music("a.mp3")]
        assert not engine.errors


class TestTraversalOrder:
    """Ordering, laziness, and exact coverage."""

    TREE = {
        "a": {"1.mp3": TAGGED, "b": {"2.mp3": TAGGED}},
        "c": {"3.mp3": TAGGED},
        "top.mp3": TAGGED,
    }

    def test_depth_first_order_is_deterministic(self):
        first = list(TraversalEngine(ROOT, filesystem=MemoryFileSystem(self.TREE)))
        second = list(TraversalEngine(ROOT, filesystem=MemoryFileSystem(self.TREE)))

        assert first == second
        assert first == [
            music("top.mp3"),
            music("c", "3.mp3"),
            music("a", "1.mp3"),
            music("a", "b", "2.mp3"),
        ]

    def test_unsorted_walk_covers_same_files(self):
        sorted_walk = set(TraversalEngine(ROOT, filesystem=MemoryFileSystem(self.TREE)))
        unsorted_walk = set(TraversalEngine(ROOT, filesystem=MemoryFileSystem(self.TREE),
                                            sort_entries=False))
        assert sorted_walk == unsorted_walk

    def test_directories_are_expanded_lazily(self):
        fs = MemoryFileSystem({"a.mp3": TAGGED, "z": {"deep.mp3": TAGGED}})
        engine = TraversalEngine(ROOT, filesystem=fs)

        assert engine.next_match() == music("a.mp3")
        assert fs.list_calls == [ROOT]
        assert engine.pending_files == [music("z")]
        assert engine.pending_directories == []

        assert engine.next_match() == music("z", "deep.mp3")
        assert fs.list_calls == [ROOT, music("z")]

    def test_yields_exactly_the_qualifying_files(self):
        tree = {}
        expected = set()
        for d in range(4):
            sub = tree.setdefault(f"dir{d}", {})
            for f in range(6):
                content = TAGGED if (d + f) % 3 == 0 else (b"ID" if f == 1 else b"RIFF....WAVE")
                sub[f"f{f}.mp3"] = content
                if content.startswith(b"ID3"):
                    expected.add(music(f"dir{d}", f"f{f}.mp3"))
            sub["nested"] = {"deep.mp3": TAGGED, "skip.ogg": b"OggS"}
            expected.add(music(f"dir{d}", "nested", "deep.mp3"))

        engine = TraversalEngine(ROOT, filesystem=MemoryFileSystem(tree))
        found = list(engine)

        assert len(found) == len(set(found))
        assert set(found) == expected

    def test_exhausted_engine_keeps_returning_none(self):
        engine = TraversalEngine(ROOT, filesystem=MemoryFileSystem({"a.mp3": TAGGED}))
        assert engine.next_match() == music("a.mp3")
        assert engine.next_match() is None
        assert engine.exhausted
        assert engine.next_match() is None
        with pytest.raises(StopIteration):
            next(engine)

    def test_counters(self):
        engine = TraversalEngine(ROOT, filesystem=MemoryFileSystem(self.TREE))
        list(engine)

        assert engine.matches_yielded == 4
        assert engine.directories_expanded == 4  # root, a, a/b, c
        assert engine.entries_visited == 7


class TestSnapshots:
    """Pausing a walk and resuming it from a snapshot."""

    TREE = {
        "a": {"1.mp3": TAGGED, "2.mp3": TAGGED},
        "b": {"locked": {}, "3.mp3": TAGGED},
        "4.mp3": TAGGED,
    }

    def test_resume_continues_where_it_stopped(self):
        fs = MemoryFileSystem(self.TREE, unlistable=["/music/b/locked"])
        full = list(TraversalEngine(ROOT, filesystem=fs))

        engine = TraversalEngine(ROOT, filesystem=fs)
        head = [engine.next_match(), engine.next_match()]
        state = engine.snapshot()

        resumed = TraversalEngine.from_state(state, filesystem=fs)
        tail = list(resumed)

        assert head + tail == full
        assert len(resumed.errors) == 1
        assert resumed.matches_yielded == len(full)

    @pytest.mark.parametrize("operation, path", [
        ("list_dir", "/music/a"),
        ("stat", "/music/a"),
        ("open_read", "/music/a/2.mp3"),
    ])
    def test_interrupted_pull_keeps_entry_pending(self, operation, path):
        fs = InterruptOnceFileSystem(self.TREE, operation=operation, target=path)
        full = list(TraversalEngine(ROOT, filesystem=MemoryFileSystem(self.TREE)))

        engine = TraversalEngine(ROOT, filesystem=fs)
        head = []
        with pytest.raises(KeyboardInterrupt):
            for match in engine:
                head.append(match)

        resumed = TraversalEngine.from_state(engine.snapshot(), filesystem=fs)

        assert head + list(resumed) == full

    def test_snapshot_is_detached_from_engine(self):
        fs = MemoryFileSystem(self.TREE)
        engine = TraversalEngine(ROOT, filesystem=fs)
        engine.next_match()
        state = engine.snapshot()
        pending = list(state.pending_files)

        list(engine)

        assert state.pending_files == pending
        assert not state.exhausted
        assert engine.snapshot().exhausted

    def test_snapshot_of_fresh_engine_holds_only_root(self):
        state = TraversalEngine(ROOT, filesystem=MemoryFileSystem({})).snapshot()
        assert state.pending_directories == [str(ROOT)]
        assert state.pending_files == []
        assert state.failures == []


@pytest.mark.skipif(sys.platform == "win32", reason="symlinks need privileges on Windows")
class TestSymlinks:
    """Symlink policy on a real filesystem."""

    def test_file_symlink_is_followed(self, tmp_path):
        target = write_file(tmp_path / "store" / "real.mp3", TAGGED)
        library = tmp_path / "library"
        library.mkdir()
        (library / "link.mp3").symlink_to(target)

        assert list(TraversalEngine(library)) == [library / "link.mp3"]

    def test_directory_symlink_not_descended_by_default(self, tmp_path):
        write_file(tmp_path / "outside" / "x.mp3", TAGGED)
        library = tmp_path / "library"
        write_file(library / "own.mp3", TAGGED)
        (library / "linked").symlink_to(tmp_path / "outside", target_is_directory=True)

        engine = TraversalEngine(library)

        assert list(engine) == [library / "own.mp3"]
        assert not engine.errors

    def test_cycle_terminates_when_following_links(self, tmp_path):
        root = tmp_path / "root"
        write_file(root / "a.mp3", TAGGED)
        write_file(root / "sub" / "b.mp3", TAGGED)
        (root / "sub" / "loop").symlink_to(root, target_is_directory=True)

        found = list(TraversalEngine(root, follow_symlinks=True))

        assert sorted(found) == [root / "a.mp3", root / "sub" / "b.mp3"]

    def test_dangling_symlink_is_an_io_failure(self, tmp_path):
        (tmp_path / "dead.mp3").symlink_to(tmp_path / "missing.mp3")

        engine = TraversalEngine(tmp_path)

        assert list(engine) == []
        (failure,) = engine.errors.snapshot()
        assert failure.operation == "stat"
        assert failure.kind == FailureKind.IO


@pytest.mark.skipif(not hasattr(os, "geteuid") or os.geteuid() == 0,
                    reason="permission bits do not restrict root")
def test_unreadable_directory_on_disk(tmp_path):
    locked = tmp_path / "locked"
    write_file(locked / "a.mp3", TAGGED)
    track = write_file(tmp_path / "track.mp3", TAGGED)
    locked.chmod(0)
    try:
        engine = TraversalEngine(tmp_path)
        assert list(engine) == [track]
        (failure,) = engine.errors.snapshot()
        assert failure.path == str(locked)
    finally:
        locked.chmod(0o755)
