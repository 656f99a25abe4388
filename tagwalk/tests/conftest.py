#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Shared pytest fixtures for tagwalk.
"""

import pytest

from tagwalk.database.manager import DatabaseManager
from tagwalk.checkpoint.manager import CheckpointManager

ID3_HEADER = b"ID3\x04\x00\x00\x00\x00\x00\x00"


@pytest.fixture
def db():
    """A fresh in-memory store with the schema applied."""
    manager = DatabaseManager(":memory:")
    yield manager
    manager.close()


@pytest.fixture
def db_file(tmp_path):
    """A fresh on-disk store; yields the manager, closes it afterwards."""
    manager = DatabaseManager(tmp_path / "tagwalk.db")
    yield manager
    manager.close()


@pytest.fixture
def checkpoint_manager(db, tmp_path):
    return CheckpointManager(db, tmp_path / "checkpoints")


@pytest.fixture
def id3_header():
    return ID3_HEADER
