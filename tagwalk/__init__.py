"""tagwalk - find ID3-tagged audio files and report or index their tags."""

__version__ = "1.0.0"
__author__ = "tagwalk developers"

# Import key classes for convenient top-level access
from .scanning import (
    TraversalEngine, ContentSniffer, ErrorSink, Id3TagExtractor,
    TagScanner, ConsoleSink, PersistenceAdapter, LocalFileSystem,
)
from .database import DatabaseManager
from .checkpoint import CheckpointManager
from .models import TagRecord, PersistedRow, FailureRecord, FailureKind

__all__ = [
    # Core classes
    'TraversalEngine',
    'ContentSniffer',
    'ErrorSink',
    'TagScanner',
    'LocalFileSystem',

    # Tags and sinks
    'Id3TagExtractor',
    'ConsoleSink',
    'PersistenceAdapter',
    'DatabaseManager',
    'CheckpointManager',

    # Data models
    'TagRecord',
    'PersistedRow',
    'FailureRecord',
    'FailureKind',

    # Package metadata
    '__version__',
    '__author__'
]
