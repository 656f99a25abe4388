"""Walking, sniffing and tag extraction for tagwalk."""

from .filesystem import FileSystem, LocalFileSystem, StatKind
from .sniffer import ContentSniffer
from .error_sink import ErrorSink
from .walker import TraversalEngine
from .extractor import TagDecoder, Id3TagExtractor
from .sinks import ResultSink, ConsoleSink, CollectingSink, PersistenceAdapter
from .scanner import TagScanner, RunSummary

__all__ = [
    'FileSystem',
    'LocalFileSystem',
    'StatKind',
    'ContentSniffer',
    'ErrorSink',
    'TraversalEngine',
    'TagDecoder',
    'Id3TagExtractor',
    'ResultSink',
    'ConsoleSink',
    'CollectingSink',
    'PersistenceAdapter',
    'TagScanner',
    'RunSummary',
]
