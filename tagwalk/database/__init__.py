"""SQLite persistence for tagwalk."""

from .manager import DatabaseManager, track_to_row
from .init import ensure_schema, open_connection

__all__ = ['DatabaseManager', 'track_to_row', 'ensure_schema', 'open_connection']
