"""Utility functions for tagwalk."""

from .time import utc_now_str, utc_cutoff_str
from .path import ensure_dir, shorten

__all__ = ['utc_now_str', 'utc_cutoff_str', 'ensure_dir', 'shorten']
