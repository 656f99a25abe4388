#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Time helpers for checkpoints and reports.
"""

from datetime import datetime, timedelta, timezone

TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


def utc_now_str() -> str:
    """Return current UTC time in ISO-8601 format with 'Z'."""
    return datetime.now(timezone.utc).strftime(TIMESTAMP_FORMAT)


def utc_cutoff_str(days: int) -> str:
    """Timestamp `days` ago, comparable with utc_now_str() values as text."""
    cutoff = datetime.now(timezone.utc) - timedelta(days=days)
    return cutoff.strftime(TIMESTAMP_FORMAT)
