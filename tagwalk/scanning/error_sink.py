#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Append-only accumulator of failures for one run.
"""

from typing import Iterable, Iterator, List, Optional, Tuple

from ..models.failure import FailureKind, FailureRecord


class ErrorSink:
    """Collects FailureRecords without ever interrupting the caller."""

    def __init__(self, records: Optional[Iterable[FailureRecord]] = None):
        self._records: List[FailureRecord] = list(records or ())

    def record(self, failure: FailureRecord) -> None:
        self._records.append(failure)

    def extend(self, failures: Iterable[FailureRecord]) -> None:
        self._records.extend(failures)

    def snapshot(self) -> Tuple[FailureRecord, ...]:
        """Immutable view of everything recorded so far."""
        return tuple(self._records)

    def of_kind(self, kind: FailureKind) -> List[FailureRecord]:
        return [r for r in self._records if r.kind == kind]

    def __iter__(self) -> Iterator[FailureRecord]:
        return iter(self.snapshot())

    def __len__(self) -> int:
        return len(self._records)

    def __bool__(self) -> bool:
        return bool(self._records)

    def __repr__(self) -> str:
        return f"ErrorSink({len(self._records)} failures)"
