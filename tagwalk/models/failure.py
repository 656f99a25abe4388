#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Failure records accumulated during a run.
"""

from dataclasses import dataclass, asdict
from enum import Enum
from pathlib import Path
from typing import Optional, Union, Dict, Any


class FailureKind(str, Enum):
    """Closed set of failure categories."""
    IO = "io"
    DECODE = "decode"
    PERSISTENCE = "persistence"


@dataclass(frozen=True)
class FailureRecord:
    """One per-entry or per-file failure.

    The cause is kept as plain data (type name, errno, message) so records
    survive pickling into checkpoints and can be reported after the run.
    """
    kind: FailureKind
    path: str
    operation: str  # 'stat', 'list', 'open', 'decode', 'insert', ...
    message: str
    error_type: Optional[str] = None
    errno: Optional[int] = None

    @classmethod
    def io_failure(cls, path: Union[str, Path], operation: str,
                   exc: BaseException) -> 'FailureRecord':
        return cls(
            kind=FailureKind.IO,
            path=str(path),
            operation=operation,
            message=getattr(exc, "strerror", None) or str(exc),
            error_type=type(exc).__name__,
            errno=getattr(exc, "errno", None),
        )

    @classmethod
    def decode_failure(cls, path: Union[str, Path], message: str,
                       exc: Optional[BaseException] = None) -> 'FailureRecord':
        return cls(
            kind=FailureKind.DECODE,
            path=str(path),
            operation="decode",
            message=message,
            error_type=type(exc).__name__ if exc is not None else None,
        )

    @classmethod
    def persistence_failure(cls, path: Union[str, Path], message: str,
                            exc: Optional[BaseException] = None) -> 'FailureRecord':
        return cls(
            kind=FailureKind.PERSISTENCE,
            path=str(path),
            operation="insert",
            message=message,
            error_type=type(exc).__name__ if exc is not None else None,
        )

    def describe(self) -> str:
        """Single-line human readable description."""
        detail = self.message
        if self.error_type:
            detail = f"{self.error_type}: {detail}"
        return f"[{self.kind.value}] {self.operation} {self.path}: {detail}"

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["kind"] = self.kind.value
        return data
