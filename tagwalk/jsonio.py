# tagwalk/jsonio.py
"""JSON envelope for --json mode: one object per command on stdout, logs on stderr."""
from __future__ import annotations
import json, logging, sys
from pathlib import Path
from typing import Any, Dict, Optional, Union, List, Iterable, Tuple

from .models.track import TagRecord

Payload = Union[Dict[str, Any], List[Any], None]


def enable_json_logging(level: int = logging.ERROR):
    """Route logging to stderr only, quietly, so stdout stays parseable."""
    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
    logging.basicConfig(stream=sys.stderr, level=level)


def track_payload(path: Union[str, Path], record: TagRecord) -> Dict[str, Any]:
    """One decoded file; absent fields stay null."""
    return {
        "path": str(path),
        "title": record.title,
        "artist": record.artist,
        "album": record.album,
        "genre": record.genre,
        "track_number": record.track_number,
    }


def tracks_payload(results: Iterable[Tuple[Union[str, Path], TagRecord]]) -> List[Dict[str, Any]]:
    return [track_payload(path, record) for path, record in results]


def _emit(envelope: Dict[str, Any]) -> None:
    sys.stdout.write(json.dumps(envelope, ensure_ascii=False) + "\n")
    sys.stdout.flush()


def success(command: str, data: Payload = None,
            meta: Optional[Dict[str, Any]] = None, code: int = 0) -> int:
    envelope: Dict[str, Any] = {"result": "success", "command": command}
    envelope["data"] = {} if data is None else data
    if meta:
        envelope["meta"] = meta
    _emit(envelope)
    return code


def error(command: str, message: str, debug: Optional[Dict[str, Any]] = None, code: int = 1) -> int:
    envelope: Dict[str, Any] = {"result": "error", "command": command, "error": message}
    if debug:
        envelope["debug"] = debug
    _emit(envelope)
    return code
