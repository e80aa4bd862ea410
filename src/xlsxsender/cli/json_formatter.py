"""
JSON output for the ``--json`` flag.

Every command writes one envelope to stdout::

    {"command": ..., "data": ..., "errors": [...], "success": ...,
     "timestamp": ..., "warnings": [...]}
"""

from __future__ import annotations

import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import orjson

_OPTIONS = orjson.OPT_SORT_KEYS | orjson.OPT_INDENT_2


def _encode_extra(obj: Any) -> Any:
    # orjson handles dataclasses, enums and datetimes itself
    if isinstance(obj, Path):
        return str(obj)
    if isinstance(obj, (set, frozenset)):
        return sorted(obj)
    raise TypeError(f"Type is not JSON serializable: {type(obj).__name__}")


def _envelope(
    success: bool,
    command: str,
    data: Any,
    errors: list[str],
    warnings: list[str],
) -> dict[str, Any]:
    return {
        "success": success and not errors,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "command": command,
        "data": data,
        "errors": errors,
        "warnings": warnings,
    }


def format_json_output(
    success: bool,
    command: str,
    data: Any | None = None,
    errors: list[str] | None = None,
    warnings: list[str] | None = None,
) -> bytes:
    """
    Encode a command result as a JSON envelope.

    Any error forces ``success`` to False. Data that cannot be encoded is
    replaced by an error envelope rather than raising.

    Args:
        success: Whether the command succeeded
        command: Command name (``scan``, ``send``, ...)
        data: Command payload
        errors: Error messages
        warnings: Warning messages

    Returns:
        Indented JSON bytes with sorted keys.

    Example:
        >>> payload = format_json_output(True, "scan", data={"total_files": 2})
    """
    envelope = _envelope(success, command, data, list(errors or []), list(warnings or []))
    try:
        return orjson.dumps(envelope, default=_encode_extra, option=_OPTIONS)
    except TypeError as e:
        # orjson.JSONEncodeError is a TypeError
        fallback = _envelope(False, command, None, [f"JSON serialization failed: {e}"], [])
        return orjson.dumps(fallback, option=_OPTIONS)


def write_json_output(payload: bytes) -> None:
    """Write an encoded payload to stdout followed by a newline."""
    stream = sys.stdout.buffer
    stream.write(payload + b"\n")
    stream.flush()
