# src/sister_sync/tasks/sync_codec.py

"""
Sync codes: copy/paste-safe snapshots of a task list.

    code = base64( percent_escape( json(tasks) ) )

The escaping matches the browser's encodeURIComponent and the JSON is
compact, so codes made here and codes made by the web app are interchangeable.
"""

from __future__ import annotations

import base64
import binascii
import json
import logging
import math
import re
import urllib.parse
from collections.abc import Iterable
from typing import Any

from .errors import DecodeFailure
from .ids import IdGenerator
from .migrate import normalize
from .task_models import Task

logger = logging.getLogger(__name__)

EXPORT_ERROR_CODE = "Error generating code"

# Characters encodeURIComponent leaves alone (besides ASCII alphanumerics).
_URI_COMPONENT_SAFE = "-_.!~*'()"

_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")
_WHITESPACE = re.compile(r"\s+")


def _reject_constant(name: str) -> Any:
    raise ValueError(f"non-standard JSON constant: {name}")


def _finite_float(raw: str) -> float:
    value = float(raw)
    if not math.isfinite(value):
        raise ValueError(f"number out of range: {raw}")
    return value


def loads_strict(text: str) -> Any:
    """
    json.loads limited to what JSON.parse/JSON.stringify can round-trip.

    NaN/Infinity literals and overflowing numbers raise ValueError, and so does
    nesting too deep to parse (RecursionError is re-raised as ValueError).
    """
    try:
        return json.loads(text, parse_constant=_reject_constant, parse_float=_finite_float)
    except RecursionError as e:
        raise ValueError("JSON nested too deeply") from e


def _b64decode_forgiving(code: str) -> bytes:
    """base64 decode that ignores whitespace and tolerates missing padding."""
    data = _WHITESPACE.sub("", code)
    if len(data) % 4 == 1:
        raise binascii.Error("invalid base64 length")
    data += "=" * (-len(data) % 4)
    return base64.b64decode(data, validate=True)


class SyncCodec:
    def __init__(self, ids: IdGenerator) -> None:
        self._ids = ids

    def encode(self, tasks: Iterable[Task]) -> str:
        """Return a sync code, or EXPORT_ERROR_CODE if the tasks cannot be serialized."""
        try:
            payload = [t.to_dict() for t in tasks]
            text = json.dumps(payload, ensure_ascii=False, separators=(",", ":"), allow_nan=False)
            escaped = urllib.parse.quote(text, safe=_URI_COMPONENT_SAFE)
            return base64.b64encode(escaped.encode("ascii")).decode("ascii")
        except Exception:
            logger.exception("Failed to build sync code")
            return EXPORT_ERROR_CODE

    def decode_raw(self, code: str) -> Any:
        """Undo the transport encoding and return the parsed JSON value (shape unchecked)."""
        try:
            escaped = _b64decode_forgiving(code.strip()).decode("latin-1")
        except (binascii.Error, ValueError, AttributeError) as e:
            raise DecodeFailure("sync code is not valid base64") from e

        if _BAD_ESCAPE.search(escaped):
            raise DecodeFailure("sync code contains a malformed escape sequence")
        try:
            text = urllib.parse.unquote_to_bytes(escaped).decode("utf-8")
        except UnicodeDecodeError as e:
            raise DecodeFailure("sync code does not decode to UTF-8 text") from e

        try:
            return loads_strict(text)
        except ValueError as e:
            raise DecodeFailure("sync code does not contain valid JSON") from e

    def decode(self, code: str) -> list[Task]:
        """
        Parse a sync code into normalized Tasks.

        Raises DecodeFailure for a corrupt code and NotACollection when the
        payload is not a list. Nothing is returned on failure.
        """
        return normalize(self.decode_raw(code), self._ids)
