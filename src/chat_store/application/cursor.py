"""Cursor-based pagination helpers.

Cursor format: base64("<json-timestamp>|<document id>")
"""
from __future__ import annotations

import base64
import binascii
import json
from numbers import Real

from chat_store.application.exceptions import ValidationError


def encode_cursor(timestamp: int | float, doc_id: str) -> str:
    raw = f"{json.dumps(timestamp)}|{doc_id}"
    cursor = base64.urlsafe_b64encode(raw.encode()).decode()
    return cursor.rstrip("=")


def decode_cursor(cursor: str) -> tuple[int | float, str]:
    # Restore base64 padding if it was stripped
    padded = cursor + "=" * ((4 - len(cursor) % 4) % 4)
    try:
        raw = base64.urlsafe_b64decode(padded.encode()).decode()
        ts_str, doc_id = raw.split("|", 1)
        timestamp = json.loads(ts_str)
    except (binascii.Error, UnicodeDecodeError, ValueError) as exc:
        raise ValidationError(f"Malformed cursor: {cursor!r}") from exc

    if isinstance(timestamp, bool) or not isinstance(timestamp, Real) or not doc_id:
        raise ValidationError(f"Malformed cursor: {cursor!r}")
    return timestamp, doc_id
