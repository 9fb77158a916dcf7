#!/usr/bin/env python3
"""
codec.py
--------
JSON encoding of stored records.

The key-value store only deals in strings. Every record the engine writes
(master data items, catalog records, secondary catalog records) is a JSON
object encoded here, and every record it reads is decoded here, so a
malformed value is detected in exactly one place.

Usage:
    from catalog.database.codec import decode_record, encode_record

    store.set(key, encode_record(item))
    item = decode_record(store.get(key))
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import json
from typing import Any, Dict

# --- Local imports ---
from catalog.core.exceptions import SerializationError


def encode_record(record: Dict[str, Any]) -> str:
    """
    Encode a record as JSON text.

    Keys whose value is None are dropped, so a cleared field disappears
    from the stored object instead of being persisted as ``null``.

    Args:
        record: Record dictionary

    Returns:
        JSON string

    Raises:
        SerializationError: If the record is not a dict or holds values
            that cannot be serialized
    """
    if not isinstance(record, dict):
        raise SerializationError(
            f"Records must be JSON objects, got {type(record).__name__}"
        )
    compact = {key: value for key, value in record.items() if value is not None}
    try:
        return json.dumps(compact, ensure_ascii=False)
    except (TypeError, ValueError) as e:
        raise SerializationError(f"Cannot serialize record: {e}") from e


def decode_record(raw: Any) -> Dict[str, Any]:
    """
    Decode JSON text into a record dictionary.

    Args:
        raw: Stored value

    Returns:
        Decoded record

    Raises:
        SerializationError: If the value is not a JSON object
    """
    if not isinstance(raw, (str, bytes, bytearray)):
        raise SerializationError(
            f"Stored value must be text, got {type(raw).__name__}"
        )
    try:
        record = json.loads(raw)
    except ValueError as e:
        raise SerializationError(f"Malformed JSON: {e}") from e
    if not isinstance(record, dict):
        raise SerializationError(
            f"Stored value is not a JSON object: {type(record).__name__}"
        )
    return record
