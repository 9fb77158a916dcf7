#!/usr/bin/env python3
"""
identifiers.py
--------------
Identifier and timestamp helpers for stored records.

Master data ids are opaque strings of the form
``{epoch_millis}-{9 random base36 characters}``; they sort roughly by
creation time and are unique enough for a single-writer admin panel.
Timestamps are ISO-8601 UTC strings with millisecond precision and a
trailing ``Z``.

Usage:
    from catalog.utils.identifiers import generate_id, utc_timestamp

    item = {"id": generate_id(), "createdAt": utc_timestamp()}
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import secrets
import string
import time
from datetime import datetime, timezone
from typing import Optional

_BASE36 = string.digits + string.ascii_lowercase


def generate_id(now_ms: Optional[int] = None) -> str:
    """
    Generate an opaque record id.

    Args:
        now_ms: Epoch milliseconds to embed (defaults to the current time)

    Returns:
        Id string such as ``1729321234567-k3j9x0a2b``
    """
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    suffix = "".join(secrets.choice(_BASE36) for _ in range(9))
    return f"{now_ms}-{suffix}"


def utc_timestamp(moment: Optional[datetime] = None) -> str:
    """
    Format a moment as an ISO-8601 UTC string with milliseconds.

    Args:
        moment: Aware or naive (assumed UTC) datetime, defaults to now

    Returns:
        Timestamp string such as ``2026-10-19T08:30:00.123Z``
    """
    if moment is None:
        moment = datetime.now(timezone.utc)
    elif moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    moment = moment.astimezone(timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")
