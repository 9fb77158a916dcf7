#!/usr/bin/env python3
"""
validators.py
--------------------
Normalization helpers for master data payloads.

Every helper maps unusable input to None, which the repository treats
as "clear this field".
"""
from __future__ import annotations

from typing import Any, List, Optional


class DataValidator:
    """Type-safe conversion of incoming field values."""

    @staticmethod
    def normalize_string(value: Any) -> Optional[str]:
        """
        Normalize string value.

        Args:
            value: Value to normalize

        Returns:
            Trimmed string, or None for None, non-strings and blank strings
        """
        if not isinstance(value, str):
            return None
        value = value.strip()
        return value or None

    @staticmethod
    def name_key(value: Any) -> Optional[str]:
        """
        Comparison key for identifying names.

        Names compare equal when they match after trimming surrounding
        whitespace and lowercasing.

        Args:
            value: Stored or candidate name

        Returns:
            Normalized key or None if the value is not a non-blank string
        """
        normalized = DataValidator.normalize_string(value)
        return normalized.lower() if normalized is not None else None

    @staticmethod
    def normalize_string_list(value: Any) -> Optional[List[str]]:
        """
        Normalize a list of strings, dropping blank and non-string items.

        Args:
            value: List to normalize

        Returns:
            List of trimmed strings, or None if nothing remains
        """
        if not isinstance(value, list):
            return None
        items = [
            item.strip() for item in value if isinstance(item, str) and item.strip()
        ]
        return items or None

    @staticmethod
    def normalize_int(value: Any) -> Optional[int]:
        """
        Convert value to integer safely.

        Args:
            value: Value to convert

        Returns:
            Integer value or None
        """
        if value is None or isinstance(value, bool):
            return None
        try:
            return int(value)
        except (TypeError, ValueError):
            return None
