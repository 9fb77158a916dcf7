#!/usr/bin/env python3
"""
base_manager.py
--------------------
Base manager providing common record utilities over the key-value store.
All record managers should inherit from this class.

Key Features:
    - Decoded reads and encoded writes of JSON records
    - Partition scans that skip malformed entries with a warning
    - Generic field-merge helper implementing the update contract
      (absent key preserves, None clears, value overwrites)

Usage:
    class MasterDataManager(BaseManager):
        def find_by_id(self, item_type, item_id):
            return self._load(config.key_for(item_id))
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from abc import ABC
from typing import Any, Callable, Dict, Iterable, Iterator, Optional, Tuple

# --- Local imports ---
from catalog.core.exceptions import SerializationError
from catalog.core.logging_manager import CatalogLogger, safe_logger
from catalog.database.codec import decode_record, encode_record
from catalog.database.kv_store import KeyValueStore

Record = Dict[str, Any]


class BaseManager(ABC):
    """
    Abstract base manager for JSON records in the key-value store.

    Attributes:
        store: Key-value store
        logger: Optional logger for operation tracking
    """

    def __init__(
        self, store: KeyValueStore, logger: Optional[CatalogLogger] = None
    ) -> None:
        """
        Initialize the base manager.

        Args:
            store: Key-value store
            logger: Optional logger for operation tracking
        """
        self.store = store
        self.logger = logger

    # -------------------------------------------------------------------------
    # Record I/O
    # -------------------------------------------------------------------------

    def _load(self, key: str) -> Optional[Record]:
        """
        Read and decode the record under key.

        Returns:
            Decoded record, or None if the key is absent

        Raises:
            SerializationError: If the stored value is malformed
        """
        raw = self.store.get(key)
        if raw is None:
            return None
        return decode_record(raw)

    def _save(self, key: str, record: Record) -> None:
        """Encode and persist a record under key."""
        self.store.set(key, encode_record(record))

    def _scan(self, prefix: str) -> Iterator[Tuple[str, Record]]:
        """
        Stream decoded records of a partition.

        Malformed entries are logged and skipped.

        Args:
            prefix: Partition key prefix

        Yields:
            (key, record) tuples in key order
        """
        for key, raw in self.store.iter_prefix(prefix):
            try:
                record = decode_record(raw)
            except SerializationError as e:
                safe_logger(self.logger).log_warning(
                    "Skipping malformed entry", {"key": key, "error": str(e)}
                )
                continue
            yield key, record

    # -------------------------------------------------------------------------
    # Field Helpers
    # -------------------------------------------------------------------------

    @staticmethod
    def _merge_fields(
        target: Record,
        payload: Record,
        fields: Iterable[str],
        normalizer: Callable[[Any], Any],
    ) -> None:
        """
        Merge payload fields into target in place.

        For each field:
            - absent from payload: target keeps its value
            - present as None, or normalizing to None: removed from target
            - otherwise: target takes the normalized value

        Args:
            target: Record being written
            payload: Incoming data
            fields: Field names to process
            normalizer: Function converting raw input to the stored form
        """
        for field_name in fields:
            if field_name not in payload:
                continue
            value = normalizer(payload[field_name])
            if value is None:
                target.pop(field_name, None)
            else:
                target[field_name] = value
