#!/usr/bin/env python3
"""
propagation.py
--------------
Rename propagation across denormalized catalog records.

Catalog records (``movie:{id}``) and secondary catalog records
(``scmovie:{id}``) reference master data by name, not by id. When a master
item is renamed, the coordinator streams both partitions and rewrites every
reference to the old name.

Field map:
    actor     -> movie.actors (token list), scmovie.cast (token list)
    actress   -> movie.actress (token list), scmovie.cast (token list)
    director  -> movie.director (scalar), scmovie.cast (token list)
    tag       -> movie.tags, scmovie.tags (token lists)
    type      -> movie.type, scmovie.type (token lists)

Failure model:
    Each record is decoded, rewritten and persisted on its own. Any error
    raised while handling one record is logged and the record is left as it
    was; the scan moves on to the next record. An error from the scan
    itself ends that partition early with its counts intact. Records
    already rewritten stay rewritten and the master item rename is never
    rolled back.

Usage:
    coordinator = PropagationCoordinator(store, logger)
    report = coordinator.propagate_cast_rename("actress", "Maria Ozawa", "Maria O.")
    report.to_dict()   # {"recordsUpdated": 2, "secondaryRecordsUpdated": 1}
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Optional

# --- Local imports ---
from catalog.core.exceptions import PropagationRecordError, ValidationError
from catalog.core.logging_manager import CatalogLogger, safe_logger
from catalog.database.codec import decode_record, encode_record
from catalog.database.kv_store import KeyValueStore
from catalog.database.managers.master_types import (
    CAST_TYPES,
    LABEL_TYPES,
    PROPAGATE_CAST,
    PROPAGATE_LABEL,
    get_type_config,
)
from catalog.utils.identifiers import utc_timestamp
from .token_list import TokenList

Record = Dict[str, Any]
Transform = Callable[[Record], Optional[Record]]

CATALOG_PREFIX = "movie:"
SECONDARY_PREFIX = "scmovie:"

# Catalog record field holding each cast kind
CATALOG_CAST_FIELDS = {"actor": "actors", "actress": "actress", "director": "director"}
SCALAR_CAST_KINDS = ("director",)
SECONDARY_CAST_FIELD = "cast"

LABEL_FIELDS = {"tag": "tags", "type": "type"}


@dataclass
class SyncReport:
    """
    Number of records rewritten by one propagation.

    Attributes:
        records_updated: Catalog records rewritten
        secondary_records_updated: Secondary catalog records rewritten
    """

    records_updated: int = 0
    secondary_records_updated: int = 0

    @property
    def total(self) -> int:
        return self.records_updated + self.secondary_records_updated

    def to_dict(self) -> Dict[str, int]:
        return {
            "recordsUpdated": self.records_updated,
            "secondaryRecordsUpdated": self.secondary_records_updated,
        }


class RecordOutcome(Enum):
    """Result of rewriting one record."""

    UPDATED = "updated"
    UNCHANGED = "unchanged"
    FAILED = "failed"


@dataclass
class PartitionSummary:
    """Per-outcome counts of one partition rewrite."""

    prefix: str
    updated: int = 0
    unchanged: int = 0
    failed: int = 0
    aborted: bool = False

    def record(self, outcome: RecordOutcome) -> None:
        if outcome is RecordOutcome.UPDATED:
            self.updated += 1
        elif outcome is RecordOutcome.UNCHANGED:
            self.unchanged += 1
        else:
            self.failed += 1

    @property
    def scanned(self) -> int:
        return self.updated + self.unchanged + self.failed


# -------------------------------------------------------------------------
# Transforms
# -------------------------------------------------------------------------


def token_field_rewriter(field_name: str, old_name: str, new_name: str) -> Transform:
    """
    Build a transform replacing old_name inside a token list field.

    The transform returns None when the field does not hold the token.
    """

    def rewrite(record: Record) -> Optional[Record]:
        tokens = TokenList.parse(record.get(field_name))
        if not TokenList.contains(tokens, old_name):
            return None
        updated = dict(record)
        updated[field_name] = TokenList.format(
            TokenList.replace(tokens, old_name, new_name)
        )
        return updated

    return rewrite


def scalar_field_rewriter(field_name: str, old_name: str, new_name: str) -> Transform:
    """
    Build a transform replacing a scalar field exactly equal to old_name.
    """

    def rewrite(record: Record) -> Optional[Record]:
        if record.get(field_name) != old_name:
            return None
        updated = dict(record)
        updated[field_name] = new_name
        return updated

    return rewrite


class PropagationCoordinator:
    """
    Rewrites name references in catalog partitions after a rename.

    Attributes:
        store: Key-value store holding the catalog partitions
        logger: Optional logger
    """

    def __init__(
        self, store: KeyValueStore, logger: Optional[CatalogLogger] = None
    ) -> None:
        self.store = store
        self.logger = logger

    # -------------------------------------------------------------------------
    # Entry Points
    # -------------------------------------------------------------------------

    def propagate(self, item_type: str, old_name: str, new_name: str) -> SyncReport:
        """
        Propagate a rename of any master data type.

        Types without denormalized references yield an empty report.
        """
        config = get_type_config(item_type)
        if config.propagation == PROPAGATE_CAST:
            return self.propagate_cast_rename(item_type, old_name, new_name)
        if config.propagation == PROPAGATE_LABEL:
            return self.propagate_label_rename(item_type, old_name, new_name)
        return SyncReport()

    def propagate_cast_rename(
        self, entity_kind: str, old_name: str, new_name: str
    ) -> SyncReport:
        """
        Propagate a cast member rename to both catalog partitions.

        Args:
            entity_kind: "actor", "actress" or "director"
            old_name: Name before the rename
            new_name: Name after the rename

        Returns:
            SyncReport with the number of records rewritten per partition
        """
        if entity_kind not in CAST_TYPES:
            raise ValidationError(f"Not a cast type: {entity_kind}")
        if self._is_noop(old_name, new_name):
            return SyncReport()

        field_name = CATALOG_CAST_FIELDS[entity_kind]
        if entity_kind in SCALAR_CAST_KINDS:
            primary = scalar_field_rewriter(field_name, old_name, new_name)
        else:
            primary = token_field_rewriter(field_name, old_name, new_name)
        secondary = token_field_rewriter(SECONDARY_CAST_FIELD, old_name, new_name)

        return self._run(entity_kind, old_name, new_name, primary, secondary)

    def propagate_label_rename(
        self, kind: str, old_name: str, new_name: str
    ) -> SyncReport:
        """
        Propagate a tag or type rename to both catalog partitions.

        Args:
            kind: "tag" or "type"
            old_name: Name before the rename
            new_name: Name after the rename

        Returns:
            SyncReport with the number of records rewritten per partition
        """
        if kind not in LABEL_TYPES:
            raise ValidationError(f"Not a label type: {kind}")
        if self._is_noop(old_name, new_name):
            return SyncReport()

        field_name = LABEL_FIELDS[kind]
        rewrite = token_field_rewriter(field_name, old_name, new_name)
        return self._run(kind, old_name, new_name, rewrite, rewrite)

    # -------------------------------------------------------------------------
    # Partition Rewrite
    # -------------------------------------------------------------------------

    def rewrite_partition(self, prefix: str, transform: Transform) -> PartitionSummary:
        """
        Stream a partition and persist every record the transform changes.

        Per-record failures are logged and counted; they never stop the scan.
        If the scan itself fails (any error raised by the store iterator),
        the records rewritten so far are kept and the summary is marked
        aborted.

        Args:
            prefix: Partition key prefix
            transform: Returns the rewritten record, or None if unchanged

        Returns:
            PartitionSummary with per-outcome counts
        """
        summary = PartitionSummary(prefix)

        try:
            for key, raw in self.store.iter_prefix(prefix):
                try:
                    outcome = self._rewrite_record(key, raw, transform)
                except PropagationRecordError as e:
                    safe_logger(self.logger).log_warning(
                        "Record skipped during propagation",
                        {"key": e.key, "error": str(e)},
                    )
                    outcome = RecordOutcome.FAILED
                summary.record(outcome)
        except Exception as e:
            summary.aborted = True
            safe_logger(self.logger).log_error(
                e,
                {
                    "operation": "rewrite_partition",
                    "prefix": prefix,
                    "updated_before_abort": summary.updated,
                },
            )

        safe_logger(self.logger).log_debug(
            "Partition rewritten",
            {
                "prefix": prefix,
                "scanned": summary.scanned,
                "updated": summary.updated,
                "failed": summary.failed,
            },
        )
        return summary

    def _rewrite_record(self, key: str, raw: str, transform: Transform) -> RecordOutcome:
        """
        Decode, transform and persist one record.

        Raises:
            PropagationRecordError: If the record cannot be decoded,
                transformed or saved, whatever the underlying error
        """
        try:
            updated = transform(decode_record(raw))
            if updated is None:
                return RecordOutcome.UNCHANGED

            updated["updatedAt"] = utc_timestamp()
            self.store.set(key, encode_record(updated))
        except Exception as e:
            raise PropagationRecordError(key, f"{type(e).__name__}: {e}") from e
        return RecordOutcome.UPDATED

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    @staticmethod
    def _is_noop(old_name: Optional[str], new_name: Optional[str]) -> bool:
        return not old_name or not new_name or old_name == new_name

    def _run(
        self,
        kind: str,
        old_name: str,
        new_name: str,
        primary: Transform,
        secondary: Transform,
    ) -> SyncReport:
        safe_logger(self.logger).log_info(
            "Propagating rename",
            {"kind": kind, "old_name": old_name, "new_name": new_name},
        )

        catalog = self.rewrite_partition(CATALOG_PREFIX, primary)
        secondary_catalog = self.rewrite_partition(SECONDARY_PREFIX, secondary)
        report = SyncReport(catalog.updated, secondary_catalog.updated)

        safe_logger(self.logger).log_operation(
            "rename_propagated",
            {
                "kind": kind,
                "records_updated": report.records_updated,
                "secondary_records_updated": report.secondary_records_updated,
                "total": report.total,
                "failed": catalog.failed + secondary_catalog.failed,
                "aborted": catalog.aborted or secondary_catalog.aborted,
            },
        )
        return report
