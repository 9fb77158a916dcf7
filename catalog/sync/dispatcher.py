#!/usr/bin/env python3
"""
dispatcher.py
-------------
Sync-aware master data updates.

An update goes through these states:

    Received -> Validating -> Rejected (duplicate, not found, invalid)
                           -> Persisting -> name unchanged -> Done(0, 0)
                                         -> name changed -> Propagating -> Done(m, s)

Validation and persistence belong to the repository; this module decides
whether a rename happened and, for types whose names are denormalized into
catalog records, runs the propagation. The persisted item is returned even
when propagation fails.

Usage:
    dispatcher = SyncUpdateDispatcher(master_data, coordinator, logger)
    result = dispatcher.update_with_sync("actress", item_id, {"name": "Maria O."})
    result.to_dict()
    # {"data": {...}, "sync": {"recordsUpdated": 2, "secondaryRecordsUpdated": 1}}
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, Optional

# --- Local imports ---
from catalog.core.exceptions import NotFoundError
from catalog.core.logging_manager import CatalogLogger, safe_logger
from catalog.database.managers.master_types import get_type_config
from .propagation import PropagationCoordinator, SyncReport

if TYPE_CHECKING:
    from catalog.database.managers import MasterDataManager


@dataclass
class SyncResult:
    """
    Outcome of a sync-aware update.

    Attributes:
        item: The persisted master data item
        report: Propagation counts (zeros when nothing was propagated)
    """

    item: Dict[str, Any]
    report: SyncReport = field(default_factory=SyncReport)

    def to_dict(self) -> Dict[str, Any]:
        return {"data": self.item, "sync": self.report.to_dict()}


class SyncUpdateDispatcher:
    """
    Routes master data updates through the repository and propagates renames.

    Attributes:
        master_data: Repository used for validation and persistence
        coordinator: Propagation coordinator
        logger: Optional logger
    """

    def __init__(
        self,
        master_data: MasterDataManager,
        coordinator: PropagationCoordinator,
        logger: Optional[CatalogLogger] = None,
    ) -> None:
        self.master_data = master_data
        self.coordinator = coordinator
        self.logger = logger

    def update_with_sync(
        self, item_type: str, item_id: str, payload: Dict[str, Any]
    ) -> SyncResult:
        """
        Update an item and propagate a rename to catalog records.

        Args:
            item_type: Master data type
            item_id: Item id
            payload: Field values

        Returns:
            SyncResult with the persisted item and the propagation counts

        Raises:
            ValidationError: If the payload is invalid
            DuplicateNameError: If the new name is taken in its scope
            NotFoundError: If the item does not exist
        """
        config = get_type_config(item_type)

        existing = self.master_data.find_by_id(item_type, item_id)
        if existing is None:
            raise NotFoundError(config.display_name, item_id)
        old_name = config.identifying_name(existing)

        item = self.master_data.update(item_type, item_id, payload)
        new_name = config.identifying_name(item)

        if config.propagation is None or not old_name or old_name == new_name:
            return SyncResult(item)

        # Record-level and scan-level failures are absorbed by the coordinator;
        # anything reaching here failed before a scan started
        try:
            report = self.coordinator.propagate(item_type, old_name, new_name)
        except Exception as e:
            safe_logger(self.logger).log_error(
                e,
                {
                    "operation": "propagate_rename",
                    "type": item_type,
                    "id": item_id,
                    "old_name": old_name,
                    "new_name": new_name,
                },
            )
            report = SyncReport()

        return SyncResult(item, report)

    def rename(self, item_type: str, item_id: str, new_name: str) -> SyncResult:
        """
        Rename an item and propagate the new name.

        Series are renamed through their English title.
        """
        config = get_type_config(item_type)
        return self.update_with_sync(item_type, item_id, {config.name_fields[0]: new_name})
