#!/usr/bin/env python3
"""
master_data_manager.py
----------------------
Config-driven repository for the eleven master data types.

Every type is stored as JSON under ``master_{type}_{id}`` and described by
a MasterTypeConfig (see master_types.py). This manager implements the
shared behaviour:

    - Listing a partition, skipping malformed entries
    - Validated create with generated id and creation timestamp
    - Validated update merging the payload into the stored item
    - Duplicate detection on the identifying name(s), case-insensitive and
      trimmed, optionally scoped by a parent id
    - Delete without cascade

Usage:
    manager = MasterDataManager(store, logger)
    tag = manager.create("tag", {"name": "Drama"})
    manager.update("tag", tag["id"], {"name": "Comedy"})
    manager.delete("tag", tag["id"])
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from typing import Any, Dict, List, Optional, Tuple

# --- Local imports ---
from catalog.core.exceptions import (
    DuplicateNameError,
    NotFoundError,
    SerializationError,
    ValidationError,
)
from catalog.core.logging_manager import safe_logger
from catalog.core.validators import DataValidator
from catalog.database.codec import decode_record
from catalog.database.decorators import log_database_operation
from catalog.sync.token_list import TokenList
from catalog.utils.identifiers import generate_id, utc_timestamp
from .base_manager import BaseManager, Record
from .master_types import MASTER_TYPES, MasterTypeConfig, get_type_config

WEBSITE_LABEL = "Website"


class MasterDataManager(BaseManager):
    """
    Repository for master data items.

    All public methods take the type string first and raise
    ValidationError for unknown types.
    """

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def list_by_type(self, item_type: str) -> List[Record]:
        """
        List every item of a type in key order.

        Args:
            item_type: Master data type

        Returns:
            Decoded items; malformed entries are skipped
        """
        config = get_type_config(item_type)
        return [record for _, record in self._scan(config.prefix)]

    def find_by_id(self, item_type: str, item_id: str) -> Optional[Record]:
        """
        Load one item.

        Args:
            item_type: Master data type
            item_id: Item id

        Returns:
            The item, or None if absent

        Raises:
            ValidationError: If the id is blank or the type unknown
            SerializationError: If the stored value is malformed
        """
        config = get_type_config(item_type)
        return self._load(config.key_for(self._require_id(item_id)))

    def count_by_type(self) -> Dict[str, int]:
        """Number of stored keys per master data type."""
        return {
            type_name: self.store.count_prefix(config.prefix)
            for type_name, config in MASTER_TYPES.items()
        }

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    @log_database_operation("create_master_item")
    def create(self, item_type: str, payload: Dict[str, Any]) -> Record:
        """
        Create a new item.

        Args:
            item_type: Master data type
            payload: Field values

        Returns:
            The persisted item, including its generated id

        Raises:
            ValidationError: If the name or a required parent id is missing
            DuplicateNameError: If the name is taken within its scope
        """
        config = get_type_config(item_type)
        payload = self._require_payload(payload)

        fields = self._apply_payload(config, {}, payload)
        self._validate_identity(config, fields)
        self._check_duplicate(config, fields)

        item: Record = {"id": generate_id(), "type": config.type_name}
        item.update(fields)
        item["createdAt"] = utc_timestamp()

        self._save(config.key_for(item["id"]), item)
        return item

    @log_database_operation("update_master_item")
    def update(self, item_type: str, item_id: str, payload: Dict[str, Any]) -> Record:
        """
        Update an existing item.

        Keys absent from the payload keep their stored value, keys set to
        None (or to a blank value) are cleared, other keys overwrite.

        Args:
            item_type: Master data type
            item_id: Item id
            payload: Field values

        Returns:
            The persisted item

        Raises:
            NotFoundError: If the item does not exist
            ValidationError: If the name would become empty
            DuplicateNameError: If another item in scope holds the name
        """
        config = get_type_config(item_type)
        item_id = self._require_id(item_id)
        payload = self._require_payload(payload)

        existing = self._load(config.key_for(item_id))
        if existing is None:
            raise NotFoundError(config.display_name, item_id)

        item = self._apply_payload(config, dict(existing), payload)
        self._validate_identity(config, item)
        self._check_duplicate(config, item, exclude_id=item_id)

        item["id"] = existing.get("id", item_id)
        item["type"] = config.type_name
        item["updatedAt"] = utc_timestamp()

        self._save(config.key_for(item_id), item)
        return item

    @log_database_operation("delete_master_item")
    def delete(self, item_type: str, item_id: str) -> Record:
        """
        Delete an item. References held by catalog records are left as-is.

        Args:
            item_type: Master data type
            item_id: Item id

        Returns:
            Snapshot of the deleted item

        Raises:
            NotFoundError: If the item does not exist
        """
        config = get_type_config(item_type)
        item_id = self._require_id(item_id)
        key = config.key_for(item_id)

        raw = self.store.get(key)
        if raw is None:
            raise NotFoundError(config.display_name, item_id)

        self.store.delete(key)

        try:
            return decode_record(raw)
        except SerializationError as e:
            safe_logger(self.logger).log_warning(
                "Deleted malformed entry", {"key": key, "error": str(e)}
            )
            return {"id": item_id, "type": config.type_name}

    def save(self, item_type: str, item: Record) -> Record:
        """
        Persist an item as-is under its key, without validation.

        Args:
            item_type: Master data type
            item: Item with an ``id``

        Returns:
            The stored item
        """
        config = get_type_config(item_type)
        if not isinstance(item, dict):
            raise ValidationError("Item must be a JSON object")
        item_id = self._require_id(item.get("id"))
        self._save(config.key_for(item_id), item)
        return item

    # -------------------------------------------------------------------------
    # Validation
    # -------------------------------------------------------------------------

    @staticmethod
    def _require_id(item_id: Any) -> str:
        normalized = DataValidator.normalize_string(item_id)
        if normalized is None:
            raise ValidationError("ID parameter is required")
        return normalized

    @staticmethod
    def _require_payload(payload: Any) -> Dict[str, Any]:
        if not isinstance(payload, dict):
            raise ValidationError("Request body must be a JSON object")
        return payload

    @staticmethod
    def _validate_identity(config: MasterTypeConfig, item: Record) -> None:
        """Check the identifying name and parent id of a merged item."""
        if config.identifying_name(item) is None:
            if len(config.name_fields) > 1:
                raise ValidationError("At least one title (EN or JP) is required")
            raise ValidationError("Name is required")

        if config.is_hierarchical and not item.get(config.parent_field):
            raise ValidationError(f"{config.parent_label} is required")

    def _find_duplicate(
        self,
        config: MasterTypeConfig,
        item: Record,
        exclude_id: Optional[str] = None,
    ) -> Optional[Tuple[str, str, Record]]:
        """
        Find a stored item whose identifying name collides with item.

        Args:
            config: Type configuration
            item: Candidate item
            exclude_id: Id of the item being updated

        Returns:
            (name field, conflicting id, stored item) or None
        """
        candidate = {
            name_field: DataValidator.name_key(item.get(name_field))
            for name_field in config.name_fields
        }
        candidate = {name: key for name, key in candidate.items() if key is not None}
        if not candidate:
            return None

        parent = item.get(config.parent_field) if config.is_hierarchical else None
        excluded_key = config.key_for(exclude_id) if exclude_id else None

        for key, stored in self._scan(config.prefix):
            stored_id = stored.get("id") or key[len(config.prefix):]
            if exclude_id is not None and (key == excluded_key or stored_id == exclude_id):
                continue
            if config.is_hierarchical:
                stored_parent = DataValidator.normalize_string(
                    stored.get(config.parent_field)
                )
                if stored_parent != parent:
                    continue
            for name_field, name_key in candidate.items():
                if DataValidator.name_key(stored.get(name_field)) == name_key:
                    return name_field, stored_id, stored
        return None

    def _check_duplicate(
        self,
        config: MasterTypeConfig,
        item: Record,
        exclude_id: Optional[str] = None,
    ) -> None:
        """
        Raise DuplicateNameError if the item's name is taken in its scope.
        """
        match = self._find_duplicate(config, item, exclude_id)
        if match is None:
            return
        name_field, conflicting_id, _ = match
        safe_logger(self.logger).log_info(
            "Duplicate name rejected",
            {
                "type": config.type_name,
                "name": item[name_field],
                "conflicting_id": conflicting_id,
            },
        )
        raise DuplicateNameError(config.display_name, item[name_field], conflicting_id)

    # -------------------------------------------------------------------------
    # Field Processing
    # -------------------------------------------------------------------------

    def _apply_payload(
        self, config: MasterTypeConfig, item: Record, payload: Dict[str, Any]
    ) -> Record:
        """
        Merge payload fields accepted by the type into item.

        Args:
            config: Type configuration
            item: Starting record (empty on create, stored item on update)
            payload: Incoming data

        Returns:
            The merged record
        """
        strings = config.name_fields + config.string_fields
        if config.is_hierarchical:
            strings += (config.parent_field,)

        self._merge_fields(item, payload, strings, DataValidator.normalize_string)
        self._merge_fields(
            item, payload, config.list_fields, DataValidator.normalize_string_list
        )
        self._merge_fields(item, payload, config.token_list_fields, TokenList.normalize)
        self._merge_fields(item, payload, config.int_fields, DataValidator.normalize_int)

        for field_name in config.object_fields:
            if field_name in payload:
                value = self._require_object(field_name, payload[field_name])
                if value:
                    item[field_name] = value
                else:
                    item.pop(field_name, None)

        for field_name in config.merged_object_fields:
            if field_name in payload:
                value = self._require_object(field_name, payload[field_name])
                if value is None:
                    item.pop(field_name, None)
                else:
                    current = item.get(field_name)
                    merged = dict(current) if isinstance(current, dict) else {}
                    merged.update(value)
                    item[field_name] = merged

        if config.links_field:
            self._merge_fields(
                item, payload, (config.links_field,), self._normalize_links
            )

        if config.has_photos:
            self._merge_photos(item, payload)

        for field_name in config.cleared_fields:
            item.pop(field_name, None)

        for field_name, default in config.defaults.items():
            if item.get(field_name) is None:
                item[field_name] = default

        return item

    @staticmethod
    def _require_object(field_name: str, value: Any) -> Optional[Dict[str, Any]]:
        if value is None:
            return None
        if not isinstance(value, dict):
            raise ValidationError(f"{field_name} must be an object")
        return value

    @staticmethod
    def _normalize_links(value: Any) -> Optional[List[Dict[str, str]]]:
        """
        Normalize labeled links.

        Accepts a list of {id, label, url} objects (entries lacking a label
        or url are dropped, missing ids are generated) or a single URL
        string, which becomes one "Website" link.
        """
        if isinstance(value, str):
            url = value.strip()
            if not url:
                return None
            return [{"id": generate_id(), "label": WEBSITE_LABEL, "url": url}]

        if not isinstance(value, list):
            return None

        links = []
        for link in value:
            if not isinstance(link, dict):
                continue
            label = DataValidator.normalize_string(link.get("label"))
            url = DataValidator.normalize_string(link.get("url"))
            if label is None or url is None:
                continue
            link_id = DataValidator.normalize_string(link.get("id")) or generate_id()
            links.append({"id": link_id, "label": label, "url": url})
        return links or None

    @staticmethod
    def _merge_photos(item: Record, payload: Dict[str, Any]) -> None:
        """
        Combine profilePicture and photo into one de-duplicated list.

        The first picture becomes ``profilePicture``, the rest ``photo``.
        A key absent from the payload contributes its stored value.
        """
        if "profilePicture" not in payload and "photo" not in payload:
            return

        primary = payload.get("profilePicture", item.get("profilePicture"))
        extra = payload.get("photo", item.get("photo"))
        if not isinstance(extra, list):
            extra = [extra]

        photos: List[str] = []
        for candidate in [primary] + extra:
            url = DataValidator.normalize_string(candidate)
            if url is not None and url not in photos:
                photos.append(url)

        item.pop("profilePicture", None)
        item.pop("photo", None)
        if photos:
            item["profilePicture"] = photos[0]
        if len(photos) > 1:
            item["photo"] = photos[1:]
