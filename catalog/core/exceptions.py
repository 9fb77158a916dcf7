#!/usr/bin/env python3
"""
exceptions.py
--------------------
Custom exception classes for the catalog master data system.

This module defines the hierarchy of exceptions raised by the key-value
store, the master data repository, and the rename propagation engine.

Exception Hierarchy:
    Exception (built-in)
    └── CatalogError - Base for all catalog errors
        ├── DatabaseError - Store I/O and schema failures
        │   └── SerializationError - Stored value cannot be encoded or decoded
        ├── ValidationError - Invalid or missing input data
        │   └── DuplicateNameError - Name collision within a duplicate scope
        ├── NotFoundError - Unknown master data item
        └── PropagationRecordError - One denormalized record failed to sync

Usage:
    from catalog.core.exceptions import DuplicateNameError, NotFoundError

    try:
        manager.update("actress", item_id, {"name": "Yui"})
    except DuplicateNameError as e:
        logger.error(f"Name taken by {e.conflicting_id}")
    except NotFoundError as e:
        logger.error(f"Missing item: {e}")
"""
from __future__ import annotations

from typing import Optional


class CatalogError(Exception):
    """
    Base exception for every error raised by the catalog package.

    Catch this to handle any catalog failure, or catch the specific
    subclasses for more granular handling.
    """

    pass


class DatabaseError(CatalogError):
    """
    Exception for persistence failures.

    Raised when the key-value store cannot be read or written, when the
    schema cannot be initialized, or when a stored value cannot be
    serialized. Handlers map it to a 500 response.

    Examples:
        >>> raise DatabaseError("Database operation set failed: disk I/O error")
        >>> raise DatabaseError("Cannot serialize value for key master_tag_1")
    """

    pass


class SerializationError(DatabaseError):
    """
    Exception for values that cannot be encoded to or decoded from JSON.

    Listing operations skip entries that raise it; propagation scans count
    the record as failed and move on.
    """

    pass


class ValidationError(CatalogError):
    """
    Exception for data validation failures.

    Raised when input data fails validation checks:
    - Missing or empty identifying name
    - Missing parent id for hierarchical types
    - Unknown master data type
    - Malformed payload

    Examples:
        >>> raise ValidationError("Name is required")
        >>> raise ValidationError("Group ID is required")
    """

    def __init__(self, message: str, details: Optional[str] = None) -> None:
        super().__init__(message)
        self.details = details


class DuplicateNameError(ValidationError):
    """
    Exception for identifying-name collisions within a duplicate scope.

    The comparison is case-insensitive and ignores surrounding whitespace.
    The id of the conflicting item is attached for user feedback.

    Attributes:
        item_type: Master data type being written
        name: Candidate name that collided
        conflicting_id: Id of the item that already holds the name
    """

    def __init__(self, item_type: str, name: str, conflicting_id: str) -> None:
        self.item_type = item_type
        self.name = name
        self.conflicting_id = conflicting_id
        label = item_type.capitalize()
        super().__init__(
            f"{label} with this name already exists",
            details=(
                f'A {item_type} named "{name}" already exists '
                f"with ID: {conflicting_id}"
            ),
        )


class NotFoundError(CatalogError):
    """
    Exception for unknown master data items on update or delete.

    Attributes:
        item_type: Master data type
        item_id: Id that could not be found
    """

    def __init__(self, item_type: str, item_id: str) -> None:
        self.item_type = item_type
        self.item_id = item_id
        super().__init__(f"{item_type.capitalize()} not found")


class PropagationRecordError(CatalogError):
    """
    Exception for a single denormalized record that could not be rewritten.

    Raised inside a propagation scan when a catalog record cannot be decoded,
    rewritten or persisted, wrapping whatever error the record caused. It is always caught by the scan, logged, and counted as
    "not updated"; callers of the dispatcher never see it.

    Attributes:
        key: Store key of the failing record
    """

    def __init__(self, key: str, message: str) -> None:
        self.key = key
        super().__init__(f"{key}: {message}")
