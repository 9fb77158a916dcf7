#!/usr/bin/env python3
"""
Catalog Database Package
------------------------
Key-value persistence and master data management.

This package provides:
- The SQLite-backed key-value store and its JSON codec
- The CatalogDB manager (engine, schema, Alembic, component wiring)
- The master data repository
"""

from .manager import CatalogDB
from .kv_store import KeyValueStore
from .codec import decode_record, encode_record
from .decorators import handle_db_errors, log_database_operation
from .managers import MasterDataManager
from catalog.core.exceptions import DatabaseError, SerializationError, ValidationError

__all__ = [
    # Main manager
    "CatalogDB",
    # Store
    "KeyValueStore",
    "encode_record",
    "decode_record",
    # Managers
    "MasterDataManager",
    # Decorators
    "log_database_operation",
    "handle_db_errors",
    # Exceptions
    "DatabaseError",
    "SerializationError",
    "ValidationError",
]
