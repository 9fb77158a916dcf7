#!/usr/bin/env python3
"""
managers package
--------------------
Record managers for the catalog key-value database.

Available Managers:
    BaseManager: Abstract base class with record I/O and merge helpers
    MasterDataManager: Config-driven repository for all master data types

Usage:
    from catalog.database.managers import MasterDataManager

    manager = MasterDataManager(store, logger)
    actress = manager.create("actress", {"name": "Yui Hatano"})
"""
from .base_manager import BaseManager
from .master_data_manager import MasterDataManager
from .master_types import MASTER_TYPES, VALID_TYPES, MasterTypeConfig, get_type_config

__all__ = [
    "BaseManager",
    "MasterDataManager",
    "MasterTypeConfig",
    "MASTER_TYPES",
    "VALID_TYPES",
    "get_type_config",
]
