#!/usr/bin/env python3
"""
Catalog Sync Package
--------------------
Keeps name references in catalog records consistent with master data.

Modules:
    - token_list: Parsing and formatting of comma-joined name lists
    - propagation: Streaming rewrite of catalog partitions after a rename
    - dispatcher: Sync-aware update entry point
"""
from .token_list import TokenList
from .propagation import PropagationCoordinator, SyncReport
from .dispatcher import SyncResult, SyncUpdateDispatcher

__all__ = [
    "TokenList",
    "PropagationCoordinator",
    "SyncReport",
    "SyncResult",
    "SyncUpdateDispatcher",
]
