"""
Catalog Master Data Package
===========================

Master data backend for a media metadata catalog.

Master data items (cast, studios, labels, series, tags, groups and their
generations and lineups) live in a key-value store next to the catalog
records that reference them by name. This package keeps those name
references consistent: renaming a master item rewrites every catalog
record that mentions the old name, tolerating per-record failures.

Main Components:
    - database: Key-value store, CatalogDB manager, master data repository
    - sync: Token lists, rename propagation, sync-aware updates
    - api: Handler-style entry points returning JSON responses
    - cli: ``catalogdb`` command-line interface
    - core: Logging, validation, paths, exceptions

Example Usage:
    >>> from catalog.database import CatalogDB
    >>> from catalog.core.paths import DB_PATH, LOG_DIR
    >>> db = CatalogDB(DB_PATH, log_dir=LOG_DIR)
    >>> item = db.master_data.create("actress", {"name": "Maria Ozawa"})
    >>> result = db.dispatcher.rename("actress", item["id"], "Maria O.")
"""

__version__ = "1.0.0"
