"""
Catalog Database Models
-----------------------

SQLAlchemy ORM models for the catalog key-value database.

Modules:
    - base: Declarative base and mixins
    - store: KVEntry, the key-value table
"""
from .base import Base, TimestampMixin
from .store import KVEntry

__all__ = [
    "Base",
    "TimestampMixin",
    "KVEntry",
]
