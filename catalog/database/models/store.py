"""
Key-Value Store Model
---------------------

The single table backing the catalog's key-value namespace.

Every record of the system lives in this table under a string key. Key
prefixes act as implicit tables ("partitions"):

    master_{type}_{id}   master data items (actor, tag, series, ...)
    movie:{id}           catalog records
    scmovie:{id}         secondary catalog records

Values are opaque JSON text; encoding is done by catalog.database.codec.
"""
# --- Annotations ---
from __future__ import annotations

# --- Third party ---
from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

# --- Local imports ---
from .base import Base, TimestampMixin


class KVEntry(TimestampMixin, Base):
    """
    One key-value pair.

    Attributes:
        key: Unique string key, including its partition prefix
        value: Encoded value
    """

    __tablename__ = "kv_store"

    key: Mapped[str] = mapped_column(String(255), primary_key=True)
    value: Mapped[str] = mapped_column(Text, nullable=False)

    def __repr__(self) -> str:
        return f"<KVEntry(key={self.key!r})>"
