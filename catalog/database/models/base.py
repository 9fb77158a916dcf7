"""
Base Classes
------------

Foundational ORM classes for the catalog database.

Classes:
    - Base: Declarative base for all SQLAlchemy models
    - TimestampMixin: Mixin providing a last-write timestamp
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from datetime import datetime, timezone

# --- Third party ---
from sqlalchemy import DateTime
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


# --- Base ORM class ---
class Base(DeclarativeBase):
    """
    Base class for all ORM models.

    Serves as the declarative base for SQLAlchemy models and provides
    access to the metadata object for table creation and migrations.
    """

    pass


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TimestampMixin:
    """
    Mixin recording when a row was last written.

    Attributes:
        written_at: Timestamp of the last insert or update
    """

    written_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        onupdate=_utcnow,
        doc="Timestamp of the last write",
    )
