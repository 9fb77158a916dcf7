#!/usr/bin/env python3
"""
kv_store.py
-----------
String-keyed persistence primitive backed by the ``kv_store`` table.

Provides get/set/delete plus prefix scans. Each primitive runs in its own
short session and commits on its own, so single-key operations are atomic
but there is no atomicity across keys. Callers that need to touch several
keys (propagation scans) must tolerate partial failure themselves.

Key Features:
    - Upsert semantics for set()
    - Materialized prefix scan (get_by_prefix) for small partitions
    - Paged, key-ordered streaming scan (iter_prefix) using keyset
      pagination so memory is bounded by the page size
    - Retry with exponential backoff when SQLite reports a locked database
    - SQLAlchemy errors surfaced as DatabaseError

Usage:
    store = KeyValueStore(db.SessionLocal, logger)
    store.set("master_tag_1", '{"id": "1", "name": "Drama"}')
    for key, value in store.iter_prefix("movie:"):
        ...
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import time
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Callable, Iterator, List, Optional, Tuple

# --- Third party imports ---
from sqlalchemy import delete, select
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

# --- Local imports ---
from catalog.core.exceptions import DatabaseError
from catalog.core.logging_manager import CatalogLogger, safe_logger
from .decorators import handle_db_errors
from .models import KVEntry

DEFAULT_PAGE_SIZE = 200


class KeyValueStore:
    """
    Key-value store over a SQLAlchemy session factory.

    Attributes:
        session_factory: Callable returning a new Session
        logger: Optional logger for operation tracking
        page_size: Default number of rows fetched per scan page
    """

    def __init__(
        self,
        session_factory: Callable[[], Session],
        logger: Optional[CatalogLogger] = None,
        page_size: int = DEFAULT_PAGE_SIZE,
        max_retries: int = 3,
        retry_delay: float = 0.1,
    ) -> None:
        if page_size < 1:
            raise ValueError("page_size must be positive")
        self.session_factory = session_factory
        self.logger = logger
        self.page_size = page_size
        self.max_retries = max_retries
        self.retry_delay = retry_delay

    # -------------------------------------------------------------------------
    # Session & Retry Helpers
    # -------------------------------------------------------------------------

    @contextmanager
    def _session_scope(self) -> Iterator[Session]:
        """Run one primitive in its own transaction."""
        session = self.session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def _execute_with_retry(self, operation: Callable[[], Any]) -> Any:
        """
        Execute a store operation, retrying while the database is locked.

        Args:
            operation: Callable that performs the operation

        Returns:
            Result of the operation

        Raises:
            OperationalError: If the error is not a lock or retries are exhausted
        """
        for attempt in range(self.max_retries):
            try:
                return operation()
            except OperationalError as e:
                error_msg = str(e).lower()

                if (
                    "locked" in error_msg or "busy" in error_msg
                ) and attempt < self.max_retries - 1:
                    wait_time = self.retry_delay * (2**attempt)

                    safe_logger(self.logger).log_debug(
                        f"Database locked, retrying in {wait_time}s",
                        {"attempt": attempt + 1, "max_retries": self.max_retries},
                    )

                    time.sleep(wait_time)
                    continue

                raise

        raise DatabaseError("Retry loop completed without success")

    # -------------------------------------------------------------------------
    # Single-Key Primitives
    # -------------------------------------------------------------------------

    @handle_db_errors
    def get(self, key: str) -> Optional[str]:
        """
        Read the value stored under a key.

        Args:
            key: Full key

        Returns:
            Stored value, or None if the key is absent
        """

        def _get() -> Optional[str]:
            with self._session_scope() as session:
                entry = session.get(KVEntry, key)
                return entry.value if entry is not None else None

        return self._execute_with_retry(_get)

    @handle_db_errors
    def set(self, key: str, value: str) -> None:
        """
        Insert or replace the value stored under a key.

        Args:
            key: Full key
            value: Encoded value

        Raises:
            DatabaseError: If the value is not a string or the write fails
        """
        if not isinstance(value, str):
            raise DatabaseError(
                f"Store values must be encoded strings, got {type(value).__name__}"
            )

        def _set() -> None:
            with self._session_scope() as session:
                entry = session.get(KVEntry, key)
                if entry is None:
                    session.add(KVEntry(key=key, value=value))
                else:
                    entry.value = value
                    entry.written_at = datetime.now(timezone.utc)

        self._execute_with_retry(_set)

    @handle_db_errors
    def delete(self, key: str) -> None:
        """
        Remove a key. Removing an absent key is not an error.

        Args:
            key: Full key
        """

        def _delete() -> None:
            with self._session_scope() as session:
                session.execute(delete(KVEntry).where(KVEntry.key == key))

        self._execute_with_retry(_delete)

    # -------------------------------------------------------------------------
    # Prefix Scans
    # -------------------------------------------------------------------------

    @handle_db_errors
    def _fetch_page(
        self, prefix: str, after_key: Optional[str], limit: int
    ) -> List[Tuple[str, str]]:
        """
        Fetch one key-ordered page of a prefix scan.

        Args:
            prefix: Key prefix
            after_key: Last key of the previous page (exclusive bound)
            limit: Maximum rows to return

        Returns:
            List of (key, value) tuples
        """

        def _fetch() -> List[Tuple[str, str]]:
            query = select(KVEntry.key, KVEntry.value).where(
                KVEntry.key.startswith(prefix, autoescape=True)
            )
            if after_key is not None:
                query = query.where(KVEntry.key > after_key)
            query = query.order_by(KVEntry.key).limit(limit)

            with self._session_scope() as session:
                rows = session.execute(query).all()
            return [(row.key, row.value) for row in rows]

        return self._execute_with_retry(_fetch)

    def iter_prefix(
        self, prefix: str, page_size: Optional[int] = None
    ) -> Iterator[Tuple[str, str]]:
        """
        Stream every (key, value) pair whose key starts with prefix.

        Pages are fetched lazily in key order. Writes to keys that were
        already yielded do not disturb the scan; keys inserted behind the
        cursor during the scan are not seen.

        Args:
            prefix: Key prefix
            page_size: Rows per page (defaults to the store's page size)

        Yields:
            (key, value) tuples
        """
        limit = page_size or self.page_size
        after_key: Optional[str] = None
        pages = 0

        while True:
            page = self._fetch_page(prefix, after_key, limit)
            pages += 1
            for key, value in page:
                # SQLite LIKE is case-insensitive for ASCII
                if key.startswith(prefix):
                    yield key, value
            if len(page) < limit:
                break
            after_key = page[-1][0]

        safe_logger(self.logger).log_debug(
            "Prefix scan finished", {"prefix": prefix, "pages": pages}
        )

    def get_by_prefix(self, prefix: str) -> List[Tuple[str, str]]:
        """
        Materialize a full prefix scan.

        Args:
            prefix: Key prefix

        Returns:
            List of (key, value) tuples in key order
        """
        return list(self.iter_prefix(prefix))

    @handle_db_errors
    def count_prefix(self, prefix: str) -> int:
        """
        Count keys starting with prefix.

        Args:
            prefix: Key prefix

        Returns:
            Number of matching keys
        """

        def _count() -> int:
            with self._session_scope() as session:
                keys = session.execute(
                    select(KVEntry.key).where(
                        KVEntry.key.startswith(prefix, autoescape=True)
                    )
                ).scalars()
                return sum(1 for key in keys if key.startswith(prefix))

        return self._execute_with_retry(_count)
