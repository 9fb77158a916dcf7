#!/usr/bin/env python3
"""
manager.py
--------------------
Database manager for the catalog master data system.

Provides the CatalogDB class that owns the SQLite engine behind the
key-value store and wires the components that run on top of it.
Handles:
    - Initialization of the database engine and sessionmaker
    - Schema creation and Alembic versioning
    - Construction of the key-value store, the master data repository,
      the rename propagation coordinator and the sync-aware dispatcher
    - Logging with rotation

Notes
==============
- Every store primitive runs in its own session; there are no
  cross-key transactions
- Migrations are handled via Alembic, configured programmatically
- Retry logic for SQLite lock contention lives in the store
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Dict, Iterator, Optional, Union

# --- Third party ---
from sqlalchemy import Engine, create_engine, inspect
from sqlalchemy.orm import Session, sessionmaker

from alembic import command
from alembic.config import Config
from alembic.runtime.migration import MigrationContext

# --- Local imports ---
from catalog.core.exceptions import DatabaseError
from catalog.core.logging_manager import CatalogLogger
from catalog.core.paths import ALEMBIC_DIR, ALEMBIC_INI
from .decorators import handle_db_errors, log_database_operation
from .kv_store import DEFAULT_PAGE_SIZE, KeyValueStore
from .managers import MasterDataManager
from .models import Base, KVEntry


class CatalogDB:
    """
    Main database manager for the catalog key-value database.

    Attributes:
        db_path: Filesystem path to the SQLite database file
        alembic_dir: Filesystem path to the Alembic script directory
        engine: SQLAlchemy engine instance
        SessionLocal: SQLAlchemy session factory
        logger: Optional CatalogLogger

    Usage:
        db = CatalogDB("~/catalog/data/kv/catalog.db")
        db.master_data.create("tag", {"name": "Drama"})
        result = db.dispatcher.update_with_sync("actress", item_id, payload)
    """

    # ---- Initialization ----
    def __init__(
        self,
        db_path: Union[str, Path],
        alembic_dir: Union[str, Path] = ALEMBIC_DIR,
        log_dir: Optional[Union[str, Path]] = None,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> None:
        """
        Initialize database engine, session factory and components.

        Args:
            db_path: Path to the SQLite file
            alembic_dir: Path to the Alembic directory
            log_dir: Directory for log files (optional)
            page_size: Rows fetched per page during prefix scans
        """
        self.db_path = Path(db_path).expanduser().resolve()
        self.alembic_dir = Path(alembic_dir).expanduser().resolve()
        self.page_size = page_size

        # --- Logging ---
        if log_dir:
            self.log_dir = Path(log_dir).expanduser().resolve() / "system"
            self.logger: Optional[CatalogLogger] = CatalogLogger(
                self.log_dir,
                component_name="database",
            )
        else:
            self.logger = None

        self._setup_engine()

        # --- Components ---
        self._store = KeyValueStore(
            self.SessionLocal, logger=self.logger, page_size=self.page_size
        )
        self._master_data = MasterDataManager(self._store, self.logger)
        self._propagation = None
        self._dispatcher = None

    def _setup_engine(self) -> None:
        """Initialize database engine and session factory."""
        try:
            if self.logger:
                self.logger.log_operation(
                    "database_init_start",
                    {
                        "db_path": str(self.db_path),
                        "alembic_dir": str(self.alembic_dir),
                    },
                )

            self.db_path.parent.mkdir(parents=True, exist_ok=True)

            self.engine: Engine = create_engine(
                f"sqlite:///{self.db_path}",
                echo=False,
                pool_pre_ping=True,
            )

            self.SessionLocal: sessionmaker = sessionmaker(
                bind=self.engine,
                autoflush=True,
                expire_on_commit=False,
            )

            self.alembic_cfg: Config = self._setup_alembic()

            if not inspect(self.engine).has_table(KVEntry.__tablename__):
                self.initialize_schema()

            if self.logger:
                self.logger.log_operation("database_init_complete", {"success": True})

        except Exception as e:
            if self.logger:
                self.logger.log_error(e, {"operation": "database_init"})
            raise DatabaseError(f"Database initialization failed: {e}") from e

    # ---- Session Management ----
    @contextmanager
    def session_scope(self) -> Iterator[Session]:
        """
        Provide a transactional scope for direct ORM access.

        The store manages its own sessions; this scope is for maintenance
        tasks that read the table directly.
        """
        session = self.SessionLocal()
        session_id = datetime.now().strftime("%Y%m%d_%H%M%S_%f")

        if self.logger:
            self.logger.log_debug("session_start", {"session_id": session_id})

        try:
            yield session
            session.commit()
        except Exception as e:
            session.rollback()
            if self.logger:
                self.logger.log_error(
                    e, {"operation": "session_rollback", "session_id": session_id}
                )
            raise
        finally:
            session.close()

    # -------------------------------------------------------------------------
    # Components
    # -------------------------------------------------------------------------

    @property
    def store(self) -> KeyValueStore:
        """The key-value store."""
        return self._store

    @property
    def master_data(self) -> MasterDataManager:
        """The master data repository."""
        return self._master_data

    @property
    def propagation(self):
        """The rename propagation coordinator (created on first use)."""
        if self._propagation is None:
            from catalog.sync.propagation import PropagationCoordinator

            self._propagation = PropagationCoordinator(self._store, self.logger)
        return self._propagation

    @property
    def dispatcher(self):
        """The sync-aware update dispatcher (created on first use)."""
        if self._dispatcher is None:
            from catalog.sync.dispatcher import SyncUpdateDispatcher

            self._dispatcher = SyncUpdateDispatcher(
                self._master_data, self.propagation, self.logger
            )
        return self._dispatcher

    # -------------------------------------------------------------------------
    # Schema & Migrations
    # -------------------------------------------------------------------------

    def _setup_alembic(self) -> Config:
        """Setup Alembic configuration."""
        try:
            if self.logger:
                self.logger.log_debug("Setting up Alembic configuration...")

            alembic_cfg = Config(str(ALEMBIC_INI)) if ALEMBIC_INI.exists() else Config()
            alembic_cfg.set_main_option("script_location", str(self.alembic_dir))
            alembic_cfg.set_main_option("sqlalchemy.url", f"sqlite:///{self.db_path}")
            # Keep the application logging setup when running in-process
            alembic_cfg.attributes["configure_logger"] = False
            return alembic_cfg
        except Exception as e:
            if self.logger:
                self.logger.log_error(e, {"operation": "setup_alembic"})
            raise DatabaseError(f"Alembic configuration failed: {e}") from e

    def initialize_schema(self) -> None:
        """
        Create the schema if needed.

        Actions:
            If the database has no tables,
                creates all tables from the ORM models
                stamps the Alembic revision to head
            If not,
                runs pending migrations
        """
        try:
            table_names = inspect(self.engine).get_table_names()

            if not table_names:
                Base.metadata.create_all(bind=self.engine)
                try:
                    command.stamp(self.alembic_cfg, "head")
                    if self.logger:
                        self.logger.log_operation(
                            "fresh_database_created",
                            {"tables_created": len(Base.metadata.tables)},
                        )
                except Exception as e:
                    if self.logger:
                        self.logger.log_error(e, {"operation": "stamp_database"})
            else:
                self.upgrade_database()
                if self.logger:
                    self.logger.log_operation(
                        "existing_database_migrated",
                        {"table_count": len(table_names)},
                    )

        except DatabaseError:
            raise
        except Exception as e:
            raise DatabaseError(f"Could not initialize database: {e}") from e

    @handle_db_errors
    @log_database_operation("upgrade_database")
    def upgrade_database(self, revision: str = "head") -> None:
        """
        Upgrade the database schema to the specified Alembic revision.

        Args:
            revision: Target revision (defaults to 'head')
        """
        try:
            command.upgrade(self.alembic_cfg, revision)
        except Exception as e:
            raise DatabaseError(f"Database upgrade failed: {e}") from e

    def get_migration_history(self) -> Dict[str, Optional[str]]:
        """
        Get the current migration status of the database.

        Returns:
            Dictionary with 'current_revision' and 'status'
            ('up_to_date' or 'needs_migration'), or 'error'
        """
        try:
            with self.engine.connect() as conn:
                context = MigrationContext.configure(conn)
                current_rev = context.get_current_revision()

            return {
                "current_revision": current_rev,
                "status": "up_to_date" if current_rev else "needs_migration",
            }
        except Exception as e:
            if self.logger:
                self.logger.log_error(e, {"operation": "get_migration_history"})
            return {"error": str(e)}

    # ----- Context Manager Support -----
    def close(self) -> None:
        """Dispose of the engine's connection pool."""
        self.engine.dispose()

    def __enter__(self) -> "CatalogDB":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        del exc_type, exc_val, exc_tb
        self.close()
