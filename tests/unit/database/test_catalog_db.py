"""
test_catalog_db.py
------------------
Unit tests for CatalogDB engine, schema and component wiring.
"""
from sqlalchemy import inspect, select

from catalog.database.manager import CatalogDB
from catalog.database.models import KVEntry
from catalog.sync.dispatcher import SyncUpdateDispatcher
from catalog.sync.propagation import PropagationCoordinator


class TestSchema:
    """Test schema creation and versioning."""

    def test_creates_kv_table(self, test_db):
        assert inspect(test_db.engine).has_table("kv_store")

    def test_stamps_alembic_head(self, test_db):
        history = test_db.get_migration_history()
        assert history["current_revision"] == "3f1c9a7e52d0"
        assert history["status"] == "up_to_date"

    def test_reopening_keeps_data(self, test_db_path):
        with CatalogDB(test_db_path) as db:
            db.store.set("movie:1", '{"id": "1"}')

        with CatalogDB(test_db_path) as db:
            assert db.store.get("movie:1") == '{"id": "1"}'

    def test_initialize_schema_is_repeatable(self, test_db):
        test_db.store.set("movie:1", "{}")
        test_db.initialize_schema()
        assert test_db.store.get("movie:1") == "{}"

    def test_written_at_is_recorded(self, test_db):
        test_db.store.set("movie:1", "{}")
        with test_db.session_scope() as session:
            entry = session.execute(select(KVEntry)).scalar_one()
            assert entry.written_at is not None


class TestComponents:
    """Test component wiring."""

    def test_components_share_the_store(self, test_db):
        assert test_db.master_data.store is test_db.store
        assert isinstance(test_db.propagation, PropagationCoordinator)
        assert test_db.propagation.store is test_db.store

    def test_dispatcher_is_cached(self, test_db):
        dispatcher = test_db.dispatcher
        assert isinstance(dispatcher, SyncUpdateDispatcher)
        assert test_db.dispatcher is dispatcher

    def test_log_dir_creates_system_logs(self, tmp_dir):
        db = CatalogDB(tmp_dir / "logged.db", log_dir=tmp_dir / "logs")
        try:
            assert (tmp_dir / "logs" / "system" / "database.log").exists()
        finally:
            db.close()
