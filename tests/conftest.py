"""
conftest.py
-----------
Shared pytest fixtures for catalog tests.

Provides fixtures for:
- Database setup and teardown
- Component instances (store, repository, coordinator, dispatcher, api)
- Catalog record factories
"""
import pytest
from pathlib import Path
from tempfile import TemporaryDirectory

from catalog.database.codec import decode_record, encode_record


# ----- Path Fixtures -----

@pytest.fixture
def tmp_dir():
    """Create a temporary directory for test file operations."""
    with TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


# ----- Test Database Fixtures -----

@pytest.fixture
def test_db_path(tmp_dir):
    """Create temporary test database path."""
    return tmp_dir / "test.db"


@pytest.fixture
def test_db(test_db_path):
    """
    Create test database instance with schema.

    Returns a CatalogDB instance with an initialized schema.
    Database is torn down after the test.
    """
    from catalog.database.manager import CatalogDB

    db = CatalogDB(db_path=test_db_path)

    yield db

    db.close()
    if test_db_path.exists():
        test_db_path.unlink()


@pytest.fixture
def store(test_db):
    """Key-value store of the test database."""
    return test_db.store


@pytest.fixture
def master_data(test_db):
    """Master data repository of the test database."""
    return test_db.master_data


@pytest.fixture
def coordinator(test_db):
    """Propagation coordinator of the test database."""
    return test_db.propagation


@pytest.fixture
def dispatcher(test_db):
    """Sync-aware update dispatcher of the test database."""
    return test_db.dispatcher


@pytest.fixture
def api(test_db):
    """Master data handlers bound to the test database."""
    from catalog.api.handlers import MasterDataApi

    return MasterDataApi.from_db(test_db)


# ----- Catalog Record Factories -----

@pytest.fixture
def put_movie(store):
    """Store a catalog record under movie:{id}."""

    def _put(movie_id, **fields):
        record = {"id": movie_id, **fields}
        store.set(f"movie:{movie_id}", encode_record(record))
        return record

    return _put


@pytest.fixture
def put_scmovie(store):
    """Store a secondary catalog record under scmovie:{id}."""

    def _put(movie_id, **fields):
        record = {"id": movie_id, **fields}
        store.set(f"scmovie:{movie_id}", encode_record(record))
        return record

    return _put


@pytest.fixture
def read_record(store):
    """Read and decode a stored record by key."""

    def _read(key):
        raw = store.get(key)
        return decode_record(raw) if raw is not None else None

    return _read
