"""
test_db_decorators.py
---------------------
Unit tests for database decorators.
"""
import pytest
from unittest.mock import MagicMock

from sqlalchemy.exc import IntegrityError, OperationalError

from catalog.core.exceptions import DatabaseError, DuplicateNameError
from catalog.core.logging_manager import CatalogLogger
from catalog.database.decorators import handle_db_errors, log_database_operation


class TestHandleDbErrors:
    """Test handle_db_errors."""

    def test_names_operation_and_driver_message(self):
        @handle_db_errors
        def set_value():
            raise OperationalError("UPDATE", {}, Exception("database is locked"))

        with pytest.raises(DatabaseError) as exc_info:
            set_value()

        assert str(exc_info.value) == (
            "Database operation set_value failed: database is locked"
        )
        assert isinstance(exc_info.value.__cause__, OperationalError)

    def test_integrity_error(self):
        @handle_db_errors
        def insert():
            raise IntegrityError("INSERT", {}, Exception("UNIQUE constraint failed"))

        with pytest.raises(DatabaseError, match="UNIQUE constraint failed"):
            insert()

    def test_other_errors_pass_through(self):
        @handle_db_errors
        def fail():
            raise KeyError("x")

        with pytest.raises(KeyError):
            fail()


class TestLogDatabaseOperation:
    """Test log_database_operation."""

    class Repository:
        def __init__(self, logger):
            self.logger = logger

        @log_database_operation("create_item")
        def create(self, item_type, error=None):
            if error is not None:
                raise error
            return {"id": "42", "type": item_type}

    def test_logs_type_id_and_duration(self):
        logger = MagicMock(spec=CatalogLogger)
        assert self.Repository(logger).create("tag") == {"id": "42", "type": "tag"}

        operation, details = logger.log_operation.call_args[0]
        assert operation == "create_item"
        assert details["type"] == "tag"
        assert details["id"] == "42"
        assert details["duration_ms"] >= 0

    def test_rejections_are_logged_as_info(self):
        logger = MagicMock(spec=CatalogLogger)
        with pytest.raises(DuplicateNameError):
            self.Repository(logger).create(
                "tag", error=DuplicateNameError("tag", "Drama", "1")
            )

        message, details = logger.log_info.call_args[0]
        assert message == "create_item rejected"
        assert details["reason"] == "Tag with this name already exists"
        logger.log_error.assert_not_called()
        logger.log_operation.assert_not_called()

    def test_failures_are_logged_as_errors(self):
        logger = MagicMock(spec=CatalogLogger)
        with pytest.raises(DatabaseError):
            self.Repository(logger).create("tag", error=DatabaseError("disk full"))

        error, context = logger.log_error.call_args[0]
        assert isinstance(error, DatabaseError)
        assert context == {"operation": "create_item", "type": "tag"}

    def test_works_without_logger(self):
        assert self.Repository(None).create("tag")["id"] == "42"
