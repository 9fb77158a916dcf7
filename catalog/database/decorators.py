#!/usr/bin/env python3
"""
decorators.py
-------------
Decorators shared by the key-value store, CatalogDB and the master data
repository.

    handle_db_errors        SQLAlchemy errors become DatabaseError
    log_database_operation  outcome and duration of repository writes

Usage:
    class KeyValueStore:
        @handle_db_errors
        def get(self, key): ...

    class MasterDataManager(BaseManager):
        @log_database_operation("create_master_item")
        def create(self, item_type, payload): ...
"""
# --- Standard library imports ---
import time
from functools import wraps
from typing import Any, Callable, Dict

# --- Third party imports ---
from sqlalchemy.exc import SQLAlchemyError

# --- Local imports ---
from catalog.core.exceptions import DatabaseError, NotFoundError, ValidationError
from catalog.core.logging_manager import safe_logger

# Caller mistakes; logged at info level, never in errors.log
REJECTION_ERRORS = (ValidationError, NotFoundError)


def log_database_operation(operation_name: str):
    """
    Log the outcome of a repository write.

    When the wrapped method's first argument is a string it is recorded as
    the master data type, and the id of a returned item is recorded too.
    Rejected writes are logged at info level, other failures go to the
    error log. Exceptions are always re-raised.

    Args:
        operation_name: Name recorded in the component log
    """

    def decorator(function: Callable) -> Callable:
        @wraps(function)
        def wrapper(self, *args, **kwargs):
            logger = safe_logger(getattr(self, "logger", None))
            details: Dict[str, Any] = {}
            if args and isinstance(args[0], str):
                details["type"] = args[0]

            started = time.perf_counter()
            try:
                result = function(self, *args, **kwargs)
            except REJECTION_ERRORS as e:
                details["reason"] = str(e)
                logger.log_info(f"{operation_name} rejected", details)
                raise
            except Exception as e:
                logger.log_error(e, {"operation": operation_name, **details})
                raise

            if isinstance(result, dict) and "id" in result:
                details["id"] = result["id"]
            details["duration_ms"] = round((time.perf_counter() - started) * 1000, 2)
            logger.log_operation(operation_name, details)
            return result

        return wrapper

    return decorator


def handle_db_errors(function: Callable) -> Callable:
    """
    Translate SQLAlchemy errors into DatabaseError naming the operation.

    The driver's own message (e.g. "database is locked") is kept when
    SQLAlchemy wraps one.
    """

    @wraps(function)
    def wrapper(*args, **kwargs):
        try:
            return function(*args, **kwargs)
        except SQLAlchemyError as e:
            cause = getattr(e, "orig", None) or e
            raise DatabaseError(
                f"Database operation {function.__name__} failed: {cause}"
            ) from e

    return wrapper
