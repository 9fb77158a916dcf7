#!/usr/bin/env python3
"""
logging_manager.py
--------------------
Log files for the catalog components.

Two components write logs, each through its own CatalogLogger:

    database   CatalogDB and everything it wires: the key-value store,
               the master data repository and rename propagation
               ({log_dir}/system/database.log)
    cli        catalogdb commands ({log_dir}/operations/cli.log)

Every component also writes ERROR records to an ``errors.log`` next to
its component log. Warnings are echoed to the console.

Record layout:
    2026-10-19 09:00:00 - catalog.database - INFO - OPERATION - rename_propagated: {"kind": "actress", ...}

The logger is optional everywhere: components hold ``Optional[CatalogLogger]``
and call ``safe_logger(self.logger)``, which falls back to a NullLogger.
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import json
import logging
import sys
import traceback
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Dict, Optional

# --- Third party imports ---
import click

ROOT_LOGGER = "catalog"
MAX_LOG_BYTES = 5 * 1024 * 1024
LOG_BACKUPS = 3

FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
CONSOLE_FORMAT = "%(levelname)s [%(name)s] %(message)s"


def _rotating_handler(path: Path, level: int) -> RotatingFileHandler:
    handler = RotatingFileHandler(
        path, maxBytes=MAX_LOG_BYTES, backupCount=LOG_BACKUPS, encoding="utf-8"
    )
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    return handler


def _with_details(message: str, details: Optional[Dict[str, Any]]) -> str:
    if not details:
        return message
    return f"{message}: {json.dumps(details, default=str, ensure_ascii=False)}"


def format_cli_error(error: Exception, show_traceback: bool = False) -> str:
    """
    One-line error message for the terminal.

    Examples:
        >>> format_cli_error(NotFoundError("actress", "42"))
        '❌ NotFoundError: Actress not found'
    """
    message = f"❌ {type(error).__name__}: {error}"
    if show_traceback and error.__traceback__ is not None:
        trace = "".join(traceback.format_exception(type(error), error, error.__traceback__))
        message = f"{message}\n\n{trace}"
    return message


class CatalogLogger:
    """
    File logger for one catalog component.

    Attributes:
        log_dir: Directory holding the component log and errors.log
        component_name: "database", "cli", ...
        main_logger: ``catalog.{component}``, DEBUG and up
        error_logger: ``catalog.{component}.errors``, ERROR only
    """

    def __init__(self, log_dir: Path, component_name: str = "database") -> None:
        self.log_dir = Path(log_dir)
        self.component_name = component_name
        self._setup_loggers()

    def _setup_loggers(self) -> None:
        self.log_dir.mkdir(parents=True, exist_ok=True)

        self.main_logger = logging.getLogger(f"{ROOT_LOGGER}.{self.component_name}")
        self.error_logger = logging.getLogger(
            f"{ROOT_LOGGER}.{self.component_name}.errors"
        )
        # Re-creating a component logger (one per CatalogDB) replaces its handlers
        for logger, level in ((self.main_logger, logging.DEBUG), (self.error_logger, logging.ERROR)):
            for handler in list(logger.handlers):
                logger.removeHandler(handler)
                handler.close()
            logger.setLevel(level)
            logger.propagate = False

        self.main_logger.addHandler(
            _rotating_handler(self.log_dir / f"{self.component_name}.log", logging.DEBUG)
        )
        self.error_logger.addHandler(
            _rotating_handler(self.log_dir / "errors.log", logging.ERROR)
        )

        console = logging.StreamHandler()
        console.setLevel(logging.WARNING)
        console.setFormatter(logging.Formatter(CONSOLE_FORMAT))
        self.main_logger.addHandler(console)

    # ---- Levels ----
    def log_operation(self, operation: str, details: Optional[Dict[str, Any]] = None) -> None:
        """Record a completed store, repository or propagation operation."""
        self.main_logger.info(_with_details(f"OPERATION - {operation}", details))

    def log_debug(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        self.main_logger.debug(_with_details(message, details))

    def log_info(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        self.main_logger.info(_with_details(message, details))

    def log_warning(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        self.main_logger.warning(_with_details(message, details))

    def log_error(self, error: Exception, context: Optional[Dict[str, Any]] = None) -> None:
        """
        Write an error, its context and its traceback to errors.log.

        The component log gets a one-line pointer so a scan or command
        can be followed in a single file.
        """
        summary = f"{type(error).__name__}: {error}"
        lines = [summary]
        if context:
            lines.append("Context: " + ", ".join(f"{k}={v}" for k, v in context.items()))
        if error.__traceback__ is not None:
            lines.append(
                "".join(traceback.format_exception(type(error), error, error.__traceback__))
            )

        self.error_logger.error("\n".join(lines))
        self.main_logger.debug(_with_details(f"ERROR - {summary}", context))

    def log_cli_error(
        self,
        error: Exception,
        context: Optional[Dict[str, Any]] = None,
        show_traceback: bool = False,
    ) -> str:
        """Log a failed command and return the message to print."""
        self.log_error(error, context or {"source": "cli"})
        return format_cli_error(error, show_traceback)


class NullLogger:
    """CatalogLogger stand-in for components created without a log directory."""

    def log_operation(self, operation: str, details: Optional[Dict[str, Any]] = None) -> None:
        pass

    def log_debug(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        pass

    def log_info(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        pass

    def log_warning(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        pass

    def log_error(self, error: Exception, context: Optional[Dict[str, Any]] = None) -> None:
        pass

    def log_cli_error(
        self,
        error: Exception,
        context: Optional[Dict[str, Any]] = None,
        show_traceback: bool = False,
    ) -> str:
        return format_cli_error(error, show_traceback)


_null_logger = NullLogger()


def safe_logger(logger: Optional[CatalogLogger]) -> CatalogLogger:
    """Return logger, or the shared NullLogger when it is None."""
    return logger if logger is not None else _null_logger  # type: ignore[return-value]


def handle_cli_error(
    ctx: "click.Context",
    error: Exception,
    operation: str,
    additional_context: Optional[Dict[str, Any]] = None,
    exit_code: int = 1,
) -> None:
    """
    Report a failed catalogdb command and exit.

    The full error goes to the CLI logger; stderr gets one line, plus the
    traceback when --verbose is set.

    Args:
        ctx: Click context whose obj holds "logger" and "verbose"
        error: Exception raised by the command
        operation: Command name (e.g. 'rename', 'create')
        additional_context: Extra context such as type and id
        exit_code: Process exit code
    """
    context = {"operation": operation, **(additional_context or {})}
    message = safe_logger(ctx.obj.get("logger")).log_cli_error(
        error, context, show_traceback=ctx.obj.get("verbose", False)
    )
    click.echo(message, err=True)
    sys.exit(exit_code)
