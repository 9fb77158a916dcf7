#!/usr/bin/env python3
"""
Catalog Master Data CLI
-----------------------

Command-line interface for master data management.

This module provides the main CLI group and shared context setup for all
commands.

Command Structure:
    - Setup & Status (init, stats)
    - Master Data (list, show, create, update, rename, delete)

Usage:
    # Get general help
    catalogdb --help

    # Rename an actress and rewrite catalog references
    catalogdb rename actress 1729321234567-k3j9x0a2b "Maria O."
"""
import click
import logging
from pathlib import Path

from catalog.core.cli_utils import setup_logger
from catalog.core.paths import DB_PATH, LOG_DIR
from catalog.database import CatalogDB


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    default=str(DB_PATH),
    envvar="CATALOG_DB_PATH",
    show_envvar=True,
    help="Path to database file",
)
@click.option(
    "--log-dir",
    type=click.Path(),
    default=str(LOG_DIR),
    envvar="CATALOG_LOG_DIR",
    show_envvar=True,
    help="Path to log directory",
)
@click.option(
    "--verbose",
    is_flag=True,
    help="Show detailed errors and tracebacks",
)
@click.pass_context
def cli(ctx, db_path, log_dir, verbose):
    """Catalog Master Data CLI"""

    # Suppress Alembic INFO logging by default
    logging.getLogger("alembic").setLevel(logging.WARNING)

    ctx.ensure_object(dict)
    ctx.obj["db_path"] = Path(db_path)
    ctx.obj["log_dir"] = Path(log_dir)
    ctx.obj["verbose"] = verbose
    ctx.obj["logger"] = setup_logger(Path(log_dir), "cli")


def get_db(ctx) -> CatalogDB:
    """Get or create database instance from context."""
    if "db" not in ctx.obj:
        ctx.obj["db"] = CatalogDB(
            db_path=ctx.obj["db_path"],
            log_dir=ctx.obj["log_dir"],
        )
    return ctx.obj["db"]


# Import and register command modules
# These imports must come after CLI group definition
from .setup import init, stats  # noqa: E402
from .items import create, delete, list_items, rename, show, update  # noqa: E402

cli.add_command(init)
cli.add_command(stats)
cli.add_command(list_items)
cli.add_command(show)
cli.add_command(create)
cli.add_command(update)
cli.add_command(rename)
cli.add_command(delete)


if __name__ == "__main__":
    cli(obj={})
