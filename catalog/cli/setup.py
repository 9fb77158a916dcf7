"""
Setup & Status Commands
-----------------------

Database initialization and statistics.

Commands:
    - init: Create the schema and stamp the Alembic revision
    - stats: Item counts per master data type and catalog partition
"""
import click

from catalog.core.exceptions import CatalogError
from catalog.core.logging_manager import handle_cli_error
from catalog.sync.propagation import CATALOG_PREFIX, SECONDARY_PREFIX
from . import get_db


@click.command()
@click.pass_context
def init(ctx):
    """Initialize the database schema."""
    try:
        click.echo("🚀 Initializing catalog database...")
        db = get_db(ctx)
        db.initialize_schema()

        history = db.get_migration_history()
        click.echo(f"✅ Database ready at {db.db_path}")
        if history.get("current_revision"):
            click.echo(f"  Schema revision: {history['current_revision']}")

    except CatalogError as e:
        handle_cli_error(ctx, e, "init")


@click.command()
@click.pass_context
def stats(ctx):
    """Display item counts."""
    try:
        db = get_db(ctx)
        counts = db.master_data.count_by_type()

        click.echo("\n📊 Master Data:\n")
        for type_name, count in counts.items():
            click.echo(f"  {type_name:<12} {count:6d}")
        click.echo(f"\n  {'total':<12} {sum(counts.values()):6d}")

        click.echo("\n🎬 Catalog:\n")
        click.echo(f"  {'movies':<12} {db.store.count_prefix(CATALOG_PREFIX):6d}")
        click.echo(f"  {'sc movies':<12} {db.store.count_prefix(SECONDARY_PREFIX):6d}")

    except CatalogError as e:
        handle_cli_error(ctx, e, "stats")
