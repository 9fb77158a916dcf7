"""
Master Data Commands
--------------------

Browse and edit master data items.

Commands:
    - list: List every item of a type
    - show: Display one item
    - create: Create an item
    - update: Update an item, optionally propagating a rename
    - rename: Rename an item and propagate the new name
    - delete: Delete an item (catalog references are kept)

Payloads come from a YAML or JSON file (--file) and/or repeated
``--set key=value`` options. ``--set key=`` clears a field.
"""
import json
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import click
import yaml

from catalog.core.exceptions import CatalogError, NotFoundError, ValidationError
from catalog.core.logging_manager import handle_cli_error
from catalog.database.managers import VALID_TYPES, get_type_config
from . import get_db

TYPE_CHOICE = click.Choice(VALID_TYPES)


def _dump(data: Any) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False)


def load_payload(file: Optional[str], assignments: Tuple[str, ...]) -> Dict[str, Any]:
    """
    Build a payload from a file and key=value assignments.

    Args:
        file: Path to a YAML or JSON mapping, or None
        assignments: ``key=value`` strings; an empty value means None

    Returns:
        Payload dictionary

    Raises:
        ValidationError: If the file is not a mapping or an assignment is
            malformed
    """
    payload: Dict[str, Any] = {}

    if file:
        try:
            with Path(file).open(encoding="utf-8") as f:
                loaded = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValidationError(f"Cannot parse payload file {file}", str(e)) from e
        if loaded is None:
            loaded = {}
        if not isinstance(loaded, dict):
            raise ValidationError(f"Payload file {file} must contain a mapping")
        payload.update(loaded)

    for assignment in assignments:
        key, sep, value = assignment.partition("=")
        key = key.strip()
        if not sep or not key:
            raise ValidationError(f"Expected key=value, got: {assignment}")
        payload[key] = value if value else None

    return payload


@click.command("list")
@click.argument("item_type", type=TYPE_CHOICE)
@click.option("--json", "as_json", is_flag=True, help="Print items as JSON")
@click.pass_context
def list_items(ctx, item_type, as_json):
    """List every item of a type."""
    try:
        db = get_db(ctx)
        items = db.master_data.list_by_type(item_type)

        if as_json:
            click.echo(_dump(items))
            return

        click.echo(f"\n📋 {item_type} ({len(items)}):\n")
        config = get_type_config(item_type)
        for item in items:
            name = config.identifying_name(item) or ""
            click.echo(f"  {item.get('id', '?')}  {name}")

    except CatalogError as e:
        handle_cli_error(ctx, e, "list", {"type": item_type})


@click.command()
@click.argument("item_type", type=TYPE_CHOICE)
@click.argument("item_id")
@click.pass_context
def show(ctx, item_type, item_id):
    """Display one item as JSON."""
    try:
        db = get_db(ctx)
        item = db.master_data.find_by_id(item_type, item_id)
        if item is None:
            raise NotFoundError(item_type, item_id)
        click.echo(_dump(item))

    except CatalogError as e:
        handle_cli_error(ctx, e, "show", {"type": item_type, "id": item_id})


@click.command()
@click.argument("item_type", type=TYPE_CHOICE)
@click.option("--name", help="Identifying name (titleEn for series)")
@click.option("--file", "payload_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--set", "assignments", multiple=True, metavar="KEY=VALUE")
@click.pass_context
def create(ctx, item_type, name, payload_file, assignments):
    """Create an item."""
    try:
        payload = load_payload(payload_file, assignments)
        if name is not None:
            payload[get_type_config(item_type).name_fields[0]] = name

        db = get_db(ctx)
        item = db.master_data.create(item_type, payload)
        click.echo(f"✅ Created {item_type} {item['id']}")
        click.echo(_dump(item))

    except CatalogError as e:
        handle_cli_error(ctx, e, "create", {"type": item_type})


@click.command()
@click.argument("item_type", type=TYPE_CHOICE)
@click.argument("item_id")
@click.option("--file", "payload_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--set", "assignments", multiple=True, metavar="KEY=VALUE")
@click.option(
    "--sync/--no-sync",
    default=True,
    show_default=True,
    help="Propagate a rename to catalog records",
)
@click.pass_context
def update(ctx, item_type, item_id, payload_file, assignments, sync):
    """Update an item."""
    try:
        payload = load_payload(payload_file, assignments)
        db = get_db(ctx)

        if sync:
            result = db.dispatcher.update_with_sync(item_type, item_id, payload)
            item = result.item
            _echo_report(result.report)
        else:
            item = db.master_data.update(item_type, item_id, payload)

        click.echo(f"✅ Updated {item_type} {item_id}")
        click.echo(_dump(item))

    except CatalogError as e:
        handle_cli_error(ctx, e, "update", {"type": item_type, "id": item_id})


@click.command()
@click.argument("item_type", type=TYPE_CHOICE)
@click.argument("item_id")
@click.argument("new_name")
@click.pass_context
def rename(ctx, item_type, item_id, new_name):
    """Rename an item and rewrite catalog references."""
    try:
        db = get_db(ctx)
        result = db.dispatcher.rename(item_type, item_id, new_name)
        click.echo(f"✅ Renamed {item_type} {item_id} to {new_name}")
        _echo_report(result.report)

    except CatalogError as e:
        handle_cli_error(
            ctx, e, "rename", {"type": item_type, "id": item_id, "new_name": new_name}
        )


@click.command()
@click.argument("item_type", type=TYPE_CHOICE)
@click.argument("item_id")
@click.confirmation_option(
    prompt="Delete this item? Catalog records keep referencing its name."
)
@click.pass_context
def delete(ctx, item_type, item_id):
    """Delete an item."""
    try:
        db = get_db(ctx)
        item = db.master_data.delete(item_type, item_id)
        click.echo(f"🗑️  Deleted {item_type} {item.get('id', item_id)}")

    except CatalogError as e:
        handle_cli_error(ctx, e, "delete", {"type": item_type, "id": item_id})


def _echo_report(report) -> None:
    click.echo(
        f"🔄 Catalog records updated: {report.records_updated}, "
        f"secondary records updated: {report.secondary_records_updated}"
    )
