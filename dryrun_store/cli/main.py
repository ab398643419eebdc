"""CLI commands for dry-run resource operations."""

import asyncio
import json
import logging.config
from typing import Any

import click

from dryrun_store.application.services import PurchaseService, handle_exception
from dryrun_store.config import ConfigManager, ConfiguredComponentFactory, get_config, get_log_config
from dryrun_store.domain.entities import Filter, FilterOperator
from dryrun_store.domain.exceptions import ClientError

TABLES = ["users", "categories", "products", "purchases"]


def _parse_value(raw: str) -> Any:
    """Decode JSON scalars (numbers, booleans, null); anything else stays a string."""
    try:
        return json.loads(raw)
    except ValueError:
        return raw


def _parse_filter(text: str) -> Filter:
    parts = text.split(":", 2)
    if len(parts) != 3:
        raise ClientError(f"Invalid filter '{text}', expected column:operator:value.")
    column, operator, raw_value = parts

    if operator == FilterOperator.IN.value:
        value: Any = [_parse_value(item.strip()) for item in raw_value.split(",") if item.strip()]
    else:
        value = _parse_value(raw_value)
    return Filter(column, operator, value)


def _parse_columns(columns: str | None) -> list[str] | None:
    if not columns:
        return None
    parsed = [column.strip() for column in columns.split(",") if column.strip()]
    return parsed or None


def _parse_payload(data_json: str) -> dict[str, Any]:
    try:
        payload = json.loads(data_json)
    except ValueError as e:
        raise ClientError("Invalid JSON payload", raw=str(e)) from e
    if not isinstance(payload, dict):
        raise ClientError("The payload must be a JSON object")
    return payload


def _parse_item(text: str) -> dict[str, int]:
    try:
        product_id, quantity = text.split(":", 1)
        return {"product_id": int(product_id), "quantity": int(quantity)}
    except ValueError as e:
        raise ClientError(f"Invalid item '{text}', expected PRODUCT_ID:QUANTITY.") from e


def _echo(payload: dict[str, Any]) -> None:
    click.echo(json.dumps(payload, indent=2, default=str))


def _run(ctx: click.Context, operation) -> None:
    """Run ``operation(factory)`` and print its result or the rendered error."""
    factory: ConfiguredComponentFactory = ctx.obj["factory"]
    try:
        result = asyncio.run(operation(factory))
    except Exception as e:
        response = handle_exception(e)
        _echo(response.payload)
        ctx.exit(1)
    _echo({"data": result})


@click.group()
@click.option('--database', 'database_path', default=None, help='SQLite database file (defaults to configured path)')
@click.pass_context
def cli(ctx: click.Context, database_path: str | None):
    """Dry-run store: every write is simulated and rolled back."""
    if database_path:
        config_manager = ConfigManager()
        config_manager.set("database.connection.database_path", database_path)
    else:
        config_manager = get_config()

    logging.config.dictConfig(get_log_config())
    ctx.ensure_object(dict)
    ctx.obj["factory"] = ConfiguredComponentFactory(config_manager)


@cli.command('init-db')
@click.pass_context
def init_db(ctx: click.Context):
    """Create the database schema (this is persisted)."""
    async def _init(factory: ConfiguredComponentFactory):
        schema_manager = factory.create_schema_manager()
        await schema_manager.create_schema()
        return {"database": factory.database_path, "tables": await schema_manager.get_existing_tables()}

    _run(ctx, _init)


@cli.command()
@click.pass_context
def status(ctx: click.Context):
    """Report whether the database schema is in place."""
    async def _status(factory: ConfiguredComponentFactory):
        schema_ready = await factory.create_schema_manager().validate_schema()
        return {"status": "ok", "database": factory.database_path, "schema_ready": schema_ready}

    _run(ctx, _status)


@cli.command('list')
@click.argument('table', type=click.Choice(TABLES))
@click.option('--columns', default=None, help='Comma separated list of columns')
@click.option('--limit', type=int, default=None, help='Maximum number of rows')
@click.option('--filter', 'filters', multiple=True, help='Condition as column:operator:value')
@click.option('--min-date', default=None, help='Purchases created at or after this date')
@click.option('--max-date', default=None, help='Purchases created at or before this date')
@click.pass_context
def list_rows(ctx: click.Context, table: str, columns: str | None, limit: int | None, filters: tuple,
              min_date: str | None, max_date: str | None):
    """List rows of TABLE."""
    async def _list(factory: ConfiguredComponentFactory):
        service = factory.create_service(table)
        conditions = [_parse_filter(text) for text in filters]
        if isinstance(service, PurchaseService):
            return await service.list(_parse_columns(columns), conditions, limit, min_date=min_date, max_date=max_date)
        return await service.list(_parse_columns(columns), conditions, limit)

    _run(ctx, _list)


@cli.command()
@click.argument('table', type=click.Choice(TABLES))
@click.argument('record_id', type=int)
@click.option('--columns', default=None, help='Comma separated list of columns')
@click.pass_context
def get(ctx: click.Context, table: str, record_id: int, columns: str | None):
    """Show one row of TABLE (purchases include their items)."""
    async def _get(factory: ConfiguredComponentFactory):
        return await factory.create_service(table).get(record_id, _parse_columns(columns))

    _run(ctx, _get)


@cli.command()
@click.argument('table', type=click.Choice(TABLES))
@click.argument('data_json')
@click.pass_context
def insert(ctx: click.Context, table: str, data_json: str):
    """Simulate inserting DATA_JSON into TABLE."""
    async def _insert(factory: ConfiguredComponentFactory):
        return await factory.create_service(table).create(_parse_payload(data_json))

    _run(ctx, _insert)


@cli.command()
@click.argument('table', type=click.Choice(TABLES))
@click.argument('record_id', type=int)
@click.argument('data_json')
@click.pass_context
def update(ctx: click.Context, table: str, record_id: int, data_json: str):
    """Simulate applying DATA_JSON to one row of TABLE."""
    async def _update(factory: ConfiguredComponentFactory):
        return await factory.create_service(table).update(record_id, _parse_payload(data_json))

    _run(ctx, _update)


@cli.command()
@click.argument('table', type=click.Choice(TABLES))
@click.argument('record_id', type=int)
@click.argument('column')
@click.pass_context
def toggle(ctx: click.Context, table: str, record_id: int, column: str):
    """Simulate flipping a 0/1 COLUMN of one row."""
    async def _toggle(factory: ConfiguredComponentFactory):
        return await factory.create_service(table).toggle(record_id, column)

    _run(ctx, _toggle)


@cli.command()
@click.argument('table', type=click.Choice(TABLES))
@click.argument('record_id', type=int)
@click.pass_context
def delete(ctx: click.Context, table: str, record_id: int):
    """Simulate deleting one row of TABLE."""
    async def _delete(factory: ConfiguredComponentFactory):
        return await factory.create_service(table).delete(record_id)

    _run(ctx, _delete)


@cli.command('change-password')
@click.argument('user_id', type=int)
@click.argument('actual_password')
@click.argument('new_password')
@click.pass_context
def change_password(ctx: click.Context, user_id: int, actual_password: str, new_password: str):
    """Simulate a password change for one user."""
    async def _change(factory: ConfiguredComponentFactory):
        return await factory.create_service("users").change_password(user_id, actual_password, new_password)

    _run(ctx, _change)


@cli.command()
@click.argument('buyer_id', type=int)
@click.option('--item', 'items', multiple=True, required=True, help='Line as PRODUCT_ID:QUANTITY')
@click.pass_context
def purchase(ctx: click.Context, buyer_id: int, items: tuple):
    """Simulate a purchase with its items."""
    async def _purchase(factory: ConfiguredComponentFactory):
        lines = [_parse_item(text) for text in items]
        return await factory.create_service("purchases").create({"buyer_id": buyer_id, "products": lines})

    _run(ctx, _purchase)


if __name__ == '__main__':
    cli()
