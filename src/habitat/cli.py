"""Command line maintenance tools for a Habitat database."""

from __future__ import annotations

import json
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

import click
from pydantic import ValidationError

from .config import BaseConfig
from .errors import HabitatError
from .infra.database import serialize_database
from .infra.lock import ConcurrencyGate
from .logging_config import setup_logging
from .services.snapshot import FAMILIES, ExportSelection
from .store import HabitatStore, open_store


@contextmanager
def _open(ctx: click.Context) -> Iterator[HabitatStore]:
    """Take the storage lock, open the store, and release both on exit."""

    config: BaseConfig = ctx.obj["config"]
    database: Optional[str] = ctx.obj["database"]
    lock_path = Path(database).with_suffix(".lock") if database else config.LOCK_PATH
    gate = ConcurrencyGate(
        lock_path, attempts=config.LOCK_ATTEMPTS, retry_delay=config.LOCK_RETRY_DELAY
    )
    try:
        gate.acquire()
    except HabitatError as exc:
        raise click.ClickException(str(exc)) from exc
    try:
        store = open_store(config, database_path=database)
        try:
            yield store
        finally:
            store.close()
    finally:
        gate.release()


@click.group()
@click.option(
    "--database",
    type=click.Path(dir_okay=False),
    default=None,
    help="SQLite file to operate on (defaults to the configured data directory).",
)
@click.pass_context
def main(ctx: click.Context, database: Optional[str]) -> None:
    """Maintain a Habitat database."""

    config = BaseConfig()
    setup_logging(config)
    ctx.ensure_object(dict)
    ctx.obj["config"] = config
    ctx.obj["database"] = database


@main.command("init")
@click.pass_context
def init_command(ctx: click.Context) -> None:
    """Create or upgrade the database and apply default content."""

    with _open(ctx) as store:
        click.echo(f"Schema version: {store.schema_version}")


@main.command("info")
@click.option("--sql", is_flag=True, default=False, help="Print the DDL of every object.")
@click.pass_context
def info_command(ctx: click.Context, sql: bool) -> None:
    """Show the schema version, tables and indices."""

    with _open(ctx) as store:
        info = store.db_info()
    click.echo(f"user_version: {info.user_version}")
    click.echo("tables:")
    for table in info.tables:
        click.echo(f"  {table.name}")
        if sql:
            click.echo(f"    {table.sql}")
    click.echo("indices:")
    for index in info.indices:
        click.echo(f"  {index.name} ({index.tbl_name})")
        if sql:
            click.echo(f"    {index.sql}")


@main.command("integrity")
@click.pass_context
def integrity_command(ctx: click.Context) -> None:
    """Run SQLite's integrity check; exits non-zero on problems."""

    with _open(ctx) as store:
        rows = store.integrity_check()
    for row in rows:
        click.echo(row)
    if rows != ["ok"]:
        ctx.exit(1)


@main.command("export")
@click.option(
    "--only",
    "families",
    multiple=True,
    type=click.Choice(FAMILIES),
    help="Export just these families (repeatable). Everything by default.",
)
@click.option("--output", "-o", type=click.Path(dir_okay=False, writable=True), required=True)
@click.pass_context
def export_command(ctx: click.Context, families: tuple[str, ...], output: str) -> None:
    """Write a JSON snapshot."""

    selection = (
        ExportSelection(**{family: True for family in families})
        if families
        else ExportSelection.everything()
    )
    with _open(ctx) as store:
        bundle = store.export_json(selection)
    Path(output).write_text(json.dumps(bundle.model_dump(mode="json"), indent=2), encoding="utf-8")
    click.echo(f"Export written: {output}")


@main.command("import")
@click.argument("source", type=click.Path(exists=True, dir_okay=False))
@click.pass_context
def import_command(ctx: click.Context, source: str) -> None:
    """Load a JSON snapshot; existing rows are kept."""

    try:
        bundle = json.loads(Path(source).read_text(encoding="utf-8"))
    except ValueError as exc:
        raise click.ClickException(f"{source} is not valid JSON: {exc}") from exc
    if not isinstance(bundle, dict):
        raise click.ClickException(f"{source} does not contain an export bundle")
    with _open(ctx) as store:
        try:
            store.import_json(bundle)
        except (HabitatError, ValidationError) as exc:
            raise click.ClickException(str(exc)) from exc
    click.echo(f"Imported snapshot from {source}")


@main.command("backup")
@click.option("--output", "-o", type=click.Path(dir_okay=False, writable=True), required=True)
@click.pass_context
def backup_command(ctx: click.Context, output: str) -> None:
    """Write a byte-for-byte copy of the database."""

    with _open(ctx) as store:
        image = serialize_database(store.engine)
    Path(output).write_bytes(image)
    click.echo(f"Backup written: {output} ({len(image)} bytes)")


@main.command("streak")
@click.argument("habit_id")
@click.pass_context
def streak_command(ctx: click.Context, habit_id: str) -> None:
    """Print the current and longest streak of a habit."""

    with _open(ctx) as store:
        habit = store.habit_repo.get_by_id(habit_id)
        if habit is None:
            raise click.ClickException(f"Habit not found: {habit_id}")
        streak = store.habit_repo.get_streak(habit_id)
    click.echo(f"{habit.name}: current {streak.current}, longest {streak.longest}")


if __name__ == "__main__":
    main()
