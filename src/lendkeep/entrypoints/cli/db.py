"""LENDKEEP DB CLI: forward-only Alembic wrappers.

Rental history is never deleted, so the schema only moves forward:
``downgrade`` and ``stamp`` are not exposed.

Alembic output goes to stdout; notices and confirmations go to stderr.
``LENDKEEP_DB_URL`` must be set for every command that touches the
database.
"""

from __future__ import annotations

import logging
import sys
from enum import Enum
from typing import TYPE_CHECKING

import click
import click_extra as clickx
from alembic import command
from alembic.config import Config
from alembic.runtime.migration import MigrationContext
from alembic.script import ScriptDirectory
from sqlalchemy import func, select, text
from sqlalchemy.exc import ArgumentError, OperationalError

from lendkeep import config
from lendkeep.adapters.db.engine import make_engine
from lendkeep.adapters.db.schema import items, rentals, waiting_list_entries

from .helpers import error, sanitize_url, success, warn

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

logger = logging.getLogger(__name__)

MISSING_DB_URL_MSG = (
    "LENDKEEP_DB_URL is not set.\n\n"
    "Set it before running this command, e.g.:\n"
    "  export LENDKEEP_DB_URL='sqlite:///lendkeep.db'\n"
    "  or in PowerShell:\n"
    "  $env:LENDKEEP_DB_URL='sqlite:///lendkeep.db'"
)

INVALID_URL_FORMAT_MSG = (
    "The value of LENDKEEP_DB_URL is not a valid SQLAlchemy database URL."
)

CANNOT_CONNECT_MSG = (
    "LENDKEEP_DB_URL is set, but the database is not reachable.\n"
    "Please ensure the database is running and the URL is correct."
)

UPGRADE_SCHEMA_WARNING = (
    "This will upgrade the database schema to the latest version.\n"
    "Please ensure you have a backup before proceeding."
)

UPGRADE_SCHEMA_INSTRUCTIONS = "Run 'lendkeep db upgrade' to update the schema."


def _check_connection(url: str) -> None:
    engine = make_engine(url)
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))  # pragma: no mutate
    finally:
        engine.dispose()


def resolve_db_url() -> str:
    """Read ``LENDKEEP_DB_URL`` and check that the database answers.

    Raises:
        click.ClickException: If the variable is unset, malformed, or the
            database cannot be reached.
    """
    try:
        url = config.get_db_url()
    except config.DatabaseUrlNotSetError as e:
        raise click.ClickException(MISSING_DB_URL_MSG) from e
    try:
        _check_connection(url)
    except OperationalError as e:
        logger.debug("Connection check failed for %s", sanitize_url(url), exc_info=True)
        raise click.ClickException(CANNOT_CONNECT_MSG) from e
    except ArgumentError as e:
        raise click.ClickException(INVALID_URL_FORMAT_MSG) from e
    return url


verbose_option = click.option(
    "--verbose",
    "-v",
    "verbose",
    is_flag=True,
    help="Show alembic's more verbose output.",
)


@click.group(cls=clickx.ExtraGroup)
def db() -> None:
    """Database management commands."""


@db.command()
@verbose_option
def current(verbose: bool) -> None:
    """Show current DB revision."""
    cfg = config.build_alembic_config(db_url=resolve_db_url(), stdout=sys.stdout)
    command.current(cfg, verbose=verbose)


@db.command()
@verbose_option
def heads(verbose: bool) -> None:
    """Show available head revisions."""
    cfg = config.build_alembic_config(stdout=sys.stdout)
    command.heads(cfg, verbose=verbose)


@db.command()
@verbose_option
@click.option(
    "--indicate-current",
    "-i",
    "indicate_current",
    is_flag=True,
    help="Indicate the current revision.",
)
def history(verbose: bool, indicate_current: bool) -> None:
    """Show revision history."""
    db_url = resolve_db_url() if indicate_current else None
    cfg = config.build_alembic_config(db_url=db_url, stdout=sys.stdout)
    command.history(cfg, verbose=verbose, indicate_current=indicate_current)


@db.command()
@click.option("--sql", is_flag=True, help="Generate SQL without executing.")
@click.option("--force", is_flag=True, help="Upgrade without confirmation.")
def upgrade(sql: bool, force: bool) -> None:
    """Upgrade the database to the head revision."""
    url = resolve_db_url()
    cfg = config.build_alembic_config(db_url=url, stdout=sys.stdout)
    if not force and not sql:
        warn(UPGRADE_SCHEMA_WARNING)
        click.secho(f"db: {click.style(sanitize_url(url), underline=True)}", err=True)
        click.confirm("Are you sure you want to proceed?", abort=True, err=True)
    command.upgrade(cfg, revision="head", sql=sql)
    success("Upgrade complete!")


class MigrationStatus(Enum):
    """Describes the migration status of the database schema."""

    UP_TO_DATE = "up to date"
    OUT_OF_DATE = "out of date"
    UNINITIALIZED = "uninitialized"


def _get_current_revision(engine: Engine) -> str | None:
    with engine.connect() as conn:
        return MigrationContext.configure(conn).get_current_revision()


def _get_head_revision(cfg: Config) -> str | None:
    return ScriptDirectory.from_config(cfg).get_current_head()


def catalog_counts(engine: Engine) -> dict[str, int]:
    """Row counts shown by `db status` once the schema is current."""
    queries = {
        "items": select(func.count()).select_from(items),
        "checked_out": select(func.count())
        .select_from(items)
        .where(items.c.is_checked_out),
        "open_rentals": select(func.count())
        .select_from(rentals)
        .where(rentals.c.returned_at.is_(None)),
        "waiting": select(func.count()).select_from(waiting_list_entries),
    }
    with engine.connect() as conn:
        return {name: conn.execute(q).scalar_one() for name, q in queries.items()}


def migration_status(current_rev: str | None, head_rev: str | None) -> MigrationStatus:
    """Classify the database revision against the packaged head."""
    if current_rev is None:
        return MigrationStatus.UNINITIALIZED
    if current_rev == head_rev:
        return MigrationStatus.UP_TO_DATE
    return MigrationStatus.OUT_OF_DATE


@db.command()
def status() -> None:
    """Show database connection and schema status."""
    try:
        url = resolve_db_url()
    except click.ClickException as e:
        error("Cannot connect to database")
        click.echo(e.format_message())
        return

    engine = make_engine(url)
    success("Database reachable")
    click.echo(f"Backend : {engine.dialect.name}")
    click.echo(f"URL     : {sanitize_url(url)}")

    rev = _get_current_revision(engine)
    state = migration_status(rev, _get_head_revision(config.build_alembic_config(url)))
    click.echo(f"Schema  : {f'{rev} ({state.value})' if rev else state.value}")

    if state is not MigrationStatus.UP_TO_DATE:
        warn(UPGRADE_SCHEMA_INSTRUCTIONS)
        return

    counts = catalog_counts(engine)
    click.echo(f"Items   : {counts['items']} ({counts['checked_out']} checked out)")
    click.echo(f"Rentals : {counts['open_rentals']} open")
    click.echo(f"Waiting : {counts['waiting']} requests")
