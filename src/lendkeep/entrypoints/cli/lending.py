"""Lending commands: catalog registration, rentals, waiting list and sweep.

Each command bootstraps the application against ``LENDKEEP_DB_URL`` and
prints its result to stdout (ids first, so output can be piped). Domain
failures such as an unknown rental or an exhausted extension budget are
reported as click errors with exit status 1; a queued rent request is not an
error.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager

import click
import click_extra as clickx

from lendkeep import config
from lendkeep.bootstrap import AppContainer, bootstrap
from lendkeep.domain.errors import DomainError
from lendkeep.domain.models import Rental
from lendkeep.service_layer.catalog import register_item, register_requester

from .db import resolve_db_url
from .helpers import success, warn

logger = logging.getLogger(__name__)


def _container(sweep_interval: float | None = None) -> AppContainer:
    url = resolve_db_url()
    try:
        return bootstrap(url, sweep_interval=sweep_interval)
    except config.InvalidSettingError as e:
        raise click.ClickException(str(e)) from e


@contextmanager
def domain_errors() -> Iterator[None]:
    """Report domain failures as click errors."""
    try:
        yield
    except DomainError as e:
        raise click.ClickException(str(e)) from e


def format_rental(rental: Rental) -> str:
    """One tab-separated line per rental: id, item, requester, due, state."""
    state = (
        f"returned {rental.returned_at.isoformat()}"
        if rental.returned_at is not None
        else "open"
    )
    return "\t".join(
        [
            rental.id,
            rental.item_id,
            rental.requester_id,
            rental.due_at.isoformat(),
            f"ext={rental.extension_count}",
            state,
        ]
    )


# --- catalog ---


@click.group(cls=clickx.ExtraGroup)
def item() -> None:
    """Catalog items."""


@item.command("add")
@click.argument("title")
@click.option("--author", help="Author or creator.")
@click.option("--isbn", help="ISBN, if the item has one.")
@click.option("--genre", help="Genre or category.")
def add_item(title: str, author: str | None, isbn: str | None, genre: str | None) -> None:
    """Register a new item and print its id."""
    app = _container()
    with domain_errors():
        registered = register_item(
            app.uow_factory(),
            app.id_generator,
            title,
            author=author,
            isbn=isbn,
            genre=genre,
        )
    click.echo(registered.id)


@click.group(cls=clickx.ExtraGroup)
def requester() -> None:
    """People who rent items."""


@requester.command("add")
@click.argument("name")
@click.argument("contact")
def add_requester(name: str, contact: str) -> None:
    """Register a requester reachable at CONTACT and print their id."""
    app = _container()
    with domain_errors():
        registered = register_requester(
            app.uow_factory(), app.id_generator, name, contact
        )
    click.echo(registered.id)


# --- rentals ---


@click.command()
@click.argument("requester_id")
@click.argument("item_id")
def rent(requester_id: str, item_id: str) -> None:
    """Rent ITEM_ID to REQUESTER_ID, or join its waiting list if it is out."""
    app = _container()
    with domain_errors():
        outcome = app.coordinator.rent(requester_id, item_id)

    if outcome.rental is not None:
        click.echo(outcome.rental.id)
        success(f"Rented until {outcome.rental.due_at.isoformat()}")
    elif outcome.entry is not None:
        click.echo(outcome.entry.id)
        warn("Item is checked out; you have been added to its waiting list.")


@click.command("return")
@click.argument("rental_id")
def return_(rental_id: str) -> None:
    """Return RENTAL_ID and notify the next requester in line."""
    app = _container()
    with domain_errors():
        closed = app.coordinator.return_item(rental_id)
    click.echo(closed.id)
    success("Rental returned.")


@click.command()
@click.argument("rental_id")
@click.option(
    "--days",
    "-d",
    type=int,
    required=True,
    help="Number of days to add to the due date (positive).",
)
def extend(rental_id: str, days: int) -> None:
    """Extend the due date of RENTAL_ID."""
    app = _container()
    with domain_errors():
        extended = app.coordinator.extend_due_date(rental_id, days)
    click.echo(extended.due_at.isoformat())
    success(
        f"Extended ({extended.extension_count}/"
        f"{app.coordinator.policy.max_extensions} extensions used)."
    )


@click.group(cls=clickx.ExtraGroup)
def waitlist() -> None:
    """Per-item waiting lists."""


@waitlist.command("join")
@click.argument("requester_id")
@click.argument("item_id")
def join_waitlist(requester_id: str, item_id: str) -> None:
    """Queue REQUESTER_ID for ITEM_ID without trying to rent it."""
    app = _container()
    with domain_errors():
        entry = app.coordinator.join_waiting_list(requester_id, item_id)
    click.echo(entry.id)


@waitlist.command("show")
@click.argument("item_id")
def show_waitlist(item_id: str) -> None:
    """List the requesters waiting for ITEM_ID, first in line first."""
    app = _container()
    for position, entry in enumerate(app.coordinator.waiting_list(item_id), start=1):
        click.echo(
            f"{position}\t{entry.requester_id}\t{entry.requested_at.isoformat()}"
        )


@click.command()
@click.argument("requester_id")
def history(requester_id: str) -> None:
    """Show every rental of REQUESTER_ID, oldest first."""
    app = _container()
    for rental in app.coordinator.rental_history(requester_id):
        click.echo(format_rental(rental))


@click.command()
def overdue() -> None:
    """Show open rentals past their due date."""
    app = _container()
    for rental in app.coordinator.overdue_rentals():
        click.echo(format_rental(rental))


# --- sweep ---


@click.command()
@click.option("--once", is_flag=True, help="Run a single cycle and exit.")
@click.option(
    "--interval",
    type=click.FloatRange(min=0, min_open=True),
    help="Seconds between cycles (default: LENDKEEP_SWEEP_INTERVAL or 3600).",
)
def sweep(once: bool, interval: float | None) -> None:
    """Send overdue notices, once or on a recurring schedule."""
    app = _container(sweep_interval=interval)

    if once:
        report = app.sweep.run_cycle()
        click.echo(
            f"overdue={report.overdue} notified={report.notified} failed={report.failed}"
        )
        if report.failed:
            warn(f"{report.failed} overdue notice(s) could not be sent.")
        return

    try:
        app.sweep.run_forever()
    except KeyboardInterrupt:
        app.sweep.stop()
        warn("Overdue sweep interrupted.")
