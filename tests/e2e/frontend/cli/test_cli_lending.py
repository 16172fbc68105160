"""End-to-end tests for the lending commands.

Each test runs against a migrated SQLite file (`cli_env`) and drives the CLI
the way a desk clerk would: register items and requesters, rent, extend,
return, and inspect the waiting list, history and overdue views.
"""

from __future__ import annotations

import pytest

from lendkeep.adapters.unit_of_work import SqlAlchemyUnitOfWork
from lendkeep.entrypoints.cli.main import lendkeep

# pylint: disable=redefined-outer-name
# pylint: disable=magic-value-comparison


@pytest.fixture
def cli(runner, cli_env):
    """Invoke `lendkeep` with the test database; returns the Result."""

    def _invoke(*args: str, expect: int = 0):
        result = runner.invoke(lendkeep, list(args), env=cli_env)
        assert result.exit_code == expect, result.output
        return result

    return _invoke


def first_line(result) -> str:
    """The id or value a command prints before any notice."""
    return result.output.splitlines()[0].strip()


@pytest.fixture
def catalog(cli):
    """One item and two requesters registered through the CLI."""
    item_id = first_line(
        cli("item", "add", "Parable of the Sower", "--author", "Octavia Butler")
    )
    alice = first_line(cli("requester", "add", "Alice", "alice@example.org"))
    bob = first_line(cli("requester", "add", "Bob", "bob@example.org"))
    return item_id, alice, bob


def test_rent_then_queue(cli, catalog):
    """The first rent checks the item out, the second joins the waiting list."""
    item_id, alice, bob = catalog

    rented = cli("rent", alice, item_id)
    assert "Rented until" in rented.output

    queued = cli("rent", bob, item_id)
    assert "waiting list" in queued.output

    lines = cli("waitlist", "show", item_id).output.splitlines()
    assert [line.split("\t")[:2] for line in lines] == [["1", bob]]


def test_extend_until_limit(cli, catalog):
    """Two extensions succeed; the third is refused with exit status 1."""
    item_id, alice, _ = catalog
    rental_id = first_line(cli("rent", alice, item_id))

    first_due = first_line(cli("extend", rental_id, "--days", "7"))
    second = cli("extend", rental_id, "-d", "7")
    assert first_line(second) > first_due
    assert "2/2 extensions used" in second.output

    refused = cli("extend", rental_id, "-d", "7", expect=1)
    assert "maximum of 2 extensions" in refused.output


@pytest.mark.parametrize("days", ["0", "-3"])
def test_extend_rejects_non_positive_days(cli, catalog, days):
    """Days must be positive."""
    item_id, alice, _ = catalog
    rental_id = first_line(cli("rent", alice, item_id))
    result = cli("extend", rental_id, "--days", days, expect=1)
    assert "Invalid" in result.output


def test_return_promotes_next_in_line(cli, catalog):
    """Returning frees the item; the waiting requester may then rent it."""
    item_id, alice, bob = catalog
    rental_id = first_line(cli("rent", alice, item_id))
    cli("rent", bob, item_id)

    returned = cli("return", rental_id)
    assert first_line(returned) == rental_id
    assert cli("waitlist", "show", item_id).output.strip() == ""

    assert "Rented until" in cli("rent", bob, item_id).output

    history = cli("history", alice).output.splitlines()
    assert len(history) == 1
    assert history[0].startswith(rental_id)
    assert "\treturned " in history[0]


def test_second_return_is_an_error(cli, catalog):
    """A closed rental cannot be returned again."""
    item_id, alice, _ = catalog
    rental_id = first_line(cli("rent", alice, item_id))
    cli("return", rental_id)
    result = cli("return", rental_id, expect=1)
    assert f"Rental {rental_id} not found." in result.output


@pytest.mark.parametrize(
    "args, message",
    [
        (["rent", "nobody", "nothing"], "not found"),
        (["waitlist", "join", "nobody", "nothing"], "not found"),
        (["item", "add", "   "], "Invalid title"),
        (["requester", "add", "Eve", " "], "Invalid contact"),
    ],
)
def test_bad_input_is_reported(cli, args, message):
    """Unknown ids and blank fields exit with status 1 and a message."""
    assert message in cli(*args, expect=1).output


def test_overdue_and_sweep(
    cli, sqlite_engine_file, make_item, make_requester, make_rental
):
    """An old open rental shows up as overdue and gets a notice from the sweep."""
    item = make_item(is_checked_out=True)
    requester = make_requester()
    rental = make_rental(item_id=item.id, requester_id=requester.id)
    with SqlAlchemyUnitOfWork(sqlite_engine_file) as uow:
        uow.items.add(item)
        uow.requesters.add(requester)
        uow.rentals.add(rental)
        uow.commit()

    overdue = cli("overdue").output.splitlines()
    assert [line.split("\t")[0] for line in overdue] == [rental.id]

    report = cli("sweep", "--once")
    assert "overdue=1 notified=1 failed=0" in report.output


def test_sweep_rejects_non_positive_interval(cli):
    """The sweep interval must be positive."""
    cli("sweep", "--once", "--interval", "0", expect=2)


def test_missing_database_url(runner):
    """Lending commands need LENDKEEP_DB_URL like the db commands do."""
    result = runner.invoke(
        lendkeep,
        ["overdue"],
        env={"LENDKEEP_DB_URL": "", "LENDKEEP_FLIGHT_RECORDER": "0"},
    )
    assert result.exit_code == 1
    assert "LENDKEEP_DB_URL is not set" in result.output
