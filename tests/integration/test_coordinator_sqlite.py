"""RentalCoordinator against a migrated SQLite file database.

These mirror the in-memory coordinator tests where persistence matters:
state written by one operation must be read back by the next, and
concurrent rents must still produce a single open rental, also when each
renter runs its own coordinator and engine as separate CLI processes do.
"""

from __future__ import annotations

import concurrent.futures as cf
import threading

import pytest

from lendkeep.adapters.db.engine import make_engine
from lendkeep.adapters.id_generators import ULIDGenerator
from lendkeep.adapters.notifications import InMemoryNotifier
from lendkeep.adapters.unit_of_work import SqlAlchemyUnitOfWork
from lendkeep.domain.errors import ExtensionLimitExceededError
from lendkeep.domain.value_objects import RentStatus
from lendkeep.service_layer.coordinator import RentalCoordinator

# pylint: disable=redefined-outer-name

WORKERS = 8


@pytest.fixture
def uow_factory(sqlite_engine_file):
    """Fresh SQL units of work over the migrated file database."""
    return lambda: SqlAlchemyUnitOfWork(sqlite_engine_file)


@pytest.fixture
def notifier():
    """Recording notifier."""
    return InMemoryNotifier()


@pytest.fixture
def coordinator(uow_factory, notifier, clock):
    """Coordinator wired to SQLite."""
    return RentalCoordinator(uow_factory, notifier, clock, ULIDGenerator())


@pytest.fixture
def seed(uow_factory, make_item, make_requester):
    """Store one item and WORKERS requesters; returns (item, requesters)."""
    item = make_item()
    requesters = [make_requester() for _ in range(WORKERS)]
    with uow_factory() as uow:
        uow.items.add(item)
        for r in requesters:
            uow.requesters.add(r)
        uow.commit()
    return item, requesters


def test_rent_extend_return_promote(coordinator, uow_factory, notifier, clock, seed):
    """A full lending cycle persists at every step."""
    item, (alice, bob, *_) = seed
    rental = coordinator.rent(alice.id, item.id).rental
    assert coordinator.rent(bob.id, item.id).status is RentStatus.QUEUED

    coordinator.extend_due_date(rental.id, 7)
    coordinator.extend_due_date(rental.id, 7)
    with pytest.raises(ExtensionLimitExceededError):
        coordinator.extend_due_date(rental.id, 7)

    clock.advance(days=3)
    closed = coordinator.return_item(rental.id)

    assert closed.returned_at == clock.now()
    assert [n.contact for n in notifier.sent] == [bob.contact]
    with uow_factory() as uow:
        assert not uow.items.get(item.id).is_checked_out
        assert uow.waiting_list.query_all() == []
        assert uow.rentals.get(rental.id).extension_count == 2


@pytest.mark.slow
def test_concurrent_rents_rent_once(coordinator, uow_factory, seed):
    """Exactly one requester gets the item; the rest are queued."""
    item, requesters = seed
    barrier = threading.Barrier(WORKERS)

    def _rent(requester_id):
        barrier.wait()
        return coordinator.rent(requester_id, item.id)

    with cf.ThreadPoolExecutor(max_workers=WORKERS) as ex:
        outcomes = list(ex.map(_rent, [r.id for r in requesters]))

    statuses = [o.status for o in outcomes]
    assert statuses.count(RentStatus.RENTED) == 1
    with uow_factory() as uow:
        assert len(uow.rentals.query_all(lambda r: r.is_open)) == 1
        assert len(uow.waiting_list.query_all()) == WORKERS - 1


@pytest.mark.slow
def test_rents_from_separate_coordinators_rent_once(
    sqlite_url, uow_factory, notifier, clock, seed
):
    """Coordinators sharing only the database file still rent once.

    No coordinator shares locks with another, so the database claim on the
    item row is all that settles the race.
    """
    item, requesters = seed
    engines = [make_engine(sqlite_url) for _ in requesters]
    coordinators = [
        RentalCoordinator(
            lambda e=e: SqlAlchemyUnitOfWork(e), notifier, clock, ULIDGenerator()
        )
        for e in engines
    ]
    barrier = threading.Barrier(WORKERS)

    def _rent(coordinator, requester_id):
        barrier.wait()
        return coordinator.rent(requester_id, item.id)

    try:
        with cf.ThreadPoolExecutor(max_workers=WORKERS) as ex:
            outcomes = list(
                ex.map(_rent, coordinators, [r.id for r in requesters])
            )
    finally:
        for e in engines:
            e.dispose()

    statuses = [o.status for o in outcomes]
    assert statuses.count(RentStatus.RENTED) == 1
    assert statuses.count(RentStatus.QUEUED) == WORKERS - 1
    with uow_factory() as uow:
        assert uow.items.get(item.id).is_checked_out
        assert len(uow.rentals.query_all(lambda r: r.is_open)) == 1
        assert len(uow.waiting_list.query_all()) == WORKERS - 1
