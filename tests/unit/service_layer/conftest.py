"""Fixtures wiring the service layer to in-memory adapters."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from lendkeep.adapters.id_generators import SimpleIdGenerator
from lendkeep.adapters.notifications import InMemoryNotifier
from lendkeep.adapters.store import InMemoryStoreData
from lendkeep.adapters.unit_of_work import InMemoryUnitOfWork
from lendkeep.domain.models import Item, Rental, Requester, WaitingListEntry
from lendkeep.service_layer.coordinator import RentalCoordinator

# pylint: disable=redefined-outer-name

_STORE_FOR = {
    Item: "items",
    Requester: "requesters",
    Rental: "rentals",
    WaitingListEntry: "waiting_list",
}


@pytest.fixture
def store_data() -> InMemoryStoreData:
    """Shared backing data for every unit of work in a test."""
    return InMemoryStoreData()


@pytest.fixture
def uow_factory(store_data) -> Callable[[], InMemoryUnitOfWork]:
    """Fresh in-memory unit of work over `store_data`."""
    return lambda: InMemoryUnitOfWork(store_data)


@pytest.fixture
def notifier() -> InMemoryNotifier:
    """Recording notifier."""
    return InMemoryNotifier()


@pytest.fixture
def coordinator(uow_factory, notifier, clock) -> RentalCoordinator:
    """Coordinator with the default policy (14 days, 2 extensions)."""
    return RentalCoordinator(uow_factory, notifier, clock, SimpleIdGenerator())


@pytest.fixture
def seed(uow_factory) -> Callable[..., None]:
    """Commit entities straight into the stores, bypassing the coordinator."""

    def _seed(*entities) -> None:
        with uow_factory() as uow:
            for entity in entities:
                getattr(uow, _STORE_FOR[type(entity)]).add(entity)
            uow.commit()

    return _seed


@pytest.fixture
def item(make_item, seed) -> Item:
    """A seeded, available item."""
    seeded = make_item(title="A Wizard of Earthsea")
    seed(seeded)
    return seeded


@pytest.fixture
def alice(make_requester, seed) -> Requester:
    """A seeded requester."""
    seeded = make_requester(name="Alice", contact="alice@example.org")
    seed(seeded)
    return seeded


@pytest.fixture
def bob(make_requester, seed) -> Requester:
    """Another seeded requester."""
    seeded = make_requester(name="Bob", contact="bob@example.org")
    seed(seeded)
    return seeded


@pytest.fixture
def carol(make_requester, seed) -> Requester:
    """A third seeded requester."""
    seeded = make_requester(name="Carol", contact="carol@example.org")
    seed(seeded)
    return seeded
