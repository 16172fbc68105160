"""Rental coordination.

The coordinator is the entrypoint to the service layer for request
handling. It is the only component that flips an item's availability and it
keeps that flag consistent with the rental ledger and the waiting list:

- `rent` serializes on the item, so two concurrent rents of one available
  item produce one RENTED and one QUEUED outcome. Within one process the
  item lock does this; across processes sharing a database the claim in
  `AbstractUnitOfWork.claim_item` does.
- `return_item` and `extend_due_date` serialize on the rental; `return_item`
  then also takes the item's lock. Locks are always taken rental first.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from lendkeep.domain.errors import (
    ExtensionLimitExceededError,
    ItemNotFoundError,
    NotFoundError,
    RequesterNotFoundError,
)
from lendkeep.domain.models import Item, Rental, WaitingListEntry, validate_extension_days
from lendkeep.domain.policy import LendingPolicy
from lendkeep.domain.value_objects import RentOutcome
from lendkeep.interfaces.clock import Clock
from lendkeep.interfaces.id_generator import IdGenerator
from lendkeep.interfaces.notifier import NotificationPort
from lendkeep.interfaces.unit_of_work import AbstractUnitOfWork

from .ledger import RentalLedger
from .locks import KeyedLocks
from .waiting_list import WaitingListQueue

logger = logging.getLogger(__name__)

UnitOfWorkFactory = Callable[[], AbstractUnitOfWork]


class RentalCoordinator:
    """Rent, return, extend and queue operations over the lending catalog.

    Args:
        uow_factory: Returns a fresh unit of work; one is used per operation.
        notifier: Transport for availability notices on promotion.
        clock: Source of "now" for checkouts, returns and queue requests.
        id_generator: Ids for new rentals and waiting list entries.
        policy: Loan period and extension cap.
    """

    def __init__(  # pylint: disable=too-many-arguments
        self,
        uow_factory: UnitOfWorkFactory,
        notifier: NotificationPort,
        clock: Clock,
        id_generator: IdGenerator,
        policy: LendingPolicy | None = None,
    ) -> None:
        self.uow_factory = uow_factory
        self.notifier = notifier
        self.clock = clock
        self.id_generator = id_generator
        self.policy = policy or LendingPolicy()
        self._item_locks = KeyedLocks()
        self._rental_locks = KeyedLocks()

    # --- collaborators bound to a unit of work ---

    def _ledger(self, uow: AbstractUnitOfWork) -> RentalLedger:
        return RentalLedger(uow.rentals, self.policy)

    def _queue(self, uow: AbstractUnitOfWork) -> WaitingListQueue:
        return WaitingListQueue(uow.waiting_list, uow.requesters, self.notifier)

    @staticmethod
    def _require_item(uow: AbstractUnitOfWork, item_id: str) -> Item:
        if (item := uow.items.get(item_id)) is None:
            logger.warning("Item %s not found", item_id)
            raise ItemNotFoundError(item_id)
        return item

    @staticmethod
    def _require_requester(uow: AbstractUnitOfWork, requester_id: str) -> None:
        if uow.requesters.get(requester_id) is None:
            logger.warning("Requester %s not found", requester_id)
            raise RequesterNotFoundError(requester_id)

    # --- commands ---

    def rent(self, requester_id: str, item_id: str) -> RentOutcome:
        """Check `item_id` out to `requester_id`, or queue the request.

        Returns:
            A RENTED outcome carrying the new rental, or a QUEUED outcome
            carrying the waiting list entry when the item is checked out.

        Raises:
            ItemNotFoundError: If the item is unknown.
            RequesterNotFoundError: If the requester is unknown.
        """
        logger.info("Requester %s is attempting to rent item %s", requester_id, item_id)

        with self._item_locks.hold(item_id), self.uow_factory() as uow:
            self._require_item(uow, item_id)
            self._require_requester(uow, requester_id)
            now = self.clock.now()

            if not uow.claim_item(item_id):
                entry = self._queue(uow).enqueue(
                    self.id_generator.new_id(), item_id, requester_id, now
                )
                uow.commit()
                logger.info(
                    "Item %s is checked out; requester %s queued", item_id, requester_id
                )
                return RentOutcome.queued(entry)

            rental = self._ledger(uow).open(
                self.id_generator.new_id(), item_id, requester_id, now
            )
            self._queue(uow).remove_entry(item_id, requester_id)
            uow.commit()

        logger.info(
            "Item %s rented by requester %s as rental %s",
            item_id,
            requester_id,
            rental.id,
        )
        return RentOutcome.rented(rental)

    def return_item(self, rental_id: str) -> Rental:
        """Close an open rental, free its item and promote the next waiter.

        The rental and item changes are committed together before the
        waiting list is promoted.

        Returns:
            The closed rental.

        Raises:
            RentalNotFoundError: If the rental is unknown or already returned.
        """
        logger.info("Attempting to return rental %s", rental_id)

        with self._rental_locks.hold(rental_id):
            with self.uow_factory() as uow:
                try:
                    item_id = self._ledger(uow).get_open(rental_id).item_id
                except NotFoundError:
                    logger.warning(
                        "Rental %s is unknown or already returned", rental_id
                    )
                    raise

            with self._item_locks.hold(item_id), self.uow_factory() as uow:
                closed = self._ledger(uow).close(rental_id, self.clock.now())
                freed = self._require_item(uow, item_id).checked_in()
                uow.items.update(freed)
                uow.commit()
                logger.info(
                    "Rental %s returned; item %s is available", rental_id, item_id
                )

                self._queue(uow).promote_next(freed)
                uow.commit()

        return closed

    def extend_due_date(self, rental_id: str, days: int) -> Rental:
        """Push an open rental's due date back by `days`.

        Returns:
            The extended rental.

        Raises:
            InvalidInputError: If `days` is not a positive integer.
            RentalNotFoundError: If the rental is unknown or already returned.
            ExtensionLimitExceededError: If the extension cap has been reached.
        """
        logger.info("Attempting to extend rental %s by %s days", rental_id, days)
        validate_extension_days(days)

        with self._rental_locks.hold(rental_id), self.uow_factory() as uow:
            try:
                extended = self._ledger(uow).extend(rental_id, days)
            except NotFoundError:
                logger.warning("Rental %s not found", rental_id)
                raise
            except ExtensionLimitExceededError:
                logger.warning("Maximum extension limit reached for rental %s", rental_id)
                raise
            uow.commit()

        logger.info(
            "Rental %s due date extended to %s (%s/%s extensions)",
            rental_id,
            extended.due_at.isoformat(),
            extended.extension_count,
            self.policy.max_extensions,
        )
        return extended

    def join_waiting_list(self, requester_id: str, item_id: str) -> WaitingListEntry:
        """Queue `requester_id` for `item_id` without attempting a checkout.

        Raises:
            ItemNotFoundError: If the item is unknown.
            RequesterNotFoundError: If the requester is unknown.
        """
        with self._item_locks.hold(item_id), self.uow_factory() as uow:
            self._require_item(uow, item_id)
            self._require_requester(uow, requester_id)
            entry = self._queue(uow).enqueue(
                self.id_generator.new_id(), item_id, requester_id, self.clock.now()
            )
            uow.commit()
        return entry

    # --- queries ---

    def rental_history(self, requester_id: str) -> list[Rental]:
        """All rentals, open and closed, of `requester_id`, oldest first."""
        with self.uow_factory() as uow:
            rentals = self._ledger(uow).history(requester_id)
        logger.info(
            "Rental history for requester %s: %s rentals", requester_id, len(rentals)
        )
        return rentals

    def overdue_rentals(self) -> list[Rental]:
        """Open rentals past their due date."""
        with self.uow_factory() as uow:
            rentals = self._ledger(uow).overdue(self.clock.now())
        logger.info("%s overdue rentals found", len(rentals))
        return rentals

    def waiting_list(self, item_id: str) -> list[WaitingListEntry]:
        """Entries waiting for `item_id`, first in line first."""
        with self.uow_factory() as uow:
            return self._queue(uow).entries_for(item_id)
