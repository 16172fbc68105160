"""Rental ledger: the only place rental records change state."""

from __future__ import annotations

import logging
from datetime import datetime

from lendkeep.domain.errors import RentalNotFoundError
from lendkeep.domain.models import Rental
from lendkeep.domain.policy import LendingPolicy
from lendkeep.interfaces.store import Store

logger = logging.getLogger(__name__)


class RentalLedger:
    """Open, close and extend rentals held in a rental store.

    Args:
        rentals: Store scoped to the caller's unit of work.
        policy: Loan period and extension cap.
    """

    def __init__(self, rentals: Store[Rental], policy: LendingPolicy | None = None):
        self._rentals = rentals
        self.policy = policy or LendingPolicy()

    # --- transitions ---

    def open(
        self, rental_id: str, item_id: str, requester_id: str, now: datetime
    ) -> Rental:
        """Record a new checkout due one loan period after `now`."""
        rental = Rental.open(
            rental_id, item_id, requester_id, now, self.policy.loan_period
        )
        self._rentals.add(rental)
        logger.debug("Opened rental %s due %s", rental.id, rental.due_at.isoformat())
        return rental

    def close(self, rental_id: str, now: datetime) -> Rental:
        """Mark an open rental as returned at `now`.

        Raises:
            RentalNotFoundError: If the rental is unknown or already returned.
        """
        closed = self.get_open(rental_id).returned(now)
        self._rentals.update(closed)
        return closed

    def extend(self, rental_id: str, days: int) -> Rental:
        """Push an open rental's due date back by `days`.

        Raises:
            RentalNotFoundError: If the rental is unknown or already returned.
            ExtensionLimitExceededError: If the extension cap has been reached.
            InvalidInputError: If `days` is not a positive integer.
        """
        extended = self.get_open(rental_id).extended(days, self.policy.max_extensions)
        self._rentals.update(extended)
        return extended

    # --- lookups ---

    def get_open(self, rental_id: str) -> Rental:
        """Return the rental if it exists and has not been returned.

        Raises:
            RentalNotFoundError: Otherwise.
        """
        rental = self._rentals.get(rental_id)
        if rental is None or not rental.is_open:
            raise RentalNotFoundError(rental_id)
        return rental

    def history(self, requester_id: str) -> list[Rental]:
        """All rentals of a requester, oldest checkout first."""
        rentals = self._rentals.query_all(lambda r: r.requester_id == requester_id)
        return sorted(rentals, key=lambda r: r.checked_out_at)

    def overdue(self, now: datetime) -> list[Rental]:
        """Open rentals whose due date is before `now`."""
        return self._rentals.query_all(lambda r: r.is_overdue(now))
