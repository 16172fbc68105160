"""Entities of the lending catalog.

Entities are immutable snapshots: state transitions return a new instance
(via `dataclasses.replace`) that the caller hands back to its store.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime, timedelta

from lendkeep.domain.errors import (
    ExtensionLimitExceededError,
    InvalidInputError,
    RentalAlreadyClosedError,
)


@dataclass(frozen=True)
class Item:
    """A rentable catalog entry."""

    id: str
    title: str
    author: str | None = None
    isbn: str | None = None
    genre: str | None = None
    is_checked_out: bool = False

    def checked_out(self) -> Item:
        """Return a copy flagged as checked out."""
        return replace(self, is_checked_out=True)

    def checked_in(self) -> Item:
        """Return a copy flagged as available."""
        return replace(self, is_checked_out=False)


@dataclass(frozen=True)
class Requester:
    """Someone who rents items or waits for them."""

    id: str
    name: str
    contact: str


@dataclass(frozen=True)
class Rental:
    """One checkout lifecycle binding a requester to an item.

    A rental is open while `returned_at` is None. Closed rentals are kept as
    history and are never deleted.
    """

    id: str
    item_id: str
    requester_id: str
    checked_out_at: datetime
    due_at: datetime
    returned_at: datetime | None = None
    extension_count: int = 0

    @classmethod
    def open(
        cls,
        rental_id: str,
        item_id: str,
        requester_id: str,
        now: datetime,
        loan_period: timedelta,
    ) -> Rental:
        """Start a new rental checked out at `now`."""
        return cls(
            id=rental_id,
            item_id=item_id,
            requester_id=requester_id,
            checked_out_at=now,
            due_at=now + loan_period,
        )

    @property
    def is_open(self) -> bool:
        """True until the item has been returned."""
        return self.returned_at is None

    def is_overdue(self, now: datetime) -> bool:
        """True when the rental is open and `now` is past the due date."""
        return self.returned_at is None and now > self.due_at

    def returned(self, now: datetime) -> Rental:
        """Close the rental at `now`.

        Raises:
            RentalAlreadyClosedError: If the rental was already returned.
        """
        if not self.is_open:
            raise RentalAlreadyClosedError(self.id)
        return replace(self, returned_at=now)

    def extended(self, days: int, max_extensions: int) -> Rental:
        """Push the due date back by `days`.

        Args:
            days: Positive number of days to add to the due date.
            max_extensions: Cap on `extension_count`.

        Raises:
            InvalidInputError: If `days` is not a positive integer.
            RentalAlreadyClosedError: If the rental was already returned.
            ExtensionLimitExceededError: If the cap has been reached.
        """
        validate_extension_days(days)
        if not self.is_open:
            raise RentalAlreadyClosedError(self.id)
        if self.extension_count >= max_extensions:
            raise ExtensionLimitExceededError(self.id, max_extensions)
        return replace(
            self,
            due_at=self.due_at + timedelta(days=days),
            extension_count=self.extension_count + 1,
        )


@dataclass(frozen=True)
class WaitingListEntry:
    """A pending request for an item that is currently checked out."""

    id: str
    item_id: str
    requester_id: str
    requested_at: datetime

    @property
    def queue_key(self) -> tuple[datetime, str]:
        """FIFO ordering key: request time, then identity (insertion) order."""
        return (self.requested_at, self.id)


def validate_extension_days(days: object) -> int:
    """Return `days` if it is a positive integer, otherwise raise.

    Booleans are rejected even though they are `int` subclasses.
    """
    if isinstance(days, bool) or not isinstance(days, int):
        raise InvalidInputError("days", days, "expected an integer")
    if days <= 0:
        raise InvalidInputError("days", days, "must be positive")
    return days
