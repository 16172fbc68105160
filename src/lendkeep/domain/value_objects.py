"""Module including value objects used across the domain layer."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from lendkeep.domain.models import Rental, WaitingListEntry


class RentStatus(Enum):
    """Outcome of a rent request."""

    RENTED = "rented"
    QUEUED = "queued"


@dataclass(frozen=True)
class RentOutcome:
    """Result of `RentalCoordinator.rent`.

    Exactly one of `rental` and `entry` is set, matching `status`.
    """

    status: RentStatus
    rental: Rental | None = None
    entry: WaitingListEntry | None = None

    @classmethod
    def rented(cls, rental: Rental) -> RentOutcome:
        """Outcome for a successful checkout."""
        return cls(status=RentStatus.RENTED, rental=rental)

    @classmethod
    def queued(cls, entry: WaitingListEntry) -> RentOutcome:
        """Outcome for a request parked on the waiting list."""
        return cls(status=RentStatus.QUEUED, entry=entry)

    @property
    def is_rented(self) -> bool:
        """True if the item was checked out to the requester."""
        return self.status is RentStatus.RENTED
