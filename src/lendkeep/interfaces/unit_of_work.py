"""Unit of Work interface for LENDKEEP.

Defines the AbstractUnitOfWork contract: a context-managed unit of work
exposing one store per entity type and abstract commit/rollback methods.
"""

from __future__ import annotations

import abc

from lendkeep.domain.models import Item, Rental, Requester, WaitingListEntry

from .store import Store


class AbstractUnitOfWork(abc.ABC):
    """Contract for a transactional unit of work."""

    items: Store[Item]
    requesters: Store[Requester]
    rentals: Store[Rental]
    waiting_list: Store[WaitingListEntry]

    def __enter__(self) -> AbstractUnitOfWork:
        """Enter the unit of work context and return the unit.

        Implementations may acquire transactional resources here.
        """
        return self

    def __exit__(self, *args):
        """Exit the unit of work context.

        Default behavior is to roll back on exit. Anything already committed
        is unaffected.
        """
        self.rollback()

    @abc.abstractmethod
    def claim_item(self, item_id: str) -> bool:
        """Flag `item_id` as checked out if, and only if, it is available.

        The check and the write happen as one step against the backing
        store, so of several units of work claiming the same item at most
        one succeeds. Unknown items are never claimed.

        Returns:
            True if this unit of work now holds the claim.
        """

    @abc.abstractmethod
    def commit(self):
        """Persist changes and finalize the transaction."""

    @abc.abstractmethod
    def rollback(self):
        """Revert changes and clean up transactional resources."""
