"""Generic keyed store interface.

One parameterized contract, implemented once per backend and instantiated
once per entity type (items, requesters, rentals, waiting list entries).
Stores hold no business logic.
"""

from __future__ import annotations

import abc
from collections.abc import Callable
from typing import Generic, TypeVar

E = TypeVar("E")  # Entity type; must expose a string `id` attribute


class StoreError(Exception):
    """Base class for all store-related errors."""


class EntityNotFoundError(StoreError):
    """Raised when updating or deleting an id that is not stored."""

    def __init__(self, kind: str, entity_id: str) -> None:
        super().__init__(f"{kind} ({entity_id}) not found in store")
        self.kind = kind
        self.entity_id = entity_id


class DuplicateEntityError(StoreError):
    """Raised when adding an entity whose id is already stored."""

    def __init__(self, kind: str, entity_id: str) -> None:
        super().__init__(f"{kind} ({entity_id}) already exists in store")
        self.kind = kind
        self.entity_id = entity_id


class Store(abc.ABC, Generic[E]):
    """Keyed persistence for a single entity type."""

    @abc.abstractmethod
    def get(self, entity_id: str) -> E | None:
        """Get an entity by id.

        Returns:
            The entity if found, otherwise None.
        """

    @abc.abstractmethod
    def add(self, entity: E) -> str:
        """Store a new entity.

        Returns:
            The id of the stored entity.

        Raises:
            DuplicateEntityError: If an entity with the same id exists.
        """

    @abc.abstractmethod
    def update(self, entity: E) -> None:
        """Replace the stored entity with the same id.

        Raises:
            EntityNotFoundError: If no entity with that id is stored.
        """

    @abc.abstractmethod
    def delete(self, entity_id: str) -> None:
        """Remove an entity by id.

        Raises:
            EntityNotFoundError: If no entity with that id is stored.
        """

    @abc.abstractmethod
    def query_all(self, predicate: Callable[[E], bool] | None = None) -> list[E]:
        """Return every stored entity matching `predicate`, in insertion order.

        Args:
            predicate: Filter applied to each entity. None selects everything.
        """
