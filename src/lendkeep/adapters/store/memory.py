"""In-memory keyed store.

Writes are staged per store instance and only become visible to other units
of work when `apply()` runs (from `InMemoryUnitOfWork.commit`). Discarding
the stage is the rollback.
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Generic, TypeVar

from lendkeep.domain.models import Item, Rental, Requester, WaitingListEntry
from lendkeep.interfaces.store import DuplicateEntityError, EntityNotFoundError, Store

E = TypeVar("E")

_DELETED = object()


@dataclass(slots=True)
class InMemoryStoreData:
    """Shared in-memory backing store for in-memory store adapters.

    A single shared instance should be passed to every unit of work so they
    operate on a common data source. Each mapping is keyed by entity id and
    keeps insertion order. `lock` guards reads and commits across threads.
    """

    items: dict[str, Item] = field(default_factory=dict)
    requesters: dict[str, Requester] = field(default_factory=dict)
    rentals: dict[str, Rental] = field(default_factory=dict)
    waiting_list: dict[str, WaitingListEntry] = field(default_factory=dict)
    lock: threading.RLock = field(default_factory=threading.RLock)


class InMemoryStore(Store[E], Generic[E]):
    """Store backed by one bucket of an `InMemoryStoreData`.

    Args:
        data: The shared backing data.
        bucket: Attribute name of the bucket on `data` (e.g. ``"rentals"``).
        kind: Human-readable entity kind used in error messages.
    """

    def __init__(self, data: InMemoryStoreData, bucket: str, kind: str) -> None:
        self._data = data
        self._bucket_attr = bucket
        self.kind = kind
        self._staged: dict[str, object] = {}

    @property
    def _bucket(self) -> dict[str, E]:
        return getattr(self._data, self._bucket_attr)

    # --- reads ---

    def get(self, entity_id: str) -> E | None:
        if entity_id in self._staged:
            staged = self._staged[entity_id]
            return None if staged is _DELETED else staged  # type: ignore[return-value]
        with self._data.lock:
            return self._bucket.get(entity_id)

    def query_all(self, predicate: Callable[[E], bool] | None = None) -> list[E]:
        with self._data.lock:
            merged = dict(self._bucket)
        for entity_id, staged in self._staged.items():
            if staged is _DELETED:
                merged.pop(entity_id, None)
            else:
                merged[entity_id] = staged  # type: ignore[assignment]
        return [e for e in merged.values() if predicate is None or predicate(e)]

    # --- writes ---

    def add(self, entity: E) -> str:
        entity_id = getattr(entity, "id")
        if self.get(entity_id) is not None:
            raise DuplicateEntityError(self.kind, entity_id)
        self._staged[entity_id] = entity
        return entity_id

    def update(self, entity: E) -> None:
        entity_id = getattr(entity, "id")
        if self.get(entity_id) is None:
            raise EntityNotFoundError(self.kind, entity_id)
        self._staged[entity_id] = entity

    def delete(self, entity_id: str) -> None:
        if self.get(entity_id) is None:
            raise EntityNotFoundError(self.kind, entity_id)
        self._staged[entity_id] = _DELETED

    # --- staging ---

    def apply(self) -> None:
        """Make staged writes visible in the shared data."""
        with self._data.lock:
            bucket = self._bucket
            for entity_id, staged in self._staged.items():
                if staged is _DELETED:
                    bucket.pop(entity_id, None)
                else:
                    bucket[entity_id] = staged  # type: ignore[assignment]
        self._staged.clear()

    def discard(self) -> None:
        """Drop staged writes."""
        self._staged.clear()
