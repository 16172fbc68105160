"""Units of Work for LENDKEEP.

- `SqlAlchemyUnitOfWork`: one connection and transaction per `with` block.
- `InMemoryUnitOfWork`: stores over a shared `InMemoryStoreData`, with
  writes staged until `commit()`. Item claims are the exception: they are
  written through at once and reverted on rollback.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import update

from lendkeep.adapters.db.schema import items, rentals, requesters, waiting_list_entries
from lendkeep.adapters.store import InMemoryStore, InMemoryStoreData, SqlAlchemyStore
from lendkeep.domain.models import Item, Rental, Requester, WaitingListEntry
from lendkeep.interfaces.unit_of_work import AbstractUnitOfWork

if TYPE_CHECKING:
    from sqlalchemy.engine import Connection, Engine


class SqlAlchemyUnitOfWork(AbstractUnitOfWork):
    """SQLAlchemy-backed Unit of Work."""

    def __init__(self, engine: Engine):
        self.engine = engine
        self.connection: Connection

    def __enter__(self):
        self.connection = self.engine.connect()
        self.items = SqlAlchemyStore(self.connection, items, Item, "item")
        self.requesters = SqlAlchemyStore(
            self.connection, requesters, Requester, "requester"
        )
        self.rentals = SqlAlchemyStore(self.connection, rentals, Rental, "rental")
        self.waiting_list = SqlAlchemyStore(
            self.connection, waiting_list_entries, WaitingListEntry, "waiting list entry"
        )
        return super().__enter__()

    def __exit__(self, *args):
        super().__exit__(*args)
        self.connection.close()

    def claim_item(self, item_id: str) -> bool:
        result = self.connection.execute(
            update(items)
            .where(items.c.id == item_id, items.c.is_checked_out.is_(False))
            .values(is_checked_out=True)
        )
        return result.rowcount == 1

    def commit(self):
        self.connection.commit()

    def rollback(self):
        self.connection.rollback()


class InMemoryUnitOfWork(AbstractUnitOfWork):
    """In-memory Unit of Work over shared data.

    Several units of work may share one `InMemoryStoreData`; each sees the
    others' changes once they are committed.
    """

    def __init__(self, data: InMemoryStoreData | None = None):
        self.data = data if data is not None else InMemoryStoreData()
        self.items = InMemoryStore(self.data, "items", "item")
        self.requesters = InMemoryStore(self.data, "requesters", "requester")
        self.rentals = InMemoryStore(self.data, "rentals", "rental")
        self.waiting_list = InMemoryStore(
            self.data, "waiting_list", "waiting list entry"
        )
        self.committed = False
        self._claimed: list[str] = []

    def _stores(self) -> tuple[InMemoryStore, ...]:
        return (self.items, self.requesters, self.rentals, self.waiting_list)

    def claim_item(self, item_id: str) -> bool:
        with self.data.lock:
            item = self.items.get(item_id)
            if item is None or item.is_checked_out:
                return False
            self.items.update(item.checked_out())
            if item_id in self.data.items:
                self.data.items[item_id] = item.checked_out()
                self._claimed.append(item_id)
        return True

    def commit(self):
        with self.data.lock:
            for store in self._stores():
                store.apply()
            self._claimed.clear()
        self.committed = True

    def rollback(self):
        for store in self._stores():
            store.discard()
        with self.data.lock:
            for item_id in self._claimed:
                if (item := self.data.items.get(item_id)) is not None:
                    self.data.items[item_id] = item.checked_in()
            self._claimed.clear()
