"""Keyed store implemented with SQLAlchemy Core.

Each table carries a surrogate `seq` column (insertion order) next to the
entity columns, which are named exactly like the entity's dataclass fields.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import asdict, fields
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from sqlalchemy import delete, insert, select, update

from lendkeep.interfaces.store import DuplicateEntityError, EntityNotFoundError, Store

if TYPE_CHECKING:
    from sqlalchemy import Table
    from sqlalchemy.engine import Connection, Row

E = TypeVar("E")


class SqlAlchemyStore(Store[E], Generic[E]):
    """Store for one dataclass entity type mapped onto one table.

    Args:
        connection: Connection whose transaction the store writes into.
        table: Table holding the entity rows.
        entity_type: Frozen dataclass rebuilt from each row.
        kind: Human-readable entity kind used in error messages.

    Note:
        `query_all` evaluates its predicate in Python after loading the rows.
    """

    def __init__(
        self,
        connection: Connection,
        table: Table,
        entity_type: type[E],
        kind: str,
    ) -> None:
        self.connection = connection
        self.table = table
        self.entity_type = entity_type
        self.kind = kind
        self._columns = [table.c[f.name] for f in fields(entity_type)]  # type: ignore[arg-type]

    def _to_entity(self, row: Row[Any]) -> E:
        return self.entity_type(**row._mapping)  # pylint: disable=protected-access

    # --- reads ---

    def get(self, entity_id: str) -> E | None:
        stmt = select(*self._columns).where(self.table.c.id == entity_id)
        if not (row := self.connection.execute(stmt).fetchone()):
            return None
        return self._to_entity(row)

    def query_all(self, predicate: Callable[[E], bool] | None = None) -> list[E]:
        stmt = select(*self._columns).order_by(self.table.c.seq)
        entities = [self._to_entity(row) for row in self.connection.execute(stmt)]
        if predicate is None:
            return entities
        return [e for e in entities if predicate(e)]

    # --- writes ---

    def add(self, entity: E) -> str:
        values = asdict(entity)  # type: ignore[call-overload]
        if self.get(values["id"]) is not None:
            raise DuplicateEntityError(self.kind, values["id"])
        self.connection.execute(insert(self.table).values(**values))
        return values["id"]

    def update(self, entity: E) -> None:
        values = asdict(entity)  # type: ignore[call-overload]
        entity_id = values.pop("id")
        result = self.connection.execute(
            update(self.table).where(self.table.c.id == entity_id).values(**values)
        )
        if result.rowcount == 0:
            raise EntityNotFoundError(self.kind, entity_id)

    def delete(self, entity_id: str) -> None:
        result = self.connection.execute(
            delete(self.table).where(self.table.c.id == entity_id)
        )
        if result.rowcount == 0:
            raise EntityNotFoundError(self.kind, entity_id)
