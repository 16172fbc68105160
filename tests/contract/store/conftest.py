"""Fixtures for store contract tests.

Every test receives a unit of work from one backend and exercises one of
its stores. Backends:
  - `"memory"` → InMemoryUnitOfWork
  - `"sqlite"` → SqlAlchemyUnitOfWork over an in-memory SQLite engine
"""

from __future__ import annotations

from collections.abc import Iterator

import pytest

from lendkeep.adapters.unit_of_work import InMemoryUnitOfWork, SqlAlchemyUnitOfWork
from lendkeep.interfaces.unit_of_work import AbstractUnitOfWork


@pytest.fixture(params=["memory", "sqlite"])
def uow(request: pytest.FixtureRequest) -> Iterator[AbstractUnitOfWork]:
    """An entered unit of work for the requested backend."""
    match request.param:
        case "memory":
            unit: AbstractUnitOfWork = InMemoryUnitOfWork()
        case "sqlite":
            unit = SqlAlchemyUnitOfWork(request.getfixturevalue("sqlite_engine_memory"))
        case _:
            raise ValueError(f"unknown store backend: {request.param}")
    with unit:
        yield unit
