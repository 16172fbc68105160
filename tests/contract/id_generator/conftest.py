"""Fixtures for id generator contract tests."""

from collections.abc import Iterable

import pytest

from lendkeep.adapters.id_generators import (
    SimpleIdGenerator,
    ULIDGenerator,
    UUIDv4Generator,
)
from lendkeep.interfaces.id_generator import IdGenerator


def _build(kind: str) -> IdGenerator:
    match kind:
        case "ulid":
            return ULIDGenerator()
        case "uuid4":
            return UUIDv4Generator()
        case "simple":
            return SimpleIdGenerator()
        case _:
            raise ValueError(f"unknown id generator type: {kind}")


@pytest.fixture(params=["ulid", "uuid4", "simple"])
def id_generator(request: pytest.FixtureRequest) -> Iterable[IdGenerator]:
    """A fresh generator for each backend."""
    yield _build(request.param)


@pytest.fixture(params=["ulid", "simple"])
def ordered_id_generator(request: pytest.FixtureRequest) -> Iterable[IdGenerator]:
    """Generators whose ids sort in creation order.

    Waiting list entries requested at the same instant are ordered by id, so
    any generator used for entries must be one of these.
    """
    yield _build(request.param)
