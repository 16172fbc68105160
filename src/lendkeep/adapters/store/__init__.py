"""Keyed store adapters."""

from .memory import InMemoryStore, InMemoryStoreData
from .sqlalchemy_store import SqlAlchemyStore

__all__ = ["InMemoryStore", "InMemoryStoreData", "SqlAlchemyStore"]
