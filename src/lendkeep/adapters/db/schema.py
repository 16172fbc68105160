"""Lending catalog schema.

Four tables, one per entity type. Every table has a surrogate ``seq`` primary
key recording insertion order and a unique string ``id`` used as the entity
identity.

Constraints (enforced here):

| Constraint                                   | Purpose                              |
|----------------------------------------------|--------------------------------------|
| UNIQUE(id) on every table                    | entity identity                      |
| FK rentals/waiting_list → items, requesters  | no dangling references               |
| CHECK(extension_count >= 0)                  | extension counter never negative     |
| UNIQUE(item_id) WHERE returned_at IS NULL    | at most one open rental per item     |
"""

from __future__ import annotations

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    ForeignKey,
    Identity,
    Index,
    Integer,
    String,
    Table,
    false,
    text,
)

from .metadata import metadata
from .sa_types import BIGINT_PK, UTCDateTime

__all__ = ["items", "requesters", "rentals", "waiting_list_entries"]

ID_LENGTH = 40


def _seq_column() -> Column:
    return Column(
        "seq",
        BIGINT_PK,
        Identity(start=1),
        primary_key=True,
        nullable=False,
        comment="Insertion order.",
    )


def _id_column() -> Column:
    return Column("id", String(ID_LENGTH), nullable=False, unique=True)


items = Table(
    "items",
    metadata,
    _seq_column(),
    _id_column(),
    Column("title", String(500), nullable=False),
    Column("author", String(300), nullable=True),
    Column("isbn", String(20), nullable=True),
    Column("genre", String(100), nullable=True),
    Column(
        "is_checked_out",
        Boolean,
        nullable=False,
        server_default=false(),
        comment="True iff exactly one open rental references the item.",
    ),
    comment="Rentable catalog entries.",
)

requesters = Table(
    "requesters",
    metadata,
    _seq_column(),
    _id_column(),
    Column("name", String(300), nullable=False),
    Column("contact", String(320), nullable=False, comment="Notification address."),
    comment="People who rent items or wait for them.",
)

rentals = Table(
    "rentals",
    metadata,
    _seq_column(),
    _id_column(),
    Column("item_id", String(ID_LENGTH), ForeignKey("items.id"), nullable=False),
    Column(
        "requester_id", String(ID_LENGTH), ForeignKey("requesters.id"), nullable=False
    ),
    Column("checked_out_at", UTCDateTime(), nullable=False),
    Column("due_at", UTCDateTime(), nullable=False),
    Column("returned_at", UTCDateTime(), nullable=True, comment="NULL while open."),
    Column("extension_count", Integer, nullable=False, server_default="0"),
    CheckConstraint("extension_count >= 0", name="non_negative_extension_count"),
    Index("ix_rentals_requester_id", "requester_id"),
    Index(
        "uq_rentals_open_item",
        "item_id",
        unique=True,
        sqlite_where=text("returned_at IS NULL"),
        postgresql_where=text("returned_at IS NULL"),
    ),
    comment="Rental history. Rows are closed, never deleted.",
)

waiting_list_entries = Table(
    "waiting_list_entries",
    metadata,
    _seq_column(),
    _id_column(),
    Column("item_id", String(ID_LENGTH), ForeignKey("items.id"), nullable=False),
    Column(
        "requester_id", String(ID_LENGTH), ForeignKey("requesters.id"), nullable=False
    ),
    Column("requested_at", UTCDateTime(), nullable=False),
    Index("ix_waiting_list_entries_item_id_requested_at", "item_id", "requested_at"),
    comment="Pending requests for checked-out items.",
)
