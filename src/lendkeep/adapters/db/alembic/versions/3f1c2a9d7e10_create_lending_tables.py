"""Create lending tables

Revision ID: 3f1c2a9d7e10
Revises:
Create Date: 2026-10-19

"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

from lendkeep.adapters.db.sa_types import BIGINT_PK, UTCDateTime

# pylint: disable=no-member

# revision identifiers, used by Alembic.
revision: str = "3f1c2a9d7e10"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _seq() -> sa.Column:
    return sa.Column(
        "seq",
        BIGINT_PK,
        sa.Identity(always=False, start=1),
        nullable=False,
        comment="Insertion order.",
    )


def _id() -> sa.Column:
    return sa.Column("id", sa.String(length=40), nullable=False)


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "items",
        _seq(),
        _id(),
        sa.Column("title", sa.String(length=500), nullable=False),
        sa.Column("author", sa.String(length=300), nullable=True),
        sa.Column("isbn", sa.String(length=20), nullable=True),
        sa.Column("genre", sa.String(length=100), nullable=True),
        sa.Column(
            "is_checked_out",
            sa.Boolean(),
            server_default=sa.false(),
            nullable=False,
            comment="True iff exactly one open rental references the item.",
        ),
        sa.PrimaryKeyConstraint("seq", name=op.f("pk_items")),
        sa.UniqueConstraint("id", name=op.f("uq_items_id")),
        comment="Rentable catalog entries.",
    )
    op.create_table(
        "requesters",
        _seq(),
        _id(),
        sa.Column("name", sa.String(length=300), nullable=False),
        sa.Column(
            "contact",
            sa.String(length=320),
            nullable=False,
            comment="Notification address.",
        ),
        sa.PrimaryKeyConstraint("seq", name=op.f("pk_requesters")),
        sa.UniqueConstraint("id", name=op.f("uq_requesters_id")),
        comment="People who rent items or wait for them.",
    )
    op.create_table(
        "rentals",
        _seq(),
        _id(),
        sa.Column("item_id", sa.String(length=40), nullable=False),
        sa.Column("requester_id", sa.String(length=40), nullable=False),
        sa.Column("checked_out_at", UTCDateTime(timezone=True), nullable=False),
        sa.Column("due_at", UTCDateTime(timezone=True), nullable=False),
        sa.Column(
            "returned_at",
            UTCDateTime(timezone=True),
            nullable=True,
            comment="NULL while open.",
        ),
        sa.Column(
            "extension_count", sa.Integer(), server_default="0", nullable=False
        ),
        sa.CheckConstraint(
            "extension_count >= 0",
            name=op.f("ck_rentals_non_negative_extension_count"),
        ),
        sa.ForeignKeyConstraint(
            ["item_id"], ["items.id"], name=op.f("fk_rentals_item_id_items")
        ),
        sa.ForeignKeyConstraint(
            ["requester_id"],
            ["requesters.id"],
            name=op.f("fk_rentals_requester_id_requesters"),
        ),
        sa.PrimaryKeyConstraint("seq", name=op.f("pk_rentals")),
        sa.UniqueConstraint("id", name=op.f("uq_rentals_id")),
        comment="Rental history. Rows are closed, never deleted.",
    )
    op.create_index(
        op.f("ix_rentals_requester_id"), "rentals", ["requester_id"], unique=False
    )
    op.create_index(
        "uq_rentals_open_item",
        "rentals",
        ["item_id"],
        unique=True,
        sqlite_where=sa.text("returned_at IS NULL"),
        postgresql_where=sa.text("returned_at IS NULL"),
    )
    op.create_table(
        "waiting_list_entries",
        _seq(),
        _id(),
        sa.Column("item_id", sa.String(length=40), nullable=False),
        sa.Column("requester_id", sa.String(length=40), nullable=False),
        sa.Column("requested_at", UTCDateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(
            ["item_id"],
            ["items.id"],
            name=op.f("fk_waiting_list_entries_item_id_items"),
        ),
        sa.ForeignKeyConstraint(
            ["requester_id"],
            ["requesters.id"],
            name=op.f("fk_waiting_list_entries_requester_id_requesters"),
        ),
        sa.PrimaryKeyConstraint("seq", name=op.f("pk_waiting_list_entries")),
        sa.UniqueConstraint("id", name=op.f("uq_waiting_list_entries_id")),
        comment="Pending requests for checked-out items.",
    )
    op.create_index(
        op.f("ix_waiting_list_entries_item_id_requested_at"),
        "waiting_list_entries",
        ["item_id", "requested_at"],
        unique=False,
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index(
        op.f("ix_waiting_list_entries_item_id_requested_at"),
        table_name="waiting_list_entries",
    )
    op.drop_table("waiting_list_entries")
    op.drop_index("uq_rentals_open_item", table_name="rentals")
    op.drop_index(op.f("ix_rentals_requester_id"), table_name="rentals")
    op.drop_table("rentals")
    op.drop_table("requesters")
    op.drop_table("items")
