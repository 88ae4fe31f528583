"""create event info, item info, and ticket tables

Revision ID: 0001
Revises:
Create Date: 2026-10-18 00:00:00

"""

from __future__ import annotations

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

revision: str = "0001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "event_info",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("event_config_id", sa.String(), nullable=False),
        sa.Column("event_name", sa.String(), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_event_info"),
        sa.UniqueConstraint("event_config_id", name="uq_event_info_event_info_event_config_id"),
    )
    op.create_table(
        "item_info",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("event_config_id", sa.String(), nullable=False),
        sa.Column("item_id", sa.String(), nullable=False),
        sa.Column("item_name", sa.String(), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_item_info"),
        sa.UniqueConstraint(
            "event_config_id", "item_id", name="uq_item_info_item_info_event_config_id"
        ),
    )
    op.create_index("ix_item_info_event_config_id", "item_info", ["event_config_id"])
    op.create_table(
        "ticket",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("email", sa.String(), nullable=False),
        sa.Column("full_name", sa.String(), nullable=False),
        sa.Column("item_info_id", sa.Uuid(), nullable=True),
        sa.Column("event_config_id", sa.String(), nullable=False),
        sa.Column("is_deleted", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.ForeignKeyConstraint(
            ["item_info_id"],
            ["item_info.id"],
            name="fk_ticket_ticket_item_info_id_item_info",
            ondelete="SET NULL",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_ticket"),
        sa.UniqueConstraint("email", "item_info_id", name="uq_ticket_ticket_email"),
    )
    op.create_index(
        "ix_ticket_event_config_id", "ticket", ["event_config_id", "is_deleted"]
    )


def downgrade() -> None:
    op.drop_index("ix_ticket_event_config_id", table_name="ticket")
    op.drop_table("ticket")
    op.drop_index("ix_item_info_event_config_id", table_name="item_info")
    op.drop_table("item_info")
    op.drop_table("event_info")
