"""expiration settings

Revision ID: 5c1e2a7d9f03
Revises:
Create Date: 2026-10-17 09:12:44.318204

"""
from __future__ import annotations

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "5c1e2a7d9f03"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

ROW_ID = sa.BigInteger().with_variant(sa.Integer(), "sqlite")


def upgrade() -> None:
    """Create thread, group, configuration and outbox tables."""
    op.create_table(
        "local_user",
        sa.Column("address", sa.Text(), nullable=False),
        sa.Column("display_name", sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint("address"),
    )
    op.create_table(
        "thread",
        sa.Column("id", ROW_ID, autoincrement=True, nullable=False),
        sa.Column("recipient_address", sa.Text(), nullable=True),
        sa.Column("is_closed_group", sa.Boolean(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_table(
        "closed_group",
        sa.Column("address", sa.Text(), nullable=False),
        sa.Column("title", sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint("address"),
    )
    op.create_table(
        "group_admin",
        sa.Column("group_address", sa.Text(), nullable=False),
        sa.Column("admin_address", sa.Text(), nullable=False),
        sa.ForeignKeyConstraint(
            ["group_address"], ["closed_group.address"], ondelete="CASCADE"
        ),
        sa.PrimaryKeyConstraint("group_address", "admin_address"),
    )
    op.create_table(
        "expiration_configuration",
        sa.Column("thread_id", sa.BigInteger(), nullable=False),
        sa.Column("expiry_type", sa.VARCHAR(length=20), nullable=False),
        sa.Column("expiry_seconds", sa.BigInteger(), nullable=False),
        sa.Column("updated_at_ms", sa.BigInteger(), nullable=False),
        sa.ForeignKeyConstraint(["thread_id"], ["thread.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("thread_id"),
    )
    op.create_table(
        "config_sync_state",
        sa.Column("id", sa.BigInteger(), nullable=False),
        sa.Column("last_synced_at_ms", sa.BigInteger(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_table(
        "outbound_message",
        sa.Column("id", ROW_ID, autoincrement=True, nullable=False),
        sa.Column("kind", sa.Text(), nullable=False),
        sa.Column("thread_id", sa.BigInteger(), nullable=True),
        sa.Column("recipient_address", sa.Text(), nullable=False),
        sa.Column("sender_address", sa.Text(), nullable=True),
        sa.Column("sent_timestamp_ms", sa.BigInteger(), nullable=True),
        sa.Column("payload", sa.Text(), nullable=False),
        sa.Column("status", sa.VARCHAR(length=20), nullable=False),
        sa.Column("retry_count", sa.SmallInteger(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_outbound_message_status", "outbound_message", ["status"], unique=False
    )


def downgrade() -> None:
    """Drop all tables created by this revision."""
    op.drop_index("ix_outbound_message_status", table_name="outbound_message")
    op.drop_table("outbound_message")
    op.drop_table("config_sync_state")
    op.drop_table("expiration_configuration")
    op.drop_table("group_admin")
    op.drop_table("closed_group")
    op.drop_table("thread")
    op.drop_table("local_user")
