"""Create stock ledger and audit tables.

Revision ID: a1c3e5f7b9d2
Revises:
Create Date: 2026-10-19 09:00:00.000000
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa
from sqlalchemy import inspect


# revision identifiers, used by Alembic.
revision = "a1c3e5f7b9d2"
down_revision = None
branch_labels = None
depends_on = None


def _table_exists(table_name: str) -> bool:
    bind = op.get_bind()
    return bool(inspect(bind).has_table(table_name))


def upgrade() -> None:
    # -------------------------
    # stock_items
    # -------------------------
    if not _table_exists("stock_items"):
        op.create_table(
            "stock_items",
            sa.Column("item_code", sa.String(length=64), primary_key=True),
            sa.Column("kind", sa.String(length=10), nullable=False),
            sa.Column("item_name", sa.String(length=255), nullable=False),
            sa.Column("category", sa.String(length=128), nullable=True),
            sa.Column("opening_balance", sa.Integer(), nullable=False, server_default="0"),
            sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
            sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
            sa.CheckConstraint("opening_balance >= 0", name="ck_stock_items_opening_balance"),
        )
        op.create_index("ix_stock_items_kind", "stock_items", ["kind"])
        op.create_index("ix_stock_items_kind_category", "stock_items", ["kind", "category"])

    # -------------------------
    # stock_transactions
    # -------------------------
    if not _table_exists("stock_transactions"):
        op.create_table(
            "stock_transactions",
            sa.Column("id", sa.String(length=36), primary_key=True),
            sa.Column(
                "item_code",
                sa.String(length=64),
                sa.ForeignKey("stock_items.item_code", ondelete="RESTRICT"),
                nullable=False,
            ),
            sa.Column("movement_date", sa.Date(), nullable=False),
            sa.Column("in_qty", sa.Integer(), nullable=False, server_default="0"),
            sa.Column("out_qty", sa.Integer(), nullable=False, server_default="0"),
            sa.Column("remark", sa.Text(), nullable=True),
            sa.Column("cleaner", sa.String(length=10), nullable=True),
            sa.Column("recorded_by", sa.String(length=64), nullable=False, server_default="system"),
            sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
            sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
            sa.CheckConstraint("in_qty >= 0 AND out_qty >= 0", name="ck_stock_transactions_non_negative"),
            sa.CheckConstraint(
                "(in_qty > 0 AND out_qty = 0) OR (in_qty = 0 AND out_qty > 0)",
                name="ck_stock_transactions_single_direction",
            ),
        )
        op.create_index("ix_stock_transactions_item_code", "stock_transactions", ["item_code"])
        op.create_index("ix_stock_transactions_movement_date", "stock_transactions", ["movement_date"])
        op.create_index("ix_stock_transactions_item_date", "stock_transactions", ["item_code", "movement_date"])

    # -------------------------
    # audit_events
    # -------------------------
    if not _table_exists("audit_events"):
        op.create_table(
            "audit_events",
            sa.Column("id", sa.String(length=36), primary_key=True),
            sa.Column("entity_type", sa.String(length=64), nullable=False),
            sa.Column("entity_id", sa.String(length=64), nullable=False),
            sa.Column("action", sa.String(length=64), nullable=False),
            sa.Column("actor_user_id", sa.String(length=64), nullable=True),
            sa.Column("occurred_at", sa.DateTime(timezone=True), nullable=False),
            sa.Column("before", sa.JSON(), nullable=True),
            sa.Column("after", sa.JSON(), nullable=True),
            sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        )
        op.create_index("ix_audit_events_id", "audit_events", ["id"])
        op.create_index("ix_audit_events_entity_type", "audit_events", ["entity_type"])
        op.create_index("ix_audit_events_entity_id", "audit_events", ["entity_id"])
        op.create_index("ix_audit_events_action", "audit_events", ["action"])
        op.create_index("ix_audit_events_actor_user_id", "audit_events", ["actor_user_id"])
        op.create_index("ix_audit_events_occurred_at", "audit_events", ["occurred_at"])
        op.create_index("ix_audit_events_entity", "audit_events", ["entity_type", "entity_id"])
        op.create_index("ix_audit_events_time_desc", "audit_events", [sa.text("occurred_at DESC")])


def downgrade() -> None:
    op.drop_table("audit_events")
    op.drop_table("stock_transactions")
    op.drop_table("stock_items")
