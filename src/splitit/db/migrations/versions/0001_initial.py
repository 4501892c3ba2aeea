"""initial schema

Revision ID: 0001
Revises: 
Create Date: 2025-10-12 00:00:00.000000
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa


revision = "0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "bills",
        sa.Column("id", sa.Text(), primary_key=True),
        sa.Column("owner_tg_id", sa.BigInteger(), nullable=False),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("tax", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("tip", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("split_mode", sa.Text(), nullable=False, server_default="even"),
        sa.Column("currency_symbol", sa.Text(), nullable=False, server_default="$"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.CheckConstraint("split_mode in ('even','itemized')", name="bills_split_mode_check"),
        sa.CheckConstraint("tax >= 0 and tip >= 0", name="bills_extras_check"),
    )

    op.create_table(
        "bill_items",
        sa.Column("id", sa.Text(), primary_key=True),
        sa.Column("bill_id", sa.Text(), sa.ForeignKey("bills.id", ondelete="CASCADE"), nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("price", sa.Numeric(12, 2), nullable=False),
        sa.Column("seq", sa.BigInteger(), sa.Identity(), nullable=False),
        sa.CheckConstraint("price >= 0", name="bill_items_price_check"),
    )

    op.create_table(
        "bill_people",
        sa.Column("id", sa.Text(), primary_key=True),
        sa.Column("bill_id", sa.Text(), sa.ForeignKey("bills.id", ondelete="CASCADE"), nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("seq", sa.BigInteger(), sa.Identity(), nullable=False),
    )

    # No foreign key on person_id: assignments outlive removed people.
    op.create_table(
        "item_assignments",
        sa.Column("item_id", sa.Text(), sa.ForeignKey("bill_items.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("person_id", sa.Text(), primary_key=True),
        sa.Column("seq", sa.BigInteger(), sa.Identity(), nullable=False),
    )

    op.create_index("idx_bills_owner", "bills", ["owner_tg_id"])
    op.create_index("idx_bill_items_bill", "bill_items", ["bill_id"])
    op.create_index("idx_bill_people_bill", "bill_people", ["bill_id"])


def downgrade() -> None:
    op.drop_index("idx_bill_people_bill", table_name="bill_people")
    op.drop_index("idx_bill_items_bill", table_name="bill_items")
    op.drop_index("idx_bills_owner", table_name="bills")

    op.drop_table("item_assignments")
    op.drop_table("bill_people")
    op.drop_table("bill_items")
    op.drop_table("bills")
