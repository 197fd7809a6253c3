"""create shopping lists and shopping list items

Revision ID: 0002_shopping_lists
Revises: 0001_inventory_core
Create Date: 2026-10-19
"""

from alembic import op
import sqlalchemy as sa

revision = "0002_shopping_lists"
down_revision = "0001_inventory_core"
branch_labels = None
depends_on = None


def upgrade() -> None:
    if op.get_bind().dialect.name == "mssql":
        op.execute(
            "IF NOT EXISTS (SELECT * FROM sys.schemas WHERE name = 'shopping') EXEC('CREATE SCHEMA shopping')"
        )

    op.create_table(
        "shopping_lists",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("store_id", sa.Integer(), sa.ForeignKey("inventory.stores.id"), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("created_by", sa.String(length=64), nullable=False),
        sa.Column("updated_by", sa.String(length=64), nullable=False),
        schema="shopping",
    )
    op.create_index("ix_shopping_shopping_lists_store_id", "shopping_lists", ["store_id"], schema="shopping")
    op.create_index(
        "ix_shopping_shopping_lists_created_by",
        "shopping_lists",
        ["created_by"],
        schema="shopping",
    )
    op.create_index(
        "ix_shopping_lists_owner_created",
        "shopping_lists",
        ["created_by", "created_at"],
        schema="shopping",
    )

    op.create_table(
        "shopping_list_items",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "shopping_list_id",
            sa.Integer(),
            sa.ForeignKey("shopping.shopping_lists.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column(
            "inventory_item_id",
            sa.Integer(),
            sa.ForeignKey("inventory.inventory_items.id"),
            nullable=False,
        ),
        sa.Column("quantity_needed", sa.Float(), nullable=False),
        sa.Column("priority", sa.Integer(), nullable=False, server_default=sa.text("1")),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("is_purchased", sa.Boolean(), nullable=False, server_default=sa.text("0")),
        sa.Column("purchased_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("purchased_by", sa.String(length=64), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("created_by", sa.String(length=64), nullable=False),
        sa.Column("updated_by", sa.String(length=64), nullable=False),
        sa.CheckConstraint("priority IN (1, 2, 3)", name="ck_shopping_list_items_priority"),
        sa.CheckConstraint("quantity_needed > 0", name="ck_shopping_list_items_quantity"),
        schema="shopping",
    )
    op.create_index(
        "ix_shopping_shopping_list_items_shopping_list_id",
        "shopping_list_items",
        ["shopping_list_id"],
        schema="shopping",
    )
    op.create_index(
        "ix_shopping_shopping_list_items_inventory_item_id",
        "shopping_list_items",
        ["inventory_item_id"],
        schema="shopping",
    )
    op.create_index(
        "ix_shopping_shopping_list_items_created_by",
        "shopping_list_items",
        ["created_by"],
        schema="shopping",
    )
    op.create_index(
        "ix_shopping_shopping_list_items_purchased_by",
        "shopping_list_items",
        ["purchased_by"],
        schema="shopping",
    )
    op.create_index(
        "ix_shopping_list_items_purchased_priority",
        "shopping_list_items",
        ["is_purchased", "priority", "created_at"],
        schema="shopping",
    )


def downgrade() -> None:
    op.drop_index(
        "ix_shopping_list_items_purchased_priority",
        table_name="shopping_list_items",
        schema="shopping",
    )
    op.drop_index(
        "ix_shopping_shopping_list_items_purchased_by",
        table_name="shopping_list_items",
        schema="shopping",
    )
    op.drop_index(
        "ix_shopping_shopping_list_items_created_by",
        table_name="shopping_list_items",
        schema="shopping",
    )
    op.drop_index(
        "ix_shopping_shopping_list_items_inventory_item_id",
        table_name="shopping_list_items",
        schema="shopping",
    )
    op.drop_index(
        "ix_shopping_shopping_list_items_shopping_list_id",
        table_name="shopping_list_items",
        schema="shopping",
    )
    op.drop_table("shopping_list_items", schema="shopping")

    op.drop_index("ix_shopping_lists_owner_created", table_name="shopping_lists", schema="shopping")
    op.drop_index("ix_shopping_shopping_lists_created_by", table_name="shopping_lists", schema="shopping")
    op.drop_index("ix_shopping_shopping_lists_store_id", table_name="shopping_lists", schema="shopping")
    op.drop_table("shopping_lists", schema="shopping")
