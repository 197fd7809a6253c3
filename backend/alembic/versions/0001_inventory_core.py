"""create stores, inventory items and item prices

Revision ID: 0001_inventory_core
Revises:
Create Date: 2026-10-19
"""

from alembic import op
import sqlalchemy as sa

revision = "0001_inventory_core"
down_revision = None
branch_labels = None
depends_on = None


def _ensure_schema(name: str) -> None:
    if op.get_bind().dialect.name == "mssql":
        op.execute(
            f"IF NOT EXISTS (SELECT * FROM sys.schemas WHERE name = '{name}') EXEC('CREATE SCHEMA {name}')"
        )


def _audit_columns() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("created_by", sa.String(length=64), nullable=False),
        sa.Column("updated_by", sa.String(length=64), nullable=False),
    ]


def upgrade() -> None:
    _ensure_schema("inventory")

    op.create_table(
        "stores",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("address", sa.String(length=400), nullable=True),
        sa.Column("phone", sa.String(length=50), nullable=True),
        sa.Column("website", sa.String(length=400), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("1")),
        *_audit_columns(),
        schema="inventory",
    )
    op.create_index("ix_inventory_stores_name", "stores", ["name"], schema="inventory")
    op.create_index("ix_inventory_stores_created_by", "stores", ["created_by"], schema="inventory")

    op.create_table(
        "inventory_items",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("category", sa.String(length=120), nullable=True),
        sa.Column("brand", sa.String(length=120), nullable=True),
        sa.Column("barcode", sa.String(length=64), nullable=True),
        sa.Column("unit_of_measure", sa.String(length=40), nullable=False, server_default="each"),
        sa.Column("current_quantity", sa.Float(), nullable=False, server_default=sa.text("0")),
        sa.Column("minimum_quantity", sa.Float(), nullable=False, server_default=sa.text("0")),
        sa.Column("maximum_quantity", sa.Float(), nullable=True),
        sa.Column("expiration_date", sa.Date(), nullable=True),
        sa.Column("purchase_date", sa.Date(), nullable=True),
        sa.Column("cost_per_unit", sa.Numeric(12, 2), nullable=True),
        sa.Column("storage_location", sa.String(length=200), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("1")),
        *_audit_columns(),
        sa.CheckConstraint("current_quantity >= 0", name="ck_inventory_items_current_quantity"),
        sa.CheckConstraint("minimum_quantity >= 0", name="ck_inventory_items_minimum_quantity"),
        sa.CheckConstraint(
            "maximum_quantity IS NULL OR maximum_quantity >= minimum_quantity",
            name="ck_inventory_items_maximum_quantity",
        ),
        schema="inventory",
    )
    op.create_index("ix_inventory_inventory_items_name", "inventory_items", ["name"], schema="inventory")
    op.create_index("ix_inventory_inventory_items_barcode", "inventory_items", ["barcode"], schema="inventory")
    op.create_index(
        "ix_inventory_inventory_items_created_by",
        "inventory_items",
        ["created_by"],
        schema="inventory",
    )
    op.create_index(
        "ix_inventory_inventory_items_updated_by",
        "inventory_items",
        ["updated_by"],
        schema="inventory",
    )
    op.create_index(
        "ix_inventory_items_category_active",
        "inventory_items",
        ["category", "is_active"],
        schema="inventory",
    )

    op.create_table(
        "item_prices",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "inventory_item_id",
            sa.Integer(),
            sa.ForeignKey("inventory.inventory_items.id"),
            nullable=False,
        ),
        sa.Column("store_id", sa.Integer(), sa.ForeignKey("inventory.stores.id"), nullable=False),
        sa.Column("price", sa.Numeric(12, 2), nullable=False),
        sa.Column("unit_of_measure", sa.String(length=40), nullable=False, server_default="each"),
        sa.Column("is_current", sa.Boolean(), nullable=False, server_default=sa.text("1")),
        sa.Column("last_updated", sa.DateTime(timezone=True), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint("price > 0", name="ck_item_prices_price_positive"),
        schema="inventory",
    )
    op.create_index(
        "ix_inventory_item_prices_inventory_item_id",
        "item_prices",
        ["inventory_item_id"],
        schema="inventory",
    )
    op.create_index("ix_inventory_item_prices_store_id", "item_prices", ["store_id"], schema="inventory")
    op.create_index(
        "ix_item_prices_item_current_price",
        "item_prices",
        ["inventory_item_id", "is_current", "price"],
        schema="inventory",
    )


def downgrade() -> None:
    op.drop_index("ix_item_prices_item_current_price", table_name="item_prices", schema="inventory")
    op.drop_index("ix_inventory_item_prices_store_id", table_name="item_prices", schema="inventory")
    op.drop_index("ix_inventory_item_prices_inventory_item_id", table_name="item_prices", schema="inventory")
    op.drop_table("item_prices", schema="inventory")

    op.drop_index("ix_inventory_items_category_active", table_name="inventory_items", schema="inventory")
    op.drop_index("ix_inventory_inventory_items_updated_by", table_name="inventory_items", schema="inventory")
    op.drop_index("ix_inventory_inventory_items_created_by", table_name="inventory_items", schema="inventory")
    op.drop_index("ix_inventory_inventory_items_barcode", table_name="inventory_items", schema="inventory")
    op.drop_index("ix_inventory_inventory_items_name", table_name="inventory_items", schema="inventory")
    op.drop_table("inventory_items", schema="inventory")

    op.drop_index("ix_inventory_stores_created_by", table_name="stores", schema="inventory")
    op.drop_index("ix_inventory_stores_name", table_name="stores", schema="inventory")
    op.drop_table("stores", schema="inventory")
