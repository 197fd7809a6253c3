from sqlalchemy import Boolean, CheckConstraint, Column, DateTime, Float, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import relationship

from app.db import Base
from app.modules.auth.deps import NowUtc
from app.modules.inventory.models import InventoryItem
from app.modules.stores.models import Store


class ShoppingList(Base):
    __tablename__ = "shopping_lists"
    __table_args__ = (
        Index("ix_shopping_lists_owner_created", "created_by", "created_at"),
        {"schema": "shopping"},
    )

    Id = Column("id", Integer, primary_key=True, index=True)
    Name = Column("name", String(200), nullable=False)
    StoreId = Column("store_id", Integer, ForeignKey("inventory.stores.id"), index=True)
    CreatedAt = Column("created_at", DateTime(timezone=True), default=NowUtc, nullable=False)
    UpdatedAt = Column("updated_at", DateTime(timezone=True), default=NowUtc, nullable=False)
    CreatedBy = Column("created_by", String(64), nullable=False, index=True)
    UpdatedBy = Column("updated_by", String(64), nullable=False)

    Store = relationship(Store)
    Items = relationship(
        "ShoppingListItem",
        back_populates="ShoppingList",
        order_by=lambda: [
            ShoppingListItem.Priority.desc(),
            ShoppingListItem.CreatedAt.asc(),
            ShoppingListItem.Id.asc(),
        ],
    )


class ShoppingListItem(Base):
    __tablename__ = "shopping_list_items"
    __table_args__ = (
        CheckConstraint("priority IN (1, 2, 3)", name="ck_shopping_list_items_priority"),
        CheckConstraint("quantity_needed > 0", name="ck_shopping_list_items_quantity"),
        Index("ix_shopping_list_items_purchased_priority", "is_purchased", "priority", "created_at"),
        {"schema": "shopping"},
    )

    Id = Column("id", Integer, primary_key=True, index=True)
    ShoppingListId = Column(
        "shopping_list_id",
        Integer,
        ForeignKey("shopping.shopping_lists.id", ondelete="SET NULL"),
        index=True,
    )
    InventoryItemId = Column(
        "inventory_item_id",
        Integer,
        ForeignKey("inventory.inventory_items.id"),
        nullable=False,
        index=True,
    )
    QuantityNeeded = Column("quantity_needed", Float, nullable=False)
    Priority = Column("priority", Integer, nullable=False, default=1)
    Notes = Column("notes", Text)
    IsPurchased = Column("is_purchased", Boolean, nullable=False, default=False)
    PurchasedAt = Column("purchased_at", DateTime(timezone=True))
    PurchasedBy = Column("purchased_by", String(64), index=True)
    CreatedAt = Column("created_at", DateTime(timezone=True), default=NowUtc, nullable=False)
    UpdatedAt = Column("updated_at", DateTime(timezone=True), default=NowUtc, nullable=False)
    CreatedBy = Column("created_by", String(64), nullable=False, index=True)
    UpdatedBy = Column("updated_by", String(64), nullable=False)

    InventoryItem = relationship(InventoryItem)
    ShoppingList = relationship(ShoppingList, back_populates="Items")
