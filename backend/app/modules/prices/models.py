from sqlalchemy import Boolean, CheckConstraint, Column, DateTime, ForeignKey, Index, Integer, Numeric, String
from sqlalchemy.orm import relationship

from app.db import Base
from app.modules.auth.deps import NowUtc
from app.modules.inventory.models import InventoryItem
from app.modules.stores.models import Store


class ItemPrice(Base):
    __tablename__ = "item_prices"
    __table_args__ = (
        CheckConstraint("price > 0", name="ck_item_prices_price_positive"),
        Index("ix_item_prices_item_current_price", "inventory_item_id", "is_current", "price"),
        {"schema": "inventory"},
    )

    Id = Column("id", Integer, primary_key=True, index=True)
    InventoryItemId = Column(
        "inventory_item_id",
        Integer,
        ForeignKey("inventory.inventory_items.id"),
        nullable=False,
        index=True,
    )
    StoreId = Column("store_id", Integer, ForeignKey("inventory.stores.id"), nullable=False, index=True)
    Price = Column("price", Numeric(12, 2), nullable=False)
    UnitOfMeasure = Column("unit_of_measure", String(40), nullable=False, default="each")
    IsCurrent = Column("is_current", Boolean, nullable=False, default=True)
    LastUpdated = Column("last_updated", DateTime(timezone=True), default=NowUtc, nullable=False)
    CreatedAt = Column("created_at", DateTime(timezone=True), default=NowUtc, nullable=False)

    InventoryItem = relationship(InventoryItem)
    Store = relationship(Store)
