from sqlalchemy import Boolean, CheckConstraint, Column, Date, DateTime, Float, Index, Integer, Numeric, String, Text

from app.db import Base
from app.modules.auth.deps import NowUtc


class InventoryItem(Base):
    __tablename__ = "inventory_items"
    __table_args__ = (
        CheckConstraint("current_quantity >= 0", name="ck_inventory_items_current_quantity"),
        CheckConstraint("minimum_quantity >= 0", name="ck_inventory_items_minimum_quantity"),
        CheckConstraint(
            "maximum_quantity IS NULL OR maximum_quantity >= minimum_quantity",
            name="ck_inventory_items_maximum_quantity",
        ),
        Index("ix_inventory_items_category_active", "category", "is_active"),
        {"schema": "inventory"},
    )

    Id = Column("id", Integer, primary_key=True, index=True)
    Name = Column("name", String(200), nullable=False, index=True)
    Description = Column("description", Text)
    Category = Column("category", String(120))
    Brand = Column("brand", String(120))
    Barcode = Column("barcode", String(64), index=True)
    UnitOfMeasure = Column("unit_of_measure", String(40), nullable=False, default="each")
    CurrentQuantity = Column("current_quantity", Float, nullable=False, default=0)
    MinimumQuantity = Column("minimum_quantity", Float, nullable=False, default=0)
    MaximumQuantity = Column("maximum_quantity", Float)
    ExpirationDate = Column("expiration_date", Date)
    PurchaseDate = Column("purchase_date", Date)
    CostPerUnit = Column("cost_per_unit", Numeric(12, 2))
    StorageLocation = Column("storage_location", String(200))
    IsActive = Column("is_active", Boolean, nullable=False, default=True)
    CreatedAt = Column("created_at", DateTime(timezone=True), default=NowUtc, nullable=False)
    UpdatedAt = Column("updated_at", DateTime(timezone=True), default=NowUtc, nullable=False)
    CreatedBy = Column("created_by", String(64), nullable=False, index=True)
    UpdatedBy = Column("updated_by", String(64), nullable=False, index=True)

    @property
    def IsLowStock(self) -> bool:
        return IsLowStock(self.CurrentQuantity, self.MinimumQuantity)


def IsLowStock(current_quantity, minimum_quantity) -> bool:
    return (current_quantity or 0) < (minimum_quantity or 0)
