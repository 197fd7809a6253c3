from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from app.modules.inventory.schemas import BuildInventoryItemOut, InventoryItemOut
from app.modules.stores.schemas import BuildStoreOut, StoreOut


class ItemPriceCreate(BaseModel):
    InventoryItemId: int
    StoreId: int
    Price: Decimal = Field(gt=0)
    UnitOfMeasure: str | None = Field(default=None, max_length=40)
    IsCurrent: bool = True


class ItemPriceOut(BaseModel):
    Id: int
    InventoryItemId: int
    StoreId: int
    Price: Decimal
    UnitOfMeasure: str
    IsCurrent: bool
    LastUpdated: datetime
    CreatedAt: datetime
    InventoryItem: InventoryItemOut | None = None
    Store: StoreOut | None = None


def BuildItemPriceOut(record) -> ItemPriceOut:
    return ItemPriceOut(
        Id=record.Id,
        InventoryItemId=record.InventoryItemId,
        StoreId=record.StoreId,
        Price=record.Price,
        UnitOfMeasure=record.UnitOfMeasure,
        IsCurrent=record.IsCurrent,
        LastUpdated=record.LastUpdated,
        CreatedAt=record.CreatedAt,
        InventoryItem=BuildInventoryItemOut(record.InventoryItem) if record.InventoryItem else None,
        Store=BuildStoreOut(record.Store) if record.Store else None,
    )
