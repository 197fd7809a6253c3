from datetime import datetime
from enum import IntEnum

from pydantic import BaseModel, Field

from app.modules.inventory.schemas import BuildInventoryItemOut, InventoryItemOut
from app.modules.stores.schemas import BuildStoreOut, StoreOut


class ShoppingPriority(IntEnum):
    Low = 1
    Medium = 2
    High = 3


class ShoppingListCreate(BaseModel):
    Name: str = Field(min_length=1, max_length=200)
    StoreId: int | None = None


class ShoppingListUpdate(BaseModel):
    Name: str | None = Field(default=None, min_length=1, max_length=200)
    StoreId: int | None = None


class ShoppingListItemCreate(BaseModel):
    InventoryItemId: int
    ShoppingListId: int | None = None
    QuantityNeeded: float = Field(gt=0)
    Priority: ShoppingPriority | None = None
    Notes: str | None = None


class ShoppingListItemUpdate(BaseModel):
    QuantityNeeded: float | None = Field(default=None, gt=0)
    Priority: ShoppingPriority | None = None
    Notes: str | None = None
    IsPurchased: bool | None = None


class MarkPurchasedRequest(BaseModel):
    Notes: str | None = None


class ShoppingListSummaryOut(BaseModel):
    Id: int
    Name: str
    StoreId: int | None = None
    CreatedBy: str


class ShoppingListItemOut(BaseModel):
    Id: int
    ShoppingListId: int | None = None
    ShoppingList: ShoppingListSummaryOut | None = None
    InventoryItemId: int
    InventoryItem: InventoryItemOut | None = None
    QuantityNeeded: float
    Priority: int
    Notes: str | None = None
    IsPurchased: bool
    PurchasedAt: datetime | None = None
    PurchasedBy: str | None = None
    CreatedAt: datetime
    UpdatedAt: datetime
    CreatedBy: str
    UpdatedBy: str


class ShoppingListOut(BaseModel):
    Id: int
    Name: str
    StoreId: int | None = None
    Store: StoreOut | None = None
    ItemsCount: int | None = None
    Items: list[ShoppingListItemOut] | None = None
    CreatedAt: datetime
    UpdatedAt: datetime
    CreatedBy: str
    UpdatedBy: str


def BuildShoppingListItemOut(record) -> ShoppingListItemOut:
    shopping_list = record.ShoppingList
    return ShoppingListItemOut(
        Id=record.Id,
        ShoppingListId=record.ShoppingListId,
        ShoppingList=(
            ShoppingListSummaryOut(
                Id=shopping_list.Id,
                Name=shopping_list.Name,
                StoreId=shopping_list.StoreId,
                CreatedBy=shopping_list.CreatedBy,
            )
            if shopping_list
            else None
        ),
        InventoryItemId=record.InventoryItemId,
        InventoryItem=BuildInventoryItemOut(record.InventoryItem) if record.InventoryItem else None,
        QuantityNeeded=record.QuantityNeeded,
        Priority=record.Priority,
        Notes=record.Notes,
        IsPurchased=record.IsPurchased,
        PurchasedAt=record.PurchasedAt,
        PurchasedBy=record.PurchasedBy,
        CreatedAt=record.CreatedAt,
        UpdatedAt=record.UpdatedAt,
        CreatedBy=record.CreatedBy,
        UpdatedBy=record.UpdatedBy,
    )


def BuildShoppingListOut(
    record,
    items_count: int | None = None,
    include_items: bool = False,
) -> ShoppingListOut:
    return ShoppingListOut(
        Id=record.Id,
        Name=record.Name,
        StoreId=record.StoreId,
        Store=BuildStoreOut(record.Store) if record.Store else None,
        ItemsCount=items_count,
        Items=[BuildShoppingListItemOut(item) for item in record.Items] if include_items else None,
        CreatedAt=record.CreatedAt,
        UpdatedAt=record.UpdatedAt,
        CreatedBy=record.CreatedBy,
        UpdatedBy=record.UpdatedBy,
    )
