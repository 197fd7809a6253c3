from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, Field


class InventoryItemCreate(BaseModel):
    Name: str = Field(min_length=1, max_length=200)
    Description: str | None = None
    Category: str | None = Field(default=None, max_length=120)
    Brand: str | None = Field(default=None, max_length=120)
    Barcode: str | None = Field(default=None, max_length=64)
    UnitOfMeasure: str | None = Field(default=None, max_length=40)
    CurrentQuantity: float | None = None
    MinimumQuantity: float | None = None
    MaximumQuantity: float | None = None
    ExpirationDate: date | None = None
    PurchaseDate: date | None = None
    CostPerUnit: Decimal | None = None
    StorageLocation: str | None = Field(default=None, max_length=200)


class InventoryItemUpdate(BaseModel):
    Name: str | None = Field(default=None, min_length=1, max_length=200)
    Description: str | None = None
    Category: str | None = Field(default=None, max_length=120)
    Brand: str | None = Field(default=None, max_length=120)
    Barcode: str | None = Field(default=None, max_length=64)
    UnitOfMeasure: str | None = Field(default=None, max_length=40)
    CurrentQuantity: float | None = None
    MinimumQuantity: float | None = None
    MaximumQuantity: float | None = None
    ExpirationDate: date | None = None
    PurchaseDate: date | None = None
    CostPerUnit: Decimal | None = None
    StorageLocation: str | None = Field(default=None, max_length=200)
    IsActive: bool | None = None


class InventoryItemOut(BaseModel):
    Id: int
    Name: str
    Description: str | None = None
    Category: str | None = None
    Brand: str | None = None
    Barcode: str | None = None
    UnitOfMeasure: str
    CurrentQuantity: float
    MinimumQuantity: float
    MaximumQuantity: float | None = None
    ExpirationDate: date | None = None
    PurchaseDate: date | None = None
    CostPerUnit: Decimal | None = None
    StorageLocation: str | None = None
    IsActive: bool
    IsLowStock: bool
    CreatedAt: datetime
    UpdatedAt: datetime
    CreatedBy: str
    UpdatedBy: str


def BuildInventoryItemOut(record) -> InventoryItemOut:
    return InventoryItemOut(
        Id=record.Id,
        Name=record.Name,
        Description=record.Description,
        Category=record.Category,
        Brand=record.Brand,
        Barcode=record.Barcode,
        UnitOfMeasure=record.UnitOfMeasure,
        CurrentQuantity=record.CurrentQuantity,
        MinimumQuantity=record.MinimumQuantity,
        MaximumQuantity=record.MaximumQuantity,
        ExpirationDate=record.ExpirationDate,
        PurchaseDate=record.PurchaseDate,
        CostPerUnit=record.CostPerUnit,
        StorageLocation=record.StorageLocation,
        IsActive=record.IsActive,
        IsLowStock=record.IsLowStock,
        CreatedAt=record.CreatedAt,
        UpdatedAt=record.UpdatedAt,
        CreatedBy=record.CreatedBy,
        UpdatedBy=record.UpdatedBy,
    )
