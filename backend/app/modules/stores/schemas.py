from datetime import datetime

from pydantic import BaseModel, Field


class StoreCreate(BaseModel):
    Name: str = Field(min_length=1, max_length=200)
    Address: str | None = Field(default=None, max_length=400)
    Phone: str | None = Field(default=None, max_length=50)
    Website: str | None = Field(default=None, max_length=400)


class StoreUpdate(BaseModel):
    Name: str | None = Field(default=None, min_length=1, max_length=200)
    Address: str | None = Field(default=None, max_length=400)
    Phone: str | None = Field(default=None, max_length=50)
    Website: str | None = Field(default=None, max_length=400)
    IsActive: bool | None = None


class StoreOut(BaseModel):
    Id: int
    Name: str
    Address: str | None = None
    Phone: str | None = None
    Website: str | None = None
    IsActive: bool
    CreatedAt: datetime
    UpdatedAt: datetime
    CreatedBy: str
    UpdatedBy: str


def BuildStoreOut(record) -> StoreOut:
    return StoreOut(
        Id=record.Id,
        Name=record.Name,
        Address=record.Address,
        Phone=record.Phone,
        Website=record.Website,
        IsActive=record.IsActive,
        CreatedAt=record.CreatedAt,
        UpdatedAt=record.UpdatedAt,
        CreatedBy=record.CreatedBy,
        UpdatedBy=record.UpdatedBy,
    )
