import logging

from sqlalchemy.orm import Session

from app.core.errors import RecordNotFoundError, RecordValidationError, WrapStoreErrors
from app.modules.auth.deps import NowUtc, UserContext
from app.modules.inventory.models import InventoryItem, IsLowStock

logger = logging.getLogger("inventory")

DEFAULT_UNIT_OF_MEASURE = "each"
DEFAULT_RECENT_LIMIT = 10

# Optional columns a partial update may set, including back to null.
_NULLABLE_FIELDS = (
    "Description",
    "Category",
    "Brand",
    "Barcode",
    "MaximumQuantity",
    "ExpirationDate",
    "PurchaseDate",
    "CostPerUnit",
    "StorageLocation",
)


def _NormalizeName(value: str | None) -> str:
    return " ".join((value or "").strip().split())


def ValidateQuantities(
    current_quantity: float,
    minimum_quantity: float,
    maximum_quantity: float | None,
) -> None:
    if current_quantity < 0:
        raise RecordValidationError("Current quantity cannot be negative")
    if minimum_quantity < 0:
        raise RecordValidationError("Minimum quantity cannot be negative")
    if maximum_quantity is not None and maximum_quantity < minimum_quantity:
        raise RecordValidationError("Maximum quantity cannot be below minimum quantity")


def FilterLowStock(items: list[InventoryItem]) -> list[InventoryItem]:
    return [item for item in items if IsLowStock(item.CurrentQuantity, item.MinimumQuantity)]


def ListInventoryItems(
    db: Session,
    category: str | None = None,
    is_active: bool | None = None,
    low_stock: bool = False,
) -> list[InventoryItem]:
    with WrapStoreErrors(db, "fetch inventory items"):
        query = db.query(InventoryItem)
        if category:
            query = query.filter(InventoryItem.Category == category)
        if is_active is not None:
            query = query.filter(InventoryItem.IsActive == is_active)
        items = query.order_by(InventoryItem.Name.asc(), InventoryItem.Id.asc()).all()
    # Applied after retrieval so it composes with the filters above.
    if low_stock:
        items = FilterLowStock(items)
    return items


def ListInventoryItemsByCategory(db: Session, category: str) -> list[InventoryItem]:
    with WrapStoreErrors(db, "fetch inventory items by category"):
        return (
            db.query(InventoryItem)
            .filter(InventoryItem.Category == category, InventoryItem.IsActive == True)  # noqa: E712
            .order_by(InventoryItem.Name.asc(), InventoryItem.Id.asc())
            .all()
        )


def ListLowStockItems(db: Session) -> list[InventoryItem]:
    with WrapStoreErrors(db, "fetch low stock items"):
        items = (
            db.query(InventoryItem)
            .filter(InventoryItem.IsActive == True)  # noqa: E712
            .order_by(InventoryItem.Category.asc(), InventoryItem.Name.asc(), InventoryItem.Id.asc())
            .all()
        )
    return FilterLowStock(items)


def ListMyInventoryItems(
    db: Session,
    user: UserContext,
    category: str | None = None,
    is_active: bool | None = None,
) -> list[InventoryItem]:
    with WrapStoreErrors(db, "fetch my inventory items"):
        query = db.query(InventoryItem).filter(InventoryItem.CreatedBy == user.Id)
        if category:
            query = query.filter(InventoryItem.Category == category)
        if is_active is not None:
            query = query.filter(InventoryItem.IsActive == is_active)
        return query.order_by(InventoryItem.Name.asc(), InventoryItem.Id.asc()).all()


def ListRecentlyUpdatedItems(
    db: Session,
    user: UserContext,
    limit: int | None = None,
) -> list[InventoryItem]:
    with WrapStoreErrors(db, "fetch recently updated items"):
        return (
            db.query(InventoryItem)
            .filter(InventoryItem.UpdatedBy == user.Id)
            .order_by(InventoryItem.UpdatedAt.desc(), InventoryItem.Id.desc())
            .limit(limit or DEFAULT_RECENT_LIMIT)
            .all()
        )


def GetInventoryItem(db: Session, item_id: int) -> InventoryItem:
    with WrapStoreErrors(db, "fetch inventory item"):
        record = db.query(InventoryItem).filter(InventoryItem.Id == item_id).first()
    if not record:
        raise RecordNotFoundError("Inventory item not found")
    return record


def CreateInventoryItem(db: Session, user: UserContext, payload: dict) -> InventoryItem:
    name = _NormalizeName(payload.get("Name"))
    if not name:
        raise RecordValidationError("Name is required")
    current_quantity = payload.get("CurrentQuantity") or 0
    minimum_quantity = payload.get("MinimumQuantity") or 0
    maximum_quantity = payload.get("MaximumQuantity")
    ValidateQuantities(current_quantity, minimum_quantity, maximum_quantity)

    now = NowUtc()
    record = InventoryItem(
        Name=name,
        Description=payload.get("Description"),
        Category=payload.get("Category"),
        Brand=payload.get("Brand"),
        Barcode=payload.get("Barcode"),
        UnitOfMeasure=payload.get("UnitOfMeasure") or DEFAULT_UNIT_OF_MEASURE,
        CurrentQuantity=current_quantity,
        MinimumQuantity=minimum_quantity,
        MaximumQuantity=maximum_quantity,
        ExpirationDate=payload.get("ExpirationDate"),
        PurchaseDate=payload.get("PurchaseDate"),
        CostPerUnit=payload.get("CostPerUnit"),
        StorageLocation=payload.get("StorageLocation"),
        IsActive=True,
        CreatedAt=now,
        UpdatedAt=now,
        CreatedBy=user.Id,
        UpdatedBy=user.Id,
    )
    with WrapStoreErrors(db, "create inventory item"):
        db.add(record)
        db.commit()
        db.refresh(record)
    logger.info("inventory item %s created by %s", record.Id, user.Id)
    return record


def UpdateInventoryItem(db: Session, user: UserContext, item_id: int, payload: dict) -> InventoryItem:
    record = GetInventoryItem(db, item_id)
    data = payload

    if data.get("Name") is not None:
        name = _NormalizeName(data["Name"])
        if not name:
            raise RecordValidationError("Name is required")
        record.Name = name
    if data.get("UnitOfMeasure") is not None:
        record.UnitOfMeasure = data["UnitOfMeasure"] or DEFAULT_UNIT_OF_MEASURE
    if data.get("CurrentQuantity") is not None:
        record.CurrentQuantity = data["CurrentQuantity"]
    if data.get("MinimumQuantity") is not None:
        record.MinimumQuantity = data["MinimumQuantity"]
    if data.get("IsActive") is not None:
        record.IsActive = bool(data["IsActive"])
    for field in _NULLABLE_FIELDS:
        if field in data:
            setattr(record, field, data[field])

    try:
        ValidateQuantities(record.CurrentQuantity, record.MinimumQuantity, record.MaximumQuantity)
    except RecordValidationError:
        db.rollback()
        raise

    record.UpdatedBy = user.Id
    record.UpdatedAt = NowUtc()
    with WrapStoreErrors(db, "update inventory item"):
        db.add(record)
        db.commit()
        db.refresh(record)
    return record


def DeleteInventoryItem(db: Session, user: UserContext, item_id: int) -> InventoryItem:
    record = GetInventoryItem(db, item_id)
    record.IsActive = False
    record.UpdatedBy = user.Id
    record.UpdatedAt = NowUtc()
    with WrapStoreErrors(db, "delete inventory item"):
        db.add(record)
        db.commit()
        db.refresh(record)
    logger.info("inventory item %s deactivated by %s", record.Id, user.Id)
    return record
