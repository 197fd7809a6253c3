import logging

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from app.core.errors import RecordNotFoundError, RecordValidationError, WrapStoreErrors
from app.modules.auth.deps import NowUtc, UserContext
from app.modules.inventory.models import InventoryItem
from app.modules.shopping.models import ShoppingList, ShoppingListItem
from app.modules.shopping.utils.rbac import RequireOwner
from app.modules.stores.models import Store

logger = logging.getLogger("shopping")

PRIORITY_LOW = 1
PRIORITY_HIGH = 3
ALLOWED_PRIORITIES = {1, 2, 3}
DEFAULT_PURCHASED_LIMIT = 20
DEFAULT_RECENT_LIMIT = 10


def _NormalizeName(value: str | None) -> str:
    return " ".join((value or "").strip().split())


def _ValidatePriority(value: int) -> int:
    if value not in ALLOWED_PRIORITIES:
        raise RecordValidationError("Priority must be 1, 2 or 3")
    return value


def _ValidateQuantityNeeded(value: float) -> float:
    if value is None or value <= 0:
        raise RecordValidationError("Quantity needed must be greater than zero")
    return value


def _EnsureStoreExists(db: Session, store_id: int | None) -> None:
    if store_id is None:
        return
    with WrapStoreErrors(db, "fetch store"):
        exists = db.query(Store.Id).filter(Store.Id == store_id).first()
    if not exists:
        raise RecordNotFoundError("Store not found")


# Shopping lists


def ListShoppingLists(db: Session, user: UserContext, store_id: int | None = None) -> list[ShoppingList]:
    with WrapStoreErrors(db, "fetch shopping lists"):
        query = (
            db.query(ShoppingList)
            .options(joinedload(ShoppingList.Store))
            .filter(ShoppingList.CreatedBy == user.Id)
        )
        if store_id is not None:
            query = query.filter(ShoppingList.StoreId == store_id)
        return query.order_by(ShoppingList.CreatedAt.desc(), ShoppingList.Id.desc()).all()


def GetShoppingList(db: Session, user: UserContext, list_id: int) -> ShoppingList:
    """Fetch one of the caller's lists; another caller's list reads as missing."""
    with WrapStoreErrors(db, "fetch shopping list"):
        record = (
            db.query(ShoppingList)
            .options(joinedload(ShoppingList.Store))
            .filter(ShoppingList.Id == list_id, ShoppingList.CreatedBy == user.Id)
            .first()
        )
    if not record:
        raise RecordNotFoundError("Shopping list not found")
    return record


def _GetOwnedList(db: Session, user: UserContext, list_id: int) -> ShoppingList:
    with WrapStoreErrors(db, "fetch shopping list"):
        record = db.query(ShoppingList).filter(ShoppingList.Id == list_id).first()
    if not record:
        raise RecordNotFoundError("Shopping list not found")
    RequireOwner(user, record.CreatedBy, "shopping list")
    return record


def CreateShoppingList(db: Session, user: UserContext, payload: dict) -> ShoppingList:
    name = _NormalizeName(payload.get("Name"))
    if not name:
        raise RecordValidationError("Name is required")
    store_id = payload.get("StoreId")
    _EnsureStoreExists(db, store_id)
    now = NowUtc()
    record = ShoppingList(
        Name=name,
        StoreId=store_id,
        CreatedAt=now,
        UpdatedAt=now,
        CreatedBy=user.Id,
        UpdatedBy=user.Id,
    )
    with WrapStoreErrors(db, "create shopping list"):
        db.add(record)
        db.commit()
        db.refresh(record)
    logger.info("shopping list %s created by %s", record.Id, user.Id)
    return record


def UpdateShoppingList(db: Session, user: UserContext, list_id: int, payload: dict) -> ShoppingList:
    record = _GetOwnedList(db, user, list_id)
    if payload.get("Name") is not None:
        name = _NormalizeName(payload["Name"])
        if not name:
            raise RecordValidationError("Name is required")
        record.Name = name
    if "StoreId" in payload:
        _EnsureStoreExists(db, payload["StoreId"])
        record.StoreId = payload["StoreId"]
    record.UpdatedBy = user.Id
    record.UpdatedAt = NowUtc()
    with WrapStoreErrors(db, "update shopping list"):
        db.add(record)
        db.commit()
        db.refresh(record)
    return record


def DeleteShoppingList(db: Session, user: UserContext, list_id: int) -> None:
    record = _GetOwnedList(db, user, list_id)
    with WrapStoreErrors(db, "delete shopping list"):
        detached = (
            db.query(ShoppingListItem)
            .filter(ShoppingListItem.ShoppingListId == record.Id)
            .update({ShoppingListItem.ShoppingListId: None}, synchronize_session=False)
        )
        db.delete(record)
        db.commit()
    logger.info("shopping list %s deleted by %s (%s item(s) detached)", list_id, user.Id, detached)


def CountShoppingListItems(db: Session, list_ids: list[int]) -> dict[int, int | None]:
    """Item counts per list; a failed count reads as None rather than an error."""
    if not list_ids:
        return {}
    try:
        rows = (
            db.query(ShoppingListItem.ShoppingListId, func.count(ShoppingListItem.Id))
            .filter(ShoppingListItem.ShoppingListId.in_(list_ids))
            .group_by(ShoppingListItem.ShoppingListId)
            .all()
        )
    except SQLAlchemyError:
        logger.exception("failed to count shopping list items")
        db.rollback()
        return {list_id: None for list_id in list_ids}
    counts = {list_id: count for list_id, count in rows}
    return {list_id: counts.get(list_id, 0) for list_id in list_ids}


# Shopping list items


def _ItemQuery(db: Session):
    return db.query(ShoppingListItem).options(
        joinedload(ShoppingListItem.InventoryItem),
        joinedload(ShoppingListItem.ShoppingList),
    )


def _DefaultOrder(query):
    return query.order_by(
        ShoppingListItem.Priority.desc(),
        ShoppingListItem.CreatedAt.asc(),
        ShoppingListItem.Id.asc(),
    )


def ListShoppingListItems(
    db: Session,
    is_purchased: bool | None = None,
    priority: int | None = None,
    shopping_list_id: int | None = None,
) -> list[ShoppingListItem]:
    with WrapStoreErrors(db, "fetch shopping list items"):
        query = _ItemQuery(db)
        if is_purchased is not None:
            query = query.filter(ShoppingListItem.IsPurchased == is_purchased)
        if priority:
            query = query.filter(ShoppingListItem.Priority == priority)
        if shopping_list_id is not None:
            query = query.filter(ShoppingListItem.ShoppingListId == shopping_list_id)
        return _DefaultOrder(query).all()


def ListActiveShoppingList(db: Session) -> list[ShoppingListItem]:
    return ListShoppingListItems(db, is_purchased=False)


def ListHighPriorityShoppingList(db: Session) -> list[ShoppingListItem]:
    with WrapStoreErrors(db, "fetch high priority shopping list"):
        return (
            _ItemQuery(db)
            .filter(
                ShoppingListItem.IsPurchased == False,  # noqa: E712
                ShoppingListItem.Priority == PRIORITY_HIGH,
            )
            .order_by(ShoppingListItem.CreatedAt.asc(), ShoppingListItem.Id.asc())
            .all()
        )


def ListUnpurchasedInventoryItemIds(db: Session) -> list[int]:
    """Distinct inventory item ids still needed, in list order."""
    with WrapStoreErrors(db, "fetch shopping list for price comparison"):
        rows = _DefaultOrder(
            db.query(ShoppingListItem.InventoryItemId).filter(
                ShoppingListItem.IsPurchased == False  # noqa: E712
            )
        ).all()
    seen: set[int] = set()
    ordered = []
    for (inventory_item_id,) in rows:
        if inventory_item_id in seen:
            continue
        seen.add(inventory_item_id)
        ordered.append(inventory_item_id)
    return ordered


def ListMyShoppingList(
    db: Session,
    user: UserContext,
    is_purchased: bool | None = None,
) -> list[ShoppingListItem]:
    with WrapStoreErrors(db, "fetch my shopping list"):
        query = _ItemQuery(db).filter(ShoppingListItem.CreatedBy == user.Id)
        if is_purchased is not None:
            query = query.filter(ShoppingListItem.IsPurchased == is_purchased)
        return _DefaultOrder(query).all()


def ListMyPurchasedItems(db: Session, user: UserContext, limit: int | None = None) -> list[ShoppingListItem]:
    with WrapStoreErrors(db, "fetch my purchased items"):
        return (
            _ItemQuery(db)
            .filter(ShoppingListItem.PurchasedBy == user.Id)
            .order_by(ShoppingListItem.PurchasedAt.desc(), ShoppingListItem.Id.desc())
            .limit(limit or DEFAULT_PURCHASED_LIMIT)
            .all()
        )


def ListRecentlyAddedItems(db: Session, user: UserContext, limit: int | None = None) -> list[ShoppingListItem]:
    with WrapStoreErrors(db, "fetch recently added items"):
        return (
            _ItemQuery(db)
            .filter(ShoppingListItem.CreatedBy == user.Id)
            .order_by(ShoppingListItem.CreatedAt.desc(), ShoppingListItem.Id.desc())
            .limit(limit or DEFAULT_RECENT_LIMIT)
            .all()
        )


def GetShoppingListItem(db: Session, item_id: int) -> ShoppingListItem:
    with WrapStoreErrors(db, "fetch shopping list item"):
        record = _ItemQuery(db).filter(ShoppingListItem.Id == item_id).first()
    if not record:
        raise RecordNotFoundError("Shopping list item not found")
    return record


def CreateShoppingListItem(db: Session, user: UserContext, payload: dict) -> ShoppingListItem:
    quantity_needed = _ValidateQuantityNeeded(payload.get("QuantityNeeded"))
    priority = _ValidatePriority(payload.get("Priority") or PRIORITY_LOW)
    inventory_item_id = payload.get("InventoryItemId")
    with WrapStoreErrors(db, "fetch inventory item"):
        item_exists = db.query(InventoryItem.Id).filter(InventoryItem.Id == inventory_item_id).first()
    if not item_exists:
        raise RecordNotFoundError("Inventory item not found")
    shopping_list_id = payload.get("ShoppingListId")
    if shopping_list_id is not None:
        _GetOwnedList(db, user, shopping_list_id)

    now = NowUtc()
    record = ShoppingListItem(
        ShoppingListId=shopping_list_id,
        InventoryItemId=inventory_item_id,
        QuantityNeeded=quantity_needed,
        Priority=priority,
        Notes=payload.get("Notes"),
        IsPurchased=False,
        CreatedAt=now,
        UpdatedAt=now,
        CreatedBy=user.Id,
        UpdatedBy=user.Id,
    )
    with WrapStoreErrors(db, "create shopping list item"):
        db.add(record)
        db.commit()
    logger.info("shopping list item %s created by %s", record.Id, user.Id)
    return GetShoppingListItem(db, record.Id)


def _ApplyPurchase(record: ShoppingListItem, user: UserContext) -> None:
    now = NowUtc()
    record.IsPurchased = True
    record.PurchasedAt = now
    record.PurchasedBy = user.Id
    record.UpdatedBy = user.Id
    record.UpdatedAt = now


def UpdateShoppingListItem(db: Session, user: UserContext, item_id: int, payload: dict) -> ShoppingListItem:
    record = GetShoppingListItem(db, item_id)
    data = payload

    if data.get("QuantityNeeded") is not None:
        record.QuantityNeeded = _ValidateQuantityNeeded(data["QuantityNeeded"])
    if data.get("Priority") is not None:
        record.Priority = _ValidatePriority(data["Priority"])
    if "Notes" in data:
        record.Notes = data.get("Notes")
    if data.get("IsPurchased") is not None:
        if data["IsPurchased"]:
            _ApplyPurchase(record, user)
        elif record.IsPurchased:
            db.rollback()
            raise RecordValidationError("Purchased items cannot be marked as not purchased")

    record.UpdatedBy = user.Id
    record.UpdatedAt = NowUtc()
    with WrapStoreErrors(db, "update shopping list item"):
        db.add(record)
        db.commit()
    return GetShoppingListItem(db, item_id)


def MarkPurchased(db: Session, user: UserContext, item_id: int, payload: dict | None = None) -> ShoppingListItem:
    """Move an item to Purchased; repeating it restamps the purchase.

    Notes are overwritten only when the payload carries them.
    """
    data = payload or {}
    record = GetShoppingListItem(db, item_id)
    _ApplyPurchase(record, user)
    if "Notes" in data:
        record.Notes = data["Notes"]
    with WrapStoreErrors(db, "mark item as purchased"):
        db.add(record)
        db.commit()
    logger.info("shopping list item %s purchased by %s", item_id, user.Id)
    return GetShoppingListItem(db, item_id)


def DeleteShoppingListItem(db: Session, user: UserContext, item_id: int) -> None:
    with WrapStoreErrors(db, "fetch shopping list item"):
        record = db.query(ShoppingListItem).filter(ShoppingListItem.Id == item_id).first()
    if not record:
        raise RecordNotFoundError("Shopping list item not found")
    RequireOwner(user, record.CreatedBy, "shopping list item")
    with WrapStoreErrors(db, "delete shopping list item"):
        db.delete(record)
        db.commit()
