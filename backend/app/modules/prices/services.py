import logging

from sqlalchemy.orm import Session, joinedload

from app.core.errors import RecordNotFoundError, RecordValidationError, WrapStoreErrors
from app.modules.auth.deps import NowUtc, UserContext
from app.modules.inventory.models import InventoryItem
from app.modules.prices.models import ItemPrice
from app.modules.stores.models import Store

logger = logging.getLogger("prices")


def _PriceQuery(db: Session):
    return db.query(ItemPrice).options(
        joinedload(ItemPrice.InventoryItem),
        joinedload(ItemPrice.Store),
    )


def ListItemPrices(
    db: Session,
    inventory_item_id: int | None = None,
    store_id: int | None = None,
    is_current: bool | None = None,
) -> list[ItemPrice]:
    with WrapStoreErrors(db, "fetch item prices"):
        query = _PriceQuery(db)
        if inventory_item_id is not None:
            query = query.filter(ItemPrice.InventoryItemId == inventory_item_id)
        if store_id is not None:
            query = query.filter(ItemPrice.StoreId == store_id)
        if is_current is not None:
            query = query.filter(ItemPrice.IsCurrent == is_current)
        return query.order_by(ItemPrice.LastUpdated.desc(), ItemPrice.Id.desc()).all()


def GetItemPrice(db: Session, price_id: int) -> ItemPrice:
    with WrapStoreErrors(db, "fetch item price"):
        record = _PriceQuery(db).filter(ItemPrice.Id == price_id).first()
    if not record:
        raise RecordNotFoundError("Item price not found")
    return record


def _CurrentPricesQuery(db: Session, inventory_item_id: int):
    return (
        _PriceQuery(db)
        .filter(ItemPrice.InventoryItemId == inventory_item_id, ItemPrice.IsCurrent == True)  # noqa: E712
        .order_by(ItemPrice.Price.asc(), ItemPrice.Id.asc())
    )


def ListCurrentPricesForItem(db: Session, inventory_item_id: int) -> list[ItemPrice]:
    """Current prices for one item, cheapest first."""
    with WrapStoreErrors(db, "fetch current prices for item"):
        return _CurrentPricesQuery(db, inventory_item_id).all()


def GetCheapestCurrentPrice(db: Session, inventory_item_id: int) -> ItemPrice | None:
    with WrapStoreErrors(db, f"fetch cheapest price for item {inventory_item_id}"):
        return _CurrentPricesQuery(db, inventory_item_id).first()


def RecordItemPrice(db: Session, user: UserContext, payload: dict) -> ItemPrice:
    """Insert a price observation.

    A new current price demotes the earlier current prices for the same
    (item, store) pair, so each pair keeps at most one current row.
    """
    price = payload.get("Price")
    if price is None or price <= 0:
        raise RecordValidationError("Price must be greater than zero")

    inventory_item_id = payload["InventoryItemId"]
    store_id = payload["StoreId"]
    with WrapStoreErrors(db, "record item price"):
        item = db.query(InventoryItem).filter(InventoryItem.Id == inventory_item_id).first()
        store = db.query(Store).filter(Store.Id == store_id).first()
    if not item:
        raise RecordNotFoundError("Inventory item not found")
    if not store:
        raise RecordNotFoundError("Store not found")

    is_current = payload.get("IsCurrent", True)
    is_current = True if is_current is None else bool(is_current)
    now = NowUtc()
    record = ItemPrice(
        InventoryItemId=inventory_item_id,
        StoreId=store_id,
        Price=price,
        UnitOfMeasure=payload.get("UnitOfMeasure") or item.UnitOfMeasure,
        IsCurrent=is_current,
        LastUpdated=now,
        CreatedAt=now,
    )
    with WrapStoreErrors(db, "record item price"):
        if is_current:
            demoted = (
                db.query(ItemPrice)
                .filter(
                    ItemPrice.InventoryItemId == inventory_item_id,
                    ItemPrice.StoreId == store_id,
                    ItemPrice.IsCurrent == True,  # noqa: E712
                )
                .update({ItemPrice.IsCurrent: False, ItemPrice.LastUpdated: now}, synchronize_session=False)
            )
            if demoted:
                logger.info(
                    "demoted %s current price(s) for item %s at store %s",
                    demoted,
                    inventory_item_id,
                    store_id,
                )
        db.add(record)
        db.commit()
    logger.info("price recorded for item %s at store %s by %s", inventory_item_id, store_id, user.Id)
    return GetItemPrice(db, record.Id)
