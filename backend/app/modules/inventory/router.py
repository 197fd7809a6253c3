import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.core.errors import RecordNotFoundError, StoreFailureError
from app.db import GetDb
from app.modules.auth.deps import RequireAuthenticated, UserContext
from app.modules.inventory.schemas import (
    BuildInventoryItemOut,
    InventoryItemCreate,
    InventoryItemOut,
    InventoryItemUpdate,
)
from app.modules.inventory.services import (
    CreateInventoryItem,
    DeleteInventoryItem,
    GetInventoryItem,
    ListInventoryItems,
    ListInventoryItemsByCategory,
    ListLowStockItems,
    ListMyInventoryItems,
    ListRecentlyUpdatedItems,
    UpdateInventoryItem,
)

router = APIRouter(prefix="/api/inventory", tags=["inventory"])
logger = logging.getLogger("inventory")


def _handle_db_error(exc: StoreFailureError) -> None:
    logger.exception("inventory database error")
    raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc


def _handle_inventory_error(exc: ValueError) -> None:
    if isinstance(exc, RecordNotFoundError):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc


@router.get("/status")
async def inventory_status() -> dict:
    logger.debug("inventory status ok")
    return {"status": "ok", "module": "inventory"}


@router.get("/items", response_model=list[InventoryItemOut])
def ListInventoryItemsRoute(
    category: str | None = None,
    is_active: bool | None = None,
    low_stock: bool = False,
    db: Session = Depends(GetDb),
) -> list[InventoryItemOut]:
    try:
        records = ListInventoryItems(db, category=category, is_active=is_active, low_stock=low_stock)
        return [BuildInventoryItemOut(record) for record in records]
    except StoreFailureError as exc:
        _handle_db_error(exc)


@router.get("/items/low-stock", response_model=list[InventoryItemOut])
def ListLowStockItemsRoute(db: Session = Depends(GetDb)) -> list[InventoryItemOut]:
    try:
        return [BuildInventoryItemOut(record) for record in ListLowStockItems(db)]
    except StoreFailureError as exc:
        _handle_db_error(exc)


@router.get("/items/by-category/{category}", response_model=list[InventoryItemOut])
def ListInventoryItemsByCategoryRoute(category: str, db: Session = Depends(GetDb)) -> list[InventoryItemOut]:
    try:
        return [BuildInventoryItemOut(record) for record in ListInventoryItemsByCategory(db, category)]
    except StoreFailureError as exc:
        _handle_db_error(exc)


@router.get("/items/mine", response_model=list[InventoryItemOut])
def ListMyInventoryItemsRoute(
    category: str | None = None,
    is_active: bool | None = None,
    user: UserContext = Depends(RequireAuthenticated),
    db: Session = Depends(GetDb),
) -> list[InventoryItemOut]:
    try:
        records = ListMyInventoryItems(db, user, category=category, is_active=is_active)
        return [BuildInventoryItemOut(record) for record in records]
    except StoreFailureError as exc:
        _handle_db_error(exc)


@router.get("/items/recently-updated", response_model=list[InventoryItemOut])
def ListRecentlyUpdatedItemsRoute(
    limit: int | None = Query(default=None, ge=1, le=200),
    user: UserContext = Depends(RequireAuthenticated),
    db: Session = Depends(GetDb),
) -> list[InventoryItemOut]:
    try:
        return [BuildInventoryItemOut(record) for record in ListRecentlyUpdatedItems(db, user, limit=limit)]
    except StoreFailureError as exc:
        _handle_db_error(exc)


@router.get("/items/{item_id}", response_model=InventoryItemOut | None)
def GetInventoryItemRoute(item_id: int, db: Session = Depends(GetDb)) -> InventoryItemOut | None:
    try:
        return BuildInventoryItemOut(GetInventoryItem(db, item_id))
    except RecordNotFoundError:
        return None
    except StoreFailureError as exc:
        _handle_db_error(exc)


@router.post("/items", response_model=InventoryItemOut, status_code=status.HTTP_201_CREATED)
def CreateInventoryItemRoute(
    payload: InventoryItemCreate,
    user: UserContext = Depends(RequireAuthenticated),
    db: Session = Depends(GetDb),
) -> InventoryItemOut:
    try:
        return BuildInventoryItemOut(CreateInventoryItem(db, user, payload.model_dump()))
    except ValueError as exc:
        _handle_inventory_error(exc)
    except StoreFailureError as exc:
        _handle_db_error(exc)


@router.patch("/items/{item_id}", response_model=InventoryItemOut)
def UpdateInventoryItemRoute(
    item_id: int,
    payload: InventoryItemUpdate,
    user: UserContext = Depends(RequireAuthenticated),
    db: Session = Depends(GetDb),
) -> InventoryItemOut:
    try:
        record = UpdateInventoryItem(db, user, item_id, payload.model_dump(exclude_unset=True))
        return BuildInventoryItemOut(record)
    except ValueError as exc:
        _handle_inventory_error(exc)
    except StoreFailureError as exc:
        _handle_db_error(exc)


@router.delete("/items/{item_id}", response_model=bool)
def DeleteInventoryItemRoute(
    item_id: int,
    user: UserContext = Depends(RequireAuthenticated),
    db: Session = Depends(GetDb),
) -> bool:
    try:
        DeleteInventoryItem(db, user, item_id)
        return True
    except ValueError as exc:
        _handle_inventory_error(exc)
    except StoreFailureError as exc:
        _handle_db_error(exc)
