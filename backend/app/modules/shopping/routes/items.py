import logging

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.core.errors import RecordNotFoundError, StoreFailureError
from app.db import GetDb
from app.modules.auth.deps import RequireAuthenticated, UserContext
from app.modules.shopping.routes.errors import HandleDbError, HandleShoppingError
from app.modules.shopping.schemas import (
    BuildShoppingListItemOut,
    MarkPurchasedRequest,
    ShoppingListItemCreate,
    ShoppingListItemOut,
    ShoppingListItemUpdate,
    ShoppingPriority,
)
from app.modules.shopping.services import (
    CreateShoppingListItem,
    DeleteShoppingListItem,
    GetShoppingListItem,
    ListActiveShoppingList,
    ListHighPriorityShoppingList,
    ListMyPurchasedItems,
    ListMyShoppingList,
    ListRecentlyAddedItems,
    ListShoppingListItems,
    MarkPurchased,
    UpdateShoppingListItem,
)

router = APIRouter()
logger = logging.getLogger("shopping.items")


def _BuildList(records) -> list[ShoppingListItemOut]:
    return [BuildShoppingListItemOut(record) for record in records]


@router.get("", response_model=list[ShoppingListItemOut])
def ListShoppingListItemsRoute(
    is_purchased: bool | None = None,
    priority: ShoppingPriority | None = None,
    shopping_list_id: int | None = None,
    db: Session = Depends(GetDb),
) -> list[ShoppingListItemOut]:
    try:
        records = ListShoppingListItems(
            db,
            is_purchased=is_purchased,
            priority=priority,
            shopping_list_id=shopping_list_id,
        )
        return _BuildList(records)
    except StoreFailureError as exc:
        HandleDbError(exc)


@router.get("/active", response_model=list[ShoppingListItemOut])
def ListActiveShoppingListRoute(db: Session = Depends(GetDb)) -> list[ShoppingListItemOut]:
    try:
        return _BuildList(ListActiveShoppingList(db))
    except StoreFailureError as exc:
        HandleDbError(exc)


@router.get("/high-priority", response_model=list[ShoppingListItemOut])
def ListHighPriorityShoppingListRoute(db: Session = Depends(GetDb)) -> list[ShoppingListItemOut]:
    try:
        return _BuildList(ListHighPriorityShoppingList(db))
    except StoreFailureError as exc:
        HandleDbError(exc)


@router.get("/mine", response_model=list[ShoppingListItemOut])
def ListMyShoppingListRoute(
    is_purchased: bool | None = None,
    user: UserContext = Depends(RequireAuthenticated),
    db: Session = Depends(GetDb),
) -> list[ShoppingListItemOut]:
    try:
        return _BuildList(ListMyShoppingList(db, user, is_purchased=is_purchased))
    except StoreFailureError as exc:
        HandleDbError(exc)


@router.get("/purchased", response_model=list[ShoppingListItemOut])
def ListMyPurchasedItemsRoute(
    limit: int | None = Query(default=None, ge=1, le=200),
    user: UserContext = Depends(RequireAuthenticated),
    db: Session = Depends(GetDb),
) -> list[ShoppingListItemOut]:
    try:
        return _BuildList(ListMyPurchasedItems(db, user, limit=limit))
    except StoreFailureError as exc:
        HandleDbError(exc)


@router.get("/recent", response_model=list[ShoppingListItemOut])
def ListRecentlyAddedItemsRoute(
    limit: int | None = Query(default=None, ge=1, le=200),
    user: UserContext = Depends(RequireAuthenticated),
    db: Session = Depends(GetDb),
) -> list[ShoppingListItemOut]:
    try:
        return _BuildList(ListRecentlyAddedItems(db, user, limit=limit))
    except StoreFailureError as exc:
        HandleDbError(exc)


@router.get("/{item_id}", response_model=ShoppingListItemOut | None)
def GetShoppingListItemRoute(item_id: int, db: Session = Depends(GetDb)) -> ShoppingListItemOut | None:
    try:
        return BuildShoppingListItemOut(GetShoppingListItem(db, item_id))
    except RecordNotFoundError:
        return None
    except StoreFailureError as exc:
        HandleDbError(exc)


@router.post("", response_model=ShoppingListItemOut, status_code=status.HTTP_201_CREATED)
def CreateShoppingListItemRoute(
    payload: ShoppingListItemCreate,
    user: UserContext = Depends(RequireAuthenticated),
    db: Session = Depends(GetDb),
) -> ShoppingListItemOut:
    try:
        return BuildShoppingListItemOut(CreateShoppingListItem(db, user, payload.model_dump()))
    except ValueError as exc:
        HandleShoppingError(exc)
    except StoreFailureError as exc:
        HandleDbError(exc)


@router.patch("/{item_id}", response_model=ShoppingListItemOut)
def UpdateShoppingListItemRoute(
    item_id: int,
    payload: ShoppingListItemUpdate,
    user: UserContext = Depends(RequireAuthenticated),
    db: Session = Depends(GetDb),
) -> ShoppingListItemOut:
    try:
        record = UpdateShoppingListItem(db, user, item_id, payload.model_dump(exclude_unset=True))
        return BuildShoppingListItemOut(record)
    except ValueError as exc:
        HandleShoppingError(exc)
    except StoreFailureError as exc:
        HandleDbError(exc)


@router.post("/{item_id}/purchase", response_model=ShoppingListItemOut)
def MarkPurchasedRoute(
    item_id: int,
    payload: MarkPurchasedRequest | None = None,
    user: UserContext = Depends(RequireAuthenticated),
    db: Session = Depends(GetDb),
) -> ShoppingListItemOut:
    data = payload.model_dump(exclude_unset=True) if payload else {}
    try:
        return BuildShoppingListItemOut(MarkPurchased(db, user, item_id, data))
    except ValueError as exc:
        HandleShoppingError(exc)
    except StoreFailureError as exc:
        HandleDbError(exc)


@router.delete("/{item_id}", response_model=bool)
def DeleteShoppingListItemRoute(
    item_id: int,
    user: UserContext = Depends(RequireAuthenticated),
    db: Session = Depends(GetDb),
) -> bool:
    try:
        DeleteShoppingListItem(db, user, item_id)
        return True
    except ValueError as exc:
        HandleShoppingError(exc)
    except StoreFailureError as exc:
        HandleDbError(exc)
