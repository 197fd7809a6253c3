import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.core.errors import RecordNotFoundError, StoreFailureError
from app.db import GetDb
from app.modules.auth.deps import RequireAuthenticated, UserContext
from app.modules.shopping.routes.errors import HandleDbError, HandleShoppingError
from app.modules.shopping.schemas import (
    BuildShoppingListOut,
    ShoppingListCreate,
    ShoppingListOut,
    ShoppingListUpdate,
)
from app.modules.shopping.services import (
    CountShoppingListItems,
    CreateShoppingList,
    DeleteShoppingList,
    GetShoppingList,
    ListShoppingLists,
    UpdateShoppingList,
)

router = APIRouter()
logger = logging.getLogger("shopping.lists")


def _BuildWithCount(db: Session, record, include_items: bool = False) -> ShoppingListOut:
    counts = CountShoppingListItems(db, [record.Id])
    return BuildShoppingListOut(record, items_count=counts.get(record.Id), include_items=include_items)


@router.get("", response_model=list[ShoppingListOut])
def ListShoppingListsRoute(
    store_id: int | None = None,
    user: UserContext = Depends(RequireAuthenticated),
    db: Session = Depends(GetDb),
) -> list[ShoppingListOut]:
    try:
        records = ListShoppingLists(db, user, store_id=store_id)
        counts = CountShoppingListItems(db, [record.Id for record in records])
        return [BuildShoppingListOut(record, items_count=counts.get(record.Id)) for record in records]
    except StoreFailureError as exc:
        HandleDbError(exc)


@router.get("/{list_id}", response_model=ShoppingListOut | None)
def GetShoppingListRoute(
    list_id: int,
    user: UserContext = Depends(RequireAuthenticated),
    db: Session = Depends(GetDb),
) -> ShoppingListOut | None:
    try:
        record = GetShoppingList(db, user, list_id)
        return _BuildWithCount(db, record, include_items=True)
    except RecordNotFoundError:
        return None
    except StoreFailureError as exc:
        HandleDbError(exc)


@router.post("", response_model=ShoppingListOut, status_code=status.HTTP_201_CREATED)
def CreateShoppingListRoute(
    payload: ShoppingListCreate,
    user: UserContext = Depends(RequireAuthenticated),
    db: Session = Depends(GetDb),
) -> ShoppingListOut:
    try:
        record = CreateShoppingList(db, user, payload.model_dump())
        return _BuildWithCount(db, record)
    except ValueError as exc:
        HandleShoppingError(exc)
    except StoreFailureError as exc:
        HandleDbError(exc)


@router.patch("/{list_id}", response_model=ShoppingListOut)
def UpdateShoppingListRoute(
    list_id: int,
    payload: ShoppingListUpdate,
    user: UserContext = Depends(RequireAuthenticated),
    db: Session = Depends(GetDb),
) -> ShoppingListOut:
    try:
        record = UpdateShoppingList(db, user, list_id, payload.model_dump(exclude_unset=True))
        return _BuildWithCount(db, record)
    except ValueError as exc:
        HandleShoppingError(exc)
    except StoreFailureError as exc:
        HandleDbError(exc)


@router.delete("/{list_id}", response_model=bool)
def DeleteShoppingListRoute(
    list_id: int,
    user: UserContext = Depends(RequireAuthenticated),
    db: Session = Depends(GetDb),
) -> bool:
    try:
        DeleteShoppingList(db, user, list_id)
        return True
    except ValueError as exc:
        HandleShoppingError(exc)
    except StoreFailureError as exc:
        HandleDbError(exc)
