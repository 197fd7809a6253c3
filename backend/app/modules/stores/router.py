import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.core.errors import RecordNotFoundError, StoreFailureError
from app.db import GetDb
from app.modules.auth.deps import RequireAuthenticated, UserContext
from app.modules.stores.schemas import BuildStoreOut, StoreCreate, StoreOut, StoreUpdate
from app.modules.stores.services import CreateStore, GetStore, ListStores, UpdateStore

router = APIRouter(prefix="/api/stores", tags=["stores"])
logger = logging.getLogger("stores")


def _handle_db_error(exc: StoreFailureError) -> None:
    logger.exception("stores database error")
    raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc


def _handle_store_error(exc: ValueError) -> None:
    if isinstance(exc, RecordNotFoundError):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc


@router.get("", response_model=list[StoreOut])
def ListStoresRoute(
    is_active: bool | None = None,
    db: Session = Depends(GetDb),
) -> list[StoreOut]:
    try:
        return [BuildStoreOut(record) for record in ListStores(db, is_active=is_active)]
    except StoreFailureError as exc:
        _handle_db_error(exc)


@router.get("/{store_id}", response_model=StoreOut | None)
def GetStoreRoute(store_id: int, db: Session = Depends(GetDb)) -> StoreOut | None:
    try:
        return BuildStoreOut(GetStore(db, store_id))
    except RecordNotFoundError:
        return None
    except StoreFailureError as exc:
        _handle_db_error(exc)


@router.post("", response_model=StoreOut, status_code=status.HTTP_201_CREATED)
def CreateStoreRoute(
    payload: StoreCreate,
    user: UserContext = Depends(RequireAuthenticated),
    db: Session = Depends(GetDb),
) -> StoreOut:
    try:
        return BuildStoreOut(CreateStore(db, user, payload.model_dump()))
    except ValueError as exc:
        _handle_store_error(exc)
    except StoreFailureError as exc:
        _handle_db_error(exc)


@router.patch("/{store_id}", response_model=StoreOut)
def UpdateStoreRoute(
    store_id: int,
    payload: StoreUpdate,
    user: UserContext = Depends(RequireAuthenticated),
    db: Session = Depends(GetDb),
) -> StoreOut:
    try:
        return BuildStoreOut(UpdateStore(db, user, store_id, payload.model_dump(exclude_unset=True)))
    except ValueError as exc:
        _handle_store_error(exc)
    except StoreFailureError as exc:
        _handle_db_error(exc)
