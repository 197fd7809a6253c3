import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from app.core.config import LoadSettings
from app.core.errors import RecordNotFoundError, StoreFailureError
from app.db import GetDb, GetRecordStore
from app.modules.auth.deps import RequireAuthenticated, UserContext
from app.modules.prices.aggregator import CheapestOffersForActiveList
from app.modules.prices.schemas import BuildItemPriceOut, ItemPriceCreate, ItemPriceOut
from app.modules.prices.services import (
    GetItemPrice,
    ListCurrentPricesForItem,
    ListItemPrices,
    RecordItemPrice,
)

router = APIRouter(prefix="/api/prices", tags=["prices"])
logger = logging.getLogger("prices")


def _handle_db_error(exc: StoreFailureError) -> None:
    logger.exception("prices database error")
    raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc


@router.get("", response_model=list[ItemPriceOut])
def ListItemPricesRoute(
    inventory_item_id: int | None = None,
    store_id: int | None = None,
    is_current: bool | None = None,
    db: Session = Depends(GetDb),
) -> list[ItemPriceOut]:
    try:
        records = ListItemPrices(
            db,
            inventory_item_id=inventory_item_id,
            store_id=store_id,
            is_current=is_current,
        )
        return [BuildItemPriceOut(record) for record in records]
    except StoreFailureError as exc:
        _handle_db_error(exc)


@router.get("/current/{inventory_item_id}", response_model=list[ItemPriceOut])
def ListCurrentPricesForItemRoute(inventory_item_id: int, db: Session = Depends(GetDb)) -> list[ItemPriceOut]:
    try:
        return [BuildItemPriceOut(record) for record in ListCurrentPricesForItem(db, inventory_item_id)]
    except StoreFailureError as exc:
        _handle_db_error(exc)


@router.get("/cheapest-for-shopping-list", response_model=list[ItemPriceOut])
async def CheapestPricesForShoppingListRoute(request: Request) -> list[ItemPriceOut]:
    store = GetRecordStore(request)
    settings = LoadSettings()
    try:
        offers = await CheapestOffersForActiveList(store, max_concurrency=settings.PriceLookupConcurrency)
    except StoreFailureError as exc:
        _handle_db_error(exc)
    return [BuildItemPriceOut(record) for record in offers]


@router.get("/{price_id}", response_model=ItemPriceOut | None)
def GetItemPriceRoute(price_id: int, db: Session = Depends(GetDb)) -> ItemPriceOut | None:
    try:
        return BuildItemPriceOut(GetItemPrice(db, price_id))
    except RecordNotFoundError:
        return None
    except StoreFailureError as exc:
        _handle_db_error(exc)


@router.post("", response_model=ItemPriceOut, status_code=status.HTTP_201_CREATED)
def RecordItemPriceRoute(
    payload: ItemPriceCreate,
    user: UserContext = Depends(RequireAuthenticated),
    db: Session = Depends(GetDb),
) -> ItemPriceOut:
    try:
        return BuildItemPriceOut(RecordItemPrice(db, user, payload.model_dump()))
    except RecordNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except StoreFailureError as exc:
        _handle_db_error(exc)
