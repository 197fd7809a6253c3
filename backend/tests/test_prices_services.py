from decimal import Decimal

import pytest

from app.core.errors import RecordNotFoundError, RecordValidationError
from app.modules.prices.services import (
    GetCheapestCurrentPrice,
    ListCurrentPricesForItem,
    ListItemPrices,
    RecordItemPrice,
)


def _record(db, user, item, store, price, **fields):
    return RecordItemPrice(
        db,
        user,
        {"InventoryItemId": item.Id, "StoreId": store.Id, "Price": Decimal(price), **fields},
    )


def test_record_price_defaults_unit_and_current(make_item, make_store, db, user):
    item = make_item("Flour", UnitOfMeasure="kg")
    store = make_store()

    record = _record(db, user, item, store, "2.40")

    assert record.IsCurrent is True
    assert record.UnitOfMeasure == "kg"
    assert record.Price == Decimal("2.40")
    assert record.Store.Id == store.Id
    assert record.InventoryItem.Id == item.Id


def test_new_current_price_demotes_previous_for_same_store(make_item, make_store, db, user):
    item = make_item()
    first_store = make_store("First")
    second_store = make_store("Second")
    old = _record(db, user, item, first_store, "3.00")
    elsewhere = _record(db, user, item, second_store, "2.90")

    new = _record(db, user, item, first_store, "2.75")

    current = ListCurrentPricesForItem(db, item.Id)
    assert {price.Id for price in current} == {new.Id, elsewhere.Id}
    history = ListItemPrices(db, inventory_item_id=item.Id, store_id=first_store.Id)
    assert [price.Id for price in history if not price.IsCurrent] == [old.Id]


def test_historical_price_does_not_demote(make_item, make_store, db, user):
    item = make_item()
    store = make_store()
    current = _record(db, user, item, store, "1.10")

    _record(db, user, item, store, "0.90", IsCurrent=False)

    assert [price.Id for price in ListCurrentPricesForItem(db, item.Id)] == [current.Id]


def test_current_prices_are_cheapest_first(make_item, make_store, db, user):
    item = make_item()
    dear = _record(db, user, item, make_store("Dear"), "4.00")
    cheap = _record(db, user, item, make_store("Cheap"), "1.50")
    middle = _record(db, user, item, make_store("Middle"), "2.25")

    assert [price.Id for price in ListCurrentPricesForItem(db, item.Id)] == [cheap.Id, middle.Id, dear.Id]
    assert GetCheapestCurrentPrice(db, item.Id).Id == cheap.Id


def test_cheapest_price_is_none_without_current_prices(make_item, make_store, db, user):
    item = make_item()
    _record(db, user, item, make_store(), "1.00", IsCurrent=False)

    assert GetCheapestCurrentPrice(db, item.Id) is None


@pytest.mark.parametrize("price", ["0", "-1.00"])
def test_record_price_rejects_non_positive(make_item, make_store, db, user, price):
    with pytest.raises(RecordValidationError):
        _record(db, user, make_item(), make_store(), price)


def test_record_price_requires_existing_item_and_store(make_item, make_store, db, user):
    item = make_item()
    store = make_store()

    with pytest.raises(RecordNotFoundError):
        RecordItemPrice(db, user, {"InventoryItemId": 999, "StoreId": store.Id, "Price": Decimal("1")})
    with pytest.raises(RecordNotFoundError):
        RecordItemPrice(db, user, {"InventoryItemId": item.Id, "StoreId": 999, "Price": Decimal("1")})
