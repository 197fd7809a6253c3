import asyncio
import threading
import time
from decimal import Decimal

import pytest

from app.modules.prices import aggregator
from app.modules.prices.aggregator import CheapestOffersForActiveList
from app.modules.prices.services import RecordItemPrice
from app.modules.shopping.services import CreateShoppingListItem, MarkPurchased


def _price(db, user, item, store, price):
    RecordItemPrice(db, user, {"InventoryItemId": item.Id, "StoreId": store.Id, "Price": Decimal(price)})


def _need(db, user, item, priority=1):
    return CreateShoppingListItem(
        db,
        user,
        {"InventoryItemId": item.Id, "QuantityNeeded": 1, "Priority": priority},
    )


def test_cheapest_offer_per_needed_item(record_store, make_item, make_store, db, user):
    apples = make_item("Apples")
    bread = make_item("Bread")
    candles = make_item("Candles")
    north = make_store("North")
    south = make_store("South")
    _price(db, user, apples, north, "3.00")
    _price(db, user, apples, south, "2.50")
    _price(db, user, bread, north, "1.00")
    _need(db, user, apples, priority=3)
    _need(db, user, candles, priority=2)
    _need(db, user, bread, priority=1)
    _need(db, user, apples, priority=1)

    offers = asyncio.run(CheapestOffersForActiveList(record_store))

    assert [(offer.InventoryItemId, offer.StoreId) for offer in offers] == [
        (apples.Id, south.Id),
        (bread.Id, north.Id),
    ]
    assert offers[0].Price == Decimal("2.50")
    assert offers[0].Store.Name == "South"
    assert offers[1].InventoryItem.Name == "Bread"


def test_purchased_items_are_not_priced(record_store, make_item, make_store, db, user):
    item = make_item()
    _price(db, user, item, make_store(), "1.20")
    MarkPurchased(db, user, _need(db, user, item).Id)

    assert asyncio.run(CheapestOffersForActiveList(record_store)) == []


def test_empty_shopping_list_yields_no_offers(record_store):
    assert asyncio.run(CheapestOffersForActiveList(record_store)) == []


def test_failed_lookup_drops_only_that_item(record_store, make_item, make_store, db, user, monkeypatch):
    good = make_item("Good")
    bad = make_item("Bad")
    store = make_store()
    _price(db, user, good, store, "1.00")
    _price(db, user, bad, store, "2.00")
    _need(db, user, bad, priority=3)
    _need(db, user, good, priority=1)

    original = aggregator._LookupCheapest

    def _flaky(store_arg, inventory_item_id):
        if inventory_item_id == bad.Id:
            raise RuntimeError("connection reset")
        return original(store_arg, inventory_item_id)

    monkeypatch.setattr(aggregator, "_LookupCheapest", _flaky)

    offers = asyncio.run(CheapestOffersForActiveList(record_store))

    assert [offer.InventoryItemId for offer in offers] == [good.Id]


def test_lookups_respect_concurrency_limit(record_store, make_item, db, user, monkeypatch):
    for index in range(6):
        _need(db, user, make_item(f"Item {index}"))

    lock = threading.Lock()
    state = {"active": 0, "peak": 0, "calls": 0}

    def _slow(_store, _inventory_item_id):
        with lock:
            state["active"] += 1
            state["calls"] += 1
            state["peak"] = max(state["peak"], state["active"])
        time.sleep(0.05)
        with lock:
            state["active"] -= 1
        return None

    monkeypatch.setattr(aggregator, "_LookupCheapest", _slow)

    offers = asyncio.run(CheapestOffersForActiveList(record_store, max_concurrency=2))

    assert offers == []
    assert state["calls"] == 6
    assert state["peak"] <= 2


def test_every_lookup_failing_yields_no_offers(record_store, make_item, make_store, db, user, monkeypatch):
    store = make_store()
    for name in ("Tea", "Sugar"):
        item = make_item(name)
        _price(db, user, item, store, "1.00")
        _need(db, user, item)

    def _broken(_store, _inventory_item_id):
        raise RuntimeError("connection reset")

    monkeypatch.setattr(aggregator, "_LookupCheapest", _broken)

    assert asyncio.run(CheapestOffersForActiveList(record_store)) == []


def test_cancellation_stops_pending_lookups(record_store, make_item, db, user, monkeypatch):
    for index in range(6):
        _need(db, user, make_item(f"Item {index}"))

    lock = threading.Lock()
    state = {"calls": 0}

    def _slow(_store, _inventory_item_id):
        with lock:
            state["calls"] += 1
        time.sleep(0.3)
        return None

    monkeypatch.setattr(aggregator, "_LookupCheapest", _slow)

    async def _run():
        await asyncio.wait_for(CheapestOffersForActiveList(record_store, max_concurrency=1), timeout=0.1)

    with pytest.raises(asyncio.TimeoutError):
        asyncio.run(_run())

    assert state["calls"] <= 1
