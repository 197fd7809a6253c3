"""Cheapest current offer for every item still needed on the shopping list.

One price lookup per distinct inventory item, each in its own session on a
worker thread, at most ``max_concurrency`` in flight. A lookup that fails or
finds no current price drops that item from the result; the rest carry on.
"""

import asyncio
import logging

from app.db import RecordStore
from app.modules.prices.models import ItemPrice
from app.modules.prices.services import GetCheapestCurrentPrice
from app.modules.shopping.services import ListUnpurchasedInventoryItemIds

logger = logging.getLogger("prices.aggregator")

DEFAULT_MAX_CONCURRENCY = 4


def _LoadNeededItemIds(store: RecordStore) -> list[int]:
    with store.OpenSession() as db:
        return ListUnpurchasedInventoryItemIds(db)


def _LookupCheapest(store: RecordStore, inventory_item_id: int) -> ItemPrice | None:
    # Relations are eager-loaded, so the row stays readable once the session closes.
    with store.OpenSession() as db:
        return GetCheapestCurrentPrice(db, inventory_item_id)


async def _LookupIsolated(
    store: RecordStore,
    inventory_item_id: int,
    semaphore: asyncio.Semaphore,
) -> ItemPrice | None:
    async with semaphore:
        try:
            price = await asyncio.to_thread(_LookupCheapest, store, inventory_item_id)
        except Exception:  # noqa: BLE001
            logger.exception("failed to fetch prices for item %s", inventory_item_id)
            return None
    if price is None:
        logger.debug("no current price for item %s", inventory_item_id)
    return price


async def CheapestOffersForActiveList(
    store: RecordStore,
    max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
) -> list[ItemPrice]:
    item_ids = await asyncio.to_thread(_LoadNeededItemIds, store)
    if not item_ids:
        return []

    semaphore = asyncio.Semaphore(max(1, max_concurrency))
    tasks = [
        asyncio.create_task(_LookupIsolated(store, inventory_item_id, semaphore))
        for inventory_item_id in item_ids
    ]
    try:
        results = await asyncio.gather(*tasks)
    except BaseException:
        for task in tasks:
            task.cancel()
        raise

    offers = [price for price in results if price is not None]
    logger.info("resolved %s of %s needed item(s) to a current price", len(offers), len(item_ids))
    return offers
