from datetime import date, datetime, timezone
from decimal import Decimal

import pytest
from sqlalchemy.exc import IntegrityError

from app.core.errors import RecordNotFoundError, RecordValidationError
from app.modules.inventory.models import InventoryItem, IsLowStock
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


def test_is_low_stock_is_strictly_below_minimum():
    assert IsLowStock(1, 2)
    assert not IsLowStock(2, 2)
    assert not IsLowStock(5, 0)


def test_create_applies_defaults_and_audit_fields(db, user):
    record = CreateInventoryItem(db, user, {"Name": "  Whole   milk "})

    assert record.Id is not None
    assert record.Name == "Whole milk"
    assert record.UnitOfMeasure == "each"
    assert record.CurrentQuantity == 0
    assert record.MinimumQuantity == 0
    assert record.IsActive is True
    assert record.CreatedBy == user.Id
    assert record.UpdatedBy == user.Id


def test_create_rejects_blank_name(db, user):
    with pytest.raises(RecordValidationError):
        CreateInventoryItem(db, user, {"Name": "   "})


@pytest.mark.parametrize(
    "fields",
    [
        {"CurrentQuantity": -1},
        {"MinimumQuantity": -0.5},
        {"MinimumQuantity": 5, "MaximumQuantity": 4},
    ],
)
def test_create_rejects_invalid_quantities(db, user, fields):
    with pytest.raises(RecordValidationError):
        CreateInventoryItem(db, user, {"Name": "Rice", **fields})
    assert ListInventoryItems(db) == []


def test_low_stock_lists_only_active_items_below_minimum(make_item, db, user):
    make_item("Pasta", Category="Pantry", CurrentQuantity=2, MinimumQuantity=2)
    beans = make_item("Beans", Category="Pantry", CurrentQuantity=1, MinimumQuantity=2)
    soap = make_item("Soap", Category="Bathroom", CurrentQuantity=0, MinimumQuantity=1)
    stale = make_item("Flour", Category="Pantry", CurrentQuantity=0, MinimumQuantity=3)
    DeleteInventoryItem(db, user, stale.Id)

    low = ListLowStockItems(db)

    assert [item.Id for item in low] == [soap.Id, beans.Id]
    assert all(item.IsLowStock for item in low)


def test_list_filters_compose_with_low_stock(make_item, db):
    make_item("Tea", Category="Drinks", CurrentQuantity=0, MinimumQuantity=1)
    make_item("Coffee", Category="Drinks", CurrentQuantity=4, MinimumQuantity=1)
    make_item("Salt", Category="Pantry", CurrentQuantity=0, MinimumQuantity=1)

    drinks_low = ListInventoryItems(db, category="Drinks", low_stock=True)

    assert [item.Name for item in drinks_low] == ["Tea"]
    assert [item.Name for item in ListInventoryItemsByCategory(db, "Drinks")] == ["Coffee", "Tea"]


def test_partial_update_leaves_unspecified_fields(make_item, db, other_user):
    record = make_item("Eggs", Category="Dairy", CurrentQuantity=6, MinimumQuantity=2)

    updated = UpdateInventoryItem(db, other_user, record.Id, {"CurrentQuantity": 3})

    assert updated.CurrentQuantity == 3
    assert updated.Name == "Eggs"
    assert updated.Category == "Dairy"
    assert updated.MinimumQuantity == 2
    assert updated.UpdatedBy == other_user.Id
    assert updated.CreatedBy != other_user.Id


def test_update_can_clear_nullable_fields(make_item, db, user):
    record = make_item("Yoghurt", MaximumQuantity=10, Brand="Acme")

    updated = UpdateInventoryItem(db, user, record.Id, {"MaximumQuantity": None, "Brand": None})

    assert updated.MaximumQuantity is None
    assert updated.Brand is None


def test_update_rejects_merged_quantities_and_keeps_stored_values(make_item, db, user):
    record = make_item("Butter", MinimumQuantity=1, MaximumQuantity=4)

    with pytest.raises(RecordValidationError):
        UpdateInventoryItem(db, user, record.Id, {"MinimumQuantity": 6})

    stored = GetInventoryItem(db, record.Id)
    assert stored.MinimumQuantity == 1
    assert stored.MaximumQuantity == 4


def test_delete_deactivates_without_removing(make_item, db, user):
    record = make_item("Cheese")

    DeleteInventoryItem(db, user, record.Id)

    stored = GetInventoryItem(db, record.Id)
    assert stored.IsActive is False
    assert ListInventoryItems(db, is_active=True) == []
    assert [item.Id for item in ListInventoryItems(db, is_active=False)] == [record.Id]


def test_get_missing_item_raises_not_found(db):
    with pytest.raises(RecordNotFoundError):
        GetInventoryItem(db, 999)


def test_my_items_are_scoped_to_creator(db, user, other_user):
    mine = CreateInventoryItem(db, user, {"Name": "Oats"})
    CreateInventoryItem(db, other_user, {"Name": "Jam"})

    assert [item.Id for item in ListMyInventoryItems(db, user)] == [mine.Id]


def test_recently_updated_is_newest_first_and_limited(db, user):
    records = [CreateInventoryItem(db, user, {"Name": f"Item {index}"}) for index in range(12)]

    recent = ListRecentlyUpdatedItems(db, user)

    assert len(recent) == 10
    assert recent[0].Id == records[-1].Id
    assert [item.Id for item in ListRecentlyUpdatedItems(db, user, limit=3)] == [
        records[11].Id,
        records[10].Id,
        records[9].Id,
    ]


def test_created_item_reads_back_from_a_fresh_session(record_store, db, user):
    fields = {
        "Name": "Olive oil",
        "Description": "Extra virgin",
        "Category": "Pantry",
        "Brand": "Acme",
        "Barcode": "5000112637922",
        "UnitOfMeasure": "bottle",
        "CurrentQuantity": 1.5,
        "MinimumQuantity": 1,
        "MaximumQuantity": 4,
        "ExpirationDate": date(2027, 6, 30),
        "PurchaseDate": date(2026, 10, 1),
        "CostPerUnit": Decimal("7.49"),
        "StorageLocation": "Cupboard",
    }
    created = CreateInventoryItem(db, user, fields)

    with record_store.OpenSession() as fresh:
        stored = GetInventoryItem(fresh, created.Id)
        for field, value in fields.items():
            assert getattr(stored, field) == value, field
        assert stored.Id == created.Id
        assert stored.IsActive is True
        assert stored.CreatedBy == user.Id
        assert stored.UpdatedBy == user.Id
        assert stored.CreatedAt is not None
        assert stored.UpdatedAt is not None


def test_database_rejects_invalid_quantities(db, user):
    now = datetime(2026, 1, 1, tzinfo=timezone.utc)
    db.add(
        InventoryItem(
            Name="Rice",
            CurrentQuantity=-1,
            MinimumQuantity=0,
            CreatedAt=now,
            UpdatedAt=now,
            CreatedBy=user.Id,
            UpdatedBy=user.Id,
        )
    )

    with pytest.raises(IntegrityError):
        db.commit()
    db.rollback()
