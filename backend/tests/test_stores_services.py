import pytest

from app.core.errors import RecordNotFoundError, RecordValidationError
from app.modules.stores.services import CreateStore, GetStore, ListStores, UpdateStore


def test_create_store_normalizes_name(db, user):
    record = CreateStore(db, user, {"Name": "  Fresh   Market ", "Phone": "555-0100"})

    assert record.Name == "Fresh Market"
    assert record.Phone == "555-0100"
    assert record.IsActive is True
    assert record.CreatedBy == user.Id


def test_create_store_requires_name(db, user):
    with pytest.raises(RecordValidationError):
        CreateStore(db, user, {"Name": " "})


def test_list_stores_is_ordered_by_name(make_store, db, user):
    make_store("Zeta Grocers")
    make_store("Alpha Foods")
    closed = make_store("Beta Mart")
    UpdateStore(db, user, closed.Id, {"IsActive": False})

    assert [store.Name for store in ListStores(db)] == ["Alpha Foods", "Beta Mart", "Zeta Grocers"]
    assert [store.Name for store in ListStores(db, is_active=True)] == ["Alpha Foods", "Zeta Grocers"]


def test_update_store_only_touches_given_fields(make_store, db, other_user):
    record = make_store("Market", Address="1 High St", Website="https://market.example")

    updated = UpdateStore(db, other_user, record.Id, {"Address": None})

    assert updated.Address is None
    assert updated.Website == "https://market.example"
    assert updated.Name == "Market"
    assert updated.UpdatedBy == other_user.Id


def test_get_missing_store_raises_not_found(db):
    with pytest.raises(RecordNotFoundError):
        GetStore(db, 42)
